"""Language and parser capability tables."""

from __future__ import annotations

from collections.abc import Sequence
import dataclasses
from pathlib import Path


@dataclasses.dataclass(frozen=True, slots=True)
class Language:
    name: str
    language_ids: tuple[str, ...]
    parsers: tuple[str, ...]
    filenames: tuple[str, ...] = ()


SUPPORTED_LANGUAGES: tuple[Language, ...] = (
    Language("JavaScript", ("javascript", "mongo"), ("babel", "flow")),
    Language("JSX", ("javascriptreact",), ("babel", "flow")),
    Language("TypeScript", ("typescript",), ("typescript",)),
    Language("TSX", ("typescriptreact",), ("typescript",)),
    Language(
        "JSON.stringify",
        ("json",),
        ("json-stringify",),
        ("package.json", "package-lock.json", "composer.json"),
    ),
    Language("JSON", ("json", "jsonc"), ("json",)),
    Language("JSON5", ("json5",), ("json5",)),
    Language("CSS", ("css",), ("css",)),
    Language("PostCSS", ("postcss",), ("css",)),
    Language("Less", ("less",), ("less",)),
    Language("SCSS", ("scss",), ("scss",)),
    Language("GraphQL", ("graphql",), ("graphql",)),
    Language("Markdown", ("markdown",), ("markdown",)),
    Language("MDX", ("mdx",), ("mdx",)),
    Language("Angular", ("html",), ("angular",), ("component.html",)),
    Language("HTML", ("html",), ("html",)),
    Language("Vue", ("vue",), ("vue",)),
    Language("YAML", ("yaml",), ("yaml",)),
    Language("Handlebars", ("handlebars",), ("glimmer",)),
)

RANGE_SUPPORTED_LANGUAGES = (
    "javascript",
    "javascriptreact",
    "typescript",
    "typescriptreact",
    "json",
    "graphql",
)
ESLINT_SUPPORTED_LANGUAGES = (
    "javascript",
    "javascriptreact",
    "typescript",
    "typescriptreact",
    "vue",
)
STYLELINT_SUPPORTED_PARSERS = ("css", "less", "scss")


class LanguageResolver:
    """Maps editor language ids and file names to engine parsers."""

    def __init__(self, languages: Sequence[Language] = SUPPORTED_LANGUAGES) -> None:
        self._languages = tuple(languages)

    def all_enabled_languages(self, scope_path: str | None = None) -> list[str]:  # noqa: ARG002
        enabled: list[str] = []
        for language in self._languages:
            for language_id in language.language_ids:
                if language_id not in enabled:
                    enabled.append(language_id)
        return enabled

    def range_supported_languages(self) -> list[str]:
        return list(RANGE_SUPPORTED_LANGUAGES)

    def get_parsers_from_language_id(
        self, file_path: str | None, language_id: str
    ) -> list[str]:
        """Candidate parsers for a document, best match first.

        Languages matched by file name (e.g. ``package.json``) take priority
        over languages that only share the language id.
        """
        basename = Path(file_path).name if file_path else ""
        by_name: list[str] = []
        by_id: list[str] = []
        for language in self._languages:
            if language_id not in language.language_ids:
                continue
            if language.filenames:
                if any(basename.endswith(name) for name in language.filenames):
                    by_name.extend(language.parsers)
                continue
            by_id.extend(language.parsers)
        return list(dict.fromkeys(by_name + by_id))

    def does_language_support_eslint(self, language_id: str) -> bool:
        return language_id in ESLINT_SUPPORTED_LANGUAGES

    def does_parser_support_stylelint(self, parser: str) -> bool:
        return parser in STYLELINT_SUPPORTED_PARSERS
