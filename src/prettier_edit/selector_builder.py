"""Document selectors for the formatting provider registrations."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging
from typing import TYPE_CHECKING

from prettier_edit.core.types import DocumentFilter, RelativePattern, SelectorSet

if TYPE_CHECKING:
    from prettier_edit.core.protocols import CapabilityResolver
    from prettier_edit.core.types import WorkspaceFolder

log = logging.getLogger(__name__)

# Saved files and in-memory buffers, in registration order
SCHEMES = ("untitled", "file")


def _with_schemes(filters: Sequence[DocumentFilter]) -> tuple[DocumentFilter, ...]:
    return tuple(
        DocumentFilter(f.language, f.pattern, scheme)
        for scheme in SCHEMES
        for f in filters
    )


def _enabled(
    filters: Iterable[DocumentFilter], disabled_languages: Sequence[str]
) -> list[DocumentFilter]:
    return [f for f in filters if f.language and f.language not in disabled_languages]


def compute_selectors(
    workspace_folders: Sequence[WorkspaceFolder] | None,
    disabled_languages: Sequence[str],
    *,
    language_resolver: CapabilityResolver,
) -> SelectorSet:
    """Compute where the full-document and range providers apply.

    Without workspace folders every enabled language is registered globally.
    With folders, languages are gathered per folder and scoped to a pattern
    rooted at that folder, and every entry is duplicated for the ``untitled``
    and ``file`` schemes. Range languages are always gathered globally.
    """
    all_languages: list[DocumentFilter] = []
    if not workspace_folders:
        all_languages = [
            DocumentFilter(language)
            for language in language_resolver.all_enabled_languages()
        ]
        log.info(
            "Enabling prettier for languages: %s", [f.language for f in all_languages]
        )
    else:
        for folder in workspace_folders:
            folder_languages = language_resolver.all_enabled_languages(str(folder.path))
            pattern = RelativePattern(folder.path, "**/*.*")
            all_languages.extend(
                DocumentFilter(language, pattern) for language in folder_languages
            )
            log.info(
                "Enabling prettier in workspace '%s' for languages: %s",
                folder.name,
                list(folder_languages),
            )

    range_languages = [
        DocumentFilter(language)
        for language in language_resolver.range_supported_languages()
    ]
    log.info(
        "Enabling prettier for range supported languages: %s",
        [f.language for f in range_languages],
    )

    language_selector = _enabled(all_languages, disabled_languages)
    range_language_selector = _enabled(range_languages, disabled_languages)

    if not workspace_folders:
        return SelectorSet(tuple(language_selector), tuple(range_language_selector))

    return SelectorSet(
        _with_schemes(language_selector), _with_schemes(range_language_selector)
    )
