"""EditorConfig support: locate, parse and map ``.editorconfig`` properties.

Only the properties with an engine equivalent are mapped: indentation style
and size, maximum line length and end of line.
"""

from __future__ import annotations

import functools
import logging
from pathlib import Path
import re
from typing import Any

from prettier_edit.core.exceptions import ConfigFileError

log = logging.getLogger(__name__)

EDITORCONFIG = ".editorconfig"


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Translate an EditorConfig section glob into a regular expression."""
    out: list[str] = []
    i = 0
    depth = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "*":
            if pattern.startswith("**/", i):
                out.append("(?:.*/)?")
                i += 3
                continue
            if pattern.startswith("**", i):
                out.append(".*")
                i += 2
                continue
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        elif char == "{":
            depth += 1
            out.append("(?:")
        elif char == "}" and depth:
            depth -= 1
            out.append(")")
        elif char == "," and depth:
            out.append("|")
        elif char == "[":
            end = pattern.find("]", i)
            if end == -1:
                out.append(re.escape(char))
            else:
                body = pattern[i + 1 : end].replace("\\", "\\\\")
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append(f"[{body}]")
                i = end
        else:
            out.append(re.escape(char))
        i += 1
    return re.compile("".join(out) + r"\Z")


@functools.lru_cache(maxsize=256)
def _section_regex(section: str) -> re.Pattern[str]:
    if "/" not in section:
        return glob_to_regex("**/" + section)
    return glob_to_regex(section.removeprefix("/"))


def path_matches(pattern: str, relative_path: str) -> bool:
    """Match a posix path, relative to the config directory, against a glob."""
    return _section_regex(pattern).match(relative_path) is not None


class EditorConfigFile:
    """A parsed ``.editorconfig`` file."""

    def __init__(
        self, path: Path, root: bool, sections: list[tuple[str, dict[str, str]]]
    ) -> None:
        self.path = path
        self.root = root
        self.sections = sections

    @classmethod
    def parse(cls, path: Path) -> EditorConfigFile:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigFileError(path, f"Failed to read: {e}", cause=e) from e

        root = False
        sections: list[tuple[str, dict[str, str]]] = []
        current: dict[str, str] | None = None
        for raw in text.splitlines():
            line = raw.strip()
            if not line or line[0] in "#;":
                continue
            if line.startswith("[") and line.endswith("]"):
                current = {}
                sections.append((line[1:-1], current))
                continue
            if "=" not in line:
                continue
            key, value = (part.strip().lower() for part in line.split("=", 1))
            if current is None:
                root = root or (key == "root" and value == "true")
            else:
                current[key] = value
        return cls(path, root, sections)

    def properties_for(self, file_path: Path) -> dict[str, str]:
        relative = file_path.relative_to(self.path.parent).as_posix()
        props: dict[str, str] = {}
        for section, values in self.sections:
            if path_matches(section, relative):
                props.update(values)
        return props


def find_editorconfig_files(file_path: Path) -> list[EditorConfigFile]:
    """Return the applicable files, outermost first, stopping at ``root = true``."""
    found: list[EditorConfigFile] = []
    for directory in file_path.parents:
        candidate = directory / EDITORCONFIG
        if candidate.is_file():
            parsed = EditorConfigFile.parse(candidate)
            found.append(parsed)
            if parsed.root:
                break
    found.reverse()
    return found


def _as_int(value: str | None) -> int | None:
    if value is None or not value.isdigit():
        return None
    return int(value)


def editorconfig_to_prettier(props: dict[str, str]) -> dict[str, Any]:
    options: dict[str, Any] = {}
    if props.get("indent_style") in ("tab", "space"):
        options["useTabs"] = props["indent_style"] == "tab"

    indent_size = _as_int(props.get("indent_size"))
    tab_width = _as_int(props.get("tab_width"))
    if indent_size is not None:
        options["tabWidth"] = indent_size
    elif tab_width is not None:
        options["tabWidth"] = tab_width

    max_line_length = _as_int(props.get("max_line_length"))
    if max_line_length is not None:
        options["printWidth"] = max_line_length

    if props.get("end_of_line") in ("lf", "crlf", "cr"):
        options["endOfLine"] = props["end_of_line"]
    return options


def resolve_editorconfig_options(file_path: str | Path) -> dict[str, Any]:
    """Engine options implied by the ``.editorconfig`` files above ``file_path``."""
    path = Path(file_path).resolve()
    props: dict[str, str] = {}
    for config in find_editorconfig_files(path):
        props.update(config.properties_for(path))
    options = editorconfig_to_prettier(props)
    if options:
        log.debug("EditorConfig options for %s: %s", path, options)
    return options
