"""Editor document primitives.

These are the minimal shapes the host editor hands to the formatting
providers: a document with text and metadata, positions and ranges inside
it, and the text edits returned to the host.
"""

from __future__ import annotations

import dataclasses
from pathlib import Path
import typing

Scheme = typing.Literal["file", "untitled"]


@dataclasses.dataclass(frozen=True, slots=True, order=True)
class Position:
    """A zero-based line/character position."""

    line: int
    character: int

    def __post_init__(self) -> None:
        if self.line < 0 or self.character < 0:
            raise ValueError(
                f"Position must be non-negative, got ({self.line}, {self.character})"
            )


@dataclasses.dataclass(frozen=True, slots=True)
class Range:
    """A span between two positions; ``start`` never comes after ``end``."""

    start: Position
    end: Position

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError("Range end must not precede its start")

    @classmethod
    def of(
        cls, start_line: int, start_char: int, end_line: int, end_char: int
    ) -> Range:
        return cls(Position(start_line, start_char), Position(end_line, end_char))


@dataclasses.dataclass(frozen=True, slots=True)
class TextEdit:
    """Replacement of ``range`` with ``new_text``."""

    range: Range
    new_text: str

    @classmethod
    def replace(cls, range_: Range, new_text: str) -> TextEdit:
        return cls(range_, new_text)


@dataclasses.dataclass(frozen=True, slots=True)
class DocumentUri:
    """Document identity: a scheme plus a path (or untitled name)."""

    scheme: Scheme
    path: str

    @classmethod
    def file(cls, path: str | Path) -> DocumentUri:
        return cls("file", str(Path(path)))

    @classmethod
    def untitled(cls, name: str) -> DocumentUri:
        return cls("untitled", name)

    @property
    def fs_path(self) -> str | None:
        """Filesystem path for saved documents, None for in-memory buffers."""
        return self.path if self.scheme == "file" else None

    def __str__(self) -> str:
        return f"{self.scheme}:{self.path}"


class TextDocument:
    """A text-backed document as seen by formatting providers."""

    def __init__(self, uri: DocumentUri, language_id: str, text: str) -> None:
        self.uri = uri
        self.language_id = language_id
        self._text = text
        self._lines = text.split("\n")

    @classmethod
    def from_file(cls, path: str | Path, language_id: str) -> TextDocument:
        file_path = Path(path)
        return cls(
            DocumentUri.file(file_path),
            language_id,
            file_path.read_text(encoding="utf-8"),
        )

    @property
    def file_name(self) -> str:
        """Filesystem path, or the untitled name for in-memory buffers."""
        return self.uri.path

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_text(self) -> str:
        return self._text

    def line_at(self, line: int) -> str:
        return self._lines[line]

    def offset_at(self, position: Position) -> int:
        """Convert a position into a character offset, clamping to the text."""
        line = min(position.line, self.line_count - 1)
        offset = sum(len(text) + 1 for text in self._lines[:line])
        return offset + min(position.character, len(self._lines[line]))

    def full_range(self) -> Range:
        last_line = self.line_count - 1
        return Range.of(0, 0, last_line, len(self._lines[last_line]))

    def __repr__(self) -> str:
        return f"TextDocument(uri={str(self.uri)!r}, language_id={self.language_id!r})"
