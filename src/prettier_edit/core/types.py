"""Core data types that flow through the formatting pipeline.

This module defines the immutable data structures that represent the state
of a formatting request as it moves through the pipeline stages. Each stage
transforms the request into a new state, so a later stage can never observe
a half-resolved request.
"""

from __future__ import annotations

import dataclasses
import enum
from pathlib import Path, PurePath
from types import MappingProxyType
import typing

if typing.TYPE_CHECKING:  # pragma: no cover
    from prettier_edit.config.schema import EditorSettings
    from prettier_edit.core.documents import DocumentUri, TextDocument
    from prettier_edit.core.protocols import EngineHandle

T = typing.TypeVar("T")


def _freeze_mapping(
    m: dict[str, T] | typing.Mapping[str, T] | None,
) -> typing.Mapping[str, T]:
    """Return an immutable mapping view (empty when ``m`` is None)."""
    if isinstance(m, MappingProxyType):
        return m
    return MappingProxyType(dict(m or {}))


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


# --- Result type ---
# Stages return Success|Failure instead of raising, so early exits are part
# of the data flow and the orchestrator handles them in one place.

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success(typing.Generic[TSuccess]):
    """A successful stage result."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure(typing.Generic[TFailure]):
    """A failed (or short-circuited) stage result, containing the error."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]


# --- Requests ---


@dataclasses.dataclass(frozen=True, slots=True)
class RangeFormattingOptions:
    """Character offsets restricting formatting to a span of the document."""

    range_start: int
    range_end: int

    def __post_init__(self) -> None:
        _require(
            condition=0 <= self.range_start <= self.range_end,
            message=f"invalid range {self.range_start}..{self.range_end}",
            field_name="range",
        )

    def to_options(self) -> dict[str, int]:
        return {"rangeStart": self.range_start, "rangeEnd": self.range_end}


@dataclasses.dataclass(frozen=True, slots=True)
class FormattingRequest:
    """Immutable input to one orchestration run."""

    text: str
    language_id: str
    uri: DocumentUri
    file_path: str | None = None
    range_options: RangeFormattingOptions | None = None

    def __post_init__(self) -> None:
        _require(
            condition=isinstance(self.text, str),
            message="must be str",
            field_name="text",
            exc=TypeError,
        )
        _require(
            condition=bool(self.language_id),
            message="cannot be empty",
            field_name="language_id",
        )

    @classmethod
    def from_document(
        cls,
        document: TextDocument,
        range_options: RangeFormattingOptions | None = None,
    ) -> FormattingRequest:
        return cls(
            text=document.get_text(),
            language_id=document.language_id,
            uri=document.uri,
            file_path=document.uri.fs_path,
            range_options=range_options,
        )

    @property
    def display_name(self) -> str:
        return self.file_path or self.uri.path


@dataclasses.dataclass(frozen=True, slots=True)
class FileInfo:
    """What the engine knows about a file: ignored flag and inferred parser."""

    ignored: bool = False
    inferred_parser: str | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class ConfigOverrides:
    """Editor-level overrides applied while resolving formatting options."""

    config: str | None = None
    editorconfig: bool = True


@dataclasses.dataclass(frozen=True, slots=True)
class OptionsResolution:
    """Merged formatting options or an error; never both."""

    options: typing.Mapping[str, typing.Any] = dataclasses.field(
        default_factory=dict
    )
    error: Exception | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", _freeze_mapping(self.options))
        _require(
            condition=self.error is None or not self.options,
            message="options must be empty when an error is reported",
            field_name="options",
        )

    @classmethod
    def failed(cls, error: Exception) -> OptionsResolution:
        return cls(options={}, error=error)


class OutcomeKind(enum.Enum):
    FORMATTED = "formatted"
    UNCHANGED = "unchanged"
    IGNORED = "ignored"
    ERROR = "error"


@dataclasses.dataclass(frozen=True, slots=True)
class FormattingOutcome:
    """Terminal result of one orchestration run.

    ``text`` is the text handed back to the caller: the formatted text, the
    original text when a backend failed, or None when nothing ran.
    """

    kind: OutcomeKind
    text: str | None = None
    error: Exception | None = None

    @classmethod
    def from_text(cls, original: str, produced: str) -> FormattingOutcome:
        if produced == original:
            return cls(OutcomeKind.UNCHANGED, produced)
        return cls(OutcomeKind.FORMATTED, produced)


# --- Pipeline states ---


@dataclasses.dataclass(frozen=True, slots=True)
class LoadedCommand:
    """Request with its engine and editor settings loaded."""

    request: FormattingRequest
    engine: EngineHandle
    settings: EditorSettings


@dataclasses.dataclass(frozen=True, slots=True)
class EligibleCommand:
    """Request that passed the disabled-language and ignore-file checks."""

    loaded: LoadedCommand
    ignore_path: str | None
    file_info: FileInfo | None


@dataclasses.dataclass(frozen=True, slots=True)
class ParsedCommand:
    """Request with a resolved parser."""

    eligible: EligibleCommand
    parser: str

    def __post_init__(self) -> None:
        _require(condition=bool(self.parser), message="cannot be empty", field_name="parser")


@dataclasses.dataclass(frozen=True, slots=True)
class ConfiguredCommand:
    """Request ready for backend selection: parser and final options."""

    parsed: ParsedCommand
    options: typing.Mapping[str, typing.Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", _freeze_mapping(self.options))

    @property
    def request(self) -> FormattingRequest:
        return self.parsed.eligible.loaded.request

    @property
    def engine(self) -> EngineHandle:
        return self.parsed.eligible.loaded.engine

    @property
    def parser(self) -> str:
        return self.parsed.parser


# --- Selectors ---


@dataclasses.dataclass(frozen=True, slots=True)
class WorkspaceFolder:
    name: str
    path: Path

    @classmethod
    def at(cls, path: str | Path, name: str | None = None) -> WorkspaceFolder:
        folder = Path(path)
        return cls(name=name or folder.name, path=folder)


@dataclasses.dataclass(frozen=True, slots=True)
class RelativePattern:
    """A glob pattern rooted at a base directory."""

    base: Path
    pattern: str = "**/*.*"

    def matches(self, path: str | PurePath) -> bool:
        candidate = PurePath(path)
        try:
            relative = candidate.relative_to(self.base)
        except ValueError:
            return False
        if not relative.parts:
            return False
        return relative.full_match(self.pattern)


@dataclasses.dataclass(frozen=True, slots=True)
class DocumentFilter:
    """One (language, pattern?, scheme?) entry of a document selector."""

    language: str
    pattern: RelativePattern | None = None
    scheme: str | None = None

    def matches(self, document: TextDocument) -> bool:
        if document.language_id != self.language:
            return False
        if self.scheme is not None and document.uri.scheme != self.scheme:
            return False
        if self.pattern is not None:
            return self.pattern.matches(document.uri.path)
        return True


DocumentSelector = tuple[DocumentFilter, ...]


def selector_matches(selector: DocumentSelector, document: TextDocument) -> bool:
    return any(f.matches(document) for f in selector)


@dataclasses.dataclass(frozen=True, slots=True)
class SelectorSet:
    """Where the full-document and range providers are registered."""

    language_selector: DocumentSelector = ()
    range_language_selector: DocumentSelector = ()
