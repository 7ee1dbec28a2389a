"""Exception hierarchy for the formatting pipeline."""

from __future__ import annotations

from pathlib import Path


class PrettierEditError(Exception):
    """Base exception for prettier_edit errors."""


class FormattingIgnored(PrettierEditError):  # noqa: N818
    """Formatting was skipped on purpose; not an error condition."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class EngineUnavailableError(PrettierEditError):
    """Raised when no formatting engine can be located for a file."""


class ParserResolutionError(PrettierEditError):
    """Raised when no parser can be resolved for a document."""


class OptionsResolutionError(PrettierEditError):
    """Raised when merging formatting options reports an error."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class BackendExecutionError(PrettierEditError):
    """Raised when the selected formatting backend fails."""


class ConfigFileError(PrettierEditError):
    """Raised when a configuration file cannot be read or parsed."""

    def __init__(
        self, file_path: Path, message: str, cause: Exception | None = None
    ) -> None:
        """Initialize with file path, message, and optional cause.

        Args:
            file_path: The file that failed to load
            message: Human-readable error message
            cause: The underlying exception that caused the failure
        """
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")


class InvariantViolationError(PrettierEditError):
    """Raised when a pipeline stage breaks the stage contract."""

    def __init__(self, message: str, stage_name: str | None = None) -> None:
        self.stage_name = stage_name
        super().__init__(message)
