"""Formatter resolution and execution for editors delegating to prettier."""

import importlib.metadata
import logging

from prettier_edit.config import EditorSettings, PrettierConfigResolver, SettingsResolver
from prettier_edit.core.documents import (
    DocumentUri,
    Position,
    Range,
    TextDocument,
    TextEdit,
)
from prettier_edit.core.exceptions import (
    BackendExecutionError,
    ConfigFileError,
    EngineUnavailableError,
    FormattingIgnored,
    InvariantViolationError,
    OptionsResolutionError,
    ParserResolutionError,
    PrettierEditError,
)
from prettier_edit.core.types import (
    DocumentFilter,
    Failure,
    FormattingOutcome,
    FormattingRequest,
    OutcomeKind,
    RangeFormattingOptions,
    RelativePattern,
    Result,
    SelectorSet,
    Success,
    WorkspaceFolder,
)
from prettier_edit.edit_provider import PrettierEditProvider
from prettier_edit.ignore import IgnoreResolver
from prettier_edit.languages import LanguageResolver
from prettier_edit.modules import ModuleResolver, NodeBridge
from prettier_edit.notifications import NotificationService
from prettier_edit.orchestrator import FormattingOrchestrator
from prettier_edit.selector_builder import compute_selectors
from prettier_edit.service import PrettierEditService, RegistrationSlot, create_service
from prettier_edit.status import FormattingResult, StatusBarService
from prettier_edit.telemetry import TelemetryContext, TelemetryReporter

try:
    __version__ = importlib.metadata.version("prettier-edit")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Library logging stays silent unless the host configures handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Entry points
    "create_service",
    "PrettierEditService",
    "FormattingOrchestrator",
    "PrettierEditProvider",
    "RegistrationSlot",
    "compute_selectors",
    # Collaborators
    "IgnoreResolver",
    "LanguageResolver",
    "ModuleResolver",
    "NodeBridge",
    "NotificationService",
    "StatusBarService",
    "FormattingResult",
    # Configuration
    "EditorSettings",
    "SettingsResolver",
    "PrettierConfigResolver",
    # Documents and requests
    "DocumentUri",
    "Position",
    "Range",
    "TextDocument",
    "TextEdit",
    "FormattingRequest",
    "RangeFormattingOptions",
    "FormattingOutcome",
    "OutcomeKind",
    "WorkspaceFolder",
    "DocumentFilter",
    "RelativePattern",
    "SelectorSet",
    # Results
    "Result",
    "Success",
    "Failure",
    # Errors
    "PrettierEditError",
    "FormattingIgnored",
    "EngineUnavailableError",
    "ParserResolutionError",
    "OptionsResolutionError",
    "BackendExecutionError",
    "ConfigFileError",
    "InvariantViolationError",
    # Telemetry
    "TelemetryContext",
    "TelemetryReporter",
]
