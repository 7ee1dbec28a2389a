"""The formatting orchestrator: the decision pipeline for one document.

Stages run sequentially with explicit Result handling. A Failure from any
stage ends the run: ``FormattingIgnored`` publishes the Ignore status, every
other failure publishes Error. Once a request is fully configured, the first
available backend runs through the safe executor. Nothing raised inside the
pipeline escapes to the caller; the contract is "text or None".
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
import logging
from typing import TYPE_CHECKING, Any

from prettier_edit.core.exceptions import FormattingIgnored, InvariantViolationError
from prettier_edit.core.types import (
    ConfiguredCommand,
    Failure,
    FormattingOutcome,
    FormattingRequest,
    OutcomeKind,
    Success,
)
from prettier_edit.pipeline.backends import default_backends, select_backend
from prettier_edit.pipeline.eligibility import EligibilityGate
from prettier_edit.pipeline.engine_loader import EngineLoader
from prettier_edit.pipeline.options_resolver import OptionsResolver
from prettier_edit.pipeline.parser_resolver import ParserResolver
from prettier_edit.pipeline.safe_executor import SafeExecutor
from prettier_edit.status import FormattingResult
from prettier_edit.telemetry import TelemetryContext, TelemetryReporter

if TYPE_CHECKING:
    from prettier_edit.core.protocols import (
        CapabilityResolver,
        ConfigProvider,
        IgnorePathResolver,
        ModuleProvider,
        Notifier,
        SettingsProvider,
        StatusReporter,
    )
    from prettier_edit.core.types import WorkspaceFolder
    from prettier_edit.pipeline.backends import FormatterBackend
    from prettier_edit.pipeline.base import BaseAsyncHandler

log = logging.getLogger(__name__)


class FormattingOrchestrator:
    """Runs a formatting request through the pipeline of handlers.

    The default pipeline is: EngineLoader -> EligibilityGate ->
    ParserResolver -> OptionsResolver. Tests and hosts may pass their own
    ``pipeline_handlers``; the last one must produce a ``ConfiguredCommand``.
    """

    def __init__(
        self,
        *,
        module_resolver: ModuleProvider,
        language_resolver: CapabilityResolver,
        ignore_resolver: IgnorePathResolver,
        config_resolver: ConfigProvider,
        settings_provider: SettingsProvider,
        notification_service: Notifier,
        status_bar_service: StatusReporter,
        workspace_folders: Callable[[], Sequence[WorkspaceFolder] | None] = lambda: None,
        pipeline_handlers: Iterable[BaseAsyncHandler[Any, Any, Any]] | None = None,
        backends: Iterable[FormatterBackend] | None = None,
        telemetry_reporters: Sequence[TelemetryReporter] = (),
        telemetry_enabled: bool | None = None,
    ) -> None:
        self._status = status_bar_service
        self._pipeline: list[Any] = list(
            pipeline_handlers
            or (
                EngineLoader(module_resolver, settings_provider, notification_service),
                EligibilityGate(ignore_resolver),
                ParserResolver(language_resolver),
                OptionsResolver(config_resolver, workspace_folders),
            )
        )
        self._backends = tuple(backends or default_backends(module_resolver, language_resolver))
        self._executor = SafeExecutor(status_bar_service)
        self._telemetry = TelemetryContext(*telemetry_reporters, enabled=telemetry_enabled)

    @property
    def stage_names(self) -> tuple[str, ...]:
        return tuple(type(h).__name__ for h in self._pipeline)

    async def format(self, request: FormattingRequest) -> str | None:
        """Format a request.

        Returns:
            The formatted text, the original text when the backend failed, or
            None when formatting did not run (ignored or unresolvable).
        """
        outcome = await self.run(request)
        return outcome.text

    async def run(self, request: FormattingRequest) -> FormattingOutcome:
        ctx = self._telemetry
        current: Any = request
        try:
            for handler in self._pipeline:
                stage_name = type(handler).__name__
                with ctx("format.stage", stage=stage_name):
                    result = await handler.handle(current)

                if not isinstance(result, Success | Failure):
                    raise InvariantViolationError(
                        "Handler returned a non-Result value; expected Success|Failure.",
                        stage_name=stage_name,
                    )
                if isinstance(result, Failure):
                    return self._short_circuit(request, result.error, stage_name)
                current = result.value

            if not isinstance(current, ConfiguredCommand):
                raise InvariantViolationError(
                    "Pipeline ended without a ConfiguredCommand.",
                    stage_name=stage_name,
                )
            choice = select_backend(self._backends, current)
        except Exception as e:
            log.error("Formatting failed for %s", request.display_name, exc_info=True)
            self._status.update_status_bar(FormattingResult.ERROR)
            ctx.count("format.error")
            return FormattingOutcome(OutcomeKind.ERROR, None, error=e)

        with ctx("format.backend", backend=choice.name):
            outcome = await self._executor.execute(choice.call, request.text)
        ctx.count(f"format.{outcome.kind.value}", backend=choice.name)
        return outcome

    def _short_circuit(
        self, request: FormattingRequest, error: Exception, stage_name: str
    ) -> FormattingOutcome:
        if isinstance(error, FormattingIgnored):
            log.info("Skipping %s: %s", request.display_name, error.reason)
            self._status.update_status_bar(FormattingResult.IGNORE)
            self._telemetry.count("format.ignored", stage=stage_name)
            return FormattingOutcome(OutcomeKind.IGNORED, None, error=error)

        log.error("%s failed for %s: %s", stage_name, request.display_name, error)
        self._status.update_status_bar(FormattingResult.ERROR)
        self._telemetry.count("format.error", stage=stage_name)
        return FormattingOutcome(OutcomeKind.ERROR, None, error=error)
