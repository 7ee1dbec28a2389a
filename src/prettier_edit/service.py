"""Provider registration lifecycle and wiring of the default collaborators."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Sequence
import logging
from typing import TYPE_CHECKING, Any

from prettier_edit.config import PRETTIER_CONFIG_FILES, PrettierConfigResolver, SettingsResolver
from prettier_edit.edit_provider import PrettierEditProvider
from prettier_edit.ignore import IgnoreResolver
from prettier_edit.languages import LanguageResolver
from prettier_edit.modules import ModuleResolver
from prettier_edit.notifications import NotificationService
from prettier_edit.orchestrator import FormattingOrchestrator
from prettier_edit.selector_builder import compute_selectors
from prettier_edit.status import StatusBarService

if TYPE_CHECKING:
    from prettier_edit.config.resolver import HostSettings
    from prettier_edit.core.protocols import (
        CapabilityResolver,
        ConfigurationChangeEvent,
        Disposable,
        EditorHost,
        ModuleProvider,
        Notifier,
        SettingsProvider,
    )
    from prettier_edit.core.types import SelectorSet
    from prettier_edit.notifications import Level
    from prettier_edit.status import StatusBarState
    from prettier_edit.telemetry import TelemetryReporter

log = logging.getLogger(__name__)

CONFIG_SECTION = "prettier"


class RegistrationSlot:
    """Holds at most one set of live registrations.

    ``acquire`` always disposes the current set before creating the next
    one, so two generations of providers are never registered at once.
    Handles are held as soon as ``register`` yields them; if registration
    fails partway, the ones already created are disposed.
    """

    def __init__(self) -> None:
        self._handles: list[Disposable] = []

    @property
    def active(self) -> bool:
        return bool(self._handles)

    def acquire(self, register: Callable[[], Iterable[Disposable]]) -> None:
        self.release()
        try:
            for handle in register():
                self._handles.append(handle)
        except Exception:
            log.error("Provider registration failed; disposing partial registration")
            self.release()
            raise

    def release(self) -> None:
        handles, self._handles = self._handles, []
        _dispose_all(handles)


def _dispose_all(handles: Sequence[Disposable]) -> None:
    # Every handle is disposed even when an earlier one raises
    if not handles:
        return
    try:
        handles[0].dispose()
    finally:
        _dispose_all(handles[1:])


class PrettierEditService:
    """Registers the formatting providers and keeps them current."""

    def __init__(
        self,
        host: EditorHost,
        orchestrator: FormattingOrchestrator,
        *,
        module_resolver: ModuleProvider,
        language_resolver: CapabilityResolver,
        settings_provider: SettingsProvider,
        notification_service: Notifier,
    ) -> None:
        self._host = host
        self._orchestrator = orchestrator
        self._modules = module_resolver
        self._languages = language_resolver
        self._settings = settings_provider
        self._notifications = notification_service
        self._registrations = RegistrationSlot()

    @property
    def orchestrator(self) -> FormattingOrchestrator:
        return self._orchestrator

    @property
    def is_registered(self) -> bool:
        return self._registrations.active

    def register_disposables(self) -> list[Disposable]:
        """Subscribe to every change that can alter the registrations."""
        host = self._host

        def reregister(*_args: Any) -> None:
            self.register_formatter()

        def on_configuration(event: ConfigurationChangeEvent) -> None:
            if event.affects_configuration(CONFIG_SECTION):
                self.register_formatter()

        package_watcher = host.create_file_system_watcher("**/package.json")
        package_watcher.on_did_change(reregister)
        package_watcher.on_did_create(reregister)
        package_watcher.on_did_delete(reregister)

        configuration_watcher = host.on_did_change_configuration(on_configuration)
        workspace_watcher = host.on_did_change_workspace_folders(reregister)

        prettier_config_watcher = host.create_file_system_watcher(
            f"**/{{{','.join(PRETTIER_CONFIG_FILES)}}}"
        )
        prettier_config_watcher.on_did_change(reregister)
        prettier_config_watcher.on_did_create(reregister)
        prettier_config_watcher.on_did_delete(reregister)

        return [
            package_watcher,
            configuration_watcher,
            workspace_watcher,
            prettier_config_watcher,
        ]

    def register_formatter(self) -> SelectorSet:
        self.dispose()
        selectors = self.selectors()
        edit_provider = PrettierEditProvider(self._orchestrator.format)

        def register() -> Iterator[Disposable]:
            yield self._host.register_document_range_formatting_edit_provider(
                selectors.range_language_selector, edit_provider
            )
            yield self._host.register_document_formatting_edit_provider(
                selectors.language_selector, edit_provider
            )

        self._registrations.acquire(register)
        return selectors

    def selectors(self) -> SelectorSet:
        disabled = self._settings.get_config(None).disable_languages
        return compute_selectors(
            self._host.workspace_folders,
            disabled,
            language_resolver=self._languages,
        )

    def dispose(self) -> None:
        self._modules.dispose()
        self._notifications.dispose()
        self._registrations.release()


def create_service(
    host: EditorHost,
    *,
    host_settings: HostSettings | None = None,
    notify: Callable[[Level, str], None] | None = None,
    on_status: Callable[[StatusBarState], None] | None = None,
    telemetry_reporters: Sequence[TelemetryReporter] = (),
) -> PrettierEditService:
    """Wire the default collaborators into a ready-to-register service.

    Args:
        host: The editor host.
        host_settings: Callback returning the host's settings for a document.
        notify: Sink for user notifications (defaults to logging).
        on_status: Receives status indicator updates.
        telemetry_reporters: Reporters for stage timings when telemetry is on.
    """
    settings = SettingsResolver(host_settings)
    notifications = NotificationService(settings, notify)
    modules = ModuleResolver(settings, notifications)
    languages = LanguageResolver()

    def workspace_folders() -> Any:
        return host.workspace_folders

    orchestrator = FormattingOrchestrator(
        module_resolver=modules,
        language_resolver=languages,
        ignore_resolver=IgnoreResolver(workspace_folders),
        config_resolver=PrettierConfigResolver(),
        settings_provider=settings,
        notification_service=notifications,
        status_bar_service=StatusBarService(on_status),
        workspace_folders=workspace_folders,
        telemetry_reporters=telemetry_reporters,
    )
    return PrettierEditService(
        host,
        orchestrator,
        module_resolver=modules,
        language_resolver=languages,
        settings_provider=settings,
        notification_service=notifications,
    )
