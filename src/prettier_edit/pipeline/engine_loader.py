"""Loads the engine and editor settings for a formatting request."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prettier_edit.core.exceptions import EngineUnavailableError, PrettierEditError
from prettier_edit.core.types import (
    Failure,
    FormattingRequest,
    LoadedCommand,
    Result,
    Success,
)

if TYPE_CHECKING:
    from prettier_edit.core.protocols import ModuleProvider, Notifier, SettingsProvider

log = logging.getLogger(__name__)


class EngineLoader:
    """Legacy-settings warning, engine instance and editor settings."""

    def __init__(
        self,
        module_resolver: ModuleProvider,
        settings_provider: SettingsProvider,
        notification_service: Notifier,
    ) -> None:
        self._modules = module_resolver
        self._settings = settings_provider
        self._notifications = notification_service

    async def handle(
        self, command: FormattingRequest
    ) -> Result[LoadedCommand, PrettierEditError]:
        log.info("Formatting %s", command.display_name)

        # Informational only; never blocks formatting
        self._notifications.warn_if_legacy_configuration(command.uri)

        try:
            engine = self._modules.get_prettier_instance(
                command.file_path, True  # Show outdated or fallback warnings
            )
        except EngineUnavailableError as e:
            return Failure(e)

        settings = self._settings.get_config(command.file_path)
        return Success(LoadedCommand(request=command, engine=engine, settings=settings))
