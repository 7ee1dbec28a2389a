"""Config-file requirement and final formatting options."""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging
from typing import TYPE_CHECKING

from prettier_edit.core.exceptions import (
    FormattingIgnored,
    OptionsResolutionError,
    PrettierEditError,
)
from prettier_edit.core.types import (
    ConfigOverrides,
    ConfiguredCommand,
    Failure,
    ParsedCommand,
    Result,
    Success,
)
from prettier_edit.utils import get_workspace_relative_path

if TYPE_CHECKING:
    from prettier_edit.core.protocols import ConfigProvider
    from prettier_edit.core.types import WorkspaceFolder

log = logging.getLogger(__name__)


class OptionsResolver:
    """Applies ``require_config`` and merges the formatting options."""

    def __init__(
        self,
        config_resolver: ConfigProvider,
        workspace_folders: Callable[[], Sequence[WorkspaceFolder] | None] = lambda: None,
    ) -> None:
        self._config = config_resolver
        self._workspace_folders = workspace_folders

    async def handle(
        self, command: ParsedCommand
    ) -> Result[ConfiguredCommand, PrettierEditError]:
        loaded = command.eligible.loaded
        request, settings = loaded.request, loaded.settings

        has_config = await self._config.check_has_prettier_config(request.file_path)
        if not has_config and settings.require_config:
            log.info("Require config set to true and no config present. Skipping file.")
            return Failure(FormattingIgnored("No configuration file and require_config is set"))

        config_override = None
        if settings.config_path:
            config_override = get_workspace_relative_path(
                request.file_path, settings.config_path, self._workspace_folders()
            )

        resolution = await self._config.get_prettier_options(
            request.file_path,
            command.parser,
            settings,
            ConfigOverrides(config=config_override, editorconfig=settings.use_editor_config),
            request.range_options,
        )
        if resolution.error is not None:
            error = resolution.error
            if not isinstance(error, OptionsResolutionError):
                error = OptionsResolutionError(str(error), cause=error)
            return Failure(error)

        log.info("Prettier Options: %s", dict(resolution.options))
        return Success(ConfiguredCommand(parsed=command, options=resolution.options))
