"""Decides whether a document should be formatted at all."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prettier_edit.core.exceptions import FormattingIgnored
from prettier_edit.core.types import (
    EligibleCommand,
    Failure,
    LoadedCommand,
    Result,
    Success,
)

if TYPE_CHECKING:
    from prettier_edit.core.protocols import IgnorePathResolver

log = logging.getLogger(__name__)


class EligibilityGate:
    """Skips disabled languages and files matched by the ignore file."""

    def __init__(self, ignore_resolver: IgnorePathResolver) -> None:
        self._ignore_resolver = ignore_resolver

    async def handle(
        self, command: LoadedCommand
    ) -> Result[EligibleCommand, FormattingIgnored]:
        request = command.request

        # Still needed with per-folder selectors: a nested folder without the
        # language is covered by its parent folder's pattern.
        if request.language_id in command.settings.disable_languages:
            return Failure(
                FormattingIgnored(f"Language '{request.language_id}' is disabled")
            )

        ignore_path = self._ignore_resolver.get_ignore_path(
            request.file_path, command.settings
        )

        file_info = None
        if request.file_path:
            file_info = await command.engine.get_file_info(
                request.file_path,
                ignore_path=ignore_path,
                resolve_config=True,
            )
            log.info("File Info: %s", file_info)

        if file_info is not None and file_info.ignored:
            log.info("File is ignored, skipping.")
            return Failure(FormattingIgnored(f"{request.file_path} is ignored"))

        return Success(
            EligibleCommand(loaded=command, ignore_path=ignore_path, file_info=file_info)
        )
