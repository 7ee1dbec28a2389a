"""Resolves the parser the engine should use for a document."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prettier_edit.core.exceptions import ParserResolutionError
from prettier_edit.core.types import (
    EligibleCommand,
    Failure,
    ParsedCommand,
    Result,
    Success,
)

if TYPE_CHECKING:
    from prettier_edit.core.protocols import CapabilityResolver

log = logging.getLogger(__name__)


class ParserResolver:
    """Inferred parser first, then the language table's first candidate."""

    def __init__(self, language_resolver: CapabilityResolver) -> None:
        self._languages = language_resolver

    async def handle(
        self, command: EligibleCommand
    ) -> Result[ParsedCommand, ParserResolutionError]:
        request = command.loaded.request
        parser: str | None = None

        if command.file_info is not None and command.file_info.inferred_parser:
            parser = command.file_info.inferred_parser
        else:
            log.warning("Parser not inferred, using editor language.")
            candidates = self._languages.get_parsers_from_language_id(
                request.file_path, request.language_id
            )
            if candidates:
                parser = candidates[0]
                log.info("Resolved parser to '%s'", parser)

        if not parser:
            return Failure(
                ParserResolutionError(
                    f"Failed to resolve a parser for {request.display_name} "
                    f"(language '{request.language_id}')"
                )
            )
        return Success(ParsedCommand(eligible=command, parser=parser))
