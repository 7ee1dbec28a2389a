"""Formatting edit provider handed to the host editor."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
import logging
from time import perf_counter
from typing import Any

from prettier_edit.core.documents import Range, TextDocument, TextEdit
from prettier_edit.core.types import FormattingRequest, RangeFormattingOptions

log = logging.getLogger(__name__)

FormatFunction = Callable[[FormattingRequest], Awaitable[str | None]]


class PrettierEditProvider:
    """Full-document and range formatting entry points.

    Both return a list of edits; an empty list tells the host to defer to
    another formatter and is never an error.
    """

    def __init__(self, format_text: FormatFunction) -> None:
        self._format = format_text

    async def provide_document_formatting_edits(
        self, document: TextDocument, options: Any = None  # noqa: ARG002
    ) -> list[TextEdit]:
        return await self._provide_edits(document)

    async def provide_document_range_formatting_edits(
        self, document: TextDocument, range_: Range, options: Any = None  # noqa: ARG002
    ) -> list[TextEdit]:
        return await self._provide_edits(
            document,
            RangeFormattingOptions(
                range_start=document.offset_at(range_.start),
                range_end=document.offset_at(range_.end),
            ),
        )

    async def _provide_edits(
        self,
        document: TextDocument,
        range_options: RangeFormattingOptions | None = None,
    ) -> list[TextEdit]:
        start = perf_counter()
        original = document.get_text()
        result = await self._format(FormattingRequest.from_document(document, range_options))
        if result is None or result == original:
            # No edits happened, return nothing so the host can try other formatters
            return []
        log.info("Formatting completed in %.2fms.", (perf_counter() - start) * 1000)
        return [TextEdit.replace(document.full_range(), result)]
