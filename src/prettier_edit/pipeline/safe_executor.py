"""Uniform execution of formatting backends.

A backend call comes in one of two shapes: an awaitable that was already
created by invoking the backend, or a zero-argument callable whose result
may itself be awaitable. Callables run in a worker thread so a blocking
backend never stalls the event loop. Both shapes are collapsed into one
deferred computation so success and failure are handled in a single place.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
import inspect
import logging
from typing import TYPE_CHECKING, Any, TypeAlias

from prettier_edit.core.exceptions import BackendExecutionError
from prettier_edit.core.types import FormattingOutcome, OutcomeKind
from prettier_edit.status import FormattingResult

if TYPE_CHECKING:
    from prettier_edit.core.protocols import StatusReporter

log = logging.getLogger(__name__)

FormatCall: TypeAlias = Awaitable[Any] | Callable[[], Any]


async def _deferred(call: FormatCall) -> Any:
    # Callables may block on a subprocess, so they run off the loop thread
    result = call if inspect.isawaitable(call) else await asyncio.to_thread(call)
    while inspect.isawaitable(result):
        result = await result
    return result


class SafeExecutor:
    """Runs a backend call; on any failure the original text comes back."""

    def __init__(self, status_reporter: StatusReporter) -> None:
        self._status = status_reporter

    async def execute(self, call: FormatCall, original_text: str) -> FormattingOutcome:
        """Run ``call`` and publish Success or Error.

        Returns:
            A FORMATTED/UNCHANGED outcome carrying the produced text, or an
            ERROR outcome carrying ``original_text`` verbatim.
        """
        try:
            produced = await _deferred(call)
            if not isinstance(produced, str):
                raise BackendExecutionError(
                    f"Formatter returned {type(produced).__name__}, expected str"
                )
        except Exception as e:
            log.error("Error formatting document.", exc_info=True)
            self._status.update_status_bar(FormattingResult.ERROR)
            return FormattingOutcome(OutcomeKind.ERROR, original_text, error=e)

        self._status.update_status_bar(FormattingResult.SUCCESS)
        return FormattingOutcome.from_text(original_text, produced)

    async def run(self, call: FormatCall, original_text: str) -> str:
        outcome = await self.execute(call, original_text)
        return outcome.text if outcome.text is not None else original_text
