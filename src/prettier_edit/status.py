"""Status indicator reflecting the outcome of the last formatting run."""

from __future__ import annotations

from collections.abc import Callable
import dataclasses
import enum
import logging

log = logging.getLogger(__name__)


class FormattingResult(enum.Enum):
    SUCCESS = "success"
    IGNORE = "ignore"
    ERROR = "error"


@dataclasses.dataclass(frozen=True, slots=True)
class StatusBarState:
    text: str
    tooltip: str
    result: FormattingResult


_STATES = {
    FormattingResult.SUCCESS: StatusBarState(
        "$(check) Prettier", "Formatted successfully", FormattingResult.SUCCESS
    ),
    FormattingResult.IGNORE: StatusBarState(
        "$(eye-closed) Prettier", "File ignored", FormattingResult.IGNORE
    ),
    FormattingResult.ERROR: StatusBarState(
        "$(alert) Prettier",
        "Formatting failed, see the log for details",
        FormattingResult.ERROR,
    ),
}


class StatusBarService:
    """Keeps the last outcome and pushes it to the host's status indicator."""

    def __init__(
        self, on_update: Callable[[StatusBarState], None] | None = None
    ) -> None:
        self._on_update = on_update
        self._state: StatusBarState | None = None

    @property
    def state(self) -> StatusBarState | None:
        return self._state

    @property
    def last_result(self) -> FormattingResult | None:
        return self._state.result if self._state else None

    def update_status_bar(self, result: FormattingResult) -> None:
        self._state = _STATES[result]
        log.debug("Status: %s", result.value)
        if self._on_update is not None:
            self._on_update(self._state)
