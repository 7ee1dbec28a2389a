"""The contract shared by the formatting stages.

A request moves through the stages as progressively richer immutable states:
``FormattingRequest`` to ``LoadedCommand`` to ``EligibleCommand`` to
``ParsedCommand`` to ``ConfiguredCommand``. Each stage either hands the next
state on or stops the request. Stopping with ``FormattingIgnored`` is a
normal skip (status Ignore); any other error ends the request with status
Error. Stages never raise for expected outcomes.
"""

from typing import Protocol, TypeVar

from prettier_edit.core.exceptions import PrettierEditError
from prettier_edit.core.types import Result

StateIn = TypeVar("StateIn", contravariant=True)
StateOut = TypeVar("StateOut")
StageError = TypeVar("StageError", bound=PrettierEditError)


class BaseAsyncHandler(Protocol[StateIn, StateOut, StageError]):
    """One formatting stage.

    A stage may suspend on an external lookup (engine load, file info,
    configuration) but never runs concurrently with another stage of the
    same request.
    """

    async def handle(self, command: StateIn) -> Result[StateOut, StageError]:
        """Advance ``command`` to the next state, or stop the request with Failure."""
        ...
