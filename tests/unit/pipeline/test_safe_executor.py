"""The safe executor treats awaitables and deferred callables alike."""

import asyncio
import time

import pytest

from prettier_edit.core.exceptions import BackendExecutionError
from prettier_edit.core.types import OutcomeKind
from prettier_edit.pipeline.safe_executor import SafeExecutor
from prettier_edit.status import FormattingResult, StatusBarService

pytestmark = pytest.mark.unit


async def _produce(text: str) -> str:
    await asyncio.sleep(0)
    return text


async def _reject() -> str:
    await asyncio.sleep(0)
    raise RuntimeError("rejected")


def _throw() -> str:
    raise RuntimeError("thrown")


@pytest.fixture
def status() -> StatusBarService:
    return StatusBarService()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "make_call",
    [
        pytest.param(lambda: lambda: "formatted", id="deferred-sync"),
        pytest.param(lambda: _produce("formatted"), id="started-awaitable"),
        pytest.param(lambda: lambda: _produce("formatted"), id="deferred-awaitable"),
    ],
)
async def test_success_publishes_success_and_returns_produced_text(status, make_call):
    executor = SafeExecutor(status)

    assert await executor.run(make_call(), "original") == "formatted"
    assert status.last_result is FormattingResult.SUCCESS


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "make_call",
    [
        pytest.param(lambda: _throw, id="sync-throw"),
        pytest.param(_reject, id="started-rejection"),
        pytest.param(lambda: _reject, id="deferred-rejection"),
    ],
)
async def test_failure_returns_original_text_byte_for_byte(status, make_call):
    executor = SafeExecutor(status)
    original = "const\tx =  1\r\n// ünïcode\n"

    outcome = await executor.execute(make_call(), original)

    assert outcome.kind is OutcomeKind.ERROR
    assert outcome.text == original
    assert isinstance(outcome.error, RuntimeError)
    assert status.last_result is FormattingResult.ERROR


@pytest.mark.asyncio
async def test_non_text_result_counts_as_a_failure(status):
    executor = SafeExecutor(status)

    outcome = await executor.execute(lambda: None, "original")

    assert outcome.text == "original"
    assert isinstance(outcome.error, BackendExecutionError)
    assert status.last_result is FormattingResult.ERROR


@pytest.mark.asyncio
async def test_unchanged_output_is_reported_as_unchanged(status):
    executor = SafeExecutor(status)

    outcome = await executor.execute(lambda: "same", "same")

    assert outcome.kind is OutcomeKind.UNCHANGED
    assert status.last_result is FormattingResult.SUCCESS


@pytest.mark.asyncio
async def test_failure_is_logged(status, caplog):
    executor = SafeExecutor(status)

    with caplog.at_level("ERROR", logger="prettier_edit.pipeline.safe_executor"):
        await executor.run(_throw, "x")

    assert "Error formatting document." in caplog.text
    assert "thrown" in caplog.text


@pytest.mark.asyncio
async def test_blocking_backend_does_not_stall_the_event_loop(status):
    executor = SafeExecutor(status)
    gaps: list[float] = []
    done = asyncio.Event()

    async def tick() -> None:
        last = time.perf_counter()
        while not done.is_set():
            await asyncio.sleep(0.02)
            now = time.perf_counter()
            gaps.append(now - last)
            last = now

    def slow_backend() -> str:
        time.sleep(0.3)
        return "formatted"

    ticker = asyncio.create_task(tick())
    try:
        assert await executor.run(slow_backend, "original") == "formatted"
    finally:
        done.set()
        await ticker

    assert len(gaps) >= 5
    assert max(gaps) < 0.2
