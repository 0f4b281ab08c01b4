"""Tests for review_core/guard.py: deadlines, retries and backoff."""

import asyncio
from unittest.mock import AsyncMock, patch

from review_core.guard import RetryTimeoutGuard
from review_core.result import ErrorKind, Result


def _factory(*results):
    """Task factory returning the given Results in order."""
    calls = AsyncMock(side_effect=list(results))
    return calls


async def test_first_success_returns_immediately():
    task = _factory(Result.success("done"))
    result = await RetryTimeoutGuard(base_delay_ms=0).run(task, max_retries=3, timeout_ms=100)
    assert result.value == "done"
    assert task.await_count == 1


async def test_retries_until_success():
    task = _factory(
        Result.failure(ErrorKind.SERVICE_ERROR, "503"),
        Result.failure(ErrorKind.SERVICE_ERROR, "503"),
        Result.success("third time"),
    )
    result = await RetryTimeoutGuard(base_delay_ms=0).run(task, max_retries=3, timeout_ms=100)
    assert result.value == "third time"
    assert task.await_count == 3


async def test_exhausts_after_one_plus_max_retries():
    task = AsyncMock(return_value=Result.failure(ErrorKind.SERVICE_ERROR, "down"))
    result = await RetryTimeoutGuard(base_delay_ms=0).run(task, max_retries=2, timeout_ms=100, label="lint")

    assert task.await_count == 3
    assert result.error is ErrorKind.EXHAUSTED_RETRIES
    assert "lint failed after 3 attempts" in result.message
    assert "service_error" in result.message


async def test_zero_retries_is_single_attempt():
    task = AsyncMock(return_value=Result.failure(ErrorKind.PARSE_ERROR, "blank"))
    result = await RetryTimeoutGuard(base_delay_ms=0).run(task, max_retries=0, timeout_ms=100)
    assert task.await_count == 1
    assert result.error is ErrorKind.EXHAUSTED_RETRIES


async def test_service_unavailable_is_not_retried():
    task = AsyncMock(return_value=Result.failure(ErrorKind.SERVICE_UNAVAILABLE, "no key"))
    result = await RetryTimeoutGuard(base_delay_ms=0).run(task, max_retries=3, timeout_ms=100)
    assert task.await_count == 1
    assert result.error is ErrorKind.SERVICE_UNAVAILABLE


async def test_hanging_attempt_times_out_and_retries():
    calls = 0

    async def task():
        nonlocal calls
        calls += 1
        if calls == 1:
            await asyncio.sleep(10)
        return Result.success("fast")

    result = await RetryTimeoutGuard(base_delay_ms=0).run(task, max_retries=1, timeout_ms=50)

    assert result.value == "fast"
    assert calls == 2


async def test_every_attempt_hangs():
    async def task():
        await asyncio.sleep(10)
        return Result.success("never")

    result = await RetryTimeoutGuard(base_delay_ms=0).run(task, max_retries=1, timeout_ms=20)

    assert result.error is ErrorKind.EXHAUSTED_RETRIES
    assert "timeout" in result.message


async def test_raising_task_becomes_service_error():
    task = AsyncMock(side_effect=RuntimeError("kaboom"))
    result = await RetryTimeoutGuard(base_delay_ms=0).run(task, max_retries=0, timeout_ms=100)
    assert result.error is ErrorKind.EXHAUSTED_RETRIES
    assert "kaboom" in result.message


async def test_linear_backoff_between_attempts():
    task = AsyncMock(return_value=Result.failure(ErrorKind.TIMEOUT, "late"))
    with patch("review_core.guard.asyncio.sleep", new=AsyncMock()) as sleep:
        await RetryTimeoutGuard(base_delay_ms=1000).run(task, max_retries=3, timeout_ms=100)

    assert [c.args[0] for c in sleep.await_args_list] == [1.0, 2.0, 3.0]
