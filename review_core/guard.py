"""Deadline and bounded retry around a single asynchronous task."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from review_core.result import ErrorKind, Result

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Failures that retrying cannot fix
_NON_RETRYABLE = frozenset({ErrorKind.SERVICE_UNAVAILABLE})


class RetryTimeoutGuard:
    """Run a task factory with a per-attempt deadline and linear backoff.

    ``task`` must be a zero-argument callable returning a fresh awaitable on
    every call, since a coroutine cannot be awaited twice. Attempts are
    strictly sequential: attempt ``k`` (1-based) of a retry is preceded by a
    sleep of ``base_delay_ms * k``.

    A timed-out attempt is cancelled and its result is never observed.
    """

    def __init__(self, base_delay_ms: int = 1000) -> None:
        self._base_delay_ms = base_delay_ms

    async def run(
        self,
        task: Callable[[], Awaitable[Result[T]]],
        max_retries: int,
        timeout_ms: int,
        label: str = "task",
    ) -> Result[T]:
        """Run ``task`` up to ``1 + max_retries`` times.

        Returns:
            The first successful Result, the task's own non-retryable failure,
            or an EXHAUSTED_RETRIES failure naming the last error seen.
        """
        attempts = 1 + max(0, max_retries)
        last: Result[T] = Result.failure(ErrorKind.EXHAUSTED_RETRIES, "never attempted")

        for attempt in range(attempts):
            if attempt > 0:
                delay = self._base_delay_ms * attempt / 1000
                logger.warning(
                    "%s attempt %d/%d failed (%s), retrying in %.2fs",
                    label, attempt, attempts, last.error.value, delay,
                )
                await asyncio.sleep(delay)

            last = await self._attempt(task, timeout_ms)
            if last.ok or last.error in _NON_RETRYABLE:
                return last

        logger.warning("%s exhausted %d attempts: %s", label, attempts, last.message)
        return Result.failure(
            ErrorKind.EXHAUSTED_RETRIES,
            f"{label} failed after {attempts} attempts; last error {last.error.value}: {last.message}",
        )

    @staticmethod
    async def _attempt(task: Callable[[], Awaitable[Result[T]]], timeout_ms: int) -> Result[T]:
        try:
            return await asyncio.wait_for(task(), timeout=timeout_ms / 1000)
        except TimeoutError:
            return Result.failure(ErrorKind.TIMEOUT, f"Deadline of {timeout_ms}ms exceeded")
        except Exception as exc:
            return Result.failure(ErrorKind.SERVICE_ERROR, f"Unexpected error: {exc}")
