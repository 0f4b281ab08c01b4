"""Explicit success/failure values for the degraded paths of the pipeline.

Stages return a ``Result`` instead of raising, and callers collapse it with
``degrade`` so falling back is a visible step rather than an ``except`` block.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


class ErrorKind(str, Enum):
    SERVICE_UNAVAILABLE = "service_unavailable"  # no API key configured
    SERVICE_ERROR = "service_error"
    TIMEOUT = "timeout"
    EXHAUSTED_RETRIES = "exhausted_retries"
    PARSE_ERROR = "parse_error"


@dataclass(frozen=True)
class Result(Generic[T]):
    value: T | None = None
    error: ErrorKind | None = None
    message: str = ""

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorKind, message: str = "") -> "Result[T]":
        return cls(error=error, message=message)

    @property
    def ok(self) -> bool:
        return self.error is None

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        if not self.ok:
            return Result(error=self.error, message=self.message)
        return Result.success(fn(self.value))

    def bind(self, fn: Callable[[T], "Result[U]"]) -> "Result[U]":
        if not self.ok:
            return Result(error=self.error, message=self.message)
        return fn(self.value)


def degrade(result: Result[T], fallback: T, what: str = "result") -> T:
    """Return the result's value, or ``fallback`` when it failed.

    SERVICE_UNAVAILABLE is expected in fallback mode and logged at DEBUG;
    every other failure kind is logged at WARNING.
    """
    if result.ok:
        return result.value
    if result.error is ErrorKind.SERVICE_UNAVAILABLE:
        logger.debug("Using fallback %s: %s", what, result.message)
    else:
        logger.warning("Using fallback %s after %s: %s", what, result.error.value, result.message)
    return fallback
