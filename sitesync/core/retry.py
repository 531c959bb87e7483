"""Bounded retry over a fixed backoff schedule for transient network errors."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from typing import TypeVar

import httpx
import structlog

from sitesync.nexpose.errors import ErrorKind

log = structlog.get_logger("sitesync.retry")

T = TypeVar("T")

# Three retries after the initial attempt. Call sites pass this; with_retry
# copies it, so every call gets a fresh schedule.
DEFAULT_DELAYS: tuple[int, ...] = (3, 5, 10)

_TRANSIENT_BUILTINS = (ConnectionResetError, TimeoutError)


class RetryExhaustedError(Exception):
    """Raised when a transient failure outlasts the backoff schedule."""

    def __init__(self, cause: BaseException, attempts: int) -> None:
        self.cause = cause
        self.attempts = attempts
        super().__init__(f"retry attempts exceeded after {attempts} tries: {cause}")


def is_transient(exc: BaseException) -> bool:
    """True for connection resets and timeouts; everything else is terminal."""
    if getattr(exc, "kind", None) is ErrorKind.TRANSIENT_NETWORK:
        return True
    if isinstance(exc, (httpx.TimeoutException, httpx.NetworkError)):
        return True
    return isinstance(exc, _TRANSIENT_BUILTINS)


def with_retry(
    delays: Iterable[int],
    op: Callable[[], T],
    *,
    label: str = "request",
) -> T:
    """Run *op*, sleeping through *delays* between transient failures.

    Non-transient errors propagate immediately without consuming the
    schedule. When the schedule runs out, :class:`RetryExhaustedError` is
    raised with the last transient error as its cause.
    """
    remaining = list(delays)
    attempts = 0
    while True:
        attempts += 1
        try:
            return op()
        except Exception as exc:
            if not is_transient(exc):
                raise
            log.error("retry.transient_error", op=label, attempt=attempts, error=str(exc))
            if not remaining:
                raise RetryExhaustedError(exc, attempts) from exc
            delay = remaining.pop(0)
            log.warning("retry.backoff", op=label, wait_seconds=delay, retries_left=len(remaining))
            time.sleep(delay)
