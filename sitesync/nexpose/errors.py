"""Error kinds raised at the console boundary.

Callers branch on the exception class (or its ``kind``), never on message text.
"""

from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    TRANSIENT_NETWORK = "transient_network"
    API_REJECTED = "api_rejected"
    USER_INTERRUPTED = "user_interrupted"


class NexposeError(Exception):
    """Base exception for all console errors."""

    kind: ErrorKind


class TransientNetworkError(NexposeError):
    """Connection reset, refused, or timed out; safe to retry."""

    kind = ErrorKind.TRANSIENT_NETWORK


class ApiRejectedError(NexposeError):
    """The console answered, but refused or failed the request."""

    kind = ErrorKind.API_REJECTED

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class AuthenticationError(ApiRejectedError):
    """Login failed or the session is no longer valid (HTTP 401/403)."""


class MalformedResponseError(ApiRejectedError):
    """Response body could not be parsed into the expected shape."""


class UserInterruptedError(NexposeError):
    """The operator pressed Ctrl+C while a request was in flight."""

    kind = ErrorKind.USER_INTERRUPTED
