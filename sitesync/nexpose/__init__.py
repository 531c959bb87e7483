"""Console collaborator: session-scoped HTTP client, remote entities, error kinds."""

from sitesync.nexpose.client import NexposeClient
from sitesync.nexpose.errors import (
    ApiRejectedError,
    AuthenticationError,
    ErrorKind,
    MalformedResponseError,
    NexposeError,
    TransientNetworkError,
    UserInterruptedError,
)

__all__ = [
    "ApiRejectedError",
    "AuthenticationError",
    "ErrorKind",
    "MalformedResponseError",
    "NexposeClient",
    "NexposeError",
    "TransientNetworkError",
    "UserInterruptedError",
]
