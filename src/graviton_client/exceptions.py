"""Exceptions raised by the Core client and the explorer."""

from typing import Any, Optional


class CoreClientError(Exception):
    """Base exception for everything raised by graviton-client."""


class CoreTransportError(CoreClientError):
    """Raised when the underlying channel fails (refused connection, broken socket)."""


class CoreTimeoutError(CoreTransportError):
    """Raised when a request or the connection handshake exceeds its configured timeout."""


class CoreRPCError(CoreClientError):
    """Raised when the Core rejects a call outright instead of returning a Result."""

    def __init__(self, method: str, message: str, code: Optional[int] = None, data: Any = None):
        self.method = method
        self.code = code
        self.data = data
        super().__init__(f"{method} failed: {message}" + (f" (code {code})" if code else ""))


class StateNotFoundError(CoreClientError):
    """Raised when the Core has no session state for the configured id and token."""

    def __init__(self, state_id: int):
        self.state_id = state_id
        super().__init__(f"No state found for state id {state_id}")


class CoreOperationError(CoreClientError):
    """Raised when a Core operation returned an explicit Err result.

    The error payload is opaque to the client and kept as-is.
    """

    def __init__(self, error: Any, message: Optional[str] = None):
        self.error = error
        super().__init__(message or f"Core operation failed: {error!r}")


class DirectoryListingError(CoreOperationError):
    """Raised when listing a directory for the explorer failed."""

    def __init__(self, path: str, error: Any):
        self.path = path
        super().__init__(error, f"Could not list directory {path}: {error!r}")
