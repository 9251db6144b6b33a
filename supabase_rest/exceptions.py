"""Supabase REST client exceptions."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import ExecuteError


class SupabaseError(Exception):
    """Base exception for Supabase REST errors."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class ValidationError(SupabaseError, ValueError):
    """A precondition was violated before any request was attempted.

    Args:
        message: Human-readable description.
        field: Name of the offending argument (``url``, ``api_key``, ``table``,
            ``rpc``, ``payload`` or ``on_conflict``).
    """

    def __init__(self, message: str, field: str):
        super().__init__(message)
        self.field = field


class UnknownOperationError(SupabaseError):
    """Query was executed without a recognised operation."""

    pass


class APIError(SupabaseError):
    """The API answered with a non-2xx status.

    The parsed error body is available as ``error``; its fields are also
    rendered into the exception message, with absent fields shown as ``null``.
    """

    def __init__(self, operation: str, status_code: int, error: "ExecuteError"):
        self.operation = operation
        self.status_code = status_code
        self.error = error
        super().__init__(
            f"{operation} failed - HTTP {status_code}: {error.describe()}",
            error.code,
        )

    @property
    def hint(self) -> str | None:
        return self.error.hint

    @property
    def details(self) -> str | None:
        return self.error.details


class TransportError(SupabaseError):
    """The request did not produce an HTTP response."""

    def __init__(self, message: str, operation: str):
        super().__init__(message)
        self.operation = operation


class TimeoutError(TransportError):  # noqa: A001
    """Connect, read or write timeout exceeded."""

    pass


class ConnectionError(TransportError):  # noqa: A001
    """Network-level failure talking to the API."""

    pass


class UnexpectedTransportError(TransportError):
    """Any other failure raised by the HTTP layer."""

    pass
