"""Remote API errors (error taxonomy for the lodge REST backend).

These errors are raised by Remote API adapters and converted into failed
Results by the application layer. None of them is ever retried
automatically; retry is a caller decision.

Taxonomy:
- ValidationError: payload rejected by the server, carries field messages
- NotFoundError: the id no longer exists, callers prune local state
- TransientNetworkError: timeout / connection failure / 5xx, state kept intact
- ConflictError: concurrent-edit style rejection, surfaced verbatim
"""

from __future__ import annotations

from typing import Any

from lodge_admin.domain.exceptions import LodgeAdminError


class RemoteApiError(LodgeAdminError):
    """Base exception for Remote API failures.

    Also raised directly for responses that fit no other category
    (unexpected status codes, malformed bodies).

    Attributes:
        status_code: HTTP status code, 0 when no response was received.
        detail: Parsed response body or raw text, if any.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail


class ValidationError(RemoteApiError):
    """Raised when the server rejects a payload (400/422).

    Attributes:
        field_errors: Mapping of field name to the server's messages for it.
            Errors not tied to a field are stored under "_".
    """

    def __init__(
        self,
        message: str,
        field_errors: dict[str, list[str]] | None = None,
        status_code: int | None = 400,
        detail: Any = None,
    ) -> None:
        super().__init__(message, status_code=status_code, detail=detail)
        self.field_errors = field_errors or {}


class NotFoundError(RemoteApiError):
    """Raised when the requested resource id no longer exists (404).

    Attributes:
        resource: Resource collection name (e.g. "members").
        resource_id: The id that was not found, when known.
    """

    def __init__(
        self,
        message: str = "Not found",
        resource: str | None = None,
        resource_id: str | None = None,
        detail: Any = None,
    ) -> None:
        super().__init__(message, status_code=404, detail=detail)
        self.resource = resource
        self.resource_id = resource_id


class TransientNetworkError(RemoteApiError):
    """Raised for timeouts, connection failures and server-side errors.

    Attributes:
        retry_after: Seconds suggested by the server before retrying, if any.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        retry_after: int | None = None,
        detail: Any = None,
    ) -> None:
        super().__init__(message, status_code=status_code, detail=detail)
        self.retry_after = retry_after


class ConflictError(RemoteApiError):
    """Raised when the server rejects a write as conflicting (409)."""

    def __init__(self, message: str, detail: Any = None) -> None:
        super().__init__(message, status_code=409, detail=detail)
