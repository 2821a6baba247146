"""Result type returned by every store and attendance command.

Callers branch on `ok` instead of catching exceptions: the application
layer converts every LodgeAdminError into a failed Result and never lets
one escape to the view layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from lodge_admin.domain.errors.attendance import (
    AttendanceAlreadySettledError,
    InvalidAttendanceTransitionError,
    JustificationRequiredError,
    MemberNotOnRosterError,
)
from lodge_admin.domain.errors.query import InvalidQueryError
from lodge_admin.domain.errors.remote import (
    ConflictError,
    NotFoundError,
    TransientNetworkError,
    ValidationError,
)
from lodge_admin.domain.exceptions import LodgeAdminError

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Machine-readable failure category of a Result.

    Values:
        VALIDATION: Payload rejected by the server (field messages attached).
        NOT_FOUND: The id does not exist (locally or remotely).
        TRANSIENT_NETWORK: Timeout, connection failure or server error.
        CONFLICT: Concurrent-edit rejection from the server.
        INVALID_TRANSITION: Attendance action not allowed from current status.
        INVALID_INPUT: Bad filter, page size, action or empty justification.
        IN_PROGRESS: A transition for the same member awaits acknowledgement.
        SUPERSEDED: A newer fetch was issued; this response was discarded.
        CLOSED: The controller was torn down.
        UNEXPECTED: Anything the server returned that fits no other category.
    """

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    TRANSIENT_NETWORK = "transient_network"
    CONFLICT = "conflict"
    INVALID_TRANSITION = "invalid_transition"
    INVALID_INPUT = "invalid_input"
    IN_PROGRESS = "in_progress"
    SUPERSEDED = "superseded"
    CLOSED = "closed"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a core operation.

    Attributes:
        ok: Whether the operation succeeded.
        value: Payload on success (None for operations without one).
        error_kind: Failure category, None on success.
        message: Human-readable failure message, None on success.
        field_errors: Server field messages for VALIDATION failures.
    """

    ok: bool
    value: T | None = None
    error_kind: ErrorKind | None = None
    message: str | None = None
    field_errors: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def succeed(cls, value: T | None = None) -> Result[T]:
        return cls(ok=True, value=value)

    @classmethod
    def fail(
        cls,
        kind: ErrorKind,
        message: str,
        field_errors: dict[str, list[str]] | None = None,
    ) -> Result[T]:
        return cls(
            ok=False,
            error_kind=kind,
            message=message,
            field_errors=field_errors or {},
        )

    @classmethod
    def from_exception(cls, exc: LodgeAdminError) -> Result[T]:
        """Build a failed Result from a domain exception.

        Args:
            exc: Any LodgeAdminError raised by an adapter or domain model.

        Returns:
            Failed Result with the matching ErrorKind and the exception text.
        """
        if isinstance(exc, ValidationError):
            return cls.fail(ErrorKind.VALIDATION, str(exc), exc.field_errors)
        return cls.fail(error_kind_for(exc), str(exc))

    @property
    def failed(self) -> bool:
        return not self.ok

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "message": self.message,
            "field_errors": self.field_errors,
        }


def error_kind_for(exc: LodgeAdminError) -> ErrorKind:
    """Map a domain exception to its ErrorKind."""
    if isinstance(exc, ValidationError):
        return ErrorKind.VALIDATION
    if isinstance(exc, (NotFoundError, MemberNotOnRosterError)):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, TransientNetworkError):
        return ErrorKind.TRANSIENT_NETWORK
    if isinstance(exc, ConflictError):
        return ErrorKind.CONFLICT
    if isinstance(
        exc, (InvalidAttendanceTransitionError, AttendanceAlreadySettledError)
    ):
        return ErrorKind.INVALID_TRANSITION
    if isinstance(exc, (JustificationRequiredError, InvalidQueryError)):
        return ErrorKind.INVALID_INPUT
    return ErrorKind.UNEXPECTED
