"""Attendance workflow errors.

Raised by AttendanceRecord when a transition is not permitted by the
attendance transition matrix. The attendance state machine converts them
into failed Results and leaves the roster entry untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lodge_admin.domain.exceptions import LodgeAdminError

if TYPE_CHECKING:
    from lodge_admin.domain.models.attendance import (
        AttendanceAction,
        AttendanceStatus,
    )


class AttendanceError(LodgeAdminError):
    """Base class for attendance rule violations.

    Attributes:
        member_id: Member whose roster entry rejected the change.
    """

    def __init__(self, message: str, member_id: str) -> None:
        super().__init__(message)
        self.member_id = member_id


class InvalidAttendanceTransitionError(AttendanceError):
    """Raised when an action is not allowed from the current status.

    Attributes:
        from_status: Current status of the roster entry.
        action: The attempted action.
        allowed_actions: Actions valid from the current status.
    """

    def __init__(
        self,
        member_id: str,
        from_status: AttendanceStatus,
        action: AttendanceAction,
        allowed_actions: list[AttendanceAction] | None = None,
    ) -> None:
        self.from_status = from_status
        self.action = action
        self.allowed_actions = allowed_actions or []

        allowed_str = (
            f" Valid actions: {sorted(a.value for a in self.allowed_actions)}"
            if self.allowed_actions
            else ""
        )
        super().__init__(
            f"Cannot {action.value} member {member_id} from {from_status.value}.{allowed_str}",
            member_id=member_id,
        )


class AttendanceAlreadySettledError(AttendanceError):
    """Raised when the roster entry is in a terminal status.

    Present and excused are final for the session; no further
    transition is permitted.

    Attributes:
        terminal_status: The terminal status the entry is in.
    """

    def __init__(self, member_id: str, terminal_status: AttendanceStatus) -> None:
        self.terminal_status = terminal_status
        super().__init__(
            f"Attendance for member {member_id} is already {terminal_status.value}. "
            "Terminal statuses cannot be modified.",
            member_id=member_id,
        )


class JustificationRequiredError(AttendanceError):
    """Raised when an absence is justified with empty text."""

    def __init__(self, member_id: str) -> None:
        super().__init__(
            f"Justification text is required to excuse member {member_id}",
            member_id=member_id,
        )


class MemberNotOnRosterError(AttendanceError):
    """Raised when a command targets a member absent from the roster."""

    def __init__(self, member_id: str) -> None:
        super().__init__(f"Member {member_id} is not on the roster", member_id=member_id)
