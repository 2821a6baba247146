"""Attendance domain model for one program's roster.

This module defines the per-member attendance workflow: statuses, the
actions that move between them and the immutable AttendanceRecord that
enforces the transition matrix.

State Machine:
    PENDING   --confirm-->     CONFIRMED
    PENDING   --check_in-->    PRESENT    (arrival_time set)
    CONFIRMED --check_in-->    PRESENT
    ABSENT    --check_in-->    PRESENT    (late arrival)
    PENDING   --mark_absent--> ABSENT
    CONFIRMED --mark_absent--> ABSENT
    ABSENT    --justify-->     EXCUSED    (non-empty text required)

Terminal Statuses:
    PRESENT and EXCUSED are final for the session. Any further action on
    them raises AttendanceAlreadySettledError.

Invariants:
    - arrival_time is set if and only if status is PRESENT
    - justification is set only when status is EXCUSED
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from lodge_admin.domain.errors.attendance import (
    AttendanceAlreadySettledError,
    InvalidAttendanceTransitionError,
    JustificationRequiredError,
)
from lodge_admin.domain.errors.records import MalformedRecordError
from lodge_admin.domain.models._parsing import (
    format_timestamp,
    optional_str,
    parse_timestamp,
)


class AttendanceStatus(str, Enum):
    """Attendance status of one member for one program.

    States:
        PENDING: No answer yet (initial state).
        CONFIRMED: Member confirmed they will attend.
        PRESENT: Member checked in (terminal).
        ABSENT: Member did not attend.
        EXCUSED: Absence justified (terminal).
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PRESENT = "present"
    ABSENT = "absent"
    EXCUSED = "excused"

    def is_terminal(self) -> bool:
        """Check if no further transition is permitted from this status."""
        return self in TERMINAL_STATUSES

    def valid_actions(self) -> frozenset[AttendanceAction]:
        """Get the actions permitted from this status.

        Returns:
            Frozenset of actions; empty for terminal statuses.
        """
        return frozenset(TRANSITION_MATRIX.get(self, {}))


class AttendanceAction(str, Enum):
    """Commands that move a roster entry between statuses."""

    CONFIRM = "confirm"
    CHECK_IN = "check_in"
    MARK_ABSENT = "mark_absent"
    JUSTIFY = "justify"


TERMINAL_STATUSES: frozenset[AttendanceStatus] = frozenset(
    {
        AttendanceStatus.PRESENT,
        AttendanceStatus.EXCUSED,
    }
)

# Maps each status to {action: target status}
TRANSITION_MATRIX: dict[AttendanceStatus, dict[AttendanceAction, AttendanceStatus]] = {
    AttendanceStatus.PENDING: {
        AttendanceAction.CONFIRM: AttendanceStatus.CONFIRMED,
        AttendanceAction.CHECK_IN: AttendanceStatus.PRESENT,
        AttendanceAction.MARK_ABSENT: AttendanceStatus.ABSENT,
    },
    AttendanceStatus.CONFIRMED: {
        AttendanceAction.CHECK_IN: AttendanceStatus.PRESENT,
        AttendanceAction.MARK_ABSENT: AttendanceStatus.ABSENT,
    },
    # An absent member may still arrive late
    AttendanceStatus.ABSENT: {
        AttendanceAction.CHECK_IN: AttendanceStatus.PRESENT,
        AttendanceAction.JUSTIFY: AttendanceStatus.EXCUSED,
    },
    AttendanceStatus.PRESENT: {},
    AttendanceStatus.EXCUSED: {},
}

# Actions accepted by bulk_apply
BULK_ACTIONS: frozenset[AttendanceAction] = frozenset(
    {AttendanceAction.CHECK_IN, AttendanceAction.MARK_ABSENT}
)


@dataclass(frozen=True, eq=True)
class AttendanceRecord:
    """One member's attendance entry for one program.

    member_name, grade and role are denormalized by the server for display
    and are never changed locally.

    Attributes:
        member_id: Member identifier.
        member_name: Member's full name.
        grade: Member's grade (apprentice, fellow_craft, master).
        role: Member's lodge office, if any.
        status: Current attendance status.
        arrival_time: Check-in time, set only when PRESENT.
        confirmation_time: When the member confirmed, if they did.
        justification: Reason for the absence, set only when EXCUSED.
    """

    member_id: str
    member_name: str = field(default="")
    grade: str = field(default="")
    role: str | None = field(default=None)
    status: AttendanceStatus = field(default=AttendanceStatus.PENDING)
    arrival_time: datetime | None = field(default=None)
    confirmation_time: datetime | None = field(default=None)
    justification: str | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate the status/timestamp invariants."""
        if (self.arrival_time is not None) != (self.status == AttendanceStatus.PRESENT):
            raise ValueError("arrival_time must be set if and only if status is present")
        if self.justification is not None and self.status != AttendanceStatus.EXCUSED:
            raise ValueError("justification is only allowed when status is excused")

    def apply(
        self,
        action: AttendanceAction,
        at: datetime,
        justification: str | None = None,
    ) -> AttendanceRecord:
        """Create the record that results from applying an action.

        Since AttendanceRecord is frozen, returns a new instance.

        Args:
            action: The attendance action to apply.
            at: Timestamp for arrival (check-in) or confirmation.
            justification: Reason text, required for JUSTIFY.

        Returns:
            New AttendanceRecord in the target status.

        Raises:
            AttendanceAlreadySettledError: If the current status is terminal.
            InvalidAttendanceTransitionError: If the action is not allowed.
            JustificationRequiredError: If JUSTIFY is given empty text.
        """
        if self.status.is_terminal():
            raise AttendanceAlreadySettledError(
                member_id=self.member_id,
                terminal_status=self.status,
            )

        transitions = TRANSITION_MATRIX[self.status]
        if action not in transitions:
            raise InvalidAttendanceTransitionError(
                member_id=self.member_id,
                from_status=self.status,
                action=action,
                allowed_actions=list(transitions),
            )

        text = (justification or "").strip()
        if action == AttendanceAction.JUSTIFY and not text:
            raise JustificationRequiredError(member_id=self.member_id)

        target = transitions[action]
        return AttendanceRecord(
            member_id=self.member_id,
            member_name=self.member_name,
            grade=self.grade,
            role=self.role,
            status=target,
            arrival_time=at if target == AttendanceStatus.PRESENT else None,
            confirmation_time=(
                at if target == AttendanceStatus.CONFIRMED else self.confirmation_time
            ),
            justification=text if target == AttendanceStatus.EXCUSED else None,
        )

    def to_payload(self) -> dict[str, Any]:
        """Build the attendance sub-resource request body."""
        payload: dict[str, Any] = {
            "memberId": self.member_id,
            "status": self.status.value,
        }
        if self.arrival_time is not None:
            payload["arrivalTime"] = format_timestamp(self.arrival_time)
        if self.justification is not None:
            payload["justification"] = self.justification
        return payload

    def to_dict(self) -> dict[str, Any]:
        return {
            "memberId": self.member_id,
            "memberName": self.member_name,
            "grade": self.grade,
            "role": self.role,
            "status": self.status.value,
            "arrivalTime": format_timestamp(self.arrival_time),
            "confirmationTime": format_timestamp(self.confirmation_time),
            "justification": self.justification,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AttendanceRecord:
        """Create from a server attendance record.

        A missing status means the server has no entry yet (PENDING).

        Raises:
            MalformedRecordError: If required fields are missing or the
                record breaks the status/timestamp invariants.
        """
        try:
            return cls(
                member_id=str(data["memberId"]),
                member_name=str(data.get("memberName") or ""),
                grade=str(data.get("grade") or ""),
                role=optional_str(data.get("role")),
                status=AttendanceStatus(data.get("status") or AttendanceStatus.PENDING),
                arrival_time=parse_timestamp(data.get("arrivalTime")),
                confirmation_time=parse_timestamp(data.get("confirmationTime")),
                justification=optional_str(data.get("justification")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedRecordError("AttendanceRecord", str(e), data) from e


AttendanceRoster = tuple[AttendanceRecord, ...]
