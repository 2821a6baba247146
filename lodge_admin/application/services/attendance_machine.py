"""Attendance State Machine for one program's roster.

Drives the per-member attendance workflow defined by AttendanceRecord:

    pending   --confirm-->     confirmed
    pending   --check_in-->    present
    confirmed --check_in-->    present
    absent    --check_in-->    present   (late arrival)
    pending   --mark_absent--> absent
    confirmed --mark_absent--> absent
    absent    --justify-->     excused

No optimistic transitions: the roster entry is replaced only with the
record the server returns after it acknowledges the write. A failed
transition leaves the member's status unchanged and is reported through
member_error(), next to that member, not through the roster-level error.

At most one transition per member may be awaiting acknowledgement; a
second one is rejected with IN_PROGRESS.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from lodge_admin.application.ports.attendance_api import AttendanceApiProtocol
from lodge_admin.application.ports.time_authority import TimeAuthorityProtocol
from lodge_admin.application.services.base import LoggingMixin
from lodge_admin.application.services.statistics import (
    AttendanceStatistics,
    IdentityMemo,
    attendance_statistics,
)
from lodge_admin.domain.errors.attendance import AttendanceError, MemberNotOnRosterError
from lodge_admin.domain.exceptions import LodgeAdminError
from lodge_admin.domain.models.attendance import (
    BULK_ACTIONS,
    AttendanceAction,
    AttendanceRecord,
    AttendanceRoster,
    AttendanceStatus,
)
from lodge_admin.domain.models.collection import CollectionStatus
from lodge_admin.domain.models.result import ErrorKind, Result


@dataclass(frozen=True)
class BulkApplyResult:
    """Per-member outcome of a bulk transition.

    There is no rollback: succeeded members keep their new status even
    when others failed.

    Attributes:
        action: The action that was applied.
        succeeded: Member ids whose transition the server acknowledged.
        failed: Failed Result per member id.
    """

    action: AttendanceAction
    succeeded: tuple[str, ...] = field(default_factory=tuple)
    failed: dict[str, Result[AttendanceRecord]] = field(default_factory=dict)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action.value,
            "succeeded": list(self.succeeded),
            "failed": {member_id: r.to_dict() for member_id, r in self.failed.items()},
        }


class AttendanceStateMachine(LoggingMixin):
    """Attendance manager for one program's roster.

    The roster is owned by this instance for one management session and
    is discarded on close(); the server stays the source of truth.
    """

    def __init__(
        self,
        api: AttendanceApiProtocol,
        program_id: str,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        """Initialize an empty session.

        Args:
            api: Attendance sub-resource implementation.
            program_id: Program whose roster is managed.
            time_authority: Clock for arrival and confirmation times.
        """
        self._api = api
        self._program_id = program_id
        self._time = time_authority
        self._statistics = IdentityMemo(attendance_statistics)

        self._roster: AttendanceRoster = ()
        self._status = CollectionStatus.IDLE
        self._error_message: str | None = None
        self._error_kind: ErrorKind | None = None
        self._member_errors: dict[str, Result[AttendanceRecord]] = {}
        self._in_flight: set[str] = set()
        self._sequence = 0
        self._closed = False

        self._init_logger(component="attendance")

    # =========================================================================
    # Selectors
    # =========================================================================

    @property
    def program_id(self) -> str:
        return self._program_id

    @property
    def roster(self) -> AttendanceRoster:
        return self._roster

    @property
    def status(self) -> CollectionStatus:
        return self._status

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def error_kind(self) -> ErrorKind | None:
        return self._error_kind

    @property
    def closed(self) -> bool:
        return self._closed

    def record(self, member_id: str) -> AttendanceRecord | None:
        return next((r for r in self._roster if r.member_id == member_id), None)

    def is_in_flight(self, member_id: str) -> bool:
        return member_id in self._in_flight

    def member_error(self, member_id: str) -> Result[AttendanceRecord] | None:
        """Last failed transition for a member, until their next success."""
        return self._member_errors.get(member_id)

    def statistics(self) -> AttendanceStatistics:
        """Attendance statistics, recomputed only when the roster changes."""
        return self._statistics(self._roster)

    def filtered(
        self,
        search: str = "",
        status: AttendanceStatus | str | None = None,
    ) -> AttendanceRoster:
        """Roster entries matching a name search and an optional status.

        Args:
            search: Case-insensitive substring of the member name.
            status: Status to keep; None or "all" keeps every status.

        Raises:
            ValueError: If status is not a known attendance status.
        """
        needle = search.strip().casefold()
        wanted = None if status in (None, "all") else AttendanceStatus(status)
        return tuple(
            r
            for r in self._roster
            if needle in r.member_name.casefold()
            and (wanted is None or r.status == wanted)
        )

    # =========================================================================
    # Commands
    # =========================================================================

    async def load(self) -> Result[AttendanceRoster]:
        """Fetch the roster and replace it wholesale.

        Only the most recently issued load may update the roster.
        """
        if self._closed:
            return self._closed_result()

        self._sequence += 1
        sequence = self._sequence
        log = self._log_operation("load", program_id=self._program_id, sequence=sequence)
        self._status = CollectionStatus.LOADING
        log.debug("roster_load_started")

        try:
            items = await self._api.list_attendance(self._program_id)
            roster = tuple(AttendanceRecord.from_dict(item) for item in items)
        except LodgeAdminError as e:
            if not self._is_current(sequence):
                return self._discarded(sequence, log)
            result: Result[AttendanceRoster] = Result.from_exception(e)
            self._status = CollectionStatus.ERROR
            self._error_message = result.message
            self._error_kind = result.error_kind
            log.warning("roster_load_failed", error=str(e), error_kind=result.error_kind)
            return result

        if not self._is_current(sequence):
            return self._discarded(sequence, log)

        self._roster = roster
        self._member_errors.clear()
        self._status = CollectionStatus.IDLE
        self._error_message = None
        self._error_kind = None
        log.info("roster_loaded", count=len(roster))
        return Result.succeed(roster)

    async def confirm(self, member_id: str) -> Result[AttendanceRecord]:
        return await self._transition(member_id, AttendanceAction.CONFIRM)

    async def check_in(
        self,
        member_id: str,
        arrival_time: datetime | None = None,
    ) -> Result[AttendanceRecord]:
        """Mark a member present, stamping arrival_time (default: now)."""
        return await self._transition(member_id, AttendanceAction.CHECK_IN, at=arrival_time)

    async def mark_absent(self, member_id: str) -> Result[AttendanceRecord]:
        return await self._transition(member_id, AttendanceAction.MARK_ABSENT)

    async def justify(self, member_id: str, text: str) -> Result[AttendanceRecord]:
        """Excuse an absent member; text must be non-empty."""
        return await self._transition(
            member_id, AttendanceAction.JUSTIFY, justification=text
        )

    async def bulk_apply(
        self,
        member_ids: Iterable[str],
        action: AttendanceAction | str,
    ) -> Result[BulkApplyResult]:
        """Apply check_in or mark_absent to each member independently.

        Duplicate ids are applied once. A member's failure never blocks the
        others and nothing is rolled back.

        Returns:
            Successful Result carrying the per-member BulkApplyResult, or
            INVALID_INPUT when the action is not a bulk action.
        """
        if self._closed:
            return self._closed_result()
        log = self._log_operation("bulk_apply", program_id=self._program_id)

        try:
            bulk_action = AttendanceAction(action)
        except ValueError:
            bulk_action = None
        if bulk_action is None or bulk_action not in BULK_ACTIONS:
            log.info("bulk_action_rejected", action=str(action))
            return Result.fail(
                ErrorKind.INVALID_INPUT,
                f"Bulk action must be one of {sorted(a.value for a in BULK_ACTIONS)}, "
                f"got {action!r}",
            )

        ids = list(dict.fromkeys(member_ids))
        at = self._time.utcnow()
        outcomes = await asyncio.gather(
            *(self._transition(member_id, bulk_action, at=at) for member_id in ids)
        )

        report = BulkApplyResult(
            action=bulk_action,
            succeeded=tuple(m for m, r in zip(ids, outcomes) if r.ok),
            failed={m: r for m, r in zip(ids, outcomes) if r.failed},
        )
        log.info(
            "bulk_apply_completed",
            action=bulk_action.value,
            succeeded=len(report.succeeded),
            failed=len(report.failed),
        )
        return Result.succeed(report)

    def close(self) -> None:
        """End the session; responses arriving later are ignored."""
        if self._closed:
            return
        self._closed = True
        self._sequence += 1
        self._log_operation("close", program_id=self._program_id).debug(
            "attendance_session_closed"
        )

    # =========================================================================
    # Internals
    # =========================================================================

    async def _transition(
        self,
        member_id: str,
        action: AttendanceAction,
        at: datetime | None = None,
        justification: str | None = None,
    ) -> Result[AttendanceRecord]:
        if self._closed:
            return self._closed_result()
        log = self._log_operation(
            "transition",
            program_id=self._program_id,
            member_id=member_id,
            action=action.value,
        )

        current = self.record(member_id)
        if current is None:
            error = MemberNotOnRosterError(member_id)
            log.info("attendance_transition_rejected", error=str(error))
            return Result.from_exception(error)

        if member_id in self._in_flight:
            log.info("attendance_transition_in_progress")
            return Result.fail(
                ErrorKind.IN_PROGRESS,
                f"A transition for member {member_id} is awaiting the server",
            )

        try:
            target = current.apply(action, at or self._time.utcnow(), justification)
        except AttendanceError as e:
            return self._member_failed(member_id, e, log)

        self._in_flight.add(member_id)
        try:
            raw = await self._api.record_attendance(self._program_id, target.to_payload())
            # Display fields are owned by the server but may be omitted in the reply
            acknowledged = AttendanceRecord.from_dict({**target.to_dict(), **raw})
        except LodgeAdminError as e:
            if self._closed:
                return self._closed_result()
            return self._member_failed(member_id, e, log)
        finally:
            self._in_flight.discard(member_id)

        if self._closed:
            return self._closed_result()

        self._roster = tuple(
            acknowledged if r.member_id == member_id else r for r in self._roster
        )
        self._member_errors.pop(member_id, None)
        log.info(
            "attendance_transition_applied",
            from_status=current.status.value,
            to_status=acknowledged.status.value,
        )
        return Result.succeed(acknowledged)

    def _member_failed(
        self,
        member_id: str,
        error: LodgeAdminError,
        log: Any,
    ) -> Result[AttendanceRecord]:
        result: Result[AttendanceRecord] = Result.from_exception(error)
        self._member_errors[member_id] = result
        log.info(
            "attendance_transition_rejected",
            error=str(error),
            error_kind=result.error_kind,
        )
        return result

    def _is_current(self, sequence: int) -> bool:
        return not self._closed and sequence == self._sequence

    def _discarded(self, sequence: int, log: Any) -> Result[AttendanceRoster]:
        if self._closed:
            return self._closed_result()
        log.info("roster_load_superseded", latest_sequence=self._sequence)
        return Result.fail(
            ErrorKind.SUPERSEDED,
            f"Roster load #{sequence} superseded by load #{self._sequence}",
        )

    def _closed_result(self) -> Result[Any]:
        return Result.fail(
            ErrorKind.CLOSED,
            f"Attendance session for program {self._program_id} is closed",
        )
