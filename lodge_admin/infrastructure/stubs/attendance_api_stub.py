"""In-memory stub implementation of AttendanceApiProtocol.

Stores one roster per program as raw camelCase records and upserts
posted transitions into it. Like the real backend it does not check the
attendance workflow; that is the state machine's job.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

from lodge_admin.application.ports.attendance_api import AttendanceApiProtocol
from lodge_admin.domain.errors.remote import NotFoundError, RemoteApiError


class AttendanceApiStub(AttendanceApiProtocol):
    """In-memory stub implementation of AttendanceApiProtocol.

    This stub is NOT suitable for production use.

    Attributes:
        posted: (program_id, payload) for every transition received.
    """

    def __init__(
        self,
        rosters: Mapping[str, Iterable[Mapping[str, Any]]] | None = None,
    ) -> None:
        self._rosters: dict[str, list[dict[str, Any]]] = {
            program_id: [dict(r) for r in records]
            for program_id, records in (rosters or {}).items()
        }
        self._member_failures: dict[str, RemoteApiError] = {}
        self._list_failures: list[RemoteApiError] = []
        self._member_gates: dict[str, asyncio.Event] = {}
        self._list_gates: list[asyncio.Event] = []
        self.posted: list[tuple[str, dict[str, Any]]] = []

    async def list_attendance(self, program_id: str) -> list[dict[str, Any]]:
        gate = self._list_gates.pop(0) if self._list_gates else None
        if self._list_failures:
            raise self._list_failures.pop(0)
        roster = self._roster(program_id)
        snapshot = [dict(r) for r in roster]
        if gate is not None:
            await gate.wait()
        return snapshot

    async def record_attendance(
        self,
        program_id: str,
        payload: Mapping[str, Any],
    ) -> dict[str, Any]:
        member_id = str(payload["memberId"])
        self.posted.append((program_id, dict(payload)))

        gate = self._member_gates.pop(member_id, None)
        if gate is not None:
            await gate.wait()
        failure = self._member_failures.pop(member_id, None)
        if failure is not None:
            raise failure

        roster = self._roster(program_id)
        for record in roster:
            if str(record.get("memberId")) == member_id:
                # Fields omitted by the transition are cleared, as the backend does
                for key in ("arrivalTime", "justification"):
                    if key not in payload:
                        record.pop(key, None)
                record.update(payload)
                return dict(record)

        record = dict(payload)
        roster.append(record)
        return dict(record)

    # =========================================================================
    # Test Controls
    # =========================================================================

    def fail_member(self, member_id: str, error: RemoteApiError) -> None:
        """Reject the next transition posted for member_id."""
        self._member_failures[member_id] = error

    def fail_next_list(self, error: RemoteApiError) -> None:
        self._list_failures.append(error)

    def hold_member(self, member_id: str) -> asyncio.Event:
        """Delay the next transition for member_id until the event is set."""
        gate = asyncio.Event()
        self._member_gates[member_id] = gate
        return gate

    def hold_next_list(self) -> asyncio.Event:
        gate = asyncio.Event()
        self._list_gates.append(gate)
        return gate

    def stored(self, program_id: str) -> list[dict[str, Any]]:
        return [dict(r) for r in self._rosters.get(program_id, [])]

    def _roster(self, program_id: str) -> list[dict[str, Any]]:
        if program_id not in self._rosters:
            raise NotFoundError(
                f"Not found: programs/{program_id}",
                resource="programs",
                resource_id=program_id,
            )
        return self._rosters[program_id]
