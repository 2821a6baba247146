"""Remote API port for a program's attendance sub-resource.

    GET  /programs/{id}/attendance -> { data: AttendanceRecord[] }
    POST /programs/{id}/attendance -> { data: AttendanceRecord }
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class AttendanceApiProtocol(Protocol):
    """Protocol for the attendance sub-resource of a program."""

    async def list_attendance(self, program_id: str) -> list[dict[str, Any]]:
        """Fetch the roster of one program.

        Raises:
            NotFoundError: If the program does not exist.
            RemoteApiError: Or another subclass on failure.
        """
        ...

    async def record_attendance(
        self,
        program_id: str,
        payload: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Record one member's attendance transition.

        Args:
            program_id: Program whose roster is being edited.
            payload: {memberId, status, arrivalTime?, justification?}

        Returns:
            The canonical attendance record stored by the server.

        Raises:
            ValidationError: If the server rejects the transition.
            ConflictError: If the server holds a newer state for the member.
        """
        ...
