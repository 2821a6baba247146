"""Errors for server records that cannot be turned into domain objects."""

from __future__ import annotations

from typing import Any

from lodge_admin.domain.exceptions import LodgeAdminError


class MalformedRecordError(LodgeAdminError):
    """Raised when a server record is missing fields or breaks an invariant.

    Attributes:
        record_type: Name of the domain type being built.
        payload: The offending raw record.
    """

    def __init__(self, record_type: str, reason: str, payload: Any = None) -> None:
        self.record_type = record_type
        self.payload = payload
        super().__init__(f"Malformed {record_type} record: {reason}")
