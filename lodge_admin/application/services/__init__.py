"""Application services: stores, state machines and their building blocks."""

from lodge_admin.application.services.attendance_machine import (
    AttendanceStateMachine,
    BulkApplyResult,
)
from lodge_admin.application.services.collection_store import CollectionStore
from lodge_admin.application.services.debounce import DebouncedInput
from lodge_admin.application.services.query_state import QuerySnapshot, QueryState
from lodge_admin.application.services.statistics import (
    AttendanceStatistics,
    DocumentStatistics,
    IdentityMemo,
    MemberStatistics,
    ProgramStatistics,
)
from lodge_admin.application.services.time_authority_service import TimeAuthorityService

__all__: list[str] = [
    "AttendanceStateMachine",
    "AttendanceStatistics",
    "BulkApplyResult",
    "CollectionStore",
    "DebouncedInput",
    "DocumentStatistics",
    "IdentityMemo",
    "MemberStatistics",
    "ProgramStatistics",
    "QuerySnapshot",
    "QueryState",
    "TimeAuthorityService",
]
