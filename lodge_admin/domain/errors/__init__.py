"""Domain errors for lodge_admin.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from LodgeAdminError.
"""

from lodge_admin.domain.errors.attendance import (
    AttendanceAlreadySettledError,
    AttendanceError,
    InvalidAttendanceTransitionError,
    JustificationRequiredError,
    MemberNotOnRosterError,
)
from lodge_admin.domain.errors.query import (
    InvalidFilterValueError,
    InvalidPageSizeError,
    InvalidQueryError,
    UnknownFilterError,
)
from lodge_admin.domain.errors.records import MalformedRecordError
from lodge_admin.domain.errors.remote import (
    ConflictError,
    NotFoundError,
    RemoteApiError,
    TransientNetworkError,
    ValidationError,
)

__all__: list[str] = [
    "AttendanceAlreadySettledError",
    "AttendanceError",
    "ConflictError",
    "InvalidAttendanceTransitionError",
    "InvalidFilterValueError",
    "InvalidPageSizeError",
    "InvalidQueryError",
    "JustificationRequiredError",
    "MalformedRecordError",
    "MemberNotOnRosterError",
    "NotFoundError",
    "RemoteApiError",
    "TransientNetworkError",
    "UnknownFilterError",
    "ValidationError",
]
