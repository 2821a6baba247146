"""Domain models for lodge_admin."""

from lodge_admin.domain.models.attendance import (
    BULK_ACTIONS,
    TERMINAL_STATUSES,
    TRANSITION_MATRIX,
    AttendanceAction,
    AttendanceRecord,
    AttendanceRoster,
    AttendanceStatus,
)
from lodge_admin.domain.models.collection import CollectionStatus, Pagination
from lodge_admin.domain.models.filter_spec import (
    ALL,
    DEFAULT_PAGE_SIZE,
    DOCUMENT_FILTERS,
    MEMBER_FILTERS,
    PAGE_SIZE_OPTIONS,
    PROGRAM_FILTERS,
    SEARCH_KEY,
    FilterSpec,
)
from lodge_admin.domain.models.records import (
    Document,
    DocumentStatus,
    DocumentType,
    Grade,
    Identified,
    Member,
    Program,
    ProgramStatus,
    ProgramType,
)
from lodge_admin.domain.models.result import ErrorKind, Result, error_kind_for

__all__: list[str] = [
    "ALL",
    "AttendanceAction",
    "AttendanceRecord",
    "AttendanceRoster",
    "AttendanceStatus",
    "BULK_ACTIONS",
    "CollectionStatus",
    "DEFAULT_PAGE_SIZE",
    "DOCUMENT_FILTERS",
    "Document",
    "DocumentStatus",
    "DocumentType",
    "ErrorKind",
    "FilterSpec",
    "Grade",
    "Identified",
    "MEMBER_FILTERS",
    "Member",
    "PAGE_SIZE_OPTIONS",
    "PROGRAM_FILTERS",
    "Pagination",
    "Program",
    "ProgramStatus",
    "ProgramType",
    "Result",
    "SEARCH_KEY",
    "TERMINAL_STATUSES",
    "TRANSITION_MATRIX",
    "error_kind_for",
]
