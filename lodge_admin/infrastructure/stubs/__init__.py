"""In-memory stubs of the Remote API ports for development and testing."""

from lodge_admin.infrastructure.stubs.attendance_api_stub import AttendanceApiStub
from lodge_admin.infrastructure.stubs.resource_api_stub import ResourceApiStub

__all__: list[str] = [
    "AttendanceApiStub",
    "ResourceApiStub",
]
