"""Application ports: interfaces to the Remote API and the clock."""

from lodge_admin.application.ports.attendance_api import AttendanceApiProtocol
from lodge_admin.application.ports.resource_api import ListPage, ResourceApiProtocol
from lodge_admin.application.ports.time_authority import TimeAuthorityProtocol

__all__: list[str] = [
    "AttendanceApiProtocol",
    "ListPage",
    "ResourceApiProtocol",
    "TimeAuthorityProtocol",
]
