"""
Pytest configuration and shared fixtures for lodge_admin tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Use the in-memory stubs from lodge_admin.infrastructure.stubs for the Remote API
- Use FakeTimeAuthority for anything stamped with a time
- Unit tests go in tests/unit/<layer>/
"""

from datetime import datetime, timezone

import pytest

from lodge_admin.infrastructure.stubs import AttendanceApiStub, ResourceApiStub
from tests.helpers import FakeTimeAuthority, make_member, make_roster_entry

MEETING_START = datetime(2026, 3, 7, 19, 30, tzinfo=timezone.utc)


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from lodge_admin import __version__

    return __version__


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    return FakeTimeAuthority(frozen_at=MEETING_START)


@pytest.fixture
def resource_api() -> ResourceApiStub:
    """Stub backend holding 25 members (m25 newest first)."""
    members = [make_member(f"m{i:02d}") for i in range(25, 0, -1)]
    return ResourceApiStub({"members": members, "documents": [], "programs": []})


@pytest.fixture
def attendance_api() -> AttendanceApiStub:
    """Stub backend holding program p1 with one member in each status."""
    return AttendanceApiStub(
        {
            "p1": [
                make_roster_entry("m1"),
                make_roster_entry("m2", status="confirmed"),
                make_roster_entry("m3", status="absent", grade="apprentice"),
                make_roster_entry(
                    "m4", status="present", arrivalTime="2026-03-07T19:25:00+00:00"
                ),
                make_roster_entry("m5", status="excused", justification="travel"),
            ]
        }
    )
