"""Unit tests for the derived-statistics projections and IdentityMemo."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from lodge_admin.application.services.statistics import (
    IdentityMemo,
    attendance_statistics,
    count_by,
    document_statistics,
    member_statistics,
    percentage,
    program_statistics,
)
from lodge_admin.domain.models.attendance import AttendanceRecord, AttendanceStatus
from lodge_admin.domain.models.records import Document, Member, Program

ARRIVAL = datetime(2026, 3, 7, 19, 30, tzinfo=timezone.utc)


def _roster(present: int, absent: int, grade: str = "master") -> tuple[AttendanceRecord, ...]:
    entries = [
        AttendanceRecord(
            member_id=f"p{i}",
            grade=grade,
            status=AttendanceStatus.PRESENT,
            arrival_time=ARRIVAL,
        )
        for i in range(present)
    ]
    entries += [
        AttendanceRecord(member_id=f"a{i}", grade=grade, status=AttendanceStatus.ABSENT)
        for i in range(absent)
    ]
    return tuple(entries)


class TestPercentage:
    @pytest.mark.parametrize(
        ("part", "whole", "expected"),
        [(6, 10, 60), (1, 3, 33), (2, 3, 67), (1, 8, 13), (1, 200, 1), (0, 0, 0), (5, 5, 100)],
    )
    def test_rounds_half_up(self, part: int, whole: int, expected: int) -> None:
        """Percentages round half up and an empty whole gives zero."""
        assert percentage(part, whole) == expected


class TestCountBy:
    def test_counts_in_first_seen_order(self) -> None:
        """Counts keep the order in which keys first appear."""
        assert count_by(["b", "a", "b"], lambda s: s) == {"b": 2, "a": 1}


class TestIdentityMemo:
    def test_same_reference_skips_recomputation(self) -> None:
        """The same tuple object returns the cached statistics."""
        memo = IdentityMemo(attendance_statistics)
        roster = _roster(present=6, absent=4)

        first = memo(roster)
        second = memo(roster)

        assert first is second
        assert memo.computations == 1

    def test_new_reference_recomputes(self) -> None:
        """A different tuple object recomputes even when equal."""
        memo = IdentityMemo(attendance_statistics)
        roster = _roster(present=6, absent=4)

        first = memo(roster)
        second = memo(tuple(roster))  # tuple() of a tuple is the same object
        third = memo(roster[:5] + roster[5:])

        assert first is second
        assert third is not first
        assert third == first
        assert memo.computations == 2


class TestAttendanceStatistics:
    def test_percent_present(self) -> None:
        """Present share of the roster and arrivals are counted."""
        stats = attendance_statistics(_roster(present=6, absent=4))

        assert stats.total == 10
        assert stats.percent_present == 60
        assert stats.with_arrival == 6

    def test_every_status_is_counted(self) -> None:
        """Every status appears in by_status, zero or not."""
        stats = attendance_statistics(_roster(present=1, absent=0))
        assert stats.by_status == {
            "pending": 0,
            "confirmed": 0,
            "present": 1,
            "absent": 0,
            "excused": 0,
        }

    def test_percent_by_grade(self) -> None:
        """Attendance is broken down per grade."""
        roster = _roster(present=1, absent=1, grade="master") + _roster(
            present=0, absent=2, grade="apprentice"
        )

        stats = attendance_statistics(roster)

        assert stats.percent_by_grade == {"master": 50, "apprentice": 0}

    def test_empty_roster(self) -> None:
        """An empty roster reports zero without dividing."""
        stats = attendance_statistics(())
        assert stats.percent_present == 0
        assert stats.percent_by_grade == {}


class TestCollectionStatistics:
    def test_members(self) -> None:
        """Member statistics count grades, contacts and active members."""
        members = (
            Member(id="1", first_names="A", last_names="B", grade="master", email="a@x"),
            Member(id="2", first_names="C", last_names="D", grade="master", phone="555"),
            Member(id="3", first_names="E", last_names="F", grade="apprentice", active=False),
        )

        stats = member_statistics(members)

        assert stats.total == 3
        assert stats.by_grade == {"master": 2, "apprentice": 1}
        assert (stats.with_email, stats.with_phone, stats.active) == (1, 1, 2)

    def test_documents(self) -> None:
        """Document statistics count types, statuses and downloads."""
        documents = (
            Document(id="1", title="t", type="minutes", status="approved", downloads=4),
            Document(id="2", title="t", type="minutes", status="pending", downloads=1),
        )

        stats = document_statistics(documents)

        assert stats.by_type == {"minutes": 2}
        assert stats.by_status == {"approved": 1, "pending": 1}
        assert stats.downloads == 5

    def test_programs(self) -> None:
        """Program statistics count statuses and serialize the total."""
        programs = (
            Program(id="1", title="t", type="conference", status="scheduled"),
            Program(id="2", title="t", type="installation", status="scheduled"),
        )

        stats = program_statistics(programs)

        assert stats.by_status == {"scheduled": 2}
        assert stats.to_dict()["total"] == 2
