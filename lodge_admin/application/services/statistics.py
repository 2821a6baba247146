"""Derived statistics over held records.

Every projection here is a pure function of a records tuple. Stores wrap
them in IdentityMemo so the same tuple object always yields the same
statistics object; a new computation happens only when the store swaps
in a new tuple.

Percentages are whole numbers rounded half-up, and 0 when the
denominator is empty.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import structlog

from lodge_admin.domain.models.attendance import AttendanceRecord, AttendanceStatus
from lodge_admin.domain.models.records import Document, Member, Program

logger = structlog.get_logger(__name__)

S = TypeVar("S")
R = TypeVar("R")
T = TypeVar("T")

_UNSET = object()


class IdentityMemo(Generic[S, R]):
    """Cache the last result of compute, keyed on the identity of its input.

    Attributes:
        computations: Number of times compute actually ran.
    """

    def __init__(self, compute: Callable[[S], R]) -> None:
        self._compute = compute
        self._source: object = _UNSET
        self._result: R | None = None
        self.computations = 0

    def __call__(self, source: S) -> R:
        if source is self._source:
            return self._result  # type: ignore[return-value]
        self._result = self._compute(source)
        self._source = source
        self.computations += 1
        logger.debug(
            "statistics_recomputed",
            projection=getattr(self._compute, "__name__", "compute"),
            computations=self.computations,
        )
        return self._result


def count_by(records: Iterable[T], key: Callable[[T], str]) -> dict[str, int]:
    """Count records per category, in first-seen order."""
    return dict(Counter(key(record) for record in records))


def percentage(part: int, whole: int) -> int:
    """part / whole as a whole-number percentage, rounded half-up."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


@dataclass(frozen=True)
class MemberStatistics:
    total: int = 0
    by_grade: dict[str, int] = field(default_factory=dict)
    with_email: int = 0
    with_phone: int = 0
    active: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "by_grade": dict(self.by_grade),
            "with_email": self.with_email,
            "with_phone": self.with_phone,
            "active": self.active,
        }


@dataclass(frozen=True)
class DocumentStatistics:
    total: int = 0
    by_type: dict[str, int] = field(default_factory=dict)
    by_status: dict[str, int] = field(default_factory=dict)
    by_grade: dict[str, int] = field(default_factory=dict)
    downloads: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "by_type": dict(self.by_type),
            "by_status": dict(self.by_status),
            "by_grade": dict(self.by_grade),
            "downloads": self.downloads,
        }


@dataclass(frozen=True)
class ProgramStatistics:
    total: int = 0
    by_type: dict[str, int] = field(default_factory=dict)
    by_status: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "by_type": dict(self.by_type),
            "by_status": dict(self.by_status),
        }


@dataclass(frozen=True)
class AttendanceStatistics:
    """Attendance summary for one roster.

    Attributes:
        total: Roster size.
        by_status: Count per status; every status is present, zeros included.
        percent_present: present / total.
        percent_by_grade: present / members of that grade, per grade.
        with_arrival: Entries carrying an arrival time.
    """

    total: int = 0
    by_status: dict[str, int] = field(default_factory=dict)
    percent_present: int = 0
    percent_by_grade: dict[str, int] = field(default_factory=dict)
    with_arrival: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "by_status": dict(self.by_status),
            "percent_present": self.percent_present,
            "percent_by_grade": dict(self.percent_by_grade),
            "with_arrival": self.with_arrival,
        }


def member_statistics(records: tuple[Member, ...]) -> MemberStatistics:
    return MemberStatistics(
        total=len(records),
        by_grade=count_by(records, lambda m: m.grade),
        with_email=sum(1 for m in records if m.email),
        with_phone=sum(1 for m in records if m.phone),
        active=sum(1 for m in records if m.active),
    )


def document_statistics(records: tuple[Document, ...]) -> DocumentStatistics:
    return DocumentStatistics(
        total=len(records),
        by_type=count_by(records, lambda d: d.type),
        by_status=count_by(records, lambda d: d.status),
        by_grade=count_by(records, lambda d: d.grade),
        downloads=sum(d.downloads for d in records),
    )


def program_statistics(records: tuple[Program, ...]) -> ProgramStatistics:
    return ProgramStatistics(
        total=len(records),
        by_type=count_by(records, lambda p: p.type),
        by_status=count_by(records, lambda p: p.status),
    )


def attendance_statistics(roster: tuple[AttendanceRecord, ...]) -> AttendanceStatistics:
    by_status = {status.value: 0 for status in AttendanceStatus}
    by_status.update(count_by(roster, lambda r: r.status.value))

    grade_totals = count_by(roster, lambda r: r.grade)
    grade_present = count_by(
        (r for r in roster if r.status == AttendanceStatus.PRESENT),
        lambda r: r.grade,
    )

    return AttendanceStatistics(
        total=len(roster),
        by_status=by_status,
        percent_present=percentage(by_status[AttendanceStatus.PRESENT.value], len(roster)),
        percent_by_grade={
            grade: percentage(grade_present.get(grade, 0), total)
            for grade, total in grade_totals.items()
        },
        with_arrival=sum(1 for r in roster if r.arrival_time is not None),
    )
