"""Lodge record types: members, documents and programs.

Records are immutable snapshots of what the server returned. They are
rebuilt from JSON on every fetch and never edited in place; writes go to
the server and the canonical record it returns replaces the local one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol

from lodge_admin.domain.errors.records import MalformedRecordError
from lodge_admin.domain.models._parsing import optional_str, parse_timestamp, record_id


class Identified(Protocol):
    """Anything a CollectionStore can hold: it must expose an id."""

    @property
    def id(self) -> str: ...


class Grade(str, Enum):
    """Masonic degree of a member (also used to scope documents/programs)."""

    APPRENTICE = "apprentice"
    FELLOW_CRAFT = "fellow_craft"
    MASTER = "master"


class DocumentType(str, Enum):
    PLAN = "plan"
    MINUTES = "minutes"
    CIRCULAR = "circular"
    REGULATION = "regulation"
    LETTER = "letter"
    REPORT = "report"
    OTHER = "other"


class DocumentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    REVIEW = "review"
    ARCHIVED = "archived"


class ProgramType(str, Enum):
    ORDINARY_MEETING = "ordinary_meeting"
    EXTRAORDINARY_MEETING = "extraordinary_meeting"
    DEGREE_CEREMONY = "degree_ceremony"
    ADMINISTRATIVE_MEETING = "administrative_meeting"
    SOCIAL_EVENT = "social_event"
    CONFERENCE = "conference"
    INSTALLATION = "installation"


class ProgramStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"
    CANCELLED = "cancelled"
    SUSPENDED = "suspended"


@dataclass(frozen=True)
class Member:
    """A lodge member as listed in the roster.

    Attributes:
        id: Server identifier.
        first_names: Given names.
        last_names: Family names.
        grade: Masonic degree (see Grade).
        position: Lodge office held, if any.
        email: Contact email, if known.
        phone: Contact phone, if known.
        active: Whether membership is current.
    """

    id: str
    first_names: str
    last_names: str
    grade: str
    position: str | None = field(default=None)
    email: str | None = field(default=None)
    phone: str | None = field(default=None)
    active: bool = field(default=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_names} {self.last_names}".strip()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Member:
        """Create from a server member record.

        Raises:
            MalformedRecordError: If the id is missing.
        """
        try:
            return cls(
                id=record_id(data),
                first_names=str(data.get("firstNames") or ""),
                last_names=str(data.get("lastNames") or ""),
                grade=str(data.get("grade") or ""),
                position=optional_str(data.get("position")),
                email=optional_str(data.get("email")),
                phone=optional_str(data.get("phone")),
                active=bool(data.get("active", True)),
            )
        except KeyError as e:
            raise MalformedRecordError("Member", f"missing field {e}", data) from e


@dataclass(frozen=True)
class Document:
    """A document in the lodge library.

    Attributes:
        id: Server identifier.
        title: Document title.
        type: Document type (see DocumentType).
        status: Review status (see DocumentStatus).
        grade: Minimum grade allowed to read it.
        author: Author display name.
        category: Free-form category, if any.
        downloads: Download counter maintained by the server.
    """

    id: str
    title: str
    type: str
    status: str
    grade: str = field(default="")
    author: str | None = field(default=None)
    category: str | None = field(default=None)
    downloads: int = field(default=0)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Document:
        """Create from a server document record.

        Raises:
            MalformedRecordError: If the id is missing or downloads is not a number.
        """
        try:
            return cls(
                id=record_id(data),
                title=str(data.get("title") or ""),
                type=str(data.get("type") or DocumentType.OTHER.value),
                status=str(data.get("status") or DocumentStatus.PENDING.value),
                grade=str(data.get("grade") or ""),
                author=optional_str(data.get("author")),
                category=optional_str(data.get("category")),
                downloads=int(data.get("downloads") or 0),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedRecordError("Document", str(e), data) from e


@dataclass(frozen=True)
class Program:
    """A scheduled lodge event (meeting, ceremony, conference...).

    Attributes:
        id: Server identifier.
        title: Event title.
        type: Event type (see ProgramType).
        status: Scheduling status (see ProgramStatus).
        starts_at: Start time, if scheduled.
        location: Venue, if known.
        grade: Minimum grade allowed to attend.
    """

    id: str
    title: str
    type: str
    status: str
    starts_at: datetime | None = field(default=None)
    location: str | None = field(default=None)
    grade: str = field(default="")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Program:
        """Create from a server program record.

        Raises:
            MalformedRecordError: If the id is missing or the start time is invalid.
        """
        try:
            return cls(
                id=record_id(data),
                title=str(data.get("title") or ""),
                type=str(data.get("type") or ProgramType.ORDINARY_MEETING.value),
                status=str(data.get("status") or ProgramStatus.SCHEDULED.value),
                starts_at=parse_timestamp(data.get("startsAt")),
                location=optional_str(data.get("location")),
                grade=str(data.get("grade") or ""),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedRecordError("Program", str(e), data) from e
