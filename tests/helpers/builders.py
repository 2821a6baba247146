"""Builders for raw backend records used across tests."""

from __future__ import annotations

from typing import Any


def make_member(member_id: str, **overrides: Any) -> dict[str, Any]:
    """Raw member record as the backend returns it."""
    record: dict[str, Any] = {
        "id": member_id,
        "firstNames": f"Name{member_id}",
        "lastNames": "Mason",
        "grade": "apprentice",
        "position": None,
        "email": f"{member_id}@lodge.example",
        "phone": None,
        "active": True,
    }
    record.update(overrides)
    return record


def make_roster_entry(member_id: str, **overrides: Any) -> dict[str, Any]:
    """Raw attendance record as the backend returns it."""
    record: dict[str, Any] = {
        "memberId": member_id,
        "memberName": f"Brother {member_id}",
        "grade": "master",
        "role": None,
        "status": "pending",
    }
    record.update(overrides)
    return record
