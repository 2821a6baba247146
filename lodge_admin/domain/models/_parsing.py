"""Helpers for reading server JSON into domain records."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp from the server.

    Naive timestamps are assumed to be UTC.

    Raises:
        ValueError: If the value is not a valid ISO 8601 string.
    """
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


def optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def record_id(payload: dict[str, Any]) -> str:
    """Return the record's id as a string.

    Raises:
        KeyError: If the payload has no id.
    """
    return str(payload["id"])
