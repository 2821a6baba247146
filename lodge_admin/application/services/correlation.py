"""Correlation ids that tie log entries and server requests to one command.

The id is held in a ContextVar, so it survives await points and each
asyncio task sees its own value. LodgeApiClient forwards it as the
X-Correlation-ID header; correlation_id_processor stamps it on log entries.

Usage:
    with correlation_scope():
        result = await store.merge_filters({"grade": "master"})
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any
from uuid import uuid4

_correlation_id: ContextVar[str] = ContextVar("lodge_admin_correlation_id", default="")


def generate_correlation_id() -> str:
    return str(uuid4())


def get_correlation_id() -> str:
    """Current correlation id, "" outside any scope."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id.set(correlation_id)


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Run a block under a correlation id, restoring the previous one after.

    Args:
        correlation_id: Id to use; a fresh UUID4 when omitted.

    Yields:
        The id in effect inside the block.
    """
    token = _correlation_id.set(correlation_id or generate_correlation_id())
    try:
        yield _correlation_id.get()
    finally:
        _correlation_id.reset(token)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor adding correlation_id unless already bound."""
    correlation_id = _correlation_id.get()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict
