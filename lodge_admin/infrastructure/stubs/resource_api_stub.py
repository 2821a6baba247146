"""In-memory stub implementation of ResourceApiProtocol.

Holds raw records per resource and answers list queries the way the
backend does: case-insensitive search over text fields, equality on
filter keys, newest-first order and page/limit slicing.

Test controls:
    - fail_next(operation, error): raise error on the next matching call
    - hold_next_list(): the next list_page waits until the returned event
      is set, so tests can make an older response arrive late
    - calls: every call received, in order
"""

from __future__ import annotations

import asyncio
import math
from collections.abc import Iterable, Mapping
from itertools import count
from typing import Any

from lodge_admin.application.ports.resource_api import ListPage, ResourceApiProtocol
from lodge_admin.domain.errors.remote import NotFoundError, RemoteApiError
from lodge_admin.domain.models.filter_spec import DEFAULT_PAGE_SIZE, SEARCH_KEY

_PAGING_KEYS = frozenset({"page", "limit"})


def _matches_filter(record: Mapping[str, Any], key: str, value: str) -> bool:
    raw = record.get(key)
    if isinstance(raw, bool):
        return raw == (value in ("active", "true"))
    return str(raw) == value


def _matches_search(record: Mapping[str, Any], text: str) -> bool:
    needle = text.casefold()
    return any(
        needle in value.casefold() for value in record.values() if isinstance(value, str)
    )


class ResourceApiStub(ResourceApiProtocol):
    """In-memory stub implementation of ResourceApiProtocol.

    This stub is NOT suitable for production use.

    Attributes:
        calls: (operation, resource, argument) for every call received.
    """

    def __init__(self, records: Mapping[str, Iterable[Mapping[str, Any]]] | None = None) -> None:
        """Initialize the stub.

        Args:
            records: Initial raw records per resource, newest first.
        """
        self._records: dict[str, list[dict[str, Any]]] = {
            resource: [dict(r) for r in items] for resource, items in (records or {}).items()
        }
        self._ids = count(1)
        self._failures: dict[str, list[RemoteApiError]] = {}
        self._list_gates: list[asyncio.Event] = []
        self._lock = asyncio.Lock()
        self.calls: list[tuple[str, str, Any]] = []

    # =========================================================================
    # ResourceApiProtocol Implementation
    # =========================================================================

    async def list_page(self, resource: str, params: Mapping[str, str]) -> ListPage:
        self.calls.append(("list_page", resource, dict(params)))
        gate = self._list_gates.pop(0) if self._list_gates else None
        self._raise_injected("list_page")
        snapshot = [dict(r) for r in self._records.get(resource, [])]
        if gate is not None:
            await gate.wait()

        search = params.get(SEARCH_KEY, "")
        matching = [
            r
            for r in snapshot
            if (not search or _matches_search(r, search))
            and all(
                _matches_filter(r, key, value)
                for key, value in params.items()
                if key not in _PAGING_KEYS and key != SEARCH_KEY
            )
        ]

        page = int(params.get("page", 1))
        limit = int(params.get("limit", DEFAULT_PAGE_SIZE))
        start = (page - 1) * limit
        return ListPage(
            items=tuple(matching[start : start + limit]),
            page=page,
            limit=limit,
            total=len(matching),
            total_pages=math.ceil(len(matching) / limit),
        )

    async def get(self, resource: str, record_id: str) -> dict[str, Any]:
        self.calls.append(("get", resource, record_id))
        self._raise_injected("get")
        return dict(self._find(resource, record_id))

    async def create(self, resource: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        self.calls.append(("create", resource, dict(payload)))
        self._raise_injected("create")
        async with self._lock:
            record = {"id": f"new-{next(self._ids)}", **payload}
            self._records.setdefault(resource, []).insert(0, record)
            return dict(record)

    async def update(
        self,
        resource: str,
        record_id: str,
        payload: Mapping[str, Any],
    ) -> dict[str, Any]:
        self.calls.append(("update", resource, record_id))
        self._raise_injected("update")
        async with self._lock:
            record = self._find(resource, record_id)
            record.update(payload)
            record["id"] = record_id
            return dict(record)

    async def delete(self, resource: str, record_id: str) -> None:
        self.calls.append(("delete", resource, record_id))
        self._raise_injected("delete")
        async with self._lock:
            record = self._find(resource, record_id)
            self._records[resource].remove(record)

    # =========================================================================
    # Test Controls
    # =========================================================================

    def fail_next(self, operation: str, error: RemoteApiError) -> None:
        """Raise error on the next call of operation (list_page, get, ...)."""
        self._failures.setdefault(operation, []).append(error)

    def hold_next_list(self) -> asyncio.Event:
        """Block the next list_page until the returned event is set."""
        gate = asyncio.Event()
        self._list_gates.append(gate)
        return gate

    def stored(self, resource: str) -> list[dict[str, Any]]:
        return [dict(r) for r in self._records.get(resource, [])]

    def clear(self) -> None:
        """Clear all records and controls (for testing)."""
        self._records.clear()
        self._failures.clear()
        self._list_gates.clear()
        self.calls.clear()

    def _raise_injected(self, operation: str) -> None:
        pending = self._failures.get(operation)
        if pending:
            raise pending.pop(0)

    def _find(self, resource: str, record_id: str) -> dict[str, Any]:
        for record in self._records.get(resource, []):
            if str(record.get("id")) == record_id:
                return record
        raise NotFoundError(
            f"Not found: {resource}/{record_id}",
            resource=resource,
            resource_id=record_id,
        )
