"""Remote API port for paginated resource collections.

This module defines the abstract interface a Collection Store uses to
reach the backend's conventional paginated-list + CRUD endpoints:

    GET    /{resource}?search=&page=&limit=&<filterKeys>
    GET    /{resource}/{id}
    POST   /{resource}
    PUT    /{resource}/{id}
    DELETE /{resource}/{id}

Implementations return raw JSON records (dicts); the store turns them
into domain records. Every failure is raised as a RemoteApiError subclass.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class ListPage:
    """One page of a paginated list response.

    Attributes:
        items: Raw records in server order.
        page: Page number the server returned.
        limit: Page size the server applied.
        total: Total matching records on the server.
        total_pages: Page count reported by the server.
    """

    items: tuple[dict[str, Any], ...] = field(default_factory=tuple)
    page: int = field(default=1)
    limit: int = field(default=20)
    total: int = field(default=0)
    total_pages: int = field(default=0)


class ResourceApiProtocol(Protocol):
    """Protocol for paginated collection endpoints.

    Methods:
        list_page: Fetch one page of a filtered collection
        get: Fetch one record by id
        create: Create a record and return the canonical copy
        update: Replace a record and return the canonical copy
        delete: Delete a record
    """

    async def list_page(
        self,
        resource: str,
        params: Mapping[str, str],
    ) -> ListPage:
        """Fetch one page of a collection.

        Args:
            resource: Collection name (e.g. "members").
            params: Query parameters (search, page, limit, filter keys).

        Raises:
            RemoteApiError: Or one of its subclasses on failure.
        """
        ...

    async def get(self, resource: str, record_id: str) -> dict[str, Any]:
        """Fetch one record.

        Raises:
            NotFoundError: If the id does not exist.
        """
        ...

    async def create(
        self,
        resource: str,
        payload: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Create a record.

        Raises:
            ValidationError: If the server rejects the payload.
        """
        ...

    async def update(
        self,
        resource: str,
        record_id: str,
        payload: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Update a record.

        Raises:
            NotFoundError: If the id does not exist.
            ValidationError: If the server rejects the payload.
            ConflictError: If the server rejects a concurrent edit.
        """
        ...

    async def delete(self, resource: str, record_id: str) -> None:
        """Delete a record.

        Raises:
            NotFoundError: If the id does not exist.
        """
        ...
