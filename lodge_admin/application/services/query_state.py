"""Filter/Pagination state for one collection.

QueryState is pure and synchronous: it validates and applies query
changes but never talks to the network. The owning Collection Store
issues a fetch after every change; view code may also subscribe to be
told when the query moved.

Rules:
    - merge_filters shallow-merges and always resets page to 1
    - reset_filters restores every default and resets page to 1
    - set_page clamps to [1, max(total_pages, 1)] and leaves filters alone
    - set_page_size resets page to 1
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from lodge_admin.domain.models.collection import Pagination
from lodge_admin.domain.models.filter_spec import DEFAULT_PAGE_SIZE, FilterSpec

QueryListener = Callable[["QuerySnapshot"], None]


@dataclass(frozen=True)
class QuerySnapshot:
    """Immutable view of a query at one point in time."""

    filters: Mapping[str, str] = field(default_factory=dict)
    pagination: Pagination = field(default_factory=Pagination)

    def to_dict(self) -> dict[str, Any]:
        return {
            "filters": dict(self.filters),
            "pagination": self.pagination.to_dict(),
        }


class QueryState:
    """Current search, filters and page position of one collection.

    Attributes:
        spec: FilterSpec used to validate filter and page size changes.
    """

    def __init__(self, spec: FilterSpec, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self.spec = spec
        self._filters: dict[str, str] = spec.defaults()
        self._pagination = Pagination(page_size=spec.validate_page_size(page_size))
        self._listeners: list[QueryListener] = []

    @property
    def filters(self) -> Mapping[str, str]:
        return MappingProxyType(dict(self._filters))

    @property
    def pagination(self) -> Pagination:
        return self._pagination

    @property
    def has_active_filters(self) -> bool:
        return self.spec.has_active_filters(self._filters)

    def snapshot(self) -> QuerySnapshot:
        return QuerySnapshot(
            filters=MappingProxyType(dict(self._filters)),
            pagination=self._pagination,
        )

    def merge_filters(self, partial: Mapping[str, object]) -> QuerySnapshot:
        """Shallow-merge filter values and go back to page 1.

        Raises:
            InvalidQueryError: If a key or value is rejected by the FilterSpec.
                The state is left untouched.
        """
        validated = self.spec.validate(partial)
        self._filters = {**self._filters, **validated}
        self._pagination = self._pagination.with_page(1)
        return self._changed()

    def reset_filters(self) -> QuerySnapshot:
        self._filters = self.spec.defaults()
        self._pagination = self._pagination.with_page(1)
        return self._changed()

    def set_page(self, page: int) -> QuerySnapshot:
        self._pagination = self._pagination.with_page(page)
        return self._changed()

    def set_page_size(self, page_size: int) -> QuerySnapshot:
        """Change the page size and go back to page 1.

        Raises:
            InvalidPageSizeError: If the size is not a permitted option.
        """
        self._pagination = self._pagination.with_page_size(
            self.spec.validate_page_size(page_size)
        )
        return self._changed()

    def apply_totals(self, total_items: int) -> None:
        """Record the server's total for the current query.

        Not a query change, so listeners are not notified.
        """
        self._pagination = self._pagination.with_totals(max(total_items, 0))

    def query_params(self) -> dict[str, str]:
        """Query string for the list endpoint (defaults omitted)."""
        return {
            **self.spec.to_query_params(self._filters),
            **self._pagination.to_query_params(),
        }

    def subscribe(self, listener: QueryListener) -> Callable[[], None]:
        """Call listener with a snapshot after every query change.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> QuerySnapshot:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
        return snapshot
