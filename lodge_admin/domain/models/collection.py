"""Collection state value types: pagination and load status."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from lodge_admin.domain.models.filter_spec import DEFAULT_PAGE_SIZE


class CollectionStatus(str, Enum):
    """Load status of a Collection Store.

    States:
        IDLE: Nothing in flight; records are the last successful page.
        LOADING: A fetch has been issued and not yet settled.
        ERROR: The last operation failed; error_message is set.
    """

    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


@dataclass(frozen=True)
class Pagination:
    """Page position and server totals for one collection.

    total_pages is always derived from total_items and page_size.

    Attributes:
        page: 1-based page number.
        page_size: Records per page.
        total_items: Total records matching the query on the server.
    """

    page: int = field(default=1)
    page_size: int = field(default=DEFAULT_PAGE_SIZE)
    total_items: int = field(default=0)

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")
        if self.total_items < 0:
            raise ValueError(f"total_items must be >= 0, got {self.total_items}")

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.page_size)

    @property
    def last_page(self) -> int:
        """Highest page set_page may move to (at least 1)."""
        return max(self.total_pages, 1)

    def with_page(self, page: int) -> Pagination:
        """Move to a page, clamped to [1, last_page]."""
        return Pagination(
            page=min(max(page, 1), self.last_page),
            page_size=self.page_size,
            total_items=self.total_items,
        )

    def with_page_size(self, page_size: int) -> Pagination:
        return Pagination(page=1, page_size=page_size, total_items=self.total_items)

    def with_totals(self, total_items: int) -> Pagination:
        return Pagination(
            page=self.page,
            page_size=self.page_size,
            total_items=total_items,
        )

    def to_query_params(self) -> dict[str, str]:
        return {"page": str(self.page), "limit": str(self.page_size)}

    def to_dict(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "page_size": self.page_size,
            "total_items": self.total_items,
            "total_pages": self.total_pages,
        }
