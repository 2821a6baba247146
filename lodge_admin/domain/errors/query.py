"""Query errors for filter and pagination input."""

from __future__ import annotations

from lodge_admin.domain.exceptions import LodgeAdminError


class InvalidQueryError(LodgeAdminError):
    """Base class for rejected filter/pagination input."""


class UnknownFilterError(InvalidQueryError):
    """Raised when a filter key is not declared by the domain's FilterSpec.

    Attributes:
        key: The rejected filter key.
        domain: Name of the FilterSpec's domain.
    """

    def __init__(self, key: str, domain: str) -> None:
        self.key = key
        self.domain = domain
        super().__init__(f"Unknown filter '{key}' for {domain}")


class InvalidFilterValueError(InvalidQueryError):
    """Raised when a filter value is outside its allowed set.

    Attributes:
        key: Filter key.
        value: Rejected value.
        allowed: Values permitted for the key.
    """

    def __init__(self, key: str, value: object, allowed: frozenset[str]) -> None:
        self.key = key
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"Invalid value {value!r} for filter '{key}'. Allowed: {sorted(allowed)}"
        )


class InvalidPageSizeError(InvalidQueryError):
    """Raised when a page size is not one of the permitted options."""

    def __init__(self, page_size: int, allowed: tuple[int, ...]) -> None:
        self.page_size = page_size
        self.allowed = allowed
        super().__init__(f"Invalid page size {page_size}. Allowed: {list(allowed)}")
