"""Pydantic models for the lodge REST API response envelopes.

The backend wraps every payload:

    list:   { "data": [...], "pagination": {page, limit, total, totalPages} }
    item:   { "data": {...} }
    delete: { "success": true }
    error:  { "success": false, "message": "...", "errors": [{msg, param|path}] }

Records inside `data` stay plain dicts; the domain layer parses them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PaginationEnvelope(BaseModel):
    """Pagination metadata of a list response.

    Attributes:
        page: Page returned.
        limit: Page size applied by the server.
        total: Total matching records.
        total_pages: Number of pages for the query.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1)
    total: int = Field(default=0, ge=0)
    total_pages: int = Field(default=0, ge=0, alias="totalPages")


class ListEnvelope(BaseModel):
    """Paginated list response."""

    model_config = ConfigDict(frozen=True)

    data: list[dict[str, Any]]
    pagination: PaginationEnvelope | None = None


class ItemEnvelope(BaseModel):
    """Single-record response."""

    model_config = ConfigDict(frozen=True)

    data: dict[str, Any]


class RecordsEnvelope(BaseModel):
    """Unpaginated list response (attendance roster)."""

    model_config = ConfigDict(frozen=True)

    data: list[dict[str, Any]]


class DeleteEnvelope(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True


class FieldErrorItem(BaseModel):
    """One express-validator style entry of an `errors` array."""

    model_config = ConfigDict(frozen=True)

    msg: str = ""
    param: str | None = None
    path: str | None = None

    @property
    def field(self) -> str:
        return self.path or self.param or "_"


class ErrorBody(BaseModel):
    """Error response body. Every field is optional."""

    model_config = ConfigDict(frozen=True)

    success: bool = False
    message: str | None = None
    error: str | None = None
    errors: list[FieldErrorItem] = Field(default_factory=list)

    @property
    def text(self) -> str | None:
        return self.message or self.error

    def field_errors(self) -> dict[str, list[str]]:
        """Group validation messages by field name."""
        grouped: dict[str, list[str]] = {}
        for item in self.errors:
            grouped.setdefault(item.field, []).append(item.msg)
        return grouped
