"""Logging entry point for applications embedding lodge_admin."""

from __future__ import annotations

from lodge_admin.infrastructure.observability import configure_structlog


def configure_logging(environment: str = "production", level: str | None = None) -> None:
    """Configure structlog once at startup, before any store is created."""
    configure_structlog(environment=environment, level=level)


__all__ = ["configure_logging"]
