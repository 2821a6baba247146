"""Observability: structlog configuration and correlation ids.

Usage:
    from lodge_admin.infrastructure.observability import (
        configure_structlog,
        correlation_scope,
    )

    configure_structlog(environment="development", level="DEBUG")
    with correlation_scope():
        await store.fetch()
"""

from lodge_admin.application.services.correlation import (
    correlation_id_processor,
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from lodge_admin.infrastructure.observability.logging import configure_structlog

__all__: list[str] = [
    "configure_structlog",
    "correlation_id_processor",
    "correlation_scope",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
]
