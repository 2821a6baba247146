"""structlog setup for lodge_admin.

Two renderers are available. "production" writes one JSON object per line
for log shipping; any other environment name gets the coloured console
renderer. The level comes from the LOG_LEVEL environment variable unless
given explicitly.

A rendered production entry looks like:

    {"event": "fetch_completed", "level": "info",
     "timestamp": "2026-03-07T19:30:00.000000Z",
     "service": "CollectionStore", "component": "collection",
     "operation": "fetch", "resource": "members",
     "correlation_id": "...", "count": 20, "total_items": 87}

Call configure_structlog() once, from bootstrap, before creating stores.
"""

import logging
import os
from typing import cast

import structlog
from structlog.typing import Processor

from lodge_admin.application.services.correlation import correlation_id_processor

LOG_LEVEL_ENV = "LOG_LEVEL"
PRODUCTION = "production"


def _resolve_level(level: str | int | None) -> int:
    if isinstance(level, int):
        return level
    name = (level or os.getenv(LOG_LEVEL_ENV) or "INFO").upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def _renderer(environment: str) -> Processor:
    if environment == PRODUCTION:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def configure_structlog(
    environment: str = PRODUCTION,
    level: str | int | None = None,
) -> None:
    """Install the processor chain and the level filter.

    Args:
        environment: "production" for JSON lines, anything else for console.
        level: Level name or number; LOG_LEVEL (default INFO) when omitted.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        cast(Processor, correlation_id_processor),
        structlog.processors.StackInfoRenderer(),
    ]
    if environment == PRODUCTION:
        # Console renderer formats exceptions itself
        processors.append(structlog.processors.format_exc_info)
    processors.append(_renderer(environment))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
