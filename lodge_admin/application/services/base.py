"""Shared structlog plumbing for stores and state machines."""

import structlog

from lodge_admin.application.services.correlation import get_correlation_id


class LoggingMixin:
    """Gives a service a logger bound to its class name and component.

    Subclasses call _init_logger() at the end of __init__ and take a
    per-command logger from _log_operation(), which also carries the
    correlation id in effect when the command started.

    Example:
        >>> log = self._log_operation("fetch", resource="members")
        >>> log.info("fetch_completed", count=20)
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "client") -> None:
        self._log = structlog.get_logger().bind(
            service=type(self).__name__,
            component=component,
        )

    def _log_operation(self, operation: str, **context: object) -> structlog.BoundLogger:
        """Logger for one command.

        Args:
            operation: Command name ("fetch", "bulk_apply", ...).
            **context: Extra fields such as resource or member_id.
        """
        bound = self._log.bind(operation=operation, **context)
        correlation_id = get_correlation_id()
        if correlation_id:
            bound = bound.bind(correlation_id=correlation_id)
        return bound
