"""System clock implementation of TimeAuthorityProtocol.

This is the only module allowed to read the wall clock directly; every
other service receives a TimeAuthorityProtocol by injection.
"""

import time
from datetime import datetime, timezone

from lodge_admin.application.ports.time_authority import TimeAuthorityProtocol


class TimeAuthorityService(TimeAuthorityProtocol):
    """Time authority backed by the system clock.

    Example:
        >>> clock = TimeAuthorityService()
        >>> clock.utcnow().tzinfo is timezone.utc
        True
    """

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def utcnow(self) -> datetime:
        return datetime.now(timezone.utc)

    def monotonic(self) -> float:
        return time.monotonic()
