"""Time Authority Protocol - interface for timestamp provisioning.

Services that stamp records (check-in arrival times, confirmation times)
inject a TimeAuthorityProtocol implementation instead of calling
datetime.now() directly, so tests can control time with FakeTimeAuthority.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Abstract interface for time authority.

    Example usage:
        class MyService:
            def __init__(self, time_authority: TimeAuthorityProtocol) -> None:
                self._time = time_authority

            def process(self) -> None:
                now = self._time.utcnow()  # NOT datetime.now()

    For production:
        Use TimeAuthorityService from lodge_admin/application/services/

    For testing:
        Use FakeTimeAuthority from tests/helpers/fake_time_authority.py
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return current time with timezone awareness (UTC)."""
        ...

    @abstractmethod
    def utcnow(self) -> datetime:
        """Return current UTC time as a timezone-aware datetime."""
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Return monotonic clock value in seconds.

        Use this for measuring elapsed time, not for timestamps. Only
        differences between values are meaningful.
        """
        ...
