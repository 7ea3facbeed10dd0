"""Clock abstraction used to stamp content groups."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """Source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as a naive UTC datetime."""


class SystemClock(Clock):
    def now(self) -> datetime:
        # Stored columns are naive UTC
        return datetime.now(timezone.utc).replace(tzinfo=None)


class FixedClock(Clock):
    """Clock frozen at a given instant; advanced explicitly."""

    def __init__(self, instant: datetime):
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, **kwargs) -> datetime:
        self._instant = self._instant + timedelta(**kwargs)
        return self._instant
