"""Time sources for date-relative business rules."""
from datetime import date, datetime, timezone


class Clock:
    """Supplies the current UTC date and time."""

    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """Wall clock in UTC (naive, matching the stored ISO timestamps)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)


class FixedClock(Clock):
    """Clock pinned to a given instant. Used by tests and manual replays."""

    def __init__(self, instant: datetime | date):
        if not isinstance(instant, datetime):
            instant = datetime(instant.year, instant.month, instant.day, 9, 0)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant
