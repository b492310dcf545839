"""
clock.py - Reference clock
Every "today" used by streaks, monthly buckets and habit logs comes from here,
so calendar days are always taken in one fixed time zone.
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from lifelog.config import LIFELOG_TIMEZONE
from lifelog.errors import ValidationError


class Clock:
    """Base clock. Subclasses only need to provide now()."""

    def __init__(self, tz_name: str = LIFELOG_TIMEZONE):
        self.tz = ZoneInfo(tz_name)

    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        return self.now().astimezone(self.tz).date()

    def to_local_date(self, value) -> date:
        """Strip the time component of a stored timestamp in the reference zone.

        Naive datetimes are stored as UTC.
        """
        if isinstance(value, datetime):
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            return value.astimezone(self.tz).date()
        return value


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Clock pinned to a given instant, or to a given calendar day."""

    def __init__(self, at, tz_name: str = LIFELOG_TIMEZONE):
        super().__init__(tz_name)
        if not isinstance(at, datetime):
            at = datetime(at.year, at.month, at.day, 12, tzinfo=self.tz)
        elif at.tzinfo is None:
            at = at.replace(tzinfo=self.tz)
        self._at = at

    def now(self) -> datetime:
        return self._at


def parse_query_date(value: str | None, field: str, clock: Clock) -> date | None:
    """Parse "YYYY-MM-DD" (or a full ISO timestamp) from a query string.

    A timestamp carrying an offset lands on its calendar day in the reference
    zone; a naive one is already local.
    """
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        moment = datetime.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD)") from e
    if moment.tzinfo is None:
        return moment.date()
    return clock.to_local_date(moment)


def to_storage_datetime(value: str | None, clock: Clock) -> datetime:
    """Naive UTC timestamp for a user-supplied date; now if omitted.

    A bare date means midnight of that day in the reference zone.
    """
    if not value:
        moment = clock.now()
    else:
        try:
            day = date.fromisoformat(value)
            moment = datetime(day.year, day.month, day.day, tzinfo=clock.tz)
        except ValueError:
            try:
                moment = datetime.fromisoformat(value)
            except ValueError as e:
                raise ValidationError("Date must be ISO formatted") from e
            if moment.tzinfo is None:
                moment = moment.replace(tzinfo=clock.tz)
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


_default_clock = SystemClock()


def get_clock() -> Clock:
    """FastAPI dependency - the process-wide reference clock."""
    return _default_clock
