"""
Half-open date windows for range queries.

Days, months and years are taken in the given zone and converted to naive
UTC boundaries, matching how timestamps are stored. The reminder today view
passes TIMEZONE; event filters use the UTC default because event dates are
stored as UTC midnight of their calendar day.
Every window is [start, end): a record exactly at end belongs to the next one.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from termwatch.models.common import to_naive_utc

Window = tuple[datetime, datetime]


def local_midnight(day: date, tz_name: str = "UTC") -> datetime:
    """Start of `day` in the given zone, as naive UTC."""
    return to_naive_utc(datetime.combine(day, time.min, tzinfo=ZoneInfo(tz_name)))


def local_today(tz_name: str = "UTC", now: Optional[datetime] = None) -> date:
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(ZoneInfo(tz_name)).date()


def day_window(day: date, tz_name: str = "UTC") -> Window:
    return local_midnight(day, tz_name), local_midnight(day + timedelta(days=1), tz_name)


def today_window(tz_name: str = "UTC", now: Optional[datetime] = None) -> Window:
    """From this local midnight up to, but excluding, the next one."""
    return day_window(local_today(tz_name, now), tz_name)


def month_window(year: int, month: int, tz_name: str = "UTC") -> Window:
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return local_midnight(start, tz_name), local_midnight(end, tz_name)


def year_window(year: int, tz_name: str = "UTC") -> Window:
    return local_midnight(date(year, 1, 1), tz_name), local_midnight(date(year + 1, 1, 1), tz_name)
