"""Calendar date utilities. All day arithmetic happens on UTC calendar dates."""

from datetime import date, datetime
from typing import Optional, Union

import pytz
from dateutil import parser as date_parser

UTC_TZ = pytz.utc

DateLike = Union[date, datetime, str]


def now_utc() -> datetime:
    """Return current time in UTC."""
    return datetime.now(UTC_TZ)


def today_utc() -> date:
    """Return the current UTC calendar date."""
    return now_utc().date()


def to_utc(dt: datetime) -> datetime:
    """Convert a datetime to UTC."""
    if dt.tzinfo is None:
        # Naive datetimes are taken to be UTC already
        return UTC_TZ.localize(dt)
    return dt.astimezone(UTC_TZ)


def parse_datetime_utc(value: str, default_tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
    """
    Parse a datetime string and return it in UTC.

    If no timezone is provided in the string, assumes UTC (or default_tz).
    """
    dt = date_parser.parse(value)
    if dt.tzinfo is None:
        tz = default_tz or UTC_TZ
        dt = tz.localize(dt)
    return to_utc(dt)


def to_utc_date(value: DateLike) -> date:
    """
    Normalize a date, datetime or ISO string to a UTC calendar date.

    A timezone-aware datetime is converted to UTC before its date is taken,
    so 2024-02-01T20:00-08:00 becomes 2024-02-02.
    """
    if isinstance(value, datetime):
        return to_utc(value).date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_datetime_utc(value).date()
    raise TypeError(f"Cannot interpret {value!r} as a date")


def days_between(start: DateLike, end: DateLike) -> int:
    """Calendar days from start to end (negative when end precedes start)."""
    return (to_utc_date(end) - to_utc_date(start)).days
