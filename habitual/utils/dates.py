"""Calendar-date helpers.

All "which day is it" questions go through here so that goal start dates,
manual goal pins and "today" agree on one reference timezone.
"""
from datetime import date, datetime, time, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from habitual.config import settings

DATE_FORMAT = "%Y-%m-%d"


def reference_tz() -> ZoneInfo:
    """Timezone used to turn instants into calendar days."""
    return ZoneInfo(settings.timezone)


def utcnow() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    MongoDB hands back naive datetimes that are already in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def local_date(value: datetime) -> date:
    """
    Calendar date of an instant in the reference timezone.

    Examples:
        >>> local_date(datetime(2024, 1, 2, 23, 30, tzinfo=timezone.utc))
        datetime.date(2024, 1, 2)
    """
    return as_utc(value).astimezone(reference_tz()).date()


def format_date(value: date) -> str:
    """Render a date as YYYY-MM-DD."""
    return value.strftime(DATE_FORMAT)


def parse_date(value: str) -> date:
    """
    Parse a strict YYYY-MM-DD string.

    Raises:
        ValueError: If the string is not a valid calendar date
    """
    parsed = datetime.strptime(value, DATE_FORMAT).date()
    # strptime accepts "2024-1-5"; pinned dates are compared as strings
    if format_date(parsed) != value:
        raise ValueError(f"Date must be formatted YYYY-MM-DD: {value!r}")
    return parsed


def start_of_day(value: date) -> datetime:
    """Midnight of a calendar day in the reference timezone, as UTC."""
    return datetime.combine(value, time.min, tzinfo=reference_tz()).astimezone(timezone.utc)


def today_string(now: Optional[datetime] = None) -> str:
    """Today's date in the reference timezone as YYYY-MM-DD."""
    return format_date(local_date(now or utcnow()))
