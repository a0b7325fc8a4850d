"""
Date parsing, formatting and enumeration utilities.

History keys are local calendar dates in ``YYYY-MM-DD`` form. Nothing here
reads the clock unless the caller omits the anchor date.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional, Union

DateLike = Union[date, datetime, str]

WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def parse_date(date_str: Optional[str]) -> Optional[date]:
    """
    Parse a date string into a date object.

    Handles:
    - ISO format (YYYY-MM-DD)
    - ISO datetime (YYYY-MM-DDTHH:MM:SS), only the date part is kept

    Args:
        date_str: Date string to parse

    Returns:
        Parsed date object or None if invalid
    """
    if not date_str or not isinstance(date_str, str):
        return None

    if 'T' in date_str:
        date_str = date_str.split('T')[0]

    try:
        return datetime.strptime(date_str, '%Y-%m-%d').date()
    except ValueError:
        return None


def format_date(d: Union[date, datetime]) -> str:
    """
    Format a date as a zero-padded local calendar key (YYYY-MM-DD).

    A datetime is reduced to its own calendar date with no timezone
    conversion, so an aware datetime keeps the wall-clock day it carries.
    """
    if isinstance(d, datetime):
        d = d.date()
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def to_date(value: DateLike) -> date:
    """Coerce a date, datetime or YYYY-MM-DD string into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Not a calendar date: {value!r}")
    return parsed


def to_key(value: DateLike) -> str:
    """Coerce a date-like value into a history key."""
    return format_date(to_date(value))


def enumerate_trailing_days(n: int, anchor: Optional[DateLike] = None) -> List[str]:
    """
    Return ``n`` date keys ending at ``anchor`` inclusive, oldest first.

    Args:
        n: Number of days in the window
        anchor: Last day of the window. Defaults to the local date today.

    Returns:
        List of YYYY-MM-DD strings
    """
    if n < 0:
        raise ValueError("Window length cannot be negative")
    end = to_date(anchor) if anchor is not None else date.today()
    return [format_date(end - timedelta(days=offset)) for offset in range(n - 1, -1, -1)]


def day_of_week(date_string: DateLike) -> int:
    """Weekday index with 0=Sunday .. 6=Saturday."""
    # date.weekday() is 0=Monday
    return (to_date(date_string).weekday() + 1) % 7


def days_between(start: DateLike, end: DateLike) -> int:
    """Whole days from ``start`` to ``end`` (negative if end is earlier)."""
    return (to_date(end) - to_date(start)).days


def weekday_labels(week_starts_on: int = 0) -> List[str]:
    """Short weekday names ordered for a week starting on Sunday (0) or Monday (1)."""
    if week_starts_on not in (0, 1):
        raise ValueError("week_starts_on must be 0 or 1")
    return WEEKDAY_NAMES[week_starts_on:] + WEEKDAY_NAMES[:week_starts_on]
