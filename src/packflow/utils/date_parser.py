"""Date and timestamp parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Callable, Optional, Union

from dateutil import parser as date_parser


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024", ...) and the
    relative words "today", "yesterday" and "tomorrow".

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def to_local_naive(value: datetime) -> datetime:
    """Express a timestamp as naive local wall-clock time.

    Aware timestamps are converted to the local timezone first; naive ones
    are assumed to already be local.
    """
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def parse_timestamp(value) -> Optional[datetime]:
    """Parse a stored timestamp into naive local time.

    Accepts datetimes, dates (taken as midnight) and ISO-8601 style strings.
    Returns None for missing or unparseable values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_local_naive(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return to_local_naive(date_parser.isoparse(str(value)))
    except (ValueError, TypeError, OverflowError):
        pass
    try:
        return to_local_naive(date_parser.parse(str(value)))
    except (ValueError, TypeError, OverflowError):
        return None


Clock = Union[datetime, Callable[[], datetime], None]


def resolve_now(now: Clock = None) -> datetime:
    """Read an injected clock, defaulting to local wall-clock time."""
    if now is None:
        value = datetime.now()
    elif callable(now):
        value = now()
    else:
        value = now
    return to_local_naive(value)
