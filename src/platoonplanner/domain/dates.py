"""Calendar helpers.

Leave works at day granularity (``date``), tasks at instant granularity
(timezone-aware ``datetime``). The two are kept apart; the only bridge is
``instant_date``, which truncates an instant to the calendar day it falls
on in its own offset.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Union

from platoonplanner.domain.errors import InvalidDateError

DateLike = Union[date, str]
InstantLike = Union[datetime, str]

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def parse_date(value: DateLike) -> date:
    """Coerce a calendar date.

    Accepts ``date`` objects, ``datetime`` objects (truncated) and ISO
    strings. Strings carrying a time part are truncated to their date
    prefix, the same way task instants are truncated.

    Raises:
        InvalidDateError: If the value is not a recognizable date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateError(value)
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        raise InvalidDateError(value) from None


def parse_instant(value: InstantLike) -> datetime:
    """Coerce an instant to an aware ``datetime``.

    Naive values are taken to be UTC. A trailing ``Z`` is accepted.

    Raises:
        InvalidDateError: If the value is not a recognizable instant.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidDateError(value, "ISO date-time") from None
    else:
        raise InvalidDateError(value, "ISO date-time")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_date(day: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return day.isoformat()


def instant_date(instant: datetime) -> date:
    """Calendar day of an instant, in the instant's own offset."""
    return instant.date()


def date_range(start: DateLike, end: DateLike) -> list[date]:
    """All dates from start to end, inclusive. Empty if end < start."""
    current = parse_date(start)
    last = parse_date(end)
    days = []
    while current <= last:
        days.append(current)
        current += timedelta(days=1)
    return days


def nights_between(start: DateLike, end: DateLike) -> int:
    """Number of nights between two dates (0 for the same day)."""
    return (parse_date(end) - parse_date(start)).days


def add_hours(instant: datetime, hours: float) -> datetime:
    """Shift an instant by a (possibly fractional) number of hours."""
    return instant + timedelta(hours=hours)


def weekday_name(day: date) -> str:
    """English weekday name, e.g. 'Friday'."""
    return WEEKDAY_NAMES[day.weekday()]


def is_weekend(day: DateLike, weekend_days: tuple[str, ...]) -> bool:
    """Check whether a date falls on one of the configured weekend days."""
    return weekday_name(parse_date(day)) in weekend_days


def dates_overlap(
    a_start: date,
    a_end: date,
    b_start: date,
    b_end: date,
) -> bool:
    """Inclusive overlap test for two date windows."""
    return a_start <= b_end and a_end >= b_start


def utc_now() -> datetime:
    """Current time in UTC. Default clock for new assignments."""
    return datetime.now(timezone.utc)
