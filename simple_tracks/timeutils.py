"""Time parsing, day windows and label formatting."""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta, tzinfo

from zoneinfo import ZoneInfo

# Culture-invariant month abbreviations (strftime("%b") follows the process locale).
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def tzinfo_from_name(tz_name: str) -> tzinfo:
    """Create tzinfo from an IANA timezone name.

    Args:
        tz_name: Timezone name like "Europe/Helsinki".

    Returns:
        tzinfo instance.

    Raises:
        ValueError: If timezone name is invalid on this system.
    """

    try:
        return ZoneInfo(tz_name)
    except Exception as exc:  # ZoneInfo raises KeyError / ZoneInfoNotFoundError (platform dependent)
        raise ValueError(f"Invalid time zone: {tz_name!r}. Example: Europe/Helsinki") from exc


def dt_from_epoch_ms(epoch_ms: int, tz_name: str) -> datetime:
    """Convert epoch milliseconds to a timezone-aware datetime."""

    tz = tzinfo_from_name(tz_name)
    return datetime.fromtimestamp(epoch_ms / 1000.0, tz=tz)


def epoch_ms_from_dt(dt: datetime) -> int:
    """Convert a datetime to epoch milliseconds.

    Args:
        dt: Datetime. If naive, will be treated as UTC (discouraged).

    Returns:
        Epoch milliseconds.
    """

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1000)


def parse_day(text: str) -> date:
    """Parse a "YYYY-MM-DD" calendar date.

    Raises:
        ValueError: If cannot parse.
    """

    try:
        return date.fromisoformat(text.strip())
    except ValueError as exc:
        raise ValueError(f"Cannot parse date: {text!r}. Expected format: 2026-01-31") from exc


def today_in(tz_name: str) -> date:
    """Current calendar date in the given timezone."""

    return datetime.now(tzinfo_from_name(tz_name)).date()


def day_window_ms(day: date, span: timedelta, tz_name: str) -> tuple[int, int]:
    """Convert a day plus span to epoch-ms [start, end) starting at local midnight.

    Args:
        day: First calendar day of the window.
        span: Window length; whole days are expected but not required.
        tz_name: IANA timezone name used to locate midnight.

    Returns:
        (start_ms, end_ms) with end exclusive.
    """

    tz = tzinfo_from_name(tz_name)
    start_dt = datetime.combine(day, time.min).replace(tzinfo=tz)
    end_dt = (start_dt.replace(tzinfo=None) + span).replace(tzinfo=tz)
    return epoch_ms_from_dt(start_dt), epoch_ms_from_dt(end_dt)


def format_day(day: date) -> str:
    """Format a date as "MMM dd yyyy", e.g. "Oct 09 2026"."""

    return f"{_MONTHS[day.month - 1]} {day.day:02d} {day.year:04d}"


def format_range(end: date, start: date) -> str:
    """Label for a multi-day view, newest day first."""

    return f"{format_day(end)} - {format_day(start)}"
