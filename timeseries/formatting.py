"""
Date and value formatting for axis ticks, tooltips and time input fields.
"""
from datetime import datetime
from typing import Optional

from timeseries.model import as_utc


def format_tooltip_time(dt: datetime) -> str:
    """UTC clock time, HH:MM:SS, no date component."""
    return as_utc(dt).strftime("%H:%M:%S")


def format_gap_range(start: datetime, end: datetime) -> str:
    return f"{format_tooltip_time(start)} - {format_tooltip_time(end)}"


def format_axis_tick(dt: datetime) -> str:
    """
    Label a tick with the coarsest unit that is not zero.

    Rules are tried in order and the first match wins:
    seconds, minutes, hours, weekday + day (not on Sundays or the 1st),
    month + day, month, year.
    """
    dt = as_utc(dt)
    if dt.second:
        return dt.strftime(":%S")
    if dt.minute:
        return dt.strftime("%H:%M")
    if dt.hour:
        return dt.strftime("%H:00")
    # isoweekday() == 7 is Sunday
    if dt.isoweekday() != 7 and dt.day != 1:
        return f"{dt.strftime('%a')} {dt.day:>2}"
    if dt.day != 1:
        return f"{dt.strftime('%b')} {dt.day:>2}"
    if dt.month != 1:
        return dt.strftime("%b")
    return dt.strftime("%Y")


def format_date(dt: Optional[datetime]) -> str:
    """Field format used by the time inputs: YYYY-MM-DD HH:MM:SS."""
    if dt is None:
        return ""
    return as_utc(dt).strftime("%Y-%m-%d %H:%M:%S")


def iso8601(dt: datetime) -> str:
    return as_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_date(s: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601-ish string as UTC.

    Accepts "2024-01-02 03:04:05", "2024-01-02T03:04:05Z" and date-only
    strings. Returns None if the string is empty or cannot be parsed.
    """
    if not s:
        return None
    text = s.strip().replace(" ", "T")
    if text.endswith("Z"):
        text = text[:-1]
    try:
        return as_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def format_value(value: float) -> str:
    """Integral readings without a trailing .0, others as repr."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)
