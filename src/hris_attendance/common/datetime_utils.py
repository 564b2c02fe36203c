from __future__ import annotations

import calendar
import re
from datetime import date, datetime, time

import pytz

from ..core.constants import DEFAULT_TIMEZONE
from ..core.exceptions import ValidationError

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def parse_hhmm(value: str) -> time:
    """Parse a 'HH:MM' (or 'HH:MM:SS') wall-clock string."""
    parts = (value or "").strip().split(":")
    try:
        hour, minute = int(parts[0]), int(parts[1])
        return time(hour=hour, minute=minute)
    except (IndexError, ValueError):
        raise ValidationError(f"Invalid time {value!r}, expected HH:MM")


def minutes_of_day(value: time | datetime | str) -> int:
    """Minutes since midnight, truncated to the minute."""
    if isinstance(value, str):
        value = parse_hhmm(value)
    return value.hour * 60 + value.minute


def now_local(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Current wall-clock time in the company timezone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(pytz.timezone(tz_name))


def format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def format_clock(value: datetime) -> str:
    return value.strftime("%H:%M:%S")


def parse_month(value: str | None) -> tuple[int, int]:
    m = _MONTH_RE.match((value or "").strip())
    if not m:
        raise ValidationError(f"Invalid month {value!r}, expected YYYY-MM")
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month {value!r}, expected YYYY-MM")
    return year, month


def month_range(value: str) -> tuple[date, date]:
    """First and last calendar day of a 'YYYY-MM' month."""
    year, month = parse_month(value)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
