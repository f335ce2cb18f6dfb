from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Any, Optional

from ..core.constants import CLOCK_FORMAT, ISO_DATE_FORMAT, MONTH_KEY_FORMAT, NOON_HOUR

_CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])\s*$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, ISO_DATE_FORMAT).date()


def parse_month_key(value: str) -> date:
    """Parse YYYY-MM into the first day of that month."""
    return datetime.strptime(value, MONTH_KEY_FORMAT).date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_minute(value: datetime) -> datetime:
    return value.replace(second=0, microsecond=0)


def format_clock(value: datetime) -> str:
    """12-hour wall-clock string, e.g. '08:15 AM'."""
    return value.strftime(CLOCK_FORMAT)


def is_before_noon(value: datetime) -> bool:
    return value.hour < NOON_HOUR


def parse_clock(value: str) -> Optional[time]:
    """Parse 'hh:mm AM/PM' into a time; None when the string does not match."""
    m = _CLOCK_RE.match(value or "")
    if not m:
        return None
    hours, minutes, period = int(m.group(1)), int(m.group(2)), m.group(3).upper()
    if not 1 <= hours <= 12 or minutes > 59:
        return None
    if period == "PM" and hours < 12:
        hours += 12
    if period == "AM" and hours == 12:
        hours = 0
    return time(hour=hours, minute=minutes)


def coerce_datetime(work_date: date, value: Any) -> Optional[datetime]:
    """Normalize a stored time value into an absolute datetime on work_date.

    Stored values can be:
    - datetime (expected)
    - 'hh:mm AM/PM' strings from older kiosk builds
    - ISO date-time strings

    Anything else returns None so that reports degrade instead of failing.
    """

    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return to_minute(value)

    if isinstance(value, str):
        t = parse_clock(value)
        if t is not None:
            return datetime.combine(work_date, t)
        try:
            return to_minute(datetime.fromisoformat(value.strip()))
        except ValueError:
            return None

    return None
