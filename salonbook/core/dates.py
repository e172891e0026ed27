# salonbook/core/dates.py

import re
from datetime import date, datetime, time
from typing import Union

from ..errors import ValidationError

ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DISPLAY_DATE = re.compile(r"^\d{2}\.\d{2}\.\d{4}$")
CLOCK_TIME = re.compile(r"^\d{1,2}:\d{2}$")

MINUTES_PER_DAY = 24 * 60


def parse_date(value: Union[str, date]) -> date:
    """Normalise a date given as ISO (YYYY-MM-DD) or display (DD.MM.YYYY) text."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"Invalid date: {value!r}")

    text = value.strip()
    try:
        if ISO_DATE.match(text):
            return datetime.strptime(text, "%Y-%m-%d").date()
        if DISPLAY_DATE.match(text):
            return datetime.strptime(text, "%d.%m.%Y").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}")

    raise ValidationError(f"Date must be YYYY-MM-DD or DD.MM.YYYY, got {value!r}")


def parse_time(value: Union[str, time]) -> time:
    if isinstance(value, time):
        return value
    if not isinstance(value, str) or not CLOCK_TIME.match(value.strip()):
        raise ValidationError(f"Time must be HH:MM, got {value!r}")
    hours, minutes = (int(part) for part in value.strip().split(":"))
    if hours > 23 or minutes > 59:
        raise ValidationError(f"Invalid time: {value!r}")
    return time(hours, minutes)


def to_minutes(value: Union[str, time]) -> int:
    """Minutes since midnight."""
    t = parse_time(value)
    return t.hour * 60 + t.minute


def from_minutes(minutes: int) -> time:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValidationError(f"Time falls outside a single day: {minutes} minutes")
    return time(minutes // 60, minutes % 60)


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    # half-open intervals: [a_start, a_end) and [b_start, b_end)
    return a_start < b_end and b_start < a_end
