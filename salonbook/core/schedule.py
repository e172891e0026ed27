# salonbook/core/schedule.py

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, Mapping, NamedTuple, Optional

from ..errors import ValidationError
from .dates import to_minutes


class Weekday(str, Enum):
    monday = "monday"
    tuesday = "tuesday"
    wednesday = "wednesday"
    thursday = "thursday"
    friday = "friday"
    saturday = "saturday"
    sunday = "sunday"

    @classmethod
    def of(cls, day: date) -> "Weekday":
        return list(cls)[day.weekday()]  # 0 = Monday

    @classmethod
    def parse(cls, value: str) -> "Weekday":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown weekday: {value!r}")


class OpenInterval(NamedTuple):
    start: int  # minutes of day, inclusive
    end: int  # minutes of day, exclusive


@dataclass(frozen=True)
class DayHours:
    start: int
    end: int
    is_open: bool = True


class WorkingHoursTemplate:
    """Weekly open/close hours, one optional entry per weekday.

    Staff store ``{"start", "end", "is_working"}`` per day and salons store
    ``{"open", "close", "is_open"}``; both are read into the same shape.
    A weekday without an entry is closed.
    """

    def __init__(self, days: Optional[Mapping[Weekday, DayHours]] = None):
        self.days: Dict[Weekday, DayHours] = dict(days or {})

    @classmethod
    def from_json(cls, data, start_key: str, end_key: str, flag_key: str) -> "WorkingHoursTemplate":
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ValidationError("Working hours must be an object keyed by weekday")

        days = {}
        for key, entry in data.items():
            weekday = Weekday.parse(key)
            if entry is None:
                continue
            if not isinstance(entry, Mapping):
                raise ValidationError(f"Working hours for {weekday.value} must be an object")

            is_open = bool(entry.get(flag_key, False))
            if not is_open:
                days[weekday] = DayHours(0, 0, is_open=False)
                continue
            if entry.get(start_key) is None or entry.get(end_key) is None:
                raise ValidationError(f"Working hours for {weekday.value} need '{start_key}' and '{end_key}'")
            days[weekday] = DayHours(to_minutes(entry[start_key]), to_minutes(entry[end_key]), True)
        return cls(days)

    @classmethod
    def from_staff_json(cls, data) -> "WorkingHoursTemplate":
        return cls.from_json(data, "start", "end", "is_working")

    @classmethod
    def from_salon_json(cls, data) -> "WorkingHoursTemplate":
        return cls.from_json(data, "open", "close", "is_open")

    def hours_for(self, day: date) -> Optional[OpenInterval]:
        entry = self.days.get(Weekday.of(day))
        if entry is None or not entry.is_open or entry.start >= entry.end:
            return None
        return OpenInterval(entry.start, entry.end)

    def is_open_on(self, day: date) -> bool:
        return self.hours_for(day) is not None


def resolve_open_interval(
    staff_hours: WorkingHoursTemplate,
    salon_hours: Optional[WorkingHoursTemplate],
    day: date,
) -> Optional[OpenInterval]:
    """Effective open interval for a staff member on a date, or None when closed.

    Passing ``salon_hours=None`` means the salon imposes no hours of its own.
    """
    staff = staff_hours.hours_for(day)
    if staff is None:
        return None
    if salon_hours is None:
        return staff

    salon = salon_hours.hours_for(day)
    if salon is None:
        return None

    start = max(salon.start, staff.start)
    end = min(salon.end, staff.end)
    if start >= end:
        return None
    return OpenInterval(start, end)
