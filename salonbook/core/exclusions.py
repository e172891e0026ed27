# salonbook/core/exclusions.py

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Sequence

from ..errors import ValidationError
from .dates import overlaps, parse_date, to_minutes
from .schedule import Weekday


class BreakKind(str, Enum):
    daily = "daily"
    weekly = "weekly"
    specific_date = "specific_date"
    date_range = "date_range"


class VacationCategory(str, Enum):
    vacation = "vacation"
    sick_leave = "sick_leave"
    personal = "personal"
    other = "other"


@dataclass(frozen=True)
class Break:
    title: str
    start: int  # minutes of day
    end: int
    is_active: bool

    kind = None

    def __post_init__(self):
        # a break lives inside one day and never spans midnight
        if self.end <= self.start:
            raise ValidationError(f"Break '{self.title}' must end after it starts")

    def applies_to(self, day: date) -> bool:
        raise NotImplementedError

    def blocks(self, day: date, start: int, end: int) -> bool:
        return self.is_active and self.applies_to(day) and overlaps(start, end, self.start, self.end)


@dataclass(frozen=True)
class DailyBreak(Break):
    kind = BreakKind.daily

    def applies_to(self, day: date) -> bool:
        return True


@dataclass(frozen=True)
class WeeklyBreak(Break):
    days: FrozenSet[Weekday] = frozenset()

    kind = BreakKind.weekly

    def applies_to(self, day: date) -> bool:
        return Weekday.of(day) in self.days


@dataclass(frozen=True)
class SpecificDateBreak(Break):
    on: Optional[date] = None

    kind = BreakKind.specific_date

    def applies_to(self, day: date) -> bool:
        return self.on is not None and day == self.on


@dataclass(frozen=True)
class DateRangeBreak(Break):
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    kind = BreakKind.date_range

    def applies_to(self, day: date) -> bool:
        if self.start_date is None or self.end_date is None:
            return False
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class Vacation:
    title: str
    start_date: date
    end_date: date  # inclusive
    category: VacationCategory = VacationCategory.vacation
    is_active: bool = True

    def __post_init__(self):
        if self.end_date < self.start_date:
            raise ValidationError(f"Vacation '{self.title}' must not end before it starts")

    def covers(self, day: date) -> bool:
        return self.is_active and self.start_date <= day <= self.end_date


def make_break(
    kind,
    title: str,
    start_time,
    end_time,
    is_active: bool = True,
    days: Optional[Iterable[str]] = None,
    on=None,
    start_date=None,
    end_date=None,
) -> Break:
    """Build the right break variant from a stored record's loose fields."""
    try:
        kind = BreakKind(kind)
    except ValueError:
        raise ValidationError(f"Unknown break type: {kind!r}")

    common = dict(title=title, start=to_minutes(start_time), end=to_minutes(end_time), is_active=is_active)

    if kind is BreakKind.daily:
        return DailyBreak(**common)
    if kind is BreakKind.weekly:
        return WeeklyBreak(**common, days=frozenset(Weekday.parse(d) for d in (days or [])))
    if kind is BreakKind.specific_date:
        return SpecificDateBreak(**common, on=parse_date(on) if on else None)
    return DateRangeBreak(
        **common,
        start_date=parse_date(start_date) if start_date else None,
        end_date=parse_date(end_date) if end_date else None,
    )


@dataclass(frozen=True)
class Exclusions:
    """Breaks and vacations belonging to one owner (a salon or a staff member)."""

    breaks: Sequence[Break] = field(default_factory=tuple)
    vacations: Sequence[Vacation] = field(default_factory=tuple)

    def is_blocked(self, day: date, start: int, end: int) -> bool:
        return is_blocked(self.breaks, self.vacations, day, start, end)

    def on_vacation(self, day: date) -> bool:
        return any(v.covers(day) for v in self.vacations)


def is_blocked(
    breaks: Iterable[Break],
    vacations: Iterable[Vacation],
    day: date,
    start: int,
    end: int,
) -> bool:
    # a vacation removes the whole day regardless of time
    if any(v.covers(day) for v in vacations):
        return True
    return any(b.blocks(day, start, end) for b in breaks)

