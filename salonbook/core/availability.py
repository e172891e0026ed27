# salonbook/core/availability.py

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Sequence

from .dates import overlaps
from .exclusions import Exclusions
from .lifecycle import ACTIVE_STATUSES
from .schedule import OpenInterval, WorkingHoursTemplate, resolve_open_interval
from .slots import DEFAULT_INTERVAL_MINUTES, generate_slots

# Why a slot was turned down
CLOSED = "closed"
OUTSIDE_HOURS = "outside_hours"
EXCLUDED = "break_or_vacation"
BOOKED = "booked"
PAST = "past"

REJECTION_MESSAGES = {
    CLOSED: "The staff member or salon is not working on that day",
    OUTSIDE_HOURS: "The appointment must fit within working hours",
    EXCLUDED: "The requested time falls on a break or vacation",
    BOOKED: "The staff member already has an appointment at that time",
    PAST: "Cannot book an appointment in the past",
}


@dataclass(frozen=True)
class BookedInterval:
    appointment_id: Optional[int]
    day: date
    start: int
    end: int
    status: str


@dataclass(frozen=True)
class StaffSchedule:
    """Everything the filter needs to know about one staff member, read at query time."""

    hours: WorkingHoursTemplate
    salon_hours: Optional[WorkingHoursTemplate] = None
    exclusions: Exclusions = field(default_factory=Exclusions)
    salon_exclusions: Exclusions = field(default_factory=Exclusions)
    bookings: Sequence[BookedInterval] = ()

    def open_interval(self, day: date) -> Optional[OpenInterval]:
        return resolve_open_interval(self.hours, self.salon_hours, day)

    def is_excluded(self, day: date, start: int, end: int) -> bool:
        # staff and salon exclusions are evaluated separately and either one blocks
        return self.exclusions.is_blocked(day, start, end) or self.salon_exclusions.is_blocked(day, start, end)

    def is_booked(self, day: date, start: int, end: int, exclude_appointment_id: Optional[int] = None) -> bool:
        for booking in self.bookings:
            if booking.day != day or booking.status not in ACTIVE_STATUSES:
                continue
            if exclude_appointment_id is not None and booking.appointment_id == exclude_appointment_id:
                continue
            if overlaps(start, end, booking.start, booking.end):
                return True
        return False


def _check(
    schedule: StaffSchedule,
    day: date,
    interval: OpenInterval,
    start: int,
    duration: int,
    now: datetime,
    exclude_appointment_id: Optional[int],
) -> Optional[str]:
    end = start + duration

    # 2) Must fit the open interval
    if start < interval.start or end > interval.end:
        return OUTSIDE_HOURS

    # 3) Breaks and vacations, staff and salon
    if schedule.is_excluded(day, start, end):
        return EXCLUDED

    # 4) Existing active appointments
    if schedule.is_booked(day, start, end, exclude_appointment_id):
        return BOOKED

    # 5) Strictly in the future
    today = now.date()
    if day < today:
        return PAST
    if day == today and start <= now.hour * 60 + now.minute:
        return PAST

    return None


def slot_rejection(
    schedule: StaffSchedule,
    day: date,
    start: int,
    duration: int,
    now: datetime,
    exclude_appointment_id: Optional[int] = None,
) -> Optional[str]:
    """Reason the slot cannot be booked, or None when it is free."""
    if duration <= 0:
        return OUTSIDE_HOURS

    # 1) Effective open interval
    interval = schedule.open_interval(day)
    if interval is None:
        return CLOSED

    return _check(schedule, day, interval, start, duration, now, exclude_appointment_id)


def is_available(
    schedule: StaffSchedule,
    day: date,
    start: int,
    duration: int,
    now: datetime,
    exclude_appointment_id: Optional[int] = None,
) -> bool:
    return slot_rejection(schedule, day, start, duration, now, exclude_appointment_id) is None


def available_slots(
    schedule: StaffSchedule,
    day: date,
    duration: int,
    now: datetime,
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
) -> List[int]:
    """Free start times on ``day`` in ascending order."""
    interval = schedule.open_interval(day)
    if interval is None or duration <= 0:
        return []

    return [
        start
        for start in generate_slots(interval.start, interval.end, interval_minutes)
        if _check(schedule, day, interval, start, duration, now, None) is None
    ]


@dataclass(frozen=True)
class DayStatus:
    is_working: bool
    is_on_vacation: bool
    is_salon_closed: bool

    @property
    def is_available(self) -> bool:
        return self.is_working and not self.is_on_vacation and not self.is_salon_closed

    def as_dict(self) -> dict:
        return {
            "is_working": self.is_working,
            "is_on_vacation": self.is_on_vacation,
            "is_salon_closed": self.is_salon_closed,
            "is_available": self.is_available,
        }


def day_status(schedule: StaffSchedule, day: date) -> DayStatus:
    salon_closed = schedule.salon_exclusions.on_vacation(day)
    if schedule.salon_hours is not None and not schedule.salon_hours.is_open_on(day):
        salon_closed = True

    return DayStatus(
        is_working=schedule.hours.is_open_on(day),
        is_on_vacation=schedule.exclusions.on_vacation(day),
        is_salon_closed=salon_closed,
    )
