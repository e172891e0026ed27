# salonbook/core/lifecycle.py

from datetime import date, datetime, time
from enum import Enum
from typing import Dict, FrozenSet, Union


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"
    no_show = "no_show"


class PaymentStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    refunded = "refunded"


# Statuses that hold a slot. Must match the partial unique index on appointments.
ACTIVE_STATUSES: FrozenSet[str] = frozenset(
    s.value for s in (AppointmentStatus.pending, AppointmentStatus.confirmed, AppointmentStatus.in_progress)
)
TERMINAL_STATUSES: FrozenSet[str] = frozenset(
    s.value for s in (AppointmentStatus.completed, AppointmentStatus.cancelled, AppointmentStatus.no_show)
)

TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.pending: frozenset({
        AppointmentStatus.confirmed,
        AppointmentStatus.cancelled,
        AppointmentStatus.no_show,
    }),
    AppointmentStatus.confirmed: frozenset({
        AppointmentStatus.in_progress,
        AppointmentStatus.completed,
        AppointmentStatus.cancelled,
        AppointmentStatus.no_show,
    }),
    AppointmentStatus.in_progress: frozenset({AppointmentStatus.completed}),
    AppointmentStatus.completed: frozenset(),
    AppointmentStatus.cancelled: frozenset(),
    AppointmentStatus.no_show: frozenset(),
}


def can_transition(old: Union[str, AppointmentStatus], new: Union[str, AppointmentStatus]) -> bool:
    return AppointmentStatus(new) in TRANSITIONS[AppointmentStatus(old)]


def initial_status(manual: bool, salon_auto_confirm: bool, staff_auto_confirm: bool) -> AppointmentStatus:
    # bookings entered by the salon itself are confirmed straight away
    if manual or salon_auto_confirm or staff_auto_confirm:
        return AppointmentStatus.confirmed
    return AppointmentStatus.pending


def has_started(day: date, start: time, now: datetime) -> bool:
    return now > datetime.combine(day, start)


def has_window_passed(day: date, end: time, now: datetime) -> bool:
    """True once the appointment's end time is behind us."""
    return now > datetime.combine(day, end)
