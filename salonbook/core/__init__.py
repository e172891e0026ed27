# salonbook/core/__init__.py
"""Scheduling engine. Pure functions of their inputs: no database, no wall clock."""

from .availability import (
    BookedInterval,
    DayStatus,
    StaffSchedule,
    available_slots,
    day_status,
    is_available,
    slot_rejection,
)
from .dates import format_minutes, overlaps, parse_date, parse_time, to_minutes
from .exclusions import Exclusions, Vacation, is_blocked, make_break
from .lifecycle import ACTIVE_STATUSES, AppointmentStatus, can_transition, has_window_passed
from .schedule import OpenInterval, Weekday, WorkingHoursTemplate, resolve_open_interval
from .slots import generate_slots

__all__ = [
    "ACTIVE_STATUSES",
    "AppointmentStatus",
    "BookedInterval",
    "DayStatus",
    "Exclusions",
    "OpenInterval",
    "StaffSchedule",
    "Vacation",
    "Weekday",
    "WorkingHoursTemplate",
    "available_slots",
    "can_transition",
    "day_status",
    "format_minutes",
    "generate_slots",
    "has_window_passed",
    "is_available",
    "is_blocked",
    "make_break",
    "overlaps",
    "parse_date",
    "parse_time",
    "resolve_open_interval",
    "slot_rejection",
    "to_minutes",
]
