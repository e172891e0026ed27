# salonbook/services/availability.py
"""Availability queries backed by the database.

Reads are advisory: they can be stale by the time a booking is written.
The unique index on appointments has the final word.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Union

from sqlmodel import Session, col, select

from ..config import Settings
from ..core.availability import (
    BookedInterval,
    DayStatus,
    StaffSchedule,
    available_slots,
    day_status,
    slot_rejection,
)
from ..core.dates import format_minutes, parse_date, to_minutes
from ..core.exclusions import Exclusions, Vacation, VacationCategory, make_break
from ..core.lifecycle import ACTIVE_STATUSES
from ..core.schedule import WorkingHoursTemplate
from ..errors import NotFoundError, ValidationError
from ..models import (
    Appointment,
    Salon,
    SalonBreak,
    SalonVacation,
    Service,
    Staff,
    StaffBreak,
    StaffServiceLink,
    StaffVacation,
)

logger = logging.getLogger(__name__)

MAX_CALENDAR_DAYS = 366


def _to_break(record):
    return make_break(
        record.type,
        record.title,
        record.start_time,
        record.end_time,
        is_active=record.is_active,
        days=record.days,
        on=record.date,
        start_date=record.start_date,
        end_date=record.end_date,
    )


def _to_vacation(record) -> Vacation:
    try:
        category = VacationCategory(record.type)
    except ValueError:
        raise ValidationError(f"Unknown vacation type: {record.type!r}")
    return Vacation(
        title=record.title,
        start_date=record.start_date,
        end_date=record.end_date,
        category=category,
        is_active=record.is_active,
    )


class AvailabilityService:
    """Loads schedule data for a staff member and runs the core availability rules over it."""

    def __init__(self, session: Session, settings: Settings):
        self.session = session
        self.settings = settings

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_staff(self, staff_id: int) -> Staff:
        staff = self.session.get(Staff, staff_id)
        if staff is None:
            raise NotFoundError("Staff member not found")
        return staff

    def get_service(self, service_id: int) -> Service:
        service = self.session.get(Service, service_id)
        if service is None:
            raise NotFoundError("Service not found")
        return service

    def get_salon(self, salon_id: int) -> Salon:
        salon = self.session.get(Salon, salon_id)
        if salon is None:
            raise NotFoundError("Salon not found")
        return salon

    def ensure_offers(self, staff: Staff, service: Service) -> None:
        link = self.session.get(StaffServiceLink, (staff.id, service.id))
        if link is None or service.salon_id != staff.salon_id:
            raise ValidationError("The selected staff cannot perform this service")

    def takes_bookings(self, staff: Staff) -> bool:
        """Inactive staff, and any staff of an inactive salon, are never bookable."""
        if not staff.is_active:
            return False
        salon = self.session.get(Salon, staff.salon_id)
        return salon is not None and salon.is_active

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def load_schedule(self, staff: Staff, first_day: date, last_day: Optional[date] = None) -> StaffSchedule:
        """Everything that decides availability for ``staff`` between two dates (inclusive)."""
        last_day = last_day or first_day
        salon = self.session.get(Salon, staff.salon_id)

        staff_breaks = self.session.exec(select(StaffBreak).where(StaffBreak.staff_id == staff.id)).all()
        staff_vacations = self.session.exec(select(StaffVacation).where(StaffVacation.staff_id == staff.id)).all()
        salon_breaks = self.session.exec(select(SalonBreak).where(SalonBreak.salon_id == staff.salon_id)).all()
        salon_vacations = self.session.exec(
            select(SalonVacation).where(SalonVacation.salon_id == staff.salon_id)
        ).all()

        appointments = self.session.exec(
            select(Appointment)
            .where(Appointment.staff_id == staff.id)
            .where(Appointment.date >= first_day)
            .where(Appointment.date <= last_day)
            .where(col(Appointment.status).in_(sorted(ACTIVE_STATUSES)))
        ).all()

        salon_hours = None
        if salon is not None and salon.working_hours:
            salon_hours = WorkingHoursTemplate.from_salon_json(salon.working_hours)

        return StaffSchedule(
            hours=WorkingHoursTemplate.from_staff_json(staff.working_hours),
            salon_hours=salon_hours,
            exclusions=Exclusions(
                breaks=tuple(_to_break(b) for b in staff_breaks),
                vacations=tuple(_to_vacation(v) for v in staff_vacations),
            ),
            salon_exclusions=Exclusions(
                breaks=tuple(_to_break(b) for b in salon_breaks),
                vacations=tuple(_to_vacation(v) for v in salon_vacations),
            ),
            bookings=tuple(
                BookedInterval(a.id, a.date, to_minutes(a.time), to_minutes(a.end_time), a.status)
                for a in appointments
            ),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def check_slot(
        self,
        staff: Staff,
        day: date,
        start: int,
        duration: int,
        now: datetime,
        exclude_appointment_id: Optional[int] = None,
    ) -> Optional[str]:
        schedule = self.load_schedule(staff, day)
        return slot_rejection(schedule, day, start, duration, now, exclude_appointment_id)

    def is_staff_available(
        self,
        staff: Staff,
        day: Union[str, date],
        time,
        duration: int,
        now: datetime,
        exclude_appointment_id: Optional[int] = None,
    ) -> bool:
        day = parse_date(day)
        return self.check_slot(staff, day, to_minutes(time), duration, now, exclude_appointment_id) is None

    def get_available_slots(self, staff_id: int, service_id: int, day: Union[str, date], now: datetime) -> List[str]:
        day = parse_date(day)
        staff = self.get_staff(staff_id)
        service = self.get_service(service_id)
        self.ensure_offers(staff, service)

        if not self.takes_bookings(staff):
            return []

        schedule = self.load_schedule(staff, day)
        slots = available_slots(schedule, day, service.duration, now, self.settings.slot_interval_minutes)
        return [format_minutes(s) for s in slots]

    def is_salon_available(
        self,
        salon_id: int,
        day: Union[str, date],
        now: datetime,
        time=None,
        duration: Optional[int] = None,
    ) -> bool:
        """True if at least one active staff member at the salon can take the booking."""
        day = parse_date(day)
        start = to_minutes(time) if time is not None else None
        duration = duration or self.settings.default_search_duration

        salon = self.session.get(Salon, salon_id)
        if salon is None or not salon.is_active:
            return False

        staff_members = self.session.exec(
            select(Staff).where(Staff.salon_id == salon_id).where(Staff.is_active == True)  # noqa: E712
        ).all()

        for staff in staff_members:
            # a malformed template only removes that staff member from the search
            try:
                schedule = self.load_schedule(staff, day)
            except ValidationError as exc:
                logger.warning("Skipping staff %s of salon %s: %s", staff.id, salon_id, exc.message)
                continue
            if start is not None:
                if slot_rejection(schedule, day, start, duration, now) is None:
                    return True
            elif available_slots(schedule, day, duration, now, self.settings.slot_interval_minutes):
                return True

        return False

    def get_available_salon_ids(
        self,
        day: Union[str, date],
        now: datetime,
        time=None,
        duration: Optional[int] = None,
    ) -> List[int]:
        day = parse_date(day)

        salon_ids = self.session.exec(
            select(Staff.salon_id)
            .join(Salon, Salon.id == Staff.salon_id)
            .where(Staff.is_active == True)  # noqa: E712
            .where(Salon.is_active == True)  # noqa: E712
            .distinct()
            .order_by(Staff.salon_id)
        ).all()

        return [
            salon_id
            for salon_id in salon_ids
            if self.is_salon_available(salon_id, day, now, time=time, duration=duration)
        ]

    def get_available_dates(
        self,
        staff_id: int,
        service_id: int,
        now: datetime,
        days_ahead: Optional[int] = None,
    ) -> List[date]:
        """Dates over the next ``days_ahead`` days, starting today, with at least one free slot."""
        days_ahead = days_ahead or self.settings.availability_days_ahead
        staff = self.get_staff(staff_id)
        service = self.get_service(service_id)
        self.ensure_offers(staff, service)

        if not self.takes_bookings(staff):
            return []

        today = now.date()
        last_day = today + timedelta(days=days_ahead - 1)
        schedule = self.load_schedule(staff, today, last_day)

        dates = []
        for offset in range(days_ahead):
            day = today + timedelta(days=offset)
            if available_slots(schedule, day, service.duration, now, self.settings.slot_interval_minutes):
                dates.append(day)
        return dates

    def get_staff_availability(
        self,
        staff_id: int,
        start_date: Union[str, date],
        end_date: Union[str, date],
    ) -> Dict[date, DayStatus]:
        first_day = parse_date(start_date)
        last_day = parse_date(end_date)
        if last_day < first_day:
            raise ValidationError("end_date must not be before start_date")
        if (last_day - first_day).days >= MAX_CALENDAR_DAYS:
            raise ValidationError(f"Date range may cover at most {MAX_CALENDAR_DAYS} days")

        staff = self.get_staff(staff_id)
        schedule = self.load_schedule(staff, first_day, last_day)

        calendar = {}
        day = first_day
        while day <= last_day:
            calendar[day] = day_status(schedule, day)
            day += timedelta(days=1)

        logger.debug("Built availability calendar for staff %s: %s days", staff_id, len(calendar))
        return calendar
