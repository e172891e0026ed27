# salonbook/services/booking.py

import logging
from datetime import date, datetime
from typing import Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from ..config import Settings
from ..core.availability import REJECTION_MESSAGES
from ..core.dates import from_minutes, parse_date, to_minutes
from ..core.lifecycle import (
    TERMINAL_STATUSES,
    AppointmentStatus,
    PaymentStatus,
    can_transition,
    has_started,
    initial_status,
)
from ..errors import ClosedError, ConflictError, NotFoundError, ValidationError
from ..models import NO_DOUBLE_BOOKING_INDEX, Appointment, Salon, Service, Staff
from ..schemas import ClientInfo
from .availability import AvailabilityService

logger = logging.getLogger(__name__)

SLOT_TAKEN = "This time slot has just been booked by another user. Please select a different time."

# SQLite reports the violated columns instead of the index name
SQLITE_SLOT_VIOLATION = "UNIQUE constraint failed: appointment.staff_id, appointment.date, appointment.time"


def _is_slot_conflict(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return NO_DOUBLE_BOOKING_INDEX in message or SQLITE_SLOT_VIOLATION in message


class BookingService:
    """Writes appointments.

    Every write re-checks availability first so the caller gets a clear
    reason, but the check can race with another request. The partial unique
    index on (staff_id, date, time) decides; a violation becomes ConflictError.
    """

    def __init__(self, session: Session, settings: Settings):
        self.session = session
        self.settings = settings
        self.availability = AvailabilityService(session, settings)

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.session.get(Appointment, appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment not found")
        return appointment

    def _precheck(
        self,
        staff: Staff,
        day: date,
        start: int,
        duration: int,
        now: datetime,
        exclude_appointment_id: Optional[int] = None,
    ) -> None:
        if not self.availability.takes_bookings(staff):
            raise ClosedError("The selected staff is not available at the requested time", reason="closed")
        reason = self.availability.check_slot(staff, day, start, duration, now, exclude_appointment_id)
        if reason is not None:
            raise ClosedError(REJECTION_MESSAGES[reason], reason=reason)

    def _commit(self, appointment: Appointment, log_context: dict) -> Appointment:
        self.session.add(appointment)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if not _is_slot_conflict(exc):
                logger.error("Appointment write failed: %s (%s)", exc.orig, log_context)
                raise
            logger.warning("Double booking attempt prevented: %s", log_context)
            raise ConflictError(SLOT_TAKEN)

        self.session.refresh(appointment)  # fills appointment.id
        return appointment

    def book(
        self,
        staff_id: int,
        service_id: int,
        day: Union[str, date],
        time,
        client: ClientInfo,
        now: datetime,
        salon_id: Optional[int] = None,
        notes: Optional[str] = None,
        manual: bool = False,
    ) -> Appointment:
        # 1) Parse input
        day = parse_date(day)
        start = to_minutes(time)

        # 2) Resolve staff, service and salon
        staff = self.availability.get_staff(staff_id)
        service = self.availability.get_service(service_id)
        if salon_id is not None and salon_id != staff.salon_id:
            raise ValidationError("The selected staff does not work at this salon")
        salon = self.session.get(Salon, staff.salon_id)
        if salon is None:
            raise NotFoundError("Salon not found")
        self.availability.ensure_offers(staff, service)

        # 3) Advisory availability check
        self._precheck(staff, day, start, service.duration, now)

        # 4) Build and insert
        status = initial_status(manual, salon.auto_confirm, staff.auto_confirm)
        appointment = Appointment(
            salon_id=salon.id,
            staff_id=staff.id,
            service_id=service.id,
            client_id=client.client_id,
            client_name=client.name,
            client_email=client.email,
            client_phone=client.phone,
            is_guest=client.is_guest,
            guest_address=client.address,
            date=day,
            time=from_minutes(start),
            end_time=from_minutes(start + service.duration),
            status=status.value,
            notes=notes,
            total_price=service.discount_price if service.discount_price is not None else service.price,
            payment_status=PaymentStatus.pending.value,
        )

        appointment = self._commit(
            appointment,
            {"staff_id": staff.id, "date": day.isoformat(), "time": from_minutes(start).strftime("%H:%M")},
        )
        logger.info(
            "Appointment %s booked for staff %s on %s at %s (%s)",
            appointment.id, staff.id, day.isoformat(), appointment.time.strftime("%H:%M"), appointment.status,
        )
        return appointment

    def reschedule(
        self,
        appointment_id: int,
        now: datetime,
        day: Union[str, date, None] = None,
        time=None,
        staff_id: Optional[int] = None,
        service_id: Optional[int] = None,
    ) -> Appointment:
        appointment = self.get_appointment(appointment_id)
        if appointment.status in TERMINAL_STATUSES:
            raise ValidationError(f"A {appointment.status} appointment cannot be rescheduled")

        day = parse_date(day) if day is not None else appointment.date
        start = to_minutes(time) if time is not None else to_minutes(appointment.time)
        staff = self.availability.get_staff(staff_id if staff_id is not None else appointment.staff_id)
        service = self.availability.get_service(service_id if service_id is not None else appointment.service_id)
        if staff.salon_id != appointment.salon_id:
            raise ValidationError("Appointments cannot be moved to another salon")
        self.availability.ensure_offers(staff, service)

        # the appointment must not collide with itself
        self._precheck(staff, day, start, service.duration, now, exclude_appointment_id=appointment.id)

        appointment.staff_id = staff.id
        appointment.date = day
        appointment.time = from_minutes(start)
        appointment.end_time = from_minutes(start + service.duration)
        if service.id != appointment.service_id:
            appointment.service_id = service.id
            appointment.total_price = service.discount_price if service.discount_price is not None else service.price

        appointment = self._commit(
            appointment,
            {"appointment_id": appointment.id, "staff_id": staff.id, "date": day.isoformat(),
             "time": appointment.time.strftime("%H:%M")},
        )
        logger.info("Appointment %s moved to %s %s", appointment.id, day.isoformat(), appointment.time.strftime("%H:%M"))
        return appointment

    def change_status(self, appointment_id: int, new_status: Union[str, AppointmentStatus], now: datetime) -> Appointment:
        appointment = self.get_appointment(appointment_id)
        new_status = AppointmentStatus(new_status)
        old_status = appointment.status

        if not can_transition(old_status, new_status):
            raise ValidationError(f"Cannot change appointment status from {old_status} to {new_status.value}")

        # a no-show can only be recorded once the start time has gone by
        if new_status is AppointmentStatus.no_show and not has_started(appointment.date, appointment.time, now):
            raise ValidationError("An appointment can only be marked as no-show after its start time")

        appointment.status = new_status.value
        self.session.add(appointment)
        self.session.commit()
        self.session.refresh(appointment)

        logger.info("Appointment %s status %s -> %s", appointment.id, old_status, appointment.status)
        return appointment
