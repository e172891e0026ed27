# salonbook/routers/public_routes.py

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..core.dates import parse_date
from ..deps import get_availability_service, get_booking_service, get_now
from ..schemas import (
    AppointmentPublic,
    AvailableDatesResponse,
    AvailableSlotsResponse,
    ClientInfo,
    GuestAppointmentCreate,
)
from ..services import AvailabilityService, BookingService

router = APIRouter(
    prefix="/public",
    tags=["public"],
)


@router.get("/available-slots", response_model=AvailableSlotsResponse)
def available_slots(
    staff_id: int,
    service_id: int,
    date: str,
    availability: AvailabilityService = Depends(get_availability_service),
    now: datetime = Depends(get_now),
):
    day = parse_date(date)
    slots = availability.get_available_slots(staff_id, service_id, day, now)
    return {"staff_id": staff_id, "service_id": service_id, "date": day, "slots": slots}


@router.get("/available-dates", response_model=AvailableDatesResponse)
def available_dates(
    staff_id: int,
    service_id: int,
    days: Optional[int] = Query(default=None, ge=1, le=366),
    availability: AvailabilityService = Depends(get_availability_service),
    now: datetime = Depends(get_now),
):
    dates = availability.get_available_dates(staff_id, service_id, now, days_ahead=days)
    return {"staff_id": staff_id, "service_id": service_id, "dates": dates}


@router.post("/book", response_model=AppointmentPublic, status_code=201)
def book_as_guest(
    appt: GuestAppointmentCreate,
    booking: BookingService = Depends(get_booking_service),
    now: datetime = Depends(get_now),
):
    client = ClientInfo(
        name=appt.guest_name,
        email=appt.guest_email,
        phone=appt.guest_phone,
        address=appt.guest_address,
        is_guest=True,
    )
    return booking.book(
        appt.staff_id,
        appt.service_id,
        appt.date,
        appt.time,
        client,
        now,
        salon_id=appt.salon_id,
        notes=appt.notes,
    )
