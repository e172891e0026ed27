# salonbook/routers/appointments_routes.py

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from ..auth import get_current_user
from ..core.lifecycle import AppointmentStatus
from ..db import get_session
from ..deps import can_manage_salon, get_booking_service, get_now, require_role
from ..schemas import (
    AppointmentCreate,
    AppointmentPublic,
    AppointmentReschedule,
    ClientInfo,
    StatusChange,
    UserRole,
)
from ..services import BookingService

router = APIRouter(
    prefix="/appointments",
    tags=["appointments"],
)

MANAGER_ROLES = (UserRole.staff.value, UserRole.salon.value, UserRole.admin.value)


@router.post("", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    booking: BookingService = Depends(get_booking_service),
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
    now: datetime = Depends(get_now),
):
    require_role(current_user, UserRole.client.value, *MANAGER_ROLES)

    if current_user["role"] == UserRole.client.value:
        # 1) Client books for themselves
        client = ClientInfo(
            client_id=current_user["id"],
            name=current_user["name"] or current_user["email"],
            email=current_user["email"],
            phone=current_user["phone"],
        )
        manual = False
    else:
        # 2) Salon side enters a booking on a client's behalf
        staff = booking.availability.get_staff(appt.staff_id)
        if not can_manage_salon(session, current_user, staff.salon_id):
            raise HTTPException(status_code=403, detail="Forbidden")
        if not appt.client_name:
            raise HTTPException(status_code=422, detail="client_name is required for manual bookings")
        client = ClientInfo(
            name=appt.client_name,
            email=appt.client_email,
            phone=appt.client_phone,
            address=appt.client_address,
            is_guest=True,
        )
        manual = True

    return booking.book(
        appt.staff_id,
        appt.service_id,
        appt.date,
        appt.time,
        client,
        now,
        salon_id=appt.salon_id,
        notes=appt.notes,
        manual=manual,
    )


@router.get("/{appt_id}", response_model=AppointmentPublic)
def get_appointment(
    appt_id: int,
    booking: BookingService = Depends(get_booking_service),
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    target = booking.get_appointment(appt_id)
    if target.client_id != current_user["id"] and not can_manage_salon(session, current_user, target.salon_id):
        raise HTTPException(status_code=403, detail="Forbidden")
    return target


@router.patch("/{appt_id}", response_model=AppointmentPublic)
def reschedule_appointment(
    appt_id: int,
    changes: AppointmentReschedule,
    booking: BookingService = Depends(get_booking_service),
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
    now: datetime = Depends(get_now),
):
    require_role(current_user, *MANAGER_ROLES)
    target = booking.get_appointment(appt_id)
    if not can_manage_salon(session, current_user, target.salon_id):
        raise HTTPException(status_code=403, detail="Forbidden")

    return booking.reschedule(
        appt_id,
        now,
        day=changes.date,
        time=changes.time,
        staff_id=changes.staff_id,
        service_id=changes.service_id,
    )


@router.post("/{appt_id}/status", response_model=AppointmentPublic)
def change_appointment_status(
    appt_id: int,
    change: StatusChange,
    booking: BookingService = Depends(get_booking_service),
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
    now: datetime = Depends(get_now),
):
    target = booking.get_appointment(appt_id)

    # Clients may only cancel their own appointments
    is_owner = target.client_id is not None and target.client_id == current_user["id"]
    client_cancelling = is_owner and change.status == AppointmentStatus.cancelled
    if not client_cancelling and not can_manage_salon(session, current_user, target.salon_id):
        raise HTTPException(status_code=403, detail="Forbidden")

    return booking.change_status(appt_id, change.status, now)
