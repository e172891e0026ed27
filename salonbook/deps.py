# salonbook/deps.py

from datetime import datetime

import pytz
from fastapi import Depends, HTTPException
from sqlmodel import Session, select

from .config import Settings, get_settings
from .db import get_session
from .models import Salon, Staff
from .services import AvailabilityService, BookingService


def require_role(user: dict, *roles: str):
    if user["role"] not in roles:
        raise HTTPException(status_code=403, detail="Forbidden")


def current_time(settings: Settings) -> datetime:
    """Wall-clock time in the business timezone, as a naive local datetime.

    Stored appointment dates and times are local to the salon, so "now" is
    compared against them without tz info. With no timezone configured the
    server's local time is used.
    """
    if settings.timezone:
        tz = pytz.timezone(settings.timezone)
        return datetime.now(tz).replace(tzinfo=None)
    return datetime.now()


# Dependency: override in tests to pin the clock
def get_now(settings: Settings = Depends(get_settings)) -> datetime:
    return current_time(settings)


def get_availability_service(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> AvailabilityService:
    return AvailabilityService(session, settings)


def get_booking_service(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> BookingService:
    return BookingService(session, settings)


def can_manage_salon(session: Session, user: dict, salon_id: int) -> bool:
    """Admins manage every salon, owners their own, staff the salon they work at."""
    if user["role"] == "admin":
        return True
    if user["role"] == "salon":
        salon = session.get(Salon, salon_id)
        return salon is not None and salon.owner_id == user["id"]
    if user["role"] == "staff":
        staff = session.exec(
            select(Staff).where(Staff.user_id == user["id"]).where(Staff.salon_id == salon_id)
        ).first()
        return staff is not None
    return False
