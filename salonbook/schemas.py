# salonbook/schemas.py

from pydantic import BaseModel, Field
from enum import Enum
from datetime import datetime, date as Date, time as Time
from typing import Dict, List, Optional

from .core.lifecycle import AppointmentStatus


class UserRole(str, Enum):
    client = "client"
    staff = "staff"
    salon = "salon"
    admin = "admin"


class ClientInfo(BaseModel):
    """Who the appointment is for: a registered user or a walk-in/guest."""
    client_id: Optional[int] = None
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    is_guest: bool = False


class GuestAppointmentCreate(BaseModel):
    salon_id: Optional[int] = None
    staff_id: int
    service_id: int
    date: str  # DD.MM.YYYY or YYYY-MM-DD
    time: str  # HH:MM
    notes: Optional[str] = Field(default=None, max_length=500)
    guest_name: str = Field(min_length=1, max_length=255)
    guest_email: Optional[str] = Field(default=None, max_length=255)
    guest_phone: str = Field(min_length=1, max_length=20)
    guest_address: str = Field(min_length=1, max_length=500)


class AppointmentCreate(BaseModel):
    salon_id: Optional[int] = None
    staff_id: int
    service_id: int
    date: str
    time: str
    notes: Optional[str] = Field(default=None, max_length=500)
    # only used when salon staff enter a booking on a client's behalf
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    client_address: Optional[str] = None


class AppointmentReschedule(BaseModel):
    staff_id: Optional[int] = None
    service_id: Optional[int] = None
    date: Optional[str] = None
    time: Optional[str] = None


class StatusChange(BaseModel):
    status: AppointmentStatus


class AppointmentPublic(BaseModel):
    id: int
    salon_id: int
    staff_id: int
    service_id: int
    client_id: Optional[int] = None
    client_name: str
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    is_guest: bool
    date: Date
    time: Time
    end_time: Time
    status: str
    notes: Optional[str] = None
    total_price: float
    payment_status: str
    created_at: datetime


class AvailableSlotsResponse(BaseModel):
    staff_id: int
    service_id: int
    date: Date
    slots: List[str]


class AvailableDatesResponse(BaseModel):
    staff_id: int
    service_id: int
    dates: List[Date]


class SalonAvailabilityResponse(BaseModel):
    salon_id: int
    date: Date
    available: bool


class AvailableSalonsResponse(BaseModel):
    date: Date
    salon_ids: List[int]


class DayAvailability(BaseModel):
    is_working: bool
    is_on_vacation: bool
    is_salon_closed: bool
    is_available: bool


class StaffAvailabilityResponse(BaseModel):
    staff_id: int
    days: Dict[Date, DayAvailability]
