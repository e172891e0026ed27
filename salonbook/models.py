# salonbook/models.py

from typing import Optional, List
from datetime import datetime, timezone, date as Date, time as Time

from sqlalchemy import Index, text
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column

from .core.lifecycle import ACTIVE_STATUSES

NO_DOUBLE_BOOKING_INDEX = "appointments_no_double_booking"
ACTIVE_STATUS_FILTER = "status IN ({})".format(", ".join(f"'{s}'" for s in sorted(ACTIVE_STATUSES)))


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    name: str = ""
    phone: Optional[str] = None
    role: str  # client, staff, salon or admin


class Salon(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    city: Optional[str] = None
    owner_id: Optional[int] = Field(default=None, foreign_key="user.id")
    # {"monday": {"open": "09:00", "close": "17:00", "is_open": true}, ...}
    working_hours: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    auto_confirm: bool = False
    is_active: bool = True


class StaffServiceLink(SQLModel, table=True):
    staff_id: int = Field(foreign_key="staff.id", primary_key=True)
    service_id: int = Field(foreign_key="service.id", primary_key=True)


class Staff(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    salon_id: int = Field(foreign_key="salon.id", index=True)
    user_id: Optional[int] = Field(default=None, foreign_key="user.id")
    name: str
    role: str = "stylist"
    # {"monday": {"start": "09:00", "end": "17:00", "is_working": true}, ...}
    working_hours: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    is_active: bool = True
    auto_confirm: bool = False


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    salon_id: int = Field(foreign_key="salon.id", index=True)
    name: str
    duration: int  # minutes
    price: float
    discount_price: Optional[float] = None


class BreakBase(SQLModel):
    title: str
    type: str  # daily, weekly, specific_date or date_range
    start_time: str  # HH:MM
    end_time: str
    days: Optional[List[str]] = Field(default=None, sa_type=JSON)  # weekly
    date: Optional[Date] = None  # specific_date
    start_date: Optional[Date] = None  # date_range
    end_date: Optional[Date] = None
    is_active: bool = True


class SalonBreak(BreakBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    salon_id: int = Field(foreign_key="salon.id", index=True)


class StaffBreak(BreakBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    staff_id: int = Field(foreign_key="staff.id", index=True)


class VacationBase(SQLModel):
    title: str
    start_date: Date
    end_date: Date  # inclusive
    type: str = "vacation"  # vacation, sick_leave, personal or other
    notes: Optional[str] = None
    is_active: bool = True


class SalonVacation(VacationBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    salon_id: int = Field(foreign_key="salon.id", index=True)


class StaffVacation(VacationBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    staff_id: int = Field(foreign_key="staff.id", index=True)


class Appointment(SQLModel, table=True):
    # At most one active appointment per staff member and start time.
    # This index, not the availability check, is what stops double booking.
    __table_args__ = (
        Index(
            NO_DOUBLE_BOOKING_INDEX,
            "staff_id",
            "date",
            "time",
            unique=True,
            sqlite_where=text(ACTIVE_STATUS_FILTER),
            postgresql_where=text(ACTIVE_STATUS_FILTER),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    salon_id: int = Field(foreign_key="salon.id", index=True)
    staff_id: int = Field(foreign_key="staff.id", index=True)
    service_id: int = Field(foreign_key="service.id")

    client_id: Optional[int] = Field(default=None, foreign_key="user.id")
    client_name: str
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    is_guest: bool = False
    guest_address: Optional[str] = None

    date: Date = Field(index=True)
    time: Time
    end_time: Time

    status: str = "pending"
    notes: Optional[str] = None
    total_price: float = 0
    payment_status: str = "pending"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
