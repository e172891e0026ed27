# salonbook/routers/salons_routes.py

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..core.dates import parse_date
from ..deps import get_availability_service, get_now
from ..schemas import AvailableSalonsResponse, SalonAvailabilityResponse
from ..services import AvailabilityService

router = APIRouter(
    prefix="/salons",
    tags=["salons"],
)


@router.get("/available-ids", response_model=AvailableSalonsResponse)
def available_salon_ids(
    date: str,
    time: Optional[str] = None,
    duration: Optional[int] = Query(default=None, ge=1),
    availability: AvailabilityService = Depends(get_availability_service),
    now: datetime = Depends(get_now),
):
    day = parse_date(date)
    salon_ids = availability.get_available_salon_ids(day, now, time=time, duration=duration)
    return {"date": day, "salon_ids": salon_ids}


@router.get("/{salon_id}/available", response_model=SalonAvailabilityResponse)
def salon_available(
    salon_id: int,
    date: str,
    time: Optional[str] = None,
    duration: Optional[int] = Query(default=None, ge=1),
    availability: AvailabilityService = Depends(get_availability_service),
    now: datetime = Depends(get_now),
):
    availability.get_salon(salon_id)  # 404 for unknown salons
    day = parse_date(date)
    available = availability.is_salon_available(salon_id, day, now, time=time, duration=duration)
    return {"salon_id": salon_id, "date": day, "available": available}
