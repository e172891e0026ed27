# salonbook/routers/staff_routes.py

from fastapi import APIRouter, Depends

from ..deps import get_availability_service
from ..schemas import StaffAvailabilityResponse
from ..services import AvailabilityService

router = APIRouter(
    prefix="/staff",
    tags=["staff"],
)


@router.get("/{staff_id}/availability", response_model=StaffAvailabilityResponse)
def staff_availability(
    staff_id: int,
    start_date: str,
    end_date: str,
    availability: AvailabilityService = Depends(get_availability_service),
):
    calendar = availability.get_staff_availability(staff_id, start_date, end_date)
    return {
        "staff_id": staff_id,
        "days": {day: status.as_dict() for day, status in calendar.items()},
    }
