# salonbook/services/__init__.py

from .availability import AvailabilityService
from .booking import BookingService
from .sweep import complete_expired_appointments

__all__ = ["AvailabilityService", "BookingService", "complete_expired_appointments"]
