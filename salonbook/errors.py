# salonbook/errors.py

from typing import Optional


class BookingError(Exception):
    """Base class for per-request scheduling failures."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    # malformed input, service not offered by staff, illegal transition
    status_code = 422


class ClosedError(BookingError):
    """The requested slot is not bookable. Pick another one."""

    status_code = 422

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.reason = reason


class ConflictError(BookingError):
    """Someone else took the slot between the availability check and the insert."""

    status_code = 409


class NotFoundError(BookingError):
    status_code = 404
