"""Domain errors raised by the services and mapped to HTTP responses in main.py"""

from typing import Optional


class BookingAppError(Exception):
    """Base class for errors that carry their own HTTP status"""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(BookingAppError):
    """Malformed input or a value outside the allowed range"""

    status_code = 400


class AuthenticationError(BookingAppError):
    status_code = 401


class AuthorizationError(BookingAppError):
    status_code = 403


class NotFoundError(BookingAppError):
    status_code = 404


class ConflictError(BookingAppError):
    """Slot overlap, booking conflict, missing pause or duplicate unique value"""

    status_code = 409
