"""
Domain-specific exception hierarchy for the salon availability engine.
"""


class SalonSlotsError(Exception):
    """Base class for all application-level errors."""


class InvalidTimeError(SalonSlotsError, ValueError):
    """Raised when a wall-clock time is malformed or out of range."""


class InvalidIntervalError(SalonSlotsError, ValueError):
    """Raised when an interval does not open strictly before it closes."""


class InvalidScheduleError(SalonSlotsError, ValueError):
    """Raised when schedule data or query parameters are inconsistent."""


class ScheduleSourceError(SalonSlotsError):
    """Raised when schedule data cannot be loaded or interpreted."""


class UnknownStylistError(SalonSlotsError):
    """Raised when a stylist id does not resolve to an active stylist."""


class UnknownServiceError(SalonSlotsError):
    """Raised when a service id is not configured."""


class BookingRejectedError(SalonSlotsError):
    """Raised when a requested start time is not bookable."""

    def __init__(self, message: str, valid_intervals: str = "") -> None:
        super().__init__(message)
        self.valid_intervals = valid_intervals
