"""
Service layer helpers that orchestrate schedule sources and domain logic.
"""

from .availability_service import BookingAvailabilityService, ScheduleSourceProtocol

__all__ = ["BookingAvailabilityService", "ScheduleSourceProtocol"]
