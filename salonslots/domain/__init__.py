"""
Domain layer - Pure availability logic without external dependencies.
"""

from .intervals import intersect_all, merge_all, subtract_all
from .lookup import lookup
from .models import (
    CLOSED_ALL_DAY,
    NO_OVERRIDE,
    AvailabilityContext,
    ClosedAllDay,
    DayAvailability,
    Intervals,
    NoOverride,
    TimeInterval,
    format_clock_time,
    parse_clock_time,
)
from .slot_calculator import AvailabilityResolver
from .slot_generator import generate_slots

__all__ = [
    "CLOSED_ALL_DAY",
    "NO_OVERRIDE",
    "AvailabilityContext",
    "AvailabilityResolver",
    "ClosedAllDay",
    "DayAvailability",
    "Intervals",
    "NoOverride",
    "TimeInterval",
    "format_clock_time",
    "generate_slots",
    "intersect_all",
    "lookup",
    "merge_all",
    "parse_clock_time",
    "subtract_all",
]
