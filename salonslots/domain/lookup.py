"""
Availability lookup: what a stylist's weekly schedule says about one day.
"""

from __future__ import annotations

from .exceptions import InvalidScheduleError
from .models import (
    CLOSED_ALL_DAY,
    DAY_NAMES,
    NO_OVERRIDE,
    EntitySchedule,
    Intervals,
    LookupResult,
    validate_day_of_week,
)


def lookup(schedule: EntitySchedule, entity_id: str, day_of_week: int) -> LookupResult:
    """
    Resolve one entity's availability for a day of the week.

    "No entry" and "closed" are deliberately different outcomes: the first
    inherits the salon hours, the second excludes the entity for the day.

    Args:
        schedule: Mapping of entity id to its weekly day entries
        entity_id: Stylist id to look up
        day_of_week: 0=Sunday .. 6=Saturday

    Returns:
        NO_OVERRIDE, CLOSED_ALL_DAY or Intervals(...)

    Raises:
        InvalidScheduleError: If the day is out of range or the entity has
            more than one entry for it
    """
    validate_day_of_week(day_of_week)

    entries = [day for day in schedule.get(entity_id, ()) if day.day_of_week == day_of_week]

    if not entries:
        return NO_OVERRIDE

    if len(entries) > 1:
        raise InvalidScheduleError(
            f"Duplicate schedule entry for '{entity_id}' on {DAY_NAMES[day_of_week]}"
        )

    entry = entries[0]
    if entry.is_closed or not entry.intervals:
        return CLOSED_ALL_DAY

    return Intervals(intervals=entry.intervals)


def is_available_on_day(schedule: EntitySchedule, entity_id: str, day_of_week: int) -> bool:
    """Check if an entity can work at all on a day (a missing entry counts as available)."""
    return lookup(schedule, entity_id, day_of_week) != CLOSED_ALL_DAY
