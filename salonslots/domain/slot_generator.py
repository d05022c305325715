"""
Enumeration of discrete start times inside availability intervals.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from .exceptions import InvalidScheduleError
from .models import TimeInterval, format_clock_time


def _require_positive(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidScheduleError(f"{name} must be a positive number of minutes, got {value!r}")
    return value


def generate_slots(interval: TimeInterval, duration_minutes: int, step_minutes: int) -> Tuple[int, ...]:
    """
    Enumerate start times at which a whole service fits into an interval.

    Start times are ``open, open + step, ...`` as long as the service ends
    at or before ``close``; a service may end exactly at closing time.

    Example: 09:00-10:00, duration 30, step 15 -> 09:00, 09:15, 09:30
    """
    _require_positive("duration_minutes", duration_minutes)
    _require_positive("step_minutes", step_minutes)

    if interval.duration_minutes() < duration_minutes:
        return ()

    last_start = interval.close - duration_minutes
    return tuple(range(interval.open, last_start + 1, step_minutes))


def generate_slots_for_intervals(
    intervals: Iterable[TimeInterval],
    duration_minutes: int,
    step_minutes: int
) -> Tuple[int, ...]:
    """Generate slots for every interval; sorted ascending and duplicate-free."""
    starts: set[int] = set()

    for interval in intervals:
        starts.update(generate_slots(interval, duration_minutes, step_minutes))

    return tuple(sorted(starts))


def format_slots(slots: Iterable[int]) -> List[str]:
    """Render start times as ``"HH:mm"`` strings."""
    return [format_clock_time(slot) for slot in slots]
