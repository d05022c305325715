"""
Domain models for wall-clock times, intervals and weekly schedules.

All times are minutes since local midnight. Nothing here knows about
timezones or calendar dates; callers hand in already-localized wall-clock
values.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Mapping, Sequence, Tuple, Union

from .exceptions import InvalidIntervalError, InvalidScheduleError, InvalidTimeError

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

# Days are numbered Sunday-first: 0=Sunday, 6=Saturday
SUNDAY = 0
SATURDAY = 6

DAY_NAMES = {
    0: "Sunday",
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
}

# "HH:mm", optionally with a ":00" seconds suffix as stored in SQL TIME columns
_CLOCK_PATTERN = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?$")


def validate_clock_time(minutes: int) -> int:
    """Ensure a minute count lies within one day."""
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise InvalidTimeError(f"Clock time must be an integer minute count, got {minutes!r}")
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise InvalidTimeError(f"Clock time must be between 0 and {MINUTES_PER_DAY - 1}, got {minutes}")
    return minutes


def parse_clock_time(value: str) -> int:
    """
    Parse an ``"HH:mm"`` string into minutes since midnight.

    A trailing ``":00"`` seconds component is accepted; any other seconds
    value is rejected rather than truncated.

    Raises:
        InvalidTimeError: If the string is malformed or out of range
    """
    if not isinstance(value, str):
        raise InvalidTimeError(f"Expected an 'HH:mm' string, got {value!r}")

    match = _CLOCK_PATTERN.match(value.strip())
    if not match:
        raise InvalidTimeError(f"Invalid time '{value}', expected format HH:mm")

    hours, minutes, seconds = match.groups()
    if seconds is not None and seconds != "00":
        raise InvalidTimeError(f"Invalid time '{value}', seconds are not supported")
    if int(hours) > 23:
        raise InvalidTimeError(f"Hour must be between 00 and 23, got '{value}'")
    if int(minutes) > 59:
        raise InvalidTimeError(f"Minute must be between 00 and 59, got '{value}'")

    return int(hours) * 60 + int(minutes)


def format_clock_time(minutes: int) -> str:
    """Render minutes since midnight as zero-padded ``"HH:mm"``."""
    validate_clock_time(minutes)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def day_of_week_for(day: date) -> int:
    """Return the Sunday-first day-of-week (0=Sunday, 6=Saturday) for a date."""
    return day.isoweekday() % 7


def validate_day_of_week(day_of_week: int) -> int:
    """Ensure a day-of-week lies in 0..6."""
    if isinstance(day_of_week, bool) or not isinstance(day_of_week, int) or not SUNDAY <= day_of_week <= SATURDAY:
        raise InvalidScheduleError(f"day_of_week must be between 0 and 6, got {day_of_week!r}")
    return day_of_week


@dataclass(frozen=True, order=True)
class TimeInterval:
    """
    Represents an immutable half-open clock interval ``[open, close)``.

    Invariant: open must be before close. Intervals sort by ``open`` and
    then by ``close``.
    """
    open: int
    close: int

    def __post_init__(self):
        validate_clock_time(self.open)
        validate_clock_time(self.close)
        if self.open >= self.close:
            raise InvalidIntervalError(
                f"Interval must open before it closes, got "
                f"{format_clock_time(self.open)}-{format_clock_time(self.close)}"
            )

    @classmethod
    def from_strings(cls, open_time: str, close_time: str) -> "TimeInterval":
        """Build an interval from two ``"HH:mm"`` strings."""
        return cls(open=parse_clock_time(open_time), close=parse_clock_time(close_time))

    def duration_minutes(self) -> int:
        """Return the length in minutes."""
        return self.close - self.open

    def overlaps(self, other: "TimeInterval") -> bool:
        """Check if this interval shares at least one minute with another."""
        return self.open < other.close and other.open < self.close

    def overlaps_or_touches(self, other: "TimeInterval") -> bool:
        """Check if two intervals overlap or meet end-to-start (mergeable)."""
        return self.open <= other.close and other.open <= self.close

    def intersect(self, other: "TimeInterval") -> "TimeInterval | None":
        """
        Calculate the intersection of two intervals.
        Returns None if they do not overlap; touching intervals do not intersect.
        """
        start = max(self.open, other.open)
        end = min(self.close, other.close)

        if start >= end:
            return None

        return TimeInterval(open=start, close=end)

    def fits(self, start: int, duration_minutes: int) -> bool:
        """Check if a service starting at ``start`` lies entirely inside."""
        return self.open <= start and start + duration_minutes <= self.close

    def __str__(self) -> str:
        return f"{format_clock_time(self.open)}-{format_clock_time(self.close)}"


def build_intervals(rows: Iterable[Tuple[str, str]]) -> Tuple[TimeInterval, ...]:
    """
    Convert raw ``(open, close)`` string pairs into intervals.

    Malformed times raise ``InvalidTimeError``. Inverted and zero-length rows
    are dropped so they never reach the interval algebra.
    """
    intervals = []

    for open_time, close_time in rows:
        open_minutes = parse_clock_time(open_time)
        close_minutes = parse_clock_time(close_time)

        if open_minutes >= close_minutes:
            logger.warning("Discarding empty or inverted interval %s-%s", open_time, close_time)
            continue

        intervals.append(TimeInterval(open=open_minutes, close=close_minutes))

    return tuple(intervals)


def format_intervals(intervals: Iterable[TimeInterval]) -> str:
    """Format intervals for messages, e.g. ``"09:00-12:00, 14:00-18:00"``."""
    return ", ".join(str(interval) for interval in intervals)


@dataclass(frozen=True)
class DayAvailability:
    """
    Opening hours (salon) or working hours (stylist) for one day of the week.

    When ``is_closed`` is set the day has no intervals, whatever was passed.
    """
    day_of_week: int
    is_closed: bool = False
    intervals: Tuple[TimeInterval, ...] = ()

    def __post_init__(self):
        validate_day_of_week(self.day_of_week)
        object.__setattr__(self, "intervals", tuple(self.intervals))

    @property
    def open_intervals(self) -> Tuple[TimeInterval, ...]:
        """Intervals that actually count, empty when the day is closed."""
        if self.is_closed:
            return ()
        return self.intervals

    @classmethod
    def closed(cls, day_of_week: int) -> "DayAvailability":
        return cls(day_of_week=day_of_week, is_closed=True)


# Stylist id -> at most one DayAvailability per day_of_week
EntitySchedule = Mapping[str, Sequence[DayAvailability]]


def validate_schedule(schedule: EntitySchedule) -> EntitySchedule:
    """Ensure every entity has at most one entry per day of the week."""
    for entity_id, days in schedule.items():
        seen: set[int] = set()
        for day in days:
            if day.day_of_week in seen:
                raise InvalidScheduleError(
                    f"Duplicate schedule entry for '{entity_id}' on {DAY_NAMES[day.day_of_week]}"
                )
            seen.add(day.day_of_week)
    return schedule


@dataclass(frozen=True)
class NoOverride:
    """The entity has no entry for the day and inherits the salon hours."""


@dataclass(frozen=True)
class ClosedAllDay:
    """The entity is explicitly unavailable for the whole day."""


@dataclass(frozen=True)
class Intervals:
    """The entity works the given intervals on that day."""
    intervals: Tuple[TimeInterval, ...]

    def __post_init__(self):
        object.__setattr__(self, "intervals", tuple(self.intervals))


NO_OVERRIDE = NoOverride()
CLOSED_ALL_DAY = ClosedAllDay()

LookupResult = Union[NoOverride, ClosedAllDay, Intervals]


@dataclass(frozen=True)
class AvailabilityContext:
    """
    Everything needed to resolve the bookable start times of one day.

    ``candidate_ids`` selects the booking mode: empty for salon hours only,
    one id for a fixed stylist, several ids for "any of these stylists".
    """
    salon: DayAvailability
    duration_minutes: int
    step_minutes: int
    schedule: EntitySchedule = field(default_factory=dict)
    candidate_ids: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "candidate_ids", tuple(self.candidate_ids))
        validate_schedule(self.schedule)
        if self.duration_minutes <= 0:
            raise InvalidScheduleError(f"duration_minutes must be greater than zero, got {self.duration_minutes}")
        if self.step_minutes <= 0:
            raise InvalidScheduleError(f"step_minutes must be greater than zero, got {self.step_minutes}")


@dataclass(frozen=True)
class Closure:
    """
    A salon-wide (``stylist_id`` is None) or per-stylist closure on one date.

    ``window`` is None when the closure lasts the whole day.
    """
    stylist_id: str | None = None
    window: TimeInterval | None = None

    @property
    def is_full_day(self) -> bool:
        return self.window is None


@dataclass(frozen=True)
class BookableSlot:
    """
    Represents a bookable start time and the stylists who can take it.
    """
    start: int
    duration_minutes: int
    stylist_ids: Tuple[str, ...] = ()

    @property
    def time(self) -> str:
        return format_clock_time(self.start)

    @property
    def end(self) -> int:
        return self.start + self.duration_minutes

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: HH:MM – HH:MM (N min)
        """
        return f"{self.time} – {format_clock_time(self.end)} ({self.duration_minutes} min)"
