"""
Application service for listing and validating bookable salon slots.

The service pulls the day's schedule data through a schedule source and
delegates the interval algebra to the domain-level ``AvailabilityResolver``.
On top of the pure weekly-schedule result it applies the day-specific
constraints: closed dates, existing appointments and times already past.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

import pendulum
from pendulum import Date, DateTime

from ..domain.exceptions import BookingRejectedError
from ..domain.intervals import merge_all, subtract_all
from ..domain.models import (
    MINUTES_PER_DAY,
    AvailabilityContext,
    BookableSlot,
    Closure,
    DayAvailability,
    TimeInterval,
    day_of_week_for,
    format_intervals,
    parse_clock_time,
)
from ..domain.slot_calculator import AvailabilityResolver
from ..domain.slot_generator import generate_slots_for_intervals

logger = logging.getLogger(__name__)


class ScheduleSourceProtocol(Protocol):
    """Protocol describing the schedule data the service needs."""

    async def get_salon_hours(self, day_of_week: int) -> DayAvailability:
        """Return the salon's hours for a day of the week."""

    async def get_service_duration(self, service_id: str) -> int:
        """Return the duration of a service in minutes."""

    async def get_candidate_ids(self, stylist_id: Optional[str] = None) -> List[str]:
        """Return the requested stylist, or all active stylists."""

    async def get_stylist_schedule(self, stylist_ids: Sequence[str]) -> Mapping[str, Sequence[DayAvailability]]:
        """Return the weekly schedule per stylist."""

    async def get_closures(self, day: Date) -> List[Closure]:
        """Return closures on a date."""

    async def get_appointments(self, stylist_ids: Sequence[str], day: Date) -> Mapping[str, List[TimeInterval]]:
        """Return booked periods per stylist on a date."""


class BookingAvailabilityService:
    """
    Orchestrates schedule retrieval and slot resolution for one salon.

    Dependency inversion toward a protocol makes it easy to plug in the YAML
    source or a stub in tests.
    """

    def __init__(
        self,
        schedule_source: ScheduleSourceProtocol,
        resolver: AvailabilityResolver | None = None,
        *,
        default_step_minutes: int = 15,
        timezone: str = "Europe/Zurich",
    ) -> None:
        self._schedule_source = schedule_source
        self._resolver = resolver or AvailabilityResolver()
        self._default_step_minutes = default_step_minutes
        self._timezone = timezone

    async def find_slots(
        self,
        *,
        day: Date,
        service_id: str,
        stylist_id: Optional[str] = None,
        now: DateTime | None = None,
        step_minutes: Optional[int] = None,
    ) -> List[BookableSlot]:
        """
        List the bookable start times for a service on a date.

        Args:
            day: Date of the booking
            service_id: Service to book
            stylist_id: Fixed stylist, or None for "no preference"
            now: Current time; slots that already started are dropped
            step_minutes: Slot granularity, defaults to the salon setting

        Returns:
            Slots in ascending order with the stylists able to take them
        """
        _, slots = await self._resolve_day(
            day=day,
            service_id=service_id,
            stylist_id=stylist_id,
            now=now,
            step_minutes=step_minutes,
        )
        return slots

    async def validate_booking(
        self,
        *,
        day: Date,
        start: str,
        service_id: str,
        stylist_id: Optional[str] = None,
        now: DateTime | None = None,
        step_minutes: Optional[int] = None,
    ) -> BookableSlot:
        """
        Check that a submitted start time is one of the bookable slots.

        Raises:
            InvalidTimeError: If ``start`` is not a valid HH:mm time
            BookingRejectedError: If the time is not bookable
        """
        start_minutes = parse_clock_time(start)

        intervals, slots = await self._resolve_day(
            day=day,
            service_id=service_id,
            stylist_id=stylist_id,
            now=now,
            step_minutes=step_minutes,
        )

        for slot in slots:
            if slot.start == start_minutes:
                return slot

        valid = format_intervals(intervals)
        logger.info("Rejected booking at %s on %s (valid: %s)", start, day.isoformat(), valid or "none")

        if not valid:
            raise BookingRejectedError(f"No availability on {day.isoformat()}")
        raise BookingRejectedError(
            f"{start} is not an available start time on {day.isoformat()}. Valid hours: {valid}",
            valid_intervals=valid,
        )

    async def _resolve_day(
        self,
        *,
        day: Date,
        service_id: str,
        stylist_id: Optional[str],
        now: DateTime | None,
        step_minutes: Optional[int],
    ) -> Tuple[Tuple[TimeInterval, ...], List[BookableSlot]]:
        day_of_week = day_of_week_for(day)
        duration = await self._schedule_source.get_service_duration(service_id)
        candidates = await self._schedule_source.get_candidate_ids(stylist_id)

        if not candidates:
            logger.info("No active stylists, nothing to book on %s", day.isoformat())
            return (), []

        salon = await self._schedule_source.get_salon_hours(day_of_week)
        schedule = await self._schedule_source.get_stylist_schedule(candidates)
        closures = await self._schedule_source.get_closures(day)
        appointments = await self._schedule_source.get_appointments(candidates, day)

        context = AvailabilityContext(
            salon=salon,
            duration_minutes=duration,
            step_minutes=self._default_step_minutes if step_minutes is None else step_minutes,
            schedule=schedule,
            candidate_ids=tuple(candidates),
        )

        return self.calculate_slots(
            context=context,
            day=day,
            closures=closures,
            appointments=appointments,
            now=now,
        )

    def calculate_slots(
        self,
        *,
        context: AvailabilityContext,
        day: Date,
        closures: Sequence[Closure] = (),
        appointments: Mapping[str, Sequence[TimeInterval]] | None = None,
        now: DateTime | None = None,
    ) -> Tuple[Tuple[TimeInterval, ...], List[BookableSlot]]:
        """
        Calculate the remaining intervals and bookable slots for one day.

        Closures and appointments are subtracted from each stylist's own
        intervals before the per-stylist results are combined. Without
        candidates the salon hours are used and no stylist is attributed.

        The returned intervals start after ``now``; slot starts keep the
        grid anchored at the opening time.
        """
        appointments = appointments or {}

        if any(closure.stylist_id is None and closure.is_full_day for closure in closures):
            logger.debug("Salon closed all day on %s", day.isoformat())
            return (), []

        salon_windows = [c.window for c in closures if c.stylist_id is None and c.window is not None]

        if not context.candidate_ids:
            # Salon-only mode: no stylist to attribute slots to
            remaining: Dict[str, Tuple[TimeInterval, ...]] = {}
            intervals = subtract_all(self._resolver.resolve_intervals(context), salon_windows)
        else:
            remaining = self._remaining_intervals(context, closures, salon_windows, appointments)
            if len(context.candidate_ids) == 1:
                intervals = remaining[context.candidate_ids[0]]
            else:
                intervals = merge_all(remaining.values())

        starts = generate_slots_for_intervals(intervals, context.duration_minutes, context.step_minutes)
        cutoff = self._cutoff_minutes(day, now)

        slots: List[BookableSlot] = []
        for start in starts:
            if cutoff is not None and start <= cutoff:
                continue

            stylist_ids = tuple(
                stylist_id
                for stylist_id in context.candidate_ids
                if any(interval.fits(start, context.duration_minutes) for interval in remaining[stylist_id])
            )
            slots.append(
                BookableSlot(start=start, duration_minutes=context.duration_minutes, stylist_ids=stylist_ids)
            )

        return self._clip_to_cutoff(intervals, cutoff), slots

    @staticmethod
    def _clip_to_cutoff(
        intervals: Tuple[TimeInterval, ...],
        cutoff: int | None
    ) -> Tuple[TimeInterval, ...]:
        """Drop the part of each interval at or before the cutoff minute."""
        if cutoff is None:
            return tuple(intervals)

        earliest = cutoff + 1
        return tuple(
            TimeInterval(open=max(interval.open, earliest), close=interval.close)
            for interval in intervals
            if interval.close > earliest
        )

    def _remaining_intervals(
        self,
        context: AvailabilityContext,
        closures: Sequence[Closure],
        salon_windows: List[TimeInterval],
        appointments: Mapping[str, Sequence[TimeInterval]],
    ) -> Dict[str, Tuple[TimeInterval, ...]]:
        """Per-stylist intervals left after closures and appointments."""
        remaining: Dict[str, Tuple[TimeInterval, ...]] = {}

        for stylist_id, intervals in self._resolver.stylist_intervals(context).items():
            own_closures = [c for c in closures if c.stylist_id == stylist_id]

            if any(closure.is_full_day for closure in own_closures):
                logger.debug("Stylist %s closed all day", stylist_id)
                remaining[stylist_id] = ()
                continue

            blocked = list(salon_windows)
            blocked.extend(c.window for c in own_closures if c.window is not None)
            blocked.extend(appointments.get(stylist_id, ()))

            remaining[stylist_id] = subtract_all(intervals, blocked)

        return remaining

    def _cutoff_minutes(self, day: Date, now: DateTime | None) -> int | None:
        """Latest minute of ``day`` that has already passed, or None if none has."""
        if now is None:
            return None

        local_now = pendulum.instance(now).in_timezone(self._timezone)
        if local_now.date() < day:
            return None
        if local_now.date() > day:
            return MINUTES_PER_DAY

        return local_now.hour * 60 + local_now.minute
