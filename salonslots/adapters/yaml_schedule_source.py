"""
Schedule source backed by the YAML configuration file.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import pendulum
from pendulum import Date

from ..config import AppConfig, StylistConfig
from ..domain.exceptions import UnknownServiceError, UnknownStylistError
from ..domain.models import (
    MINUTES_PER_DAY,
    Closure,
    DayAvailability,
    TimeInterval,
)

logger = logging.getLogger(__name__)


class YamlScheduleSource:
    """
    Serves salon hours, stylist schedules, closures and appointments from
    an ``AppConfig``.

    Methods are coroutines so the source is interchangeable with one that
    talks to a database or an HTTP API.
    """

    def __init__(self, config: AppConfig):
        """
        Initialize the source.

        Args:
            config: Loaded application configuration
        """
        self.config = config

    @property
    def timezone(self) -> str:
        return self.config.salon.timezone

    @property
    def default_step_minutes(self) -> int:
        return self.config.salon.slot_step_minutes

    async def get_salon_hours(self, day_of_week: int) -> DayAvailability:
        """Return the salon's opening hours for a day of the week."""
        return self.config.salon.hours_for(day_of_week)

    async def get_service_duration(self, service_id: str) -> int:
        """
        Return a service's duration in minutes.

        Raises:
            UnknownServiceError: If the service is not configured
        """
        service = self.config.find_service(service_id)
        if service is None:
            raise UnknownServiceError(f"Unknown service: '{service_id}'")
        return service.duration_minutes

    async def get_candidate_ids(self, stylist_id: Optional[str] = None) -> List[str]:
        """
        Return the stylists to consider for a booking.

        With a stylist id only that stylist is returned; it must exist and be
        active. Without one, every active stylist is a candidate.

        Raises:
            UnknownStylistError: If the requested stylist is unknown or inactive
        """
        if stylist_id is None:
            return [stylist.id for stylist in self.config.active_stylists()]

        stylist = self.config.find_stylist(stylist_id)
        if stylist is None:
            raise UnknownStylistError(f"Unknown stylist: '{stylist_id}'")
        if not stylist.is_active:
            raise UnknownStylistError(f"Stylist '{stylist.name}' is not available for bookings")

        return [stylist.id]

    async def get_stylist_schedule(self, stylist_ids: Sequence[str]) -> Dict[str, Tuple[DayAvailability, ...]]:
        """Return the weekly schedule for each requested stylist."""
        return self.config.build_schedule(stylist_ids)

    async def get_closures(self, day: Date) -> List[Closure]:
        """Return salon-wide and per-stylist closures on a date."""
        day_str = day.isoformat()

        return [
            Closure(stylist_id=closed.stylist_id, window=closed.window())
            for closed in self.config.closed_dates
            if closed.date == day_str
        ]

    async def get_appointments(
        self,
        stylist_ids: Sequence[str],
        day: Date
    ) -> Dict[str, List[TimeInterval]]:
        """
        Return the periods already booked per stylist on a date.

        Cancelled appointments are ignored; unparseable rows are skipped.
        """
        booked: Dict[str, List[TimeInterval]] = {stylist_id: [] for stylist_id in stylist_ids}

        for appointment in self.config.appointments:
            if appointment.is_cancelled or appointment.stylist_id not in booked:
                continue

            try:
                start = pendulum.from_format(appointment.start, "YYYY-MM-DD HH:mm", tz=self.timezone)
            except ValueError as exc:
                logger.warning("Skipping appointment with invalid start %r: %s", appointment.start, exc)
                continue

            if appointment.duration_minutes <= 0:
                logger.warning("Skipping appointment at %s without a positive duration", appointment.start)
                continue

            if start.date() != day:
                continue

            open_minutes = start.hour * 60 + start.minute
            # Appointments running past midnight block the rest of the day
            close_minutes = min(open_minutes + appointment.duration_minutes, MINUTES_PER_DAY - 1)
            if open_minutes >= close_minutes:
                continue

            booked[appointment.stylist_id].append(TimeInterval(open=open_minutes, close=close_minutes))

        return booked

    def list_stylists(self) -> List[StylistConfig]:
        """Return all configured stylists, active or not."""
        return list(self.config.stylists)
