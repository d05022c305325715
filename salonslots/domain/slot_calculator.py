"""
Core business logic for resolving bookable start times.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

from __future__ import annotations

import logging
from typing import Dict, Tuple

from .intervals import intersect_all, merge_all
from .lookup import lookup
from .models import AvailabilityContext, TimeInterval, format_intervals, validate_clock_time
from .slot_generator import generate_slots_for_intervals

logger = logging.getLogger(__name__)


class AvailabilityResolver:
    """
    Resolves the start times a customer can book on one day.

    Algorithm:
    1. Stop if the salon is closed that day
    2. For each candidate stylist, intersect the salon hours with the
       stylist's own hours for the day (or inherit the salon hours when the
       stylist has no entry)
    3. With several candidates, union the per-stylist results
    4. Enumerate start times at which the whole service fits

    Without candidates the salon hours are used directly.
    """

    def resolve_intervals(self, context: AvailabilityContext) -> Tuple[TimeInterval, ...]:
        """
        Compute the normalized intervals in which services may take place.

        Args:
            context: Salon hours, stylist schedule and booking parameters

        Returns:
            Sorted, non-touching intervals; empty when nothing is available
        """
        salon = context.salon

        if salon.is_closed:
            logger.debug("Salon closed on day %s", salon.day_of_week)
            return ()

        salon_intervals = merge_all([salon.open_intervals])

        if not context.candidate_ids:
            return salon_intervals

        per_stylist = self.stylist_intervals(context, salon_intervals)

        if len(context.candidate_ids) == 1:
            return per_stylist[context.candidate_ids[0]]

        # Union of already-intersected results, never of raw salon hours
        return merge_all(per_stylist.values())

    def stylist_intervals(
        self,
        context: AvailabilityContext,
        salon_intervals: Tuple[TimeInterval, ...] | None = None
    ) -> Dict[str, Tuple[TimeInterval, ...]]:
        """
        Compute each candidate stylist's effective intervals (salon ∩ stylist).
        """
        if context.salon.is_closed:
            return {stylist_id: () for stylist_id in context.candidate_ids}

        if salon_intervals is None:
            salon_intervals = merge_all([context.salon.open_intervals])

        day_of_week = context.salon.day_of_week
        result: Dict[str, Tuple[TimeInterval, ...]] = {}

        for stylist_id in context.candidate_ids:
            entry = lookup(context.schedule, stylist_id, day_of_week)
            result[stylist_id] = intersect_all(salon_intervals, entry)
            logger.debug(
                "Stylist %s on day %s: %s -> [%s]",
                stylist_id,
                day_of_week,
                type(entry).__name__,
                format_intervals(result[stylist_id]),
            )

        return result

    def resolve_slots(self, context: AvailabilityContext) -> Tuple[int, ...]:
        """
        Resolve all bookable start times (minutes since midnight).

        Returns:
            Ascending, duplicate-free start times; empty if none fit
        """
        intervals = self.resolve_intervals(context)

        slots = generate_slots_for_intervals(
            intervals,
            context.duration_minutes,
            context.step_minutes,
        )

        logger.debug(
            "Resolved %d slot(s) in [%s] for %d-minute service",
            len(slots),
            format_intervals(intervals),
            context.duration_minutes,
        )
        return slots

    def is_bookable(self, start: int, context: AvailabilityContext) -> bool:
        """Check a submitted start time against the resolved slots."""
        validate_clock_time(start)
        return start in self.resolve_slots(context)
