"""
Interval algebra over lists of ``TimeInterval``.

Every function returns a new tuple; inputs are never modified so that
callers sharing one schedule object cannot interfere with each other.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .models import ClosedAllDay, Intervals, LookupResult, NoOverride, TimeInterval


def merge_all(lists: Iterable[Iterable[TimeInterval]]) -> Tuple[TimeInterval, ...]:
    """
    Merge any number of interval lists into their minimal union.

    Overlapping intervals and intervals that touch end-to-start are
    coalesced, so the result is sorted and pairwise separated by a gap.

    Example: [[09:00-12:00], [12:00-15:00, 16:00-17:00]]
          -> [09:00-15:00, 16:00-17:00]
    """
    flattened = sorted(interval for intervals in lists for interval in intervals)

    if not flattened:
        return ()

    merged: List[TimeInterval] = []
    current = flattened[0]

    for following in flattened[1:]:
        if current.overlaps_or_touches(following):
            # Extend the accumulator, never shrink it
            if following.close > current.close:
                current = TimeInterval(open=current.open, close=following.close)
        else:
            merged.append(current)
            current = following

    merged.append(current)
    return tuple(merged)


def intersect_all(
    salon_intervals: Sequence[TimeInterval],
    entity_result: LookupResult
) -> Tuple[TimeInterval, ...]:
    """
    Intersect the salon's intervals with one entity's lookup result.

    - NoOverride: the entity inherits the salon intervals one-for-one
    - ClosedAllDay: nothing
    - Intervals: every salon interval against every entity interval,
      normalized through ``merge_all``
    """
    if isinstance(entity_result, NoOverride):
        return tuple(salon_intervals)

    if isinstance(entity_result, ClosedAllDay):
        return ()

    if not isinstance(entity_result, Intervals):
        raise TypeError(f"Unsupported lookup result: {entity_result!r}")

    intersections: List[TimeInterval] = []

    for salon_interval in salon_intervals:
        for entity_interval in entity_result.intervals:
            intersection = salon_interval.intersect(entity_interval)
            if intersection:
                intersections.append(intersection)

    return merge_all([intersections])


def subtract_all(
    intervals: Sequence[TimeInterval],
    blocked: Sequence[TimeInterval]
) -> Tuple[TimeInterval, ...]:
    """
    Remove blocked periods (closures, existing appointments) from intervals.

    Example:
    Open: 09:00 - 17:00
    Blocked: [10:00-11:00, 14:00-15:00]
    Result: [09:00-10:00, 11:00-14:00, 15:00-17:00]
    """
    if not blocked:
        return tuple(intervals)

    sorted_blocked = merge_all([blocked])
    remaining: List[TimeInterval] = []

    for interval in intervals:
        current_start = interval.open

        for busy in sorted_blocked:
            if not interval.overlaps(busy):
                continue

            clipped_busy_start = max(busy.open, interval.open)
            clipped_busy_end = min(busy.close, interval.close)

            # Free time before this blocked period
            if current_start < clipped_busy_start:
                remaining.append(TimeInterval(open=current_start, close=clipped_busy_start))

            current_start = max(current_start, clipped_busy_end)

        if current_start < interval.close:
            remaining.append(TimeInterval(open=current_start, close=interval.close))

    return tuple(remaining)


def covered_minutes(intervals: Iterable[TimeInterval]) -> int:
    """Total minutes covered by the union of the given intervals."""
    return sum(interval.duration_minutes() for interval in merge_all([intervals]))
