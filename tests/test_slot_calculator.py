"""
Tests for the availability resolver.
"""

from salonslots.domain.intervals import covered_minutes
from salonslots.domain.models import (
    AvailabilityContext,
    DayAvailability,
    TimeInterval,
    parse_clock_time,
)
from salonslots.domain.slot_calculator import AvailabilityResolver
from salonslots.domain.slot_generator import format_slots

MONDAY = 1


def iv(open_time: str, close_time: str) -> TimeInterval:
    return TimeInterval.from_strings(open_time, close_time)


def salon_open(*intervals: TimeInterval, day_of_week: int = MONDAY) -> DayAvailability:
    return DayAvailability(day_of_week=day_of_week, intervals=intervals)


def stylist_day(*intervals: TimeInterval, day_of_week: int = MONDAY) -> DayAvailability:
    return DayAvailability(day_of_week=day_of_week, intervals=intervals)


class TestAvailabilityResolver:
    """Tests for AvailabilityResolver."""

    def test_any_stylist_end_to_end(self):
        """Test A 09-13 and B 14-18 yield 14 hourly slots with a gap between 12:00 and 14:00."""
        context = AvailabilityContext(
            salon=salon_open(iv("09:00", "18:00")),
            duration_minutes=60,
            step_minutes=30,
            schedule={
                "a": [stylist_day(iv("09:00", "13:00"))],
                "b": [stylist_day(iv("14:00", "18:00"))],
            },
            candidate_ids=("a", "b"),
        )

        slots = format_slots(AvailabilityResolver().resolve_slots(context))

        assert slots == [
            "09:00", "09:30", "10:00", "10:30", "11:00", "11:30", "12:00",
            "14:00", "14:30", "15:00", "15:30", "16:00", "16:30", "17:00",
        ]

    def test_no_override_matches_salon_only(self):
        """Test that a stylist without entry gets exactly the salon slots."""
        salon = salon_open(iv("09:00", "18:00"))
        resolver = AvailabilityResolver()

        salon_only = resolver.resolve_slots(
            AvailabilityContext(salon=salon, duration_minutes=45, step_minutes=15)
        )
        fixed = resolver.resolve_slots(
            AvailabilityContext(
                salon=salon,
                duration_minutes=45,
                step_minutes=15,
                schedule={"a": [stylist_day(iv("10:00", "12:00"), day_of_week=3)]},
                candidate_ids=("a",),
            )
        )

        assert fixed == salon_only
        assert len(fixed) > 0

    def test_closed_all_day_excluded_from_any_stylist(self):
        """Test that a closed stylist contributes nothing even when the salon is open."""
        context = AvailabilityContext(
            salon=salon_open(iv("09:00", "18:00")),
            duration_minutes=60,
            step_minutes=60,
            schedule={
                "a": [DayAvailability.closed(MONDAY)],
                "b": [stylist_day(iv("14:00", "16:00"))],
            },
            candidate_ids=("a", "b"),
        )

        assert format_slots(AvailabilityResolver().resolve_slots(context)) == ["14:00", "15:00"]

    def test_fixed_closed_stylist_has_no_slots(self):
        """Test the fixed-stylist path with an explicitly closed stylist."""
        context = AvailabilityContext(
            salon=salon_open(iv("09:00", "18:00")),
            duration_minutes=30,
            step_minutes=15,
            schedule={"a": [DayAvailability.closed(MONDAY)]},
            candidate_ids=("a",),
        )

        assert AvailabilityResolver().resolve_slots(context) == ()

    def test_salon_closed_returns_empty(self):
        """Test that a closed salon yields nothing regardless of stylists."""
        context = AvailabilityContext(
            salon=DayAvailability(day_of_week=MONDAY, is_closed=True, intervals=(iv("09:00", "18:00"),)),
            duration_minutes=30,
            step_minutes=15,
            schedule={"a": [stylist_day(iv("09:00", "18:00"))]},
            candidate_ids=("a",),
        )

        assert AvailabilityResolver().resolve_slots(context) == ()

    def test_salon_only_normalizes_overlapping_hours(self):
        """Test that overlapping salon blocks are merged before slot generation."""
        context = AvailabilityContext(
            salon=salon_open(iv("09:00", "10:00"), iv("09:30", "11:00")),
            duration_minutes=60,
            step_minutes=30,
        )
        resolver = AvailabilityResolver()

        assert resolver.resolve_intervals(context) == (iv("09:00", "11:00"),)
        assert format_slots(resolver.resolve_slots(context)) == ["09:00", "09:30", "10:00"]

    def test_stylist_hours_clipped_to_salon(self):
        """Test that stylist hours outside the salon hours do not count."""
        context = AvailabilityContext(
            salon=salon_open(iv("09:00", "12:00"), iv("13:00", "17:00")),
            duration_minutes=60,
            step_minutes=60,
            schedule={"a": [stylist_day(iv("07:00", "19:00"))]},
            candidate_ids=("a",),
        )

        assert format_slots(AvailabilityResolver().resolve_slots(context)) == [
            "09:00", "10:00", "11:00", "13:00", "14:00", "15:00", "16:00",
        ]

    def test_union_covers_every_single_stylist(self):
        """Test that the any-stylist union covers at least each stylist's minutes."""
        context = AvailabilityContext(
            salon=salon_open(iv("09:00", "12:00"), iv("13:00", "19:00")),
            duration_minutes=30,
            step_minutes=15,
            schedule={
                "a": [stylist_day(iv("08:00", "10:30"), iv("15:00", "16:00"))],
                "b": [stylist_day(iv("10:00", "14:00"))],
                "c": [DayAvailability.closed(MONDAY)],
            },
            candidate_ids=("a", "b", "c", "d"),
        )
        resolver = AvailabilityResolver()

        union = covered_minutes(resolver.resolve_intervals(context))
        per_stylist = resolver.stylist_intervals(context)

        for intervals in per_stylist.values():
            assert union >= covered_minutes(intervals)

    def test_stylist_intervals_per_candidate(self):
        """Test the per-stylist breakdown."""
        context = AvailabilityContext(
            salon=salon_open(iv("09:00", "18:00")),
            duration_minutes=30,
            step_minutes=15,
            schedule={"a": [stylist_day(iv("08:00", "10:00"))], "b": [DayAvailability.closed(MONDAY)]},
            candidate_ids=("a", "b", "c"),
        )

        assert AvailabilityResolver().stylist_intervals(context) == {
            "a": (iv("09:00", "10:00"),),
            "b": (),
            "c": (iv("09:00", "18:00"),),
        }

    def test_other_days_ignored(self):
        """Test that only the salon's day of week is looked up."""
        context = AvailabilityContext(
            salon=salon_open(iv("09:00", "11:00")),
            duration_minutes=60,
            step_minutes=60,
            schedule={"a": [DayAvailability.closed(2)]},
            candidate_ids=("a",),
        )

        assert format_slots(AvailabilityResolver().resolve_slots(context)) == ["09:00", "10:00"]

    def test_is_bookable(self):
        """Test membership of a submitted start time."""
        context = AvailabilityContext(
            salon=salon_open(iv("09:00", "10:00")),
            duration_minutes=30,
            step_minutes=15,
        )
        resolver = AvailabilityResolver()

        assert resolver.is_bookable(parse_clock_time("09:30"), context)
        assert not resolver.is_bookable(parse_clock_time("09:45"), context)
        assert not resolver.is_bookable(parse_clock_time("09:10"), context)

    def test_inputs_are_not_mutated(self):
        """Test that repeated calls on shared data return identical results."""
        schedule = {
            "a": [stylist_day(iv("09:00", "12:00"))],
            "b": [stylist_day(iv("11:00", "15:00"))],
        }
        context = AvailabilityContext(
            salon=salon_open(iv("09:00", "18:00")),
            duration_minutes=30,
            step_minutes=30,
            schedule=schedule,
            candidate_ids=("a", "b"),
        )
        resolver = AvailabilityResolver()

        first = resolver.resolve_slots(context)
        second = resolver.resolve_slots(context)

        assert first == second
        assert schedule["a"][0].intervals == (iv("09:00", "12:00"),)
