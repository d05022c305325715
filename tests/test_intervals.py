"""
Tests for the interval algebra.
"""

import pytest

from salonslots.domain.intervals import covered_minutes, intersect_all, merge_all, subtract_all
from salonslots.domain.models import CLOSED_ALL_DAY, NO_OVERRIDE, Intervals, TimeInterval


def iv(open_time: str, close_time: str) -> TimeInterval:
    return TimeInterval.from_strings(open_time, close_time)


class TestMergeAll:
    """Tests for the union-merge engine."""

    def test_touching_intervals_merge(self):
        """Test that back-to-back blocks coalesce into one."""
        assert merge_all([[iv("09:00", "12:00"), iv("12:00", "15:00")]]) == (iv("09:00", "15:00"),)

    def test_overlapping_across_lists(self):
        """Test union across several lists."""
        merged = merge_all([
            [iv("09:00", "11:00"), iv("16:00", "17:00")],
            [iv("10:30", "12:00")],
            [iv("14:00", "15:00")],
        ])

        assert merged == (iv("09:00", "12:00"), iv("14:00", "15:00"), iv("16:00", "17:00"))

    def test_contained_interval_never_shrinks_accumulator(self):
        """Test that a nested interval keeps the wider close."""
        assert merge_all([[iv("09:00", "18:00"), iv("10:00", "11:00")]]) == (iv("09:00", "18:00"),)

    def test_unsorted_input(self):
        """Test that input order does not matter."""
        merged = merge_all([[iv("14:00", "16:00"), iv("09:00", "10:00"), iv("15:00", "17:00")]])

        assert merged == (iv("09:00", "10:00"), iv("14:00", "17:00"))

    def test_empty_input(self):
        """Test that empty input yields empty output."""
        assert merge_all([]) == ()
        assert merge_all([[], []]) == ()

    def test_merge_is_idempotent(self):
        """Test merge_all(merge_all(X)) == merge_all(X)."""
        intervals = [
            iv("13:00", "14:00"),
            iv("09:00", "10:00"),
            iv("09:30", "11:00"),
            iv("11:00", "11:30"),
            iv("16:00", "18:00"),
            iv("17:00", "17:30"),
        ]
        once = merge_all([intervals])

        assert merge_all([once]) == once

    def test_input_is_not_modified(self):
        """Test that caller lists are left untouched."""
        intervals = [iv("14:00", "15:00"), iv("09:00", "10:00")]
        snapshot = list(intervals)

        merge_all([intervals])

        assert intervals == snapshot


class TestIntersectAll:
    """Tests for the intersection engine."""

    SALON = (iv("09:00", "12:00"), iv("13:00", "18:00"))

    def test_no_override_inherits_salon_hours(self):
        """Test that an entity without entry gets the salon intervals."""
        assert intersect_all(self.SALON, NO_OVERRIDE) == self.SALON

    def test_closed_all_day_contributes_nothing(self):
        """Test that an explicitly closed entity has no intervals."""
        assert intersect_all(self.SALON, CLOSED_ALL_DAY) == ()

    def test_full_cross_product(self):
        """Test that each salon interval is intersected with every entity interval."""
        entity = Intervals(intervals=(iv("08:00", "10:00"), iv("11:00", "14:00"), iv("17:00", "20:00")))

        assert intersect_all(self.SALON, entity) == (
            iv("09:00", "10:00"),
            iv("11:00", "12:00"),
            iv("13:00", "14:00"),
            iv("17:00", "18:00"),
        )

    def test_touching_pieces_are_merged(self):
        """Test that intersection output is normalized."""
        salon = (iv("09:00", "12:00"), iv("12:00", "18:00"))
        entity = Intervals(intervals=(iv("10:00", "14:00"),))

        assert intersect_all(salon, entity) == (iv("10:00", "14:00"),)

    def test_touching_only_yields_nothing(self):
        """Test that touching salon and entity intervals do not intersect."""
        entity = Intervals(intervals=(iv("12:00", "13:00"),))

        assert intersect_all(self.SALON, entity) == ()

    def test_unsupported_result_type(self):
        """Test that unknown lookup results are rejected."""
        with pytest.raises(TypeError):
            intersect_all(self.SALON, None)


class TestSubtractAll:
    """Tests for removing blocked periods."""

    def test_subtract_inside(self):
        """Test carving busy periods out of an interval."""
        remaining = subtract_all(
            [iv("09:00", "17:00")],
            [iv("14:00", "15:00"), iv("10:00", "11:00")],
        )

        assert remaining == (iv("09:00", "10:00"), iv("11:00", "14:00"), iv("15:00", "17:00"))

    def test_subtract_overhanging(self):
        """Test that blocked periods are clipped to the interval."""
        remaining = subtract_all(
            [iv("09:00", "12:00"), iv("13:00", "18:00")],
            [iv("11:00", "14:00")],
        )

        assert remaining == (iv("09:00", "11:00"), iv("14:00", "18:00"))

    def test_subtract_everything(self):
        """Test that a covering block removes the interval."""
        assert subtract_all([iv("09:00", "12:00")], [iv("00:00", "23:59")]) == ()

    def test_touching_block_keeps_interval(self):
        """Test that a block ending at the open leaves the interval whole."""
        assert subtract_all([iv("09:00", "12:00")], [iv("08:00", "09:00")]) == (iv("09:00", "12:00"),)

    def test_nothing_blocked(self):
        """Test that no blocks returns the intervals unchanged."""
        assert subtract_all([iv("09:00", "12:00")], []) == (iv("09:00", "12:00"),)


def test_covered_minutes_counts_union_once():
    """Overlapping intervals must not be counted twice."""
    assert covered_minutes([iv("09:00", "11:00"), iv("10:00", "12:00")]) == 180
