"""Tests for the half-open overlap predicate."""

from datetime import datetime

from booking_core.scheduling.intervals import BookingInterval
from booking_core.scheduling.overlap import find_conflicts, first_conflict, overlaps


class TestOverlaps:
    def test_touching_end_to_start_does_not_overlap(self):
        # slot 09:30-10:00 vs booking 10:00-10:30
        assert not overlaps(570, 600, 600, 630)

    def test_touching_start_to_end_does_not_overlap(self):
        assert not overlaps(630, 660, 600, 630)

    def test_identical_intervals_overlap(self):
        assert overlaps(600, 630, 600, 630)

    def test_nested_interval_overlaps(self):
        assert overlaps(600, 720, 630, 660)
        assert overlaps(630, 660, 600, 720)

    def test_partial_overlap(self):
        # slot 11:15-11:30 vs booking 11:00-11:30
        assert overlaps(675, 690, 660, 690)
        assert overlaps(600, 650, 640, 700)

    def test_disjoint_intervals(self):
        assert not overlaps(540, 570, 600, 630)

    def test_works_with_datetimes(self):
        a_start = datetime(2025, 1, 15, 10, 0)
        a_end = datetime(2025, 1, 15, 10, 30)
        b_start = datetime(2025, 1, 15, 10, 30)
        b_end = datetime(2025, 1, 15, 11, 0)
        assert not overlaps(a_start, a_end, b_start, b_end)
        assert overlaps(a_start, b_end, b_start, b_end)


class TestConflictLookup:
    def setup_method(self):
        self.busy = [BookingInterval(600, 630), BookingInterval(660, 720)]

    def test_first_conflict_returns_overlapping_interval(self):
        assert first_conflict(620, 680, self.busy) == BookingInterval(600, 630)

    def test_first_conflict_none_when_free(self):
        assert first_conflict(630, 660, self.busy) is None

    def test_find_conflicts_returns_all(self):
        assert find_conflicts(600, 700, self.busy) == self.busy

    def test_find_conflicts_empty_list(self):
        assert find_conflicts(600, 700, []) == []
