"""Tests for wol_availability/services/availability/intervals.py (half-open interval algebra)."""

from datetime import timedelta

from tests.conftest import T0, h
from wol_availability.services.availability.intervals import (
    TimeRange,
    contains,
    find_overlap,
    intersection,
    intersects,
    overlap_seconds,
    shift,
)


class TestIntersects:
    def test_overlapping(self):
        assert intersects(TimeRange(0, 10), TimeRange(5, 15))
        assert intersects(TimeRange(5, 15), TimeRange(0, 10))

    def test_touching_ranges_do_not_intersect(self):
        assert not intersects(TimeRange(0, 10), TimeRange(10, 20))
        assert not intersects(TimeRange(10, 20), TimeRange(0, 10))

    def test_containment_intersects(self):
        assert intersects(TimeRange(0, 100), TimeRange(30, 40))


class TestIntersection:
    def test_partial_overlap(self):
        assert intersection(TimeRange(0, 10), TimeRange(5, 15)) == TimeRange(5, 10)

    def test_disjoint_is_empty(self):
        assert intersection(TimeRange(0, 5), TimeRange(6, 10)) is None

    def test_zero_length_is_empty(self):
        assert intersection(TimeRange(0, 5), TimeRange(5, 10)) is None

    def test_datetimes(self):
        assert intersection(TimeRange(h(0), h(10)), TimeRange(h(8), h(20))) == TimeRange(h(8), h(10))


class TestShift:
    def test_preserves_length(self):
        assert shift(TimeRange(2, 5), 0, 100) == TimeRange(102, 105)

    def test_backwards(self):
        assert shift(TimeRange(h(30), h(32)), h(24), h(0)) == TimeRange(h(6), h(8))

    def test_timedelta_offsets(self):
        r = TimeRange(timedelta(hours=1), timedelta(hours=2))
        assert shift(r, timedelta(0), timedelta(days=1)) == TimeRange(timedelta(hours=25), timedelta(hours=26))


class TestHelpers:
    def test_contains(self):
        assert contains(TimeRange(0, 10), TimeRange(0, 10))
        assert contains(TimeRange(0, 10), TimeRange(2, 3))
        assert not contains(TimeRange(0, 10), TimeRange(5, 11))

    def test_find_overlap(self):
        assert find_overlap([TimeRange(0, 5), TimeRange(5, 10), TimeRange(10, 12)]) is None
        assert find_overlap([TimeRange(10, 20), TimeRange(0, 11)]) == (TimeRange(0, 11), TimeRange(10, 20))

    def test_find_overlap_non_adjacent_input_order(self):
        assert find_overlap([TimeRange(20, 30), TimeRange(0, 5), TimeRange(25, 26)]) is not None

    def test_overlap_seconds(self):
        assert overlap_seconds(TimeRange(T0, h(2)), TimeRange(h(1), h(5))) == 3600.0
        assert overlap_seconds(TimeRange(T0, h(1)), TimeRange(h(1), h(5))) == 0.0
        assert overlap_seconds(TimeRange(0, 10), TimeRange(5, 50)) == 5.0

    def test_is_empty(self):
        assert TimeRange(3, 3).is_empty
        assert not TimeRange(3, 4).is_empty
