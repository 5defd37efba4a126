"""Unit tests for the interval algebra."""

import pytest

from recut.intervals import (
    clip_to_duration,
    contains,
    contains_time,
    merge_overlapping,
    overlap,
    split_at,
    subtract_from_duration,
    total_duration,
)
from recut.models import TimeRange


def R(start: float, end: float) -> TimeRange:
    return TimeRange(start=start, end=end)


RANGE_SETS = [
    [],
    [R(0, 1)],
    [R(5, 15), R(10, 20)],
    [R(30, 40), R(0, 10), R(10, 20)],
    [R(1, 2), R(1, 2), R(1, 2)],
    [R(0, 100), R(20, 30), R(50, 60)],
    [R(3, 3), R(4, 2), R(7, 9)],
    [R(-5, 5), R(95, 120), R(40, 41)],
]


class TestOverlap:
    def test_overlapping(self):
        assert overlap(R(0, 10), R(5, 15))
        assert overlap(R(5, 15), R(0, 10))

    def test_touching_is_not_overlap(self):
        assert not overlap(R(0, 10), R(10, 20))

    def test_disjoint(self):
        assert not overlap(R(0, 1), R(2, 3))

    def test_contains(self):
        assert contains(R(0, 10), R(2, 10))
        assert not contains(R(0, 10), R(5, 11))

    def test_contains_time_is_half_open(self):
        assert contains_time(R(0, 10), 0)
        assert not contains_time(R(0, 10), 10)


class TestMergeOverlapping:
    def test_empty(self):
        assert merge_overlapping([]) == []

    def test_overlapping_pair(self):
        assert merge_overlapping([R(5, 15), R(10, 20)]) == [R(5, 20)]

    def test_touching_ranges_merge(self):
        assert merge_overlapping([R(10, 20), R(0, 10)]) == [R(0, 20)]

    def test_unsorted_disjoint(self):
        assert merge_overlapping([R(30, 40), R(0, 10)]) == [R(0, 10), R(30, 40)]

    def test_contained_range_absorbed(self):
        assert merge_overlapping([R(0, 100), R(20, 30)]) == [R(0, 100)]

    def test_zero_length_and_inverted_dropped(self):
        assert merge_overlapping([R(3, 3), R(4, 2), R(7, 9)]) == [R(7, 9)]

    def test_input_not_mutated(self):
        ranges = [R(10, 20), R(5, 15)]
        merge_overlapping(ranges)
        assert ranges == [R(10, 20), R(5, 15)]

    @pytest.mark.parametrize("ranges", RANGE_SETS)
    def test_idempotent(self, ranges):
        once = merge_overlapping(ranges)
        assert merge_overlapping(once) == once

    @pytest.mark.parametrize("ranges", RANGE_SETS)
    def test_result_sorted_and_disjoint(self, ranges):
        merged = merge_overlapping(ranges)
        for a, b in zip(merged, merged[1:]):
            assert a.end < b.start


class TestClipToDuration:
    def test_clips_both_ends(self):
        assert clip_to_duration([R(-5, 5), R(95, 120)], 100) == [R(0, 5), R(95, 100)]

    def test_fully_outside_dropped(self):
        assert clip_to_duration([R(120, 130), R(-10, -1)], 100) == []


class TestSubtractFromDuration:
    def test_no_cuts(self):
        assert subtract_from_duration(100, []) == [R(0, 100)]

    def test_two_cuts(self):
        kept = subtract_from_duration(100, [R(0, 10), R(40, 50)])
        assert kept == [R(10, 40), R(50, 100)]

    def test_cut_covering_everything(self):
        assert subtract_from_duration(100, [R(0, 100)]) == []

    def test_cut_beyond_duration_is_clipped(self):
        assert subtract_from_duration(100, [R(90, 500), R(-20, 5)]) == [R(5, 90)]

    def test_zero_duration(self):
        assert subtract_from_duration(0, [R(0, 1)]) == []

    def test_unmerged_overlapping_cuts(self):
        assert subtract_from_duration(30, [R(10, 20), R(5, 15)]) == [R(0, 5), R(20, 30)]

    @pytest.mark.parametrize("cuts", RANGE_SETS)
    def test_kept_and_cuts_cover_duration_exactly(self, cuts):
        duration = 100.0
        kept = subtract_from_duration(duration, cuts)
        merged_cuts = merge_overlapping(clip_to_duration(cuts, duration))

        for k in kept:
            assert not any(overlap(k, c) for c in merged_cuts)
        assert merge_overlapping(kept + merged_cuts) == [R(0, duration)]
        assert total_duration(kept) + total_duration(merged_cuts) == pytest.approx(duration)


class TestSplitAt:
    def test_points_inside(self):
        assert split_at(R(0, 40), [20, 30, 40, 50]) == [R(0, 20), R(20, 30), R(30, 40)]

    def test_no_points(self):
        assert split_at(R(0, 10), []) == [R(0, 10)]
