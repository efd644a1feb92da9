"""Tests for the split planner."""

from decimal import Decimal

import pytest

from mkvutils.errors import InvalidInputError
from mkvutils.models import Segment
from mkvutils.planners.split import plan_split


def _windows(segments):
    return [(s.start, s.end) for s in segments]


class TestPlanSplitNoOverlap:
    def test_three_segments_over_ten_seconds(self):
        segments = plan_split(["00:00:03.000", "00:00:07.000"])
        assert _windows(segments) == [
            (Decimal(0), Decimal(3)),
            (Decimal(3), Decimal(7)),
            (Decimal(7), None),
        ]

    def test_contiguous(self):
        segments = plan_split(["00:00:01.250", "00:00:02.500", "00:01:00.001", "00:10:00.999"])
        for prev, seg in zip(segments, segments[1:]):
            assert seg.start == prev.start + prev.duration

    def test_single_timestamp(self):
        assert plan_split(["00:00:05.000"]) == [
            Segment(index=1, start=Decimal(0), duration=Decimal(5)),
            Segment(index=2, start=Decimal(5), duration=None),
        ]

    def test_last_segment_is_open_ended(self):
        segments = plan_split(["00:00:05.000", "00:00:06.000"])
        assert segments[-1].duration is None
        assert segments[-1].end is None


class TestPlanSplitOverlap:
    def test_two_hundred_ms(self):
        segments = plan_split(["00:00:03.000", "00:00:07.000"], overlap_ms=200)
        assert _windows(segments) == [
            (Decimal(0), Decimal(3)),
            (Decimal("2.8"), Decimal(7)),
            (Decimal("6.8"), None),
        ]

    def test_each_start_is_previous_boundary_minus_overlap(self):
        stamps = ["00:03:45.123", "00:08:30.456", "00:12:00.001"]
        bounds = [Decimal("225.123"), Decimal("510.456"), Decimal("720.001")]
        segments = plan_split(stamps, overlap_ms=333)
        for seg, boundary in zip(segments[1:], bounds):
            assert seg.start == boundary - Decimal("0.333")

    def test_segments_end_exactly_on_boundaries(self):
        segments = plan_split(["00:03:45.123", "00:08:30.456"], overlap_ms=200)
        assert segments[0].end == Decimal("225.123")
        assert segments[1].end == Decimal("510.456")

    def test_overlap_equal_to_first_boundary_is_allowed(self):
        segments = plan_split(["00:00:01.000", "00:00:05.000"], overlap_ms=1000)
        assert segments[1].start == Decimal(0)


class TestPlanSplitNumbering:
    def test_indices_and_names(self):
        segments = plan_split(["00:00:01.000", "00:00:02.000"])
        assert [s.index for s in segments] == [1, 2, 3]
        assert [s.track_name for s in segments] == ["track_01", "track_02", "track_03"]

    def test_numeric_seconds_accepted(self):
        segments = plan_split([Decimal("3"), 7.0])
        assert segments[1] == Segment(index=2, start=Decimal(3), duration=Decimal(4))


class TestPlanSplitValidation:
    def test_no_timestamps(self):
        with pytest.raises(InvalidInputError, match="At least one timestamp"):
            plan_split([])

    def test_malformed_timestamp(self):
        with pytest.raises(InvalidInputError, match="Invalid timestamp"):
            plan_split(["3 minutes"])

    def test_out_of_order(self):
        with pytest.raises(InvalidInputError, match="strictly increasing"):
            plan_split(["00:00:07.000", "00:00:03.000"])

    def test_duplicate(self):
        with pytest.raises(InvalidInputError, match="strictly increasing"):
            plan_split(["00:00:03.000", "00:00:03.000"])

    def test_zero_first_timestamp(self):
        with pytest.raises(InvalidInputError, match="after 00:00:00.000"):
            plan_split(["00:00:00.000"])

    def test_overlap_reaching_before_start(self):
        with pytest.raises(InvalidInputError, match="exceeds the first boundary"):
            plan_split(["00:00:00.100", "00:00:05.000"], overlap_ms=200)

    def test_negative_overlap(self):
        with pytest.raises(InvalidInputError):
            plan_split(["00:00:03.000"], overlap_ms=-1)
