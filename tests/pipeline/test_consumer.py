"""Tests for consumer helpers."""

import pytest

from pcstream.core import PointContext, PointReadError
from pcstream.pipeline import count_points, read_point
from pcstream.stages import FauxReader, StatsFilter

pytestmark = [pytest.mark.unit, pytest.mark.pipeline]


@pytest.fixture
def ramp():
    reader = FauxReader({"num_points": 10, "mode": "ramp", "bounds": ((0, 0, 0), (9, 9, 9))})
    reader.prepare(PointContext())
    return reader


class TestReadPoint:
    """Test single-point reads."""

    def test_reads_requested_point(self, ramp):
        point = read_point(ramp, 4)
        assert sorted(point) == ["readers.faux.X", "readers.faux.Y", "readers.faux.Z"]
        assert point["readers.faux.X"] == pytest.approx(4.0)
        assert point["readers.faux.Z"] == pytest.approx(4.0)

    def test_first_point(self, ramp):
        assert read_point(ramp, 0)["readers.faux.X"] == 0.0

    def test_point_past_end_raises_with_index(self, ramp):
        with pytest.raises(PointReadError, match="point number 10") as exc:
            read_point(ramp, 10)
        assert exc.value.index == 10
        assert exc.value.received == 0

    def test_skipped_points_not_in_stats(self):
        reader = FauxReader({"num_points": 10, "mode": "ramp", "bounds": ((0, 0, 0), (9, 9, 9))})
        stats = StatsFilter({"dimensions": "X"}, upstream=reader)
        stats.prepare(PointContext())
        read_point(stats, 7)
        summary = stats.get_stats("X")
        assert summary.count == 1
        assert summary.mean == pytest.approx(7.0)


class TestCountPoints:
    """Test full-scan counting."""

    @pytest.mark.parametrize("chunk_size", [None, 1, 3, 10, 64])
    def test_counts_all_points(self, ramp, chunk_size):
        assert count_points(ramp, chunk_size=chunk_size) == 10
