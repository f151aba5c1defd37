"""Tests for the synthetic FauxReader."""

import numpy as np
import pytest

from pcstream.core import PointBuffer, PointContext
from pcstream.stages import FauxReader

pytestmark = pytest.mark.unit


def read_all(reader, ctx, chunk_size):
    """Concatenate every X, Y, Z chunk read from ``reader``."""
    reader.prepare(ctx)
    it = reader.iterator(chunk_size=chunk_size)
    buf = PointBuffer(ctx.schema, chunk_size)
    chunks = []
    while not it.at_end():
        it.read(buf)
        chunks.append(np.column_stack([buf.column(a).copy() for a in ("X", "Y", "Z")]))
    return np.concatenate(chunks)


class TestModes:
    """Test generated values per mode."""

    def test_constant_mode_uses_lower_bounds(self, ctx, constant_reader):
        points = read_all(constant_reader, ctx, 256)
        assert points.shape == (1000, 3)
        np.testing.assert_array_equal(points[:, 0], 1.0)
        np.testing.assert_array_equal(points[:, 1], 2.0)
        np.testing.assert_array_equal(points[:, 2], 3.0)

    def test_ramp_mode_spans_bounds(self, ctx):
        reader = FauxReader({"bounds": ((0, 0, 0), (9, 90, 900)), "num_points": 10, "mode": "ramp"})
        points = read_all(reader, ctx, 3)
        np.testing.assert_allclose(points[:, 0], np.arange(10.0))
        np.testing.assert_allclose(points[:, 1], np.arange(10.0) * 10)
        np.testing.assert_allclose(points[:, 2], np.arange(10.0) * 100)

    def test_random_mode_within_bounds(self, ctx):
        reader = FauxReader({"bounds": ((-1, -2, -3), (1, 2, 3)), "num_points": 500, "mode": "random"})
        points = read_all(reader, ctx, 64)
        assert (points >= [-1, -2, -3]).all()
        assert (points <= [1, 2, 3]).all()

    def test_random_mode_is_chunk_invariant(self):
        opts = {"bounds": ((0, 0, 0), (1, 1, 1)), "num_points": 1000, "mode": "random", "seed": 7}
        a = read_all(FauxReader(opts), PointContext(), 1000)
        b = read_all(FauxReader(opts), PointContext(), 37)
        np.testing.assert_array_equal(a, b)

    def test_seed_changes_values(self):
        base = {"num_points": 50, "mode": "random"}
        a = read_all(FauxReader({**base, "seed": 1}), PointContext(), 50)
        b = read_all(FauxReader({**base, "seed": 2}), PointContext(), 50)
        assert not np.array_equal(a, b)


class TestSkipAndSchema:
    """Test skipping and registered dimensions."""

    def test_registers_xyz_in_own_namespace(self, ctx, constant_reader):
        constant_reader.prepare(ctx)
        assert ctx.schema.names() == ["readers.faux.X", "readers.faux.Y", "readers.faux.Z"]
        assert all(d.dtype == np.float64 for d in ctx.schema)

    def test_custom_stage_id_namespaces_dimensions(self, ctx):
        FauxReader({"stage_id": "las"}).prepare(ctx)
        assert ctx.schema.resolve("X").fullname == "las.X"

    def test_random_skip_matches_sequential_read(self, ctx):
        opts = {"num_points": 200, "mode": "random", "seed": 3}
        full = read_all(FauxReader(opts), PointContext(), 200)

        reader = FauxReader(opts)
        reader.prepare(ctx)
        it = reader.iterator()
        buf = PointBuffer(ctx.schema, 1)
        it.skip(150)
        it.read(buf, 1)
        np.testing.assert_array_equal(
            [buf.get("X", 0), buf.get("Y", 0), buf.get("Z", 0)], full[150]
        )

    def test_second_iterator_restarts_random_stream(self, ctx):
        reader = FauxReader({"num_points": 20, "mode": "random"})
        reader.prepare(ctx)
        buf = PointBuffer(ctx.schema, 5)
        first = reader.iterator()
        first.read(buf)
        head = buf.column("X").copy()
        second = reader.iterator()
        second.read(buf)
        np.testing.assert_array_equal(buf.column("X"), head)

    def test_metadata_contributed_at_prepare(self, ctx, constant_reader):
        constant_reader.prepare(ctx)
        assert ctx.metadata.find_child("readers.faux:mode").value == "constant"
