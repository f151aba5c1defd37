"""Tests for ArrayReader."""

import numpy as np
import pytest

from pcstream.core import PointBuffer
from pcstream.stages import ArrayReader

pytestmark = pytest.mark.unit


class TestArrayReader:
    """Test column-serving producer."""

    def test_schema_follows_column_dtypes(self, ctx, ramp_reader):
        ramp_reader.prepare(ctx)
        assert ctx.schema.names() == ["readers.las.X", "readers.las.Y", "readers.las.Classification"]
        assert ctx.schema.resolve("Classification").dtype == np.uint8

    def test_dtype_override(self, ctx):
        reader = ArrayReader({"Intensity": [1, 2, 3]}, {"dtypes": {"Intensity": "uint16"}})
        reader.prepare(ctx)
        assert ctx.schema.resolve("Intensity").size == 2

    def test_serves_values_in_order(self, ctx, ramp_reader):
        ramp_reader.prepare(ctx)
        it = ramp_reader.iterator()
        buf = PointBuffer(ctx.schema, 10)
        assert it.read(buf) == 10
        np.testing.assert_array_equal(buf.column("Y"), np.arange(10.0) * 10)

    def test_mismatched_lengths_rejected(self):
        with pytest.raises(ValueError, match="differ in length"):
            ArrayReader({"X": [1.0, 2.0], "Y": [1.0]})

    def test_multidimensional_column_rejected(self):
        with pytest.raises(ValueError, match="one-dimensional"):
            ArrayReader({"X": np.zeros((2, 2))})

    def test_dtype_for_unknown_column_rejected(self):
        with pytest.raises(ValueError, match="unknown columns"):
            ArrayReader({"X": [1.0]}, {"dtypes": {"Z": "float32"}})

    def test_num_points(self, ramp_reader):
        assert ramp_reader.num_points == 10
