"""Root-level pytest fixtures for the pcstream test suite.

Provides readers with known contents and a helper that drives a stage
chain to completion the way a consumer would.
"""

import numpy as np
import pytest

from pcstream.core import PointBuffer, PointContext
from pcstream.stages import ArrayReader, FauxReader


# =============================================================================
# Context and Reader Fixtures
# =============================================================================

@pytest.fixture
def ctx():
    """Fresh schema + metadata context."""
    return PointContext()


@pytest.fixture
def constant_reader():
    """1000 points at X=1, Y=2, Z=3."""
    return FauxReader({
        "bounds": ((1.0, 2.0, 3.0), (101.0, 102.0, 103.0)),
        "num_points": 1000,
        "mode": "constant",
    })


@pytest.fixture
def ramp_columns():
    """Ten points with X = 0..9, Y = 10 * X, Classification cycling 1, 2, 2."""
    x = np.arange(10, dtype=np.float64)
    return {
        "X": x,
        "Y": x * 10.0,
        "Classification": np.array([1, 2, 2] * 3 + [1], dtype=np.uint8),
    }


@pytest.fixture
def ramp_reader(ramp_columns):
    """ArrayReader over ``ramp_columns`` registered as ``readers.las``."""
    return ArrayReader(ramp_columns, {"stage_id": "readers.las"})


# =============================================================================
# Driving Helpers
# =============================================================================

@pytest.fixture
def run_chain():
    """Prepare ``stage`` in a new context, read everything, call done().

    Returns ``(total_points, context)``.

    Examples
    --------
    >>> def test_counts(run_chain, constant_reader):
    ...     stats = StatsFilter(upstream=constant_reader)
    ...     total, ctx = run_chain(stats, chunk_size=100)
    ...     assert total == 1000
    """
    def _run(stage, chunk_size=1000):
        context = PointContext()
        stage.prepare(context)
        it = stage.iterator(chunk_size=chunk_size)
        buffer = PointBuffer(context.schema, chunk_size)
        total = 0
        while not it.at_end():
            n = it.read(buffer)
            if n == 0:
                break
            total += n
        stage.done()
        return total, context

    return _run
