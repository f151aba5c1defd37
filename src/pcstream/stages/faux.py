"""Synthetic point producer.

Generates X, Y, Z points inside a bounds box without any backing storage,
so a dataset of any size costs only one chunk of memory.

Modes
-----
- ``constant``: every point sits at the lower corner of the bounds
- ``ramp``: coordinates increase linearly from the lower to the upper corner
- ``random``: uniform within the bounds, reproducible from ``seed``
"""

import logging
from typing import Optional

import numpy as np

from pcstream.core.buffer import PointBuffer
from pcstream.core.context import PointContext
from pcstream.schemas.stages import FauxReaderOptions
from pcstream.stages.base import Reader

__all__ = ['FauxReader']

logger = logging.getLogger(__name__)

AXES = ("X", "Y", "Z")
# Points drawn per step when fast-forwarding the random stream
DISCARD_BLOCK = 65536


class FauxReader(Reader):
    """Produce ``num_points`` synthetic points on demand.

    Random mode draws three doubles per point from a single generator
    stream, so the values of point ``i`` do not depend on how reads are
    chunked. Seeking backwards (a second iterator) restarts the stream.

    Examples
    --------
    >>> reader = FauxReader({"bounds": ((1, 2, 3), (101, 102, 103)),
    ...                      "num_points": 1000, "mode": "constant"})
    """

    name = "readers.faux"
    description = "Faux Reader"
    options_model = FauxReaderOptions

    def __init__(self, options=None):
        super().__init__(options)
        self.lower = np.array(self.options.bounds[0], dtype=np.float64)
        self.upper = np.array(self.options.bounds[1], dtype=np.float64)
        self.mode = self.options.mode
        self.dims = {}
        self._rng: Optional[np.random.Generator] = None
        self._rng_position = 0

    @property
    def num_points(self) -> int:
        return self.options.num_points

    def _prepare(self, ctx: PointContext):
        self.dims = {axis: ctx.schema.add_dimension(axis, np.float64, self.stage_id) for axis in AXES}
        ctx.metadata.add_child(f"{self.stage_id}:num_points", self.num_points)
        ctx.metadata.add_child(f"{self.stage_id}:mode", self.mode)
        logger.info("Faux reader: %d points, mode=%s", self.num_points, self.mode)

    def _seek(self, position: int):
        if self._rng is None or position < self._rng_position:
            self._rng = np.random.default_rng(self.options.seed)
            self._rng_position = 0
        while self._rng_position < position:
            step = min(DISCARD_BLOCK, position - self._rng_position)
            self._rng.random((step, len(AXES)))
            self._rng_position += step

    def _generate(self, position: int, count: int) -> np.ndarray:
        if self.mode == "constant":
            return np.broadcast_to(self.lower, (count, len(AXES)))
        if self.mode == "ramp":
            steps = max(self.num_points - 1, 1)
            index = np.arange(position, position + count, dtype=np.float64)[:, None]
            return self.lower + (self.upper - self.lower) * (index / steps)
        self._seek(position)
        values = self._rng.uniform(self.lower, self.upper, size=(count, len(AXES)))
        self._rng_position += count
        return values

    def _read_points(self, buffer: PointBuffer, position: int, count: int) -> int:
        values = self._generate(position, count)
        for i, axis in enumerate(AXES):
            buffer.write_column(self.dims[axis], values[:, i])
        return count
