"""Fixed-capacity chunks of point data.

A PointBuffer holds one numpy column per schema dimension. It is allocated
once, when the capacity and the (frozen) schema are known, and reused for
every chunk: producers overwrite the columns and set ``valid_count``.
"""

import logging
from typing import Dict, Tuple, Union

import numpy as np

from pcstream.contracts import assert_in_schema, assert_within_capacity, require
from pcstream.core.dimension import Dimension
from pcstream.core.schema import Schema

__all__ = ['PointBuffer']

logger = logging.getLogger(__name__)

DimensionRef = Union[Dimension, str]


class PointBuffer:
    """A bounded chunk of points laid out per a frozen Schema.

    Allocating a buffer freezes its schema: the layout of a buffer can not
    change after allocation, so neither can the schema it was built from.

    Parameters
    ----------
    schema : Schema
        Schema describing the columns. Frozen by this call.
    capacity : int
        Maximum number of points the buffer can hold.

    Notes
    -----
    - ``get`` is bounded by ``valid_count``; ``set`` by ``capacity``.
    - Out-of-bounds access and unknown dimensions are programming errors
      and raise ContractViolation.
    - Memory is ``capacity * schema.point_size`` bytes.

    Examples
    --------
    >>> buf = PointBuffer(schema, capacity=1024)
    >>> buf.write_column("X", np.arange(10.0))
    >>> buf.set_valid_count(10)
    >>> buf.get("X", 3)
    3.0
    """

    def __init__(self, schema: Schema, capacity: int):
        require(capacity > 0, f"Buffer contract violated: capacity must be positive, got {capacity}")
        schema.freeze()
        self.schema = schema
        self.capacity = int(capacity)
        self._valid_count = 0
        self._columns: Dict[int, Tuple[Dimension, np.ndarray]] = {
            dim.handle: (dim, np.zeros(self.capacity, dtype=dim.dtype)) for dim in schema
        }
        logger.debug("Allocated buffer: %d points x %d bytes", self.capacity, schema.point_size)

    @property
    def valid_count(self) -> int:
        return self._valid_count

    def __len__(self):
        return self._valid_count

    def set_valid_count(self, n: int):
        require(
            0 <= n <= self.capacity,
            f"Buffer contract violated: valid count {n} exceeds capacity {self.capacity}"
        )
        self._valid_count = int(n)

    def _column(self, dim: DimensionRef) -> np.ndarray:
        if not isinstance(dim, Dimension):
            dim = self.schema.resolve(dim)
        assert_in_schema(dim, self._columns)
        return self._columns[dim.handle][1]

    def get(self, dim: DimensionRef, index: int):
        """Value of ``dim`` for point ``index`` (must be < valid_count)."""
        column = self._column(dim)
        assert_within_capacity(index, self._valid_count, "valid count")
        return column[index].item()

    def set(self, dim: DimensionRef, index: int, value):
        """Store ``value`` for point ``index`` (must be < capacity)."""
        column = self._column(dim)
        assert_within_capacity(index, self.capacity, "capacity")
        column[index] = value

    def column(self, dim: DimensionRef) -> np.ndarray:
        """Writable view of the valid prefix of ``dim``'s column."""
        return self._column(dim)[:self._valid_count]

    def write_column(self, dim: DimensionRef, values, start: int = 0):
        """Copy ``values`` into ``dim``'s column starting at point ``start``.

        Does not change ``valid_count``.
        """
        column = self._column(dim)
        values = np.asarray(values)
        end = start + len(values)
        require(
            0 <= start and end <= self.capacity,
            f"Buffer contract violated: writing points [{start}, {end}) exceeds capacity {self.capacity}"
        )
        column[start:end] = values

    def point(self, index: int) -> dict:
        """All values of point ``index`` keyed by qualified dimension name."""
        assert_within_capacity(index, self._valid_count, "valid count")
        return {dim.fullname: col[index].item() for dim, col in self._columns.values()}

    def __repr__(self):
        return f"PointBuffer(capacity={self.capacity}, valid_count={self._valid_count})"
