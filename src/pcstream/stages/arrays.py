"""Producer serving points from in-memory numpy columns.

Useful as the stand-in for a format reader: the caller decodes data
however it likes and hands the columns over. The reader copies one chunk
at a time into the pipeline's buffer.
"""

import logging
from typing import Dict

import numpy as np

from pcstream.contracts import require
from pcstream.core.buffer import PointBuffer
from pcstream.core.context import PointContext
from pcstream.schemas.stages import ArrayReaderOptions
from pcstream.stages.base import Reader

__all__ = ['ArrayReader']

logger = logging.getLogger(__name__)


class ArrayReader(Reader):
    """Serve equally long 1-D arrays as point dimensions.

    Parameters
    ----------
    columns : dict of str to array-like
        Base dimension name → values. Registration order follows the
        mapping order.
    options : dict or ArrayReaderOptions, optional
        ``stage_id`` and optional per-column ``dtypes``.

    Raises
    ------
    ValueError
        If the columns are not one-dimensional or differ in length.

    Examples
    --------
    >>> reader = ArrayReader({"X": xs, "Classification": classes},
    ...                      {"stage_id": "readers.las",
    ...                       "dtypes": {"Classification": "uint8"}})
    """

    name = "readers.array"
    description = "Array Reader"
    options_model = ArrayReaderOptions

    def __init__(self, columns: Dict[str, np.ndarray], options=None):
        super().__init__(options)
        self.columns = {}
        for col_name, values in columns.items():
            dtype = self.options.dtypes.get(col_name)
            arr = np.asarray(values, dtype=dtype)
            if arr.ndim != 1:
                raise ValueError(f"Column '{col_name}' must be one-dimensional, got {arr.ndim} dims")
            self.columns[col_name] = arr
        lengths = {len(arr) for arr in self.columns.values()}
        if len(lengths) > 1:
            raise ValueError(f"Columns differ in length: {sorted(lengths)}")
        unknown = set(self.options.dtypes) - set(self.columns)
        if unknown:
            raise ValueError(f"dtypes given for unknown columns: {sorted(unknown)}")
        self._num_points = lengths.pop() if lengths else 0
        self.dims = {}

    @property
    def num_points(self) -> int:
        return self._num_points

    def _prepare(self, ctx: PointContext):
        require(bool(self.columns), f"Reader contract violated: '{self.stage_id}' has no columns")
        self.dims = {
            col_name: ctx.schema.add_dimension(col_name, arr.dtype, self.stage_id)
            for col_name, arr in self.columns.items()
        }
        ctx.metadata.add_child(f"{self.stage_id}:num_points", self._num_points)
        logger.info("Array reader: %d points, %d dimensions", self._num_points, len(self.dims))

    def _read_points(self, buffer: PointBuffer, position: int, count: int) -> int:
        for col_name, dim in self.dims.items():
            buffer.write_column(dim, self.columns[col_name][position:position + count])
        return count
