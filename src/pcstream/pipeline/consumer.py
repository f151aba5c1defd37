"""Consumer-side helpers over a prepared stage.

These sit on the consumer's side of the iterator contract: the iterator
never fails on short reads, so callers that require an exact number of
points check for themselves and raise PointReadError with context.
Neither helper calls ``done()``.
"""

import logging
from typing import Optional

from pcstream.core.buffer import PointBuffer
from pcstream.core.errors import PointReadError
from pcstream.stages.base import Stage

__all__ = ['read_point', 'count_points']

logger = logging.getLogger(__name__)


def read_point(stage: Stage, index: int) -> dict:
    """Read point ``index`` (0-based, source order) through ``stage``.

    The preceding ``index`` points are skipped, so they are never seen by
    any filter in the chain.

    Parameters
    ----------
    stage : Stage
        Prepared stage to read through.
    index : int
        Source-order index of the point.

    Returns
    -------
    dict
        Qualified dimension name → value.

    Raises
    ------
    PointReadError
        If the source has no point at ``index``.
    """
    it = stage.iterator(chunk_size=1)
    buffer = PointBuffer(stage.context.schema, 1)
    it.skip(index)
    n = it.read(buffer, 1)
    if n != 1:
        raise PointReadError(index, 1, n)
    logger.debug("Read point %d through %s", index, stage.stage_id)
    return buffer.point(0)


def count_points(stage: Stage, chunk_size: Optional[int] = None) -> int:
    """Read ``stage`` to exhaustion and return the number of points seen."""
    it = stage.iterator(chunk_size=chunk_size)
    buffer = PointBuffer(stage.context.schema, it.chunk_size)
    total = 0
    while not it.at_end():
        n = it.read(buffer)
        if n == 0:
            break
        total += n
    logger.info("Read %d points through %s", total, stage.stage_id)
    return total
