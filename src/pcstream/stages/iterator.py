"""Pull-based sequential iteration over a stage chain.

The iterator owns an explicit Cursor (position + exhausted flag). Each
``read`` is a plain synchronous call that moves one chunk through every
stage of the chain and returns the number of points placed in the buffer.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from pcstream.contracts import require
from pcstream.core.buffer import PointBuffer

if TYPE_CHECKING:
    from pcstream.stages.base import Stage

__all__ = ['Cursor', 'SequentialIterator', 'DEFAULT_CHUNK_SIZE']

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 65536


@dataclass
class Cursor:
    """Logical read position in source order."""
    position: int = 0
    exhausted: bool = False


class SequentialIterator:
    """Drives chunk-by-chunk consumption of a prepared stage.

    Creating the iterator freezes the schema and moves every stage of the
    chain to ITERATING.

    Parameters
    ----------
    stage : Stage
        Terminal stage to read through. Must be prepared.
    chunk_size : int, optional
        Hint for how many points one read should request
        (default: ``DEFAULT_CHUNK_SIZE``).

    Examples
    --------
    >>> it = stats.iterator(chunk_size=1000)
    >>> buf = PointBuffer(ctx.schema, it.chunk_size)
    >>> total = 0
    >>> while not it.at_end():
    ...     total += it.read(buf)
    >>> stats.done()
    """

    def __init__(self, stage: "Stage", chunk_size: Optional[int] = None):
        if chunk_size is None:
            chunk_size = DEFAULT_CHUNK_SIZE
        require(chunk_size > 0, f"Iterator contract violated: chunk size must be positive, got {chunk_size}")
        stage.begin_iteration()
        self.stage = stage
        self.cursor = Cursor()
        self._chunk_size = int(chunk_size)

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def position(self) -> int:
        return self.cursor.position

    def at_end(self) -> bool:
        """True once the source is exhausted."""
        return self.stage.at_end(self.cursor)

    def skip(self, count: int) -> int:
        """Advance by ``count`` points without reading them.

        Skipped points are never placed in a buffer and never reach any
        filter. Returns the number of points actually skipped.
        """
        require(count >= 0, f"Iterator contract violated: cannot skip {count} points")
        skipped = self.stage.skip(count, self.cursor)
        logger.debug("Skipped %d points, position %d", skipped, self.cursor.position)
        return skipped

    def read(self, buffer: PointBuffer, max_points: Optional[int] = None) -> int:
        """Read up to ``max_points`` points into ``buffer``.

        Parameters
        ----------
        buffer : PointBuffer
            Buffer allocated against the chain's schema; overwritten.
        max_points : int, optional
            Upper bound on the points read. Defaults to the buffer capacity.

        Returns
        -------
        int
            Points placed. ``0`` signals exhaustion; fewer than requested is
            not an error.
        """
        if max_points is None:
            max_points = buffer.capacity
        return self.stage.read(buffer, max_points, self.cursor)

    def __repr__(self):
        return f"SequentialIterator(stage={self.stage.stage_id!r}, cursor={self.cursor!r})"
