"""Incremental per-dimension statistics over a point stream.

The StatsFilter is a pass-through transformer: every chunk that flows
through it updates one Summary per tracked dimension, and nothing else.
Memory is independent of the number of points seen.

Dimension selection (resolved once, at ``prepare()``)
----------------------------------------------------
- no selection: every dimension in the schema
- ``dimensions``: base-name fallback allowed; the most downstream
  producer wins when several stages emit the same base name
- ``exact_dimensions``: literal qualified names only
- ``count``: dimensions whose distinct values are tallied as well

Any name that does not resolve fails preparation with UnknownDimension,
before a single point is read.

Metadata
--------
At ``done()`` every summary is mirrored under
``<stage_id>:<dimension>:{count,minimum,maximum,mean}``; tallied values
appear under ``<stage_id>:<dimension>:counts:count-<k>:{value,count}``.
"""

import logging
from typing import Dict, List, Optional, Union

import numpy as np
import pandas as pd

from pcstream.contracts import require
from pcstream.core.buffer import PointBuffer
from pcstream.core.context import PointContext
from pcstream.core.dimension import Dimension
from pcstream.core.errors import UnknownDimension
from pcstream.core.schema import resolve_dimension
from pcstream.schemas.stages import StatsOptions
from pcstream.stages.base import Filter

__all__ = ['Summary', 'StatsFilter']

logger = logging.getLogger(__name__)

STATISTICS = ("count", "minimum", "maximum", "mean")


class Summary:
    """Running count, minimum, maximum and mean of one dimension.

    The mean is updated incrementally, ``mean += (value - mean) / count``,
    never as a running sum divided by the count. ``insert_many`` applies
    the same update once per chunk using the chunk mean, which is
    equivalent to inserting the chunk's points one at a time.

    Parameters
    ----------
    dimension : Dimension
        Dimension summarized.
    count_values : bool, optional
        Also tally occurrences of each distinct value.
    max_distinct_values : int, optional
        Cap on distinct values tallied; further new values are ignored
        by the tally (they still update count/min/max/mean).
    """

    def __init__(self, dimension: Dimension, count_values: bool = False,
                 max_distinct_values: int = 1024):
        self.dimension = dimension
        self.count_values = count_values
        self.max_distinct_values = max_distinct_values
        self.value_counts: Dict = {}
        self.truncated = False
        self._count = 0
        self._minimum = np.inf
        self._maximum = -np.inf
        self._mean = 0.0
        self._frozen = False

    @property
    def count(self) -> int:
        return self._count

    @property
    def minimum(self) -> Optional[float]:
        return float(self._minimum) if self._count else None

    @property
    def maximum(self) -> Optional[float]:
        return float(self._maximum) if self._count else None

    @property
    def mean(self) -> Optional[float]:
        return float(self._mean) if self._count else None

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self):
        require(not self._frozen,
                f"Summary contract violated: '{self.dimension.fullname}' is final")

    def insert(self, value):
        """Add a single value."""
        self._check_mutable()
        if self.count_values:
            self._tally(np.asarray([value]))
        value = float(value)
        self._count += 1
        self._minimum = min(self._minimum, value)
        self._maximum = max(self._maximum, value)
        self._mean += (value - self._mean) / self._count

    def insert_many(self, values: np.ndarray):
        """Add a chunk of values."""
        self._check_mutable()
        n = len(values)
        if n == 0:
            return
        data = np.asarray(values, dtype=np.float64)
        self._count += n
        self._minimum = min(self._minimum, data.min())
        self._maximum = max(self._maximum, data.max())
        self._mean += (data.mean() - self._mean) * (n / self._count)
        if self.count_values:
            self._tally(np.asarray(values))

    def _tally(self, values: np.ndarray):
        uniques, counts = np.unique(values, return_counts=True)
        for value, n in zip(uniques.tolist(), counts.tolist()):
            if value in self.value_counts:
                self.value_counts[value] += n
            elif len(self.value_counts) < self.max_distinct_values:
                self.value_counts[value] = n
            elif not self.truncated:
                self.truncated = True
                logger.warning("Distinct value tally for %s capped at %d values",
                               self.dimension.fullname, self.max_distinct_values)

    def freeze(self):
        self._frozen = True

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in STATISTICS}

    def __repr__(self):
        return (f"Summary({self.dimension.fullname!r}, count={self._count}, "
                f"minimum={self.minimum}, maximum={self.maximum}, mean={self.mean})")


class StatsFilter(Filter):
    """Track per-dimension statistics as chunks pass through.

    Examples
    --------
    >>> reader = FauxReader({"num_points": 1000, "bounds": ((1, 2, 3), (101, 102, 103))})
    >>> stats = StatsFilter(upstream=reader)
    >>> ctx = PointContext()
    >>> stats.prepare(ctx)
    >>> it = stats.iterator()
    >>> buf = PointBuffer(ctx.schema, 1000)
    >>> it.read(buf)
    1000
    >>> stats.done()
    >>> stats.get_stats("X").mean
    1.0
    """

    name = "filters.stats"
    description = "Statistics Filter"
    options_model = StatsOptions
    transforms_buffer = False

    def __init__(self, options: Optional[Union[dict, StatsOptions]] = None, upstream=None):
        super().__init__(options, upstream)
        self._summaries: Dict[int, Summary] = {}

    def _select(self, ctx: PointContext) -> List[Dimension]:
        schema = ctx.schema
        opts = self.options
        exact = set(opts.exact_dimensions)

        if opts.selects_all:
            selected = list(schema)
        else:
            selected = [schema.resolve(name, exact=name in exact) for name in opts.dimensions]
            selected += [schema.resolve(name, exact=True)
                         for name in opts.exact_dimensions if name not in opts.dimensions]
        selected += [schema.resolve(name, exact=name in exact) for name in opts.count]

        unique = {}
        for dim in selected:
            unique.setdefault(dim.handle, dim)
        return list(unique.values())

    def _prepare(self, ctx: PointContext):
        exact = set(self.options.exact_dimensions)
        tracked = self._select(ctx)
        counted = {ctx.schema.resolve(name, exact=name in exact).handle
                   for name in self.options.count}
        self._summaries = {
            dim.handle: Summary(dim, count_values=dim.handle in counted,
                                max_distinct_values=self.options.max_distinct_values)
            for dim in tracked
        }
        logger.info("Stats %s tracking: %s", self.stage_id,
                    ", ".join(dim.fullname for dim in tracked))

    def _filter(self, buffer: PointBuffer):
        for summary in self._summaries.values():
            summary.insert_many(buffer.column(summary.dimension))

    def _done(self, ctx: PointContext):
        for summary in self._summaries.values():
            summary.freeze()
            self._mirror(ctx, summary)

    def _label(self, dim: Dimension) -> str:
        """Base name when it resolves back to ``dim`` among tracked dimensions."""
        if resolve_dimension(self.tracked, dim.name) == dim:
            return dim.name
        return dim.fullname

    def _mirror(self, ctx: PointContext, summary: Summary):
        prefix = f"{self.stage_id}:{self._label(summary.dimension)}"
        for stat, value in summary.to_dict().items():
            if value is not None:
                ctx.metadata.add_child(f"{prefix}:{stat}", value)
        for k, value in enumerate(sorted(summary.value_counts), start=1):
            ctx.metadata.add_child(f"{prefix}:counts:count-{k}:value", value)
            ctx.metadata.add_child(f"{prefix}:counts:count-{k}:count", summary.value_counts[value])

    @property
    def tracked(self) -> List[Dimension]:
        """Tracked dimensions in selection order."""
        return [summary.dimension for summary in self._summaries.values()]

    def get_stats(self, dim: Union[Dimension, str]) -> Summary:
        """Summary of a tracked dimension.

        Parameters
        ----------
        dim : Dimension or str
            Dimension object, qualified name, or base name. Names resolve
            among the tracked dimensions with the same policy used at
            ``prepare()``: exact qualified match first, then the most
            downstream base-name match.

        Raises
        ------
        UnknownDimension
            If the dimension is not tracked.
        """
        if isinstance(dim, Dimension):
            summary = self._summaries.get(dim.handle)
            if summary is None or summary.dimension != dim:
                raise UnknownDimension(dim.fullname, exact=True)
            return summary
        return self._summaries[resolve_dimension(self.tracked, dim).handle]

    def summaries(self) -> Dict[Dimension, Summary]:
        return {summary.dimension: summary for summary in self._summaries.values()}

    def summary_frame(self) -> pd.DataFrame:
        """One row per tracked dimension, indexed by qualified name."""
        rows = [
            {"dimension": s.dimension.fullname, **s.to_dict()}
            for s in self._summaries.values()
        ]
        return pd.DataFrame(rows, columns=["dimension", *STATISTICS]).set_index("dimension")
