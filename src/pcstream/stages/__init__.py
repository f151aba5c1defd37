"""Pipeline stages.

- base: Stage protocol, Reader and Filter
- iterator: Cursor and SequentialIterator
- faux: Synthetic point generator
- arrays: In-memory column reader
- rescale: Re-emits dimensions under a new namespace
- stats: Incremental per-dimension statistics
"""

from pcstream.stages.base import StageState, Stage, Reader, Filter
from pcstream.stages.iterator import Cursor, SequentialIterator
from pcstream.stages.faux import FauxReader
from pcstream.stages.arrays import ArrayReader
from pcstream.stages.rescale import RescaleFilter
from pcstream.stages.stats import Summary, StatsFilter

__all__ = [
    "StageState",
    "Stage",
    "Reader",
    "Filter",
    "Cursor",
    "SequentialIterator",
    "FauxReader",
    "ArrayReader",
    "RescaleFilter",
    "Summary",
    "StatsFilter",
]
