"""Stage protocol shared by producers and transformers.

A pipeline is a singly linked chain of stages. Every stage holds at most
one non-owning reference to its upstream stage; a stage without an
upstream is a producer (Reader), a stage with one is a transformer
(Filter).

**Lifecycle:**

    UNINITIALIZED → PREPARED → ITERATING → DONE

1. ``prepare(ctx)`` runs once per stage, upstream first. Stages register
   dimensions and resolve options here; no point data is read.
2. ``iterator()`` freezes the schema and moves the chain to ITERATING.
3. ``read``/``skip`` are driven by a SequentialIterator holding the cursor.
   A filter's read is its upstream's read followed by a complete pass
   over the returned chunk, so one call moves one chunk through the
   whole chain.
4. ``done()`` runs once, upstream first, after the last read.

Using a stage outside this order raises ContractViolation.
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Union

from pcstream.contracts import assert_state, require
from pcstream.core.buffer import PointBuffer
from pcstream.core.context import PointContext
from pcstream.schemas.stages import StageOptions

if TYPE_CHECKING:
    from pcstream.stages.iterator import Cursor, SequentialIterator

__all__ = ['StageState', 'Stage', 'Reader', 'Filter']

logger = logging.getLogger(__name__)


class StageState(str, Enum):
    """Lifecycle state of a stage."""
    UNINITIALIZED = "uninitialized"
    PREPARED = "prepared"
    ITERATING = "iterating"
    DONE = "done"


class Stage:
    """Base class of every pipeline node.

    Subclasses set the class attributes below and override the ``_prepare``
    / ``_done`` hooks; Reader and Filter supply the read protocol.

    Attributes
    ----------
    name : str
        Registered stage name, e.g. ``"filters.stats"``.
    description : str
        Human readable description.
    options_model : type
        Pydantic model validating the constructor options.
    extends_schema : bool
        The stage registers dimensions in ``prepare()``.
    transforms_buffer : bool
        The stage writes point data during ``read``.
    """

    name = "stage"
    description = "Stage"
    options_model = StageOptions
    extends_schema = False
    transforms_buffer = False

    def __init__(self, options: Optional[Union[dict, StageOptions]] = None,
                 upstream: Optional["Stage"] = None):
        """Validate options and optionally attach an upstream stage.

        Parameters
        ----------
        options : dict or StageOptions, optional
            Stage options, validated against ``options_model``.
        upstream : Stage, optional
            Input stage (filters only).

        Raises
        ------
        ValidationError
            If the options fail Pydantic validation.
        """
        if options is None:
            options = {}
        if isinstance(options, self.options_model):
            self.options = options
        else:
            self.options = self.options_model.model_validate(options)
        self.stage_id = self.options.stage_id or self.name
        self.state = StageState.UNINITIALIZED
        self.context: Optional[PointContext] = None
        self.upstream: Optional[Stage] = None
        if upstream is not None:
            self.set_input(upstream)

    def set_input(self, upstream: "Stage"):
        """Attach ``upstream`` as this stage's single input."""
        assert_state(self, StageState.UNINITIALIZED, action="rewire")
        require(upstream is not self and self not in upstream.chain(),
                f"Stage contract violated: connecting '{upstream.stage_id}' "
                f"to '{self.stage_id}' would create a cycle")
        self.upstream = upstream

    def chain(self) -> List["Stage"]:
        """Stages from the producer down to this stage."""
        stages = []
        stage = self
        while stage is not None:
            stages.append(stage)
            stage = stage.upstream
        return stages[::-1]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def prepare(self, ctx: PointContext):
        """Prepare the chain up to and including this stage.

        Unprepared upstream stages are prepared first, so calling
        ``prepare`` on the terminal stage prepares the whole chain.

        Raises
        ------
        ContractViolation
            If this stage was already prepared, or its upstream was
            prepared against another context.
        UnknownDimension
            If a configured dimension name does not resolve.
        """
        assert_state(self, StageState.UNINITIALIZED, action="prepare")
        if self.upstream is not None:
            if self.upstream.state is StageState.UNINITIALIZED:
                self.upstream.prepare(ctx)
            require(self.upstream.context is ctx,
                    f"Stage contract violated: '{self.upstream.stage_id}' was prepared "
                    f"with a different context than '{self.stage_id}'")
        self._prepare(ctx)
        self.context = ctx
        self.state = StageState.PREPARED
        logger.info("Prepared %s (%s)", self.stage_id, self.description)

    def _prepare(self, ctx: PointContext):
        """Register dimensions and resolve options. Override in subclasses."""

    def iterator(self, chunk_size: Optional[int] = None) -> "SequentialIterator":
        """Create a sequential iterator reading through this stage."""
        from pcstream.stages.iterator import SequentialIterator
        return SequentialIterator(self, chunk_size=chunk_size)

    def begin_iteration(self):
        """Freeze the schema and move the chain to ITERATING."""
        for stage in self.chain():
            assert_state(stage, StageState.PREPARED, StageState.ITERATING, action="iterate")
        self.context.schema.freeze()
        for stage in self.chain():
            stage.state = StageState.ITERATING

    def done(self):
        """Finalize this stage, upstream first, and freeze its metadata."""
        assert_state(self, StageState.PREPARED, StageState.ITERATING, action="finish")
        if self.upstream is not None and self.upstream.state is not StageState.DONE:
            self.upstream.done()
        self._done(self.context)
        node = self.context.metadata.find_child(self.stage_id)
        if node is not None:
            node.freeze()
        self.state = StageState.DONE
        logger.info("Finished %s", self.stage_id)

    def _done(self, ctx: PointContext):
        """Finalize internal state. Override in subclasses."""

    # ------------------------------------------------------------------
    # Read protocol (driven by SequentialIterator)
    # ------------------------------------------------------------------

    def read(self, buffer: PointBuffer, count: int, cursor: "Cursor") -> int:
        raise NotImplementedError

    def skip(self, count: int, cursor: "Cursor") -> int:
        raise NotImplementedError

    def at_end(self, cursor: "Cursor") -> bool:
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}(stage_id={self.stage_id!r}, state={self.state.value!r})"


class Reader(Stage):
    """A producer: the head of a chain.

    Subclasses implement ``_read_points(buffer, position, count)`` which
    fills points ``[0, count)`` of ``buffer`` with source points starting
    at ``position`` and returns how many were placed, and optionally
    ``_skip_points(position, count)``.
    """

    name = "readers"
    description = "Reader"
    extends_schema = True

    def set_input(self, upstream: Stage):
        require(False, f"Stage contract violated: reader '{self.stage_id}' cannot have an input")

    @property
    def num_points(self) -> Optional[int]:
        """Total number of points, or None when unknown ahead of time."""
        return None

    def _remaining(self, position: int) -> Optional[int]:
        if self.num_points is None:
            return None
        return max(self.num_points - position, 0)

    def read(self, buffer: PointBuffer, count: int, cursor: "Cursor") -> int:
        assert_state(self, StageState.ITERATING, action="read from")
        require(buffer.schema is self.context.schema,
                f"Stage contract violated: buffer schema does not belong to '{self.stage_id}'")
        count = min(count, buffer.capacity)
        remaining = self._remaining(cursor.position)
        if remaining is not None:
            count = min(count, remaining)
            if remaining == 0:
                cursor.exhausted = True
        if cursor.exhausted or count <= 0:
            placed = 0
        else:
            placed = self._read_points(buffer, cursor.position, count)
            if placed == 0:
                cursor.exhausted = True
        buffer.set_valid_count(placed)
        cursor.position += placed
        logger.debug("%s read %d points (position %d)", self.stage_id, placed, cursor.position)
        return placed

    def skip(self, count: int, cursor: "Cursor") -> int:
        assert_state(self, StageState.ITERATING, action="skip in")
        remaining = self._remaining(cursor.position)
        if remaining is not None:
            count = min(count, remaining)
        count = max(count, 0)
        if count:
            self._skip_points(cursor.position, count)
        cursor.position += count
        return count

    def at_end(self, cursor: "Cursor") -> bool:
        if cursor.exhausted:
            return True
        remaining = self._remaining(cursor.position)
        return remaining is not None and remaining == 0

    def _read_points(self, buffer: PointBuffer, position: int, count: int) -> int:
        raise NotImplementedError

    def _skip_points(self, position: int, count: int):
        """Advance any internal source state past ``count`` points."""


class Filter(Stage):
    """A transformer with exactly one upstream stage.

    Subclasses implement ``_filter(buffer)``, called once per chunk with
    all ``buffer.valid_count`` points after the upstream read returned.
    Skipped points never reach ``_filter``.
    """

    name = "filters"
    description = "Filter"
    transforms_buffer = True

    def prepare(self, ctx: PointContext):
        require(self.upstream is not None,
                f"Stage contract violated: filter '{self.stage_id}' has no input")
        super().prepare(ctx)

    def read(self, buffer: PointBuffer, count: int, cursor: "Cursor") -> int:
        assert_state(self, StageState.ITERATING, action="read from")
        placed = self.upstream.read(buffer, count, cursor)
        if placed:
            self._filter(buffer)
        return placed

    def skip(self, count: int, cursor: "Cursor") -> int:
        assert_state(self, StageState.ITERATING, action="skip in")
        return self.upstream.skip(count, cursor)

    def at_end(self, cursor: "Cursor") -> bool:
        return self.upstream.at_end(cursor)

    def _filter(self, buffer: PointBuffer):
        raise NotImplementedError
