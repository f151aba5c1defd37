"""Pipeline assembly and execution.

The Pipeline owns its stages in one append-only list. Each added stage is
wired to the previous one, so the topology is a chain by construction.
"""

import logging
from typing import List, Optional, Tuple, Union

from pcstream.contracts import require
from pcstream.core.buffer import PointBuffer
from pcstream.core.context import PointContext
from pcstream.core.metadata import MetadataNode
from pcstream.core.schema import Schema
from pcstream.schemas import PipelineConfig, resolve_config
from pcstream.stages.base import Stage, StageState
from pcstream.stages.iterator import SequentialIterator

__all__ = ['Pipeline']

logger = logging.getLogger(__name__)


class Pipeline:
    """Owns a chain of stages, their shared context, and the run loop.

    **Lifecycle:**

    1. ``add()`` stages, producer first.
    2. ``prepare()`` prepares every stage upstream-to-downstream.
    3. ``execute()`` pulls chunks of ``config.iterator.chunk_size`` points
       until the producer is exhausted, then calls ``done()``.

    Consumers that need finer control call ``iterator()`` themselves and
    ``done()`` when they stop reading.

    **Logging:**

    When ``config.logging.configure`` is set, ``prepare()`` installs a
    console handler on the root logger at ``config.logging.level``.

    Example usage::

        pipeline = Pipeline({"iterator": {"chunk_size": 10000}})
        pipeline.add(FauxReader({"num_points": 10**6, "mode": "random"}))
        stats = pipeline.add(StatsFilter())
        total = pipeline.execute()
        stats.get_stats("X").mean
    """

    def __init__(self, config: Optional[Union[dict, PipelineConfig]] = None):
        """Initialize an empty pipeline.

        Parameters
        ----------
        config : dict or PipelineConfig, optional
            Pipeline configuration; dicts are merged over the defaults.
        """
        if isinstance(config, PipelineConfig):
            self.config = config
        else:
            self.config = resolve_config(None, config)
        self.context = PointContext()
        self._stages: List[Stage] = []

    @property
    def stages(self) -> Tuple[Stage, ...]:
        return tuple(self._stages)

    @property
    def terminal(self) -> Stage:
        require(bool(self._stages), "Pipeline contract violated: pipeline has no stages")
        return self._stages[-1]

    @property
    def schema(self) -> Schema:
        return self.context.schema

    @property
    def metadata(self) -> MetadataNode:
        return self.context.metadata

    @property
    def prepared(self) -> bool:
        return bool(self._stages) and self.terminal.state is not StageState.UNINITIALIZED

    def add(self, stage: Stage) -> Stage:
        """Append ``stage`` to the chain and return it.

        The first stage must be a producer; every later stage is connected
        to the previous one unless it is already wired to it.

        Raises
        ------
        ContractViolation
            If the pipeline was prepared, the stage identity is taken, or
            the stage is wired to some other upstream.
        """
        require(not self.prepared, "Pipeline contract violated: cannot add stages after prepare()")
        require(all(s.stage_id != stage.stage_id for s in self._stages),
                f"Pipeline contract violated: duplicate stage id '{stage.stage_id}'")
        if not self._stages:
            require(stage.upstream is None,
                    f"Pipeline contract violated: first stage '{stage.stage_id}' must be a producer")
        elif stage.upstream is None:
            stage.set_input(self._stages[-1])
        else:
            require(stage.upstream is self._stages[-1],
                    f"Pipeline contract violated: '{stage.stage_id}' is wired to "
                    f"'{stage.upstream.stage_id}', not '{self._stages[-1].stage_id}'")
        self._stages.append(stage)
        logger.debug("Added stage %s", stage.stage_id)
        return stage

    def find_stage(self, stage_id: str) -> Optional[Stage]:
        for stage in self._stages:
            if stage.stage_id == stage_id:
                return stage
        return None

    def _setup_logging(self):
        """Install a console handler on the root logger."""
        log_level = getattr(logging, self.config.logging.level, logging.INFO)

        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        root = logging.getLogger()
        root.setLevel(log_level)
        for handler in root.handlers[:]:
            root.removeHandler(handler)

        ch = logging.StreamHandler()
        ch.setLevel(log_level)
        ch.setFormatter(formatter)
        root.addHandler(ch)

        logger.info("Logging: level=%s", self.config.logging.level)

    def prepare(self):
        """Prepare every stage, producer first.

        Raises
        ------
        UnknownDimension
            If a stage is configured with a dimension name that does not
            resolve. No point has been read at that time.
        """
        if self.config.logging.configure:
            self._setup_logging()
        self.terminal.prepare(self.context)
        logger.info("Pipeline prepared: %s", " -> ".join(s.stage_id for s in self._stages))
        logger.info("Schema: %s", ", ".join(self.schema.names()))

    def iterator(self) -> SequentialIterator:
        return self.terminal.iterator(chunk_size=self.config.iterator.chunk_size)

    def done(self):
        self.terminal.done()

    def execute(self) -> int:
        """Run every point through the chain and finish all stages.

        Returns
        -------
        int
            Total number of points read.
        """
        if not self.prepared:
            self.prepare()

        logger.info("=" * 60)
        logger.info("Executing pipeline ending in %s", self.terminal.stage_id)
        logger.info("=" * 60)

        it = self.iterator()
        buffer = PointBuffer(self.schema, it.chunk_size)
        total = 0
        chunks = 0
        while not it.at_end():
            n = it.read(buffer)
            if n == 0:
                break
            total += n
            chunks += 1
            logger.debug("Chunk %d: %d points (total %d)", chunks, n, total)

        self.done()
        logger.info("Pipeline finished: %d points in %d chunks", total, chunks)
        return total
