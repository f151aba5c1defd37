import pytest

from pcstream.pipeline import Pipeline
from pcstream.stages import FauxReader, StatsFilter


@pytest.fixture
def small_pipeline():
    """Ramp reader (100 points) followed by stats, read in chunks of 16."""
    pipeline = Pipeline({"iterator": {"chunk_size": 16}})
    pipeline.add(FauxReader({"num_points": 100, "mode": "ramp",
                             "bounds": ((0, 0, 0), (99, 198, 297))}))
    pipeline.add(StatsFilter())
    return pipeline
