"""Pipeline modules.

- manager: Pipeline assembly, preparation and the run loop
- consumer: Single-point and point-count helpers
"""

from pcstream.pipeline.manager import Pipeline
from pcstream.pipeline.consumer import read_point, count_points

__all__ = [
    "Pipeline",
    "read_point",
    "count_points",
]
