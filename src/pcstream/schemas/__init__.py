"""Pydantic configuration schemas for pcstream.

Exports
-------
resolve_config : function
    Single entrypoint for pipeline configuration resolution
PipelineConfig : class
    Pipeline defaults (chunk size, logging)
StageOptions, FauxReaderOptions, ArrayReaderOptions, RescaleOptions, StatsOptions : class
    Per-stage option models
"""

from pcstream.schemas.resolve import resolve_config
from pcstream.schemas.pipeline import PipelineConfig
from pcstream.schemas.stages import (
    StageOptions,
    FauxReaderOptions,
    ArrayReaderOptions,
    RescaleOptions,
    StatsOptions,
)

__all__ = [
    'resolve_config',
    'PipelineConfig',
    'StageOptions',
    'FauxReaderOptions',
    'ArrayReaderOptions',
    'RescaleOptions',
    'StatsOptions',
]
