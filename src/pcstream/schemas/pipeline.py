"""PipelineConfig: defaults for running a stage chain.

Runtime code receives a fully validated PipelineConfig built by
:func:`pcstream.schemas.resolve.resolve_config`; it never reads raw dicts.
"""

from typing import Literal

from pydantic import Field

from pcstream.schemas.base import PcstreamBaseModel


class LoggingConfig(PcstreamBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    configure: bool = Field(
        False, description="Install console handlers on the root logger when the pipeline runs"
    )


class IteratorConfig(PcstreamBaseModel):
    """Chunked iteration settings."""
    chunk_size: int = Field(65536, ge=1, description="Points requested per read")


class PipelineConfig(PcstreamBaseModel):
    """Complete pipeline configuration with all defaults.

    Usage
    -----
        config = resolve_config(PipelineConfig(), {"iterator": {"chunk_size": 1000}})
        pipeline = Pipeline(config)
    """
    iterator: IteratorConfig = Field(default_factory=IteratorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
