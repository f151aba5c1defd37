"""Shared state of one pipeline: its schema and its metadata tree."""

from pcstream.core.metadata import MetadataNode
from pcstream.core.schema import Schema

__all__ = ['PointContext']


class PointContext:
    """Schema and metadata shared by every stage of a chain.

    Stages receive the context in ``prepare()``; they register dimensions
    on ``context.schema`` and contribute nodes under ``context.metadata``.
    """

    def __init__(self):
        self.schema = Schema()
        self.metadata = MetadataNode("root")

    def __repr__(self):
        return f"PointContext(dimensions={len(self.schema)}, frozen={self.schema.frozen})"
