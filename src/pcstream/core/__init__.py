"""Core data model: dimensions, schema, point buffers, metadata.

- dimension: Named, typed per-point attributes
- schema: Ordered registry and name resolution
- buffer: Fixed-capacity point chunks
- metadata: Hierarchical diagnostic values
- context: Schema + metadata shared by a chain
- errors: UnknownDimension, DuplicateDimension, PointReadError
"""

from pcstream.core.dimension import Dimension
from pcstream.core.schema import Schema, resolve_dimension
from pcstream.core.buffer import PointBuffer
from pcstream.core.metadata import MetadataNode
from pcstream.core.context import PointContext
from pcstream.core.errors import UnknownDimension, DuplicateDimension, PointReadError

__all__ = [
    "Dimension",
    "Schema",
    "resolve_dimension",
    "PointBuffer",
    "MetadataNode",
    "PointContext",
    "UnknownDimension",
    "DuplicateDimension",
    "PointReadError",
]
