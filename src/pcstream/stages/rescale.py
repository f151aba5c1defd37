"""Transformer re-emitting dimensions under its own namespace.

Models the shape of a reprojection stage without any coordinate math:
for every configured source dimension it registers ``<stage_id>.<name>``
and fills it with ``source * scale + offset``. The source dimension keeps
its values, so after this stage two dimensions share the base name and
base-name lookups resolve to the rescaled one.
"""

import logging

import numpy as np

from pcstream.core.buffer import PointBuffer
from pcstream.core.context import PointContext
from pcstream.schemas.stages import RescaleOptions
from pcstream.stages.base import Filter

__all__ = ['RescaleFilter']

logger = logging.getLogger(__name__)


class RescaleFilter(Filter):
    """Affine rescale of selected dimensions into new qualified dimensions.

    Examples
    --------
    >>> reproj = RescaleFilter({"stage_id": "reproj", "dimensions": "X",
    ...                         "scale": 0.5, "offset": 10.0}, upstream=reader)
    """

    name = "filters.rescale"
    description = "Rescale Filter"
    options_model = RescaleOptions
    extends_schema = True

    def __init__(self, options=None, upstream=None):
        super().__init__(options, upstream)
        self.pairs = []

    def _prepare(self, ctx: PointContext):
        # sources resolve against the schema as it stood before this stage
        sources = [ctx.schema.resolve(name) for name in self.options.dimensions]
        self.pairs = [
            (src, ctx.schema.add_dimension(src.name, np.float64, self.stage_id))
            for src in sources
        ]
        logger.info("Rescale %s: %s (scale=%g, offset=%g)", self.stage_id,
                    ", ".join(f"{s.fullname} -> {d.fullname}" for s, d in self.pairs),
                    self.options.scale, self.options.offset)

    def _filter(self, buffer: PointBuffer):
        scale = self.options.scale
        offset = self.options.offset
        for src, dst in self.pairs:
            values = buffer.column(src).astype(np.float64) * scale + offset
            buffer.write_column(dst, values)
