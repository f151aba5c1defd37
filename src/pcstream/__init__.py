"""`pcstream` - streaming point-cloud stages with incremental statistics.

Subpackages:
- core: Dimensions, schema, point buffers, metadata tree
- stages: Stage protocol, sequential iterator, readers, filters
- pipeline: Pipeline assembly and consumer helpers
- schemas: Pydantic option and configuration models
- contracts: Fail-fast enforcement of lifecycle and layout invariants
"""

__version__ = "0.1.0"
