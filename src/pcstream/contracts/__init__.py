"""Pipeline contracts: fail-fast enforcement of stage invariants.

Contracts fail immediately and loudly when a caller breaks the stage
lifecycle (reading before prepare, preparing twice, touching a frozen
schema) or overruns a point buffer. These are programming errors, not
reported failures.

Key principle:
- Pydantic validates option correctness
- Contracts validate pipeline correctness
- Domain errors (UnknownDimension, ...) report bad names and short reads
"""

from pcstream.contracts.failure import ContractViolation
from pcstream.contracts.base import require
from pcstream.contracts.lifecycle import assert_state
from pcstream.contracts.layout import assert_in_schema, assert_within_capacity

__all__ = [
    "ContractViolation",
    "require",
    "assert_state",
    "assert_in_schema",
    "assert_within_capacity",
]
