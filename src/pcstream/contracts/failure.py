"""Centralized failure type for contract violations.

Contracts fail fast, loud, and once. All violations raise the same
exception type, allowing callers to handle pipeline bugs uniformly.
"""


class ContractViolation(RuntimeError):
    """Raised when a pipeline contract is violated.

    This indicates a bug in the code driving the pipeline, not bad user
    input. It means a stage was used outside its lifecycle or a buffer
    was accessed outside its layout.

    Key distinction:
    - ValidationError: option/config error (handled by Pydantic)
    - UnknownDimension: a name that does not resolve against the schema
    - ContractViolation: pipeline bug (programmer error)
    """
    pass
