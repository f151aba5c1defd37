"""Domain errors raised by the point-cloud core.

These report bad names and unmet caller expectations. Lifecycle and
layout bugs raise :class:`pcstream.contracts.ContractViolation` instead.
"""


class UnknownDimension(LookupError):
    """A dimension name could not be resolved against a schema.

    Raised at ``prepare()`` for explicitly configured names (before any
    chunk is read) and by ``get_stats()`` for untracked dimensions.
    """

    def __init__(self, name: str, exact: bool = False):
        self.name = name
        self.exact = exact
        kind = "exact qualified" if exact else "dimension"
        super().__init__(f"Unknown {kind} name '{name}'")

    def __str__(self):
        return self.args[0]


class DuplicateDimension(ValueError):
    """A qualified dimension name is registered twice."""

    def __init__(self, fullname: str):
        self.fullname = fullname
        super().__init__(f"Dimension '{fullname}' is already registered")


class PointReadError(RuntimeError):
    """A consumer received fewer points than it required.

    The iterator itself never raises for short reads; consumers that need
    an exact count raise this with the requested index for context.
    """

    def __init__(self, index: int, requested: int, received: int):
        self.index = index
        self.requested = requested
        self.received = received
        super().__init__(
            f"problem reading point number {index}: "
            f"requested {requested}, received {received}"
        )
