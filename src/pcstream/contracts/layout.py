"""Point buffer layout contract.

Buffers never grow and never hold dimensions outside their schema.
"""

from typing import TYPE_CHECKING

from pcstream.contracts.base import require

if TYPE_CHECKING:
    from pcstream.core.dimension import Dimension


def assert_within_capacity(index: int, limit: int, what: str) -> None:
    """Enforce ``0 <= index < limit`` for point indices.

    Parameters
    ----------
    index : int
        Point index being accessed.

    limit : int
        Exclusive upper bound (``valid_count`` for reads, ``capacity``
        for writes).

    what : str
        Name of the bound, used in the message.
    """
    require(
        0 <= index < limit,
        f"Buffer contract violated: point index {index} outside {what} {limit}"
    )


def assert_in_schema(dim: "Dimension", columns: dict) -> None:
    """Enforce that ``dim`` is part of the buffer layout."""
    require(
        dim.handle in columns and columns[dim.handle][0] == dim,
        f"Buffer contract violated: dimension '{dim.fullname}' is not in the buffer schema"
    )
