"""Named, typed per-point attributes.

A Dimension is identified by its qualified name ``<namespace>.<name>``,
where the namespace is the identity of the stage that registered it.
"""

from dataclasses import dataclass, field

import numpy as np

__all__ = ['Dimension', 'as_dtype', 'split_name']

# Numeric kinds a dimension may store: signed, unsigned, float
NUMERIC_KINDS = ("i", "u", "f")


def as_dtype(dtype) -> np.dtype:
    """Coerce ``dtype`` to a numeric numpy dtype.

    Raises
    ------
    TypeError
        If ``dtype`` is not a signed, unsigned or floating type.
    """
    dt = np.dtype(dtype)
    if dt.kind not in NUMERIC_KINDS:
        raise TypeError(f"Dimension type must be numeric, got '{dt}'")
    return dt


def split_name(qualified: str) -> tuple[str, str]:
    """Split ``a.b.X`` into ``("a.b", "X")``; bare names get an empty namespace."""
    namespace, _, name = qualified.rpartition(".")
    return namespace, name


@dataclass(frozen=True)
class Dimension:
    """One registered per-point attribute.

    Attributes
    ----------
    name : str
        Base name, e.g. ``"X"``.
    dtype : numpy.dtype
        Storage type; its item size is the storage width in bytes.
    namespace : str
        Identity of the producing stage, e.g. ``"readers.faux"``.
    handle : int
        Stable integer issued by the schema at registration. Handles grow
        with registration order, so a larger handle means a more
        downstream producer.
    """
    name: str
    dtype: np.dtype = field(compare=False)
    namespace: str = ""
    handle: int = -1

    @property
    def fullname(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

    @property
    def size(self) -> int:
        return self.dtype.itemsize

    @property
    def kind(self) -> str:
        return {"i": "signed", "u": "unsigned", "f": "floating"}[self.dtype.kind]

    def __str__(self):
        return self.fullname
