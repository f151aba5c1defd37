"""Ordered, append-only registry of dimensions.

Stages register dimensions while the pipeline is being prepared. Once
iteration begins the schema is frozen and its layout never changes.

Name resolution
---------------
A lookup first tries the exact qualified name (``readers.faux.X``). When
the caller does not require an exact match and no qualified name matches,
the lookup falls back to base names (``X``). Several stages may register
the same base name; the most downstream registration wins, i.e. the one
with the largest handle.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from pcstream.contracts import require
from pcstream.core.dimension import Dimension, as_dtype
from pcstream.core.errors import DuplicateDimension, UnknownDimension

__all__ = ['Schema', 'resolve_dimension', 'most_downstream']

logger = logging.getLogger(__name__)


def most_downstream(candidates: Iterable[Dimension]) -> Optional[Dimension]:
    """Pick the most recently registered dimension among ``candidates``.

    Registration happens in upstream-to-downstream prepare order, so the
    largest handle belongs to the most downstream producer.
    """
    best = None
    for dim in candidates:
        if best is None or dim.handle > best.handle:
            best = dim
    return best


def resolve_dimension(candidates: Iterable[Dimension], name: str, exact: bool = False) -> Dimension:
    """Resolve ``name`` against ``candidates``.

    Parameters
    ----------
    candidates : iterable of Dimension
        Dimensions to search (a schema, or a subset of it).
    name : str
        Qualified or base name.
    exact : bool, optional
        Require a literal qualified-name match.

    Returns
    -------
    Dimension

    Raises
    ------
    UnknownDimension
        If nothing matches.
    """
    candidates = list(candidates)
    for dim in candidates:
        if dim.fullname == name:
            return dim
    if not exact:
        found = most_downstream(d for d in candidates if d.name == name)
        if found is not None:
            return found
    raise UnknownDimension(name, exact=exact)


class Schema:
    """Ordered collection of Dimensions.

    Dimensions are appended by stages during preparation and receive
    consecutive integer handles. Once frozen, ``add_dimension`` fails.

    Examples
    --------
    >>> schema = Schema()
    >>> x = schema.add_dimension("X", "float64", "readers.faux")
    >>> rx = schema.add_dimension("X", "float64", "reproj")
    >>> schema.resolve("X") is rx
    True
    >>> schema.resolve("readers.faux.X", exact=True) is x
    True
    """

    def __init__(self):
        self._dimensions: List[Dimension] = []
        self._by_fullname: Dict[str, Dimension] = {}
        self._by_name: Dict[str, List[Dimension]] = {}
        self._frozen = False

    def add_dimension(self, name: str, dtype, namespace: str = "") -> Dimension:
        """Register a new dimension and return it.

        Raises
        ------
        DuplicateDimension
            If the qualified name is already registered.
        ContractViolation
            If the schema is frozen.
        """
        require(not self._frozen, f"Schema contract violated: cannot add '{name}' to a frozen schema")
        dim = Dimension(name=name, dtype=as_dtype(dtype), namespace=namespace,
                        handle=len(self._dimensions))
        if dim.fullname in self._by_fullname:
            raise DuplicateDimension(dim.fullname)
        self._dimensions.append(dim)
        self._reindex()
        logger.debug("Registered dimension %s (%s, handle %d)", dim.fullname, dim.dtype, dim.handle)
        return dim

    def _reindex(self):
        self._by_fullname = {d.fullname: d for d in self._dimensions}
        by_name: Dict[str, List[Dimension]] = {}
        for d in self._dimensions:
            by_name.setdefault(d.name, []).append(d)
        self._by_name = by_name

    def resolve(self, name: str, exact: bool = False) -> Dimension:
        """Resolve a qualified or base name to a Dimension.

        See the module docstring for the resolution policy.
        """
        dim = self._by_fullname.get(name)
        if dim is not None:
            return dim
        if not exact and name in self._by_name:
            return most_downstream(self._by_name[name])
        raise UnknownDimension(name, exact=exact)

    def candidates(self, name: str) -> List[Dimension]:
        """All dimensions sharing the base name ``name``, in registration order."""
        return list(self._by_name.get(name, []))

    def freeze(self):
        if not self._frozen:
            logger.debug("Schema frozen with %d dimensions", len(self._dimensions))
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def dimensions(self) -> List[Dimension]:
        return list(self._dimensions)

    @property
    def point_size(self) -> int:
        """Bytes per point across all dimensions."""
        return sum(d.size for d in self._dimensions)

    def names(self) -> List[str]:
        return [d.fullname for d in self._dimensions]

    def __iter__(self) -> Iterator[Dimension]:
        return iter(self._dimensions)

    def __len__(self):
        return len(self._dimensions)

    def __contains__(self, item):
        if isinstance(item, Dimension):
            return 0 <= item.handle < len(self._dimensions) and self._dimensions[item.handle] == item
        return item in self._by_fullname or item in self._by_name

    def __getitem__(self, handle: int) -> Dimension:
        return self._dimensions[handle]

    def __repr__(self):
        return f"Schema({self.names()!r}, frozen={self._frozen})"
