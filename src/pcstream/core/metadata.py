"""Hierarchical diagnostic value store contributed by stages.

Nodes are addressed with ``:``-separated paths such as
``filters.stats:X:mean``; dots are left free for stage identities and
qualified dimension names. Values are stored as strings so that consumers
compare them without float round-trip surprises.
"""

import logging
from typing import List, Optional

import numpy as np

from pcstream.contracts import require

__all__ = ['MetadataNode', 'format_value', 'PATH_SEPARATOR']

logger = logging.getLogger(__name__)

PATH_SEPARATOR = ":"
FLOAT_PRECISION = 10


def format_value(value) -> Optional[str]:
    """Render ``value`` as a deterministic string.

    Floats use fixed-precision decimal (``FLOAT_PRECISION`` places),
    integers print exactly, booleans as ``true``/``false``.
    """
    if value is None:
        return None
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    if isinstance(value, (float, np.floating)):
        return f"{float(value):.{FLOAT_PRECISION}f}"
    return str(value)


class MetadataNode:
    """One node of the metadata tree.

    Parameters
    ----------
    name : str
        Node name (a single path component).
    value : optional
        Initial value, stored through :func:`format_value`.

    Examples
    --------
    >>> root = MetadataNode("root")
    >>> root.add_child("filters.stats:X:count", 1000)
    >>> root.find_child("filters.stats:X:count").value
    '1000'
    """

    def __init__(self, name: str, value=None):
        require(PATH_SEPARATOR not in name,
                f"Metadata contract violated: node name '{name}' contains '{PATH_SEPARATOR}'")
        self.name = name
        self._value = format_value(value)
        self._children: List["MetadataNode"] = []
        self._frozen = False

    @property
    def value(self) -> Optional[str]:
        return self._value

    @property
    def children(self) -> List["MetadataNode"]:
        return list(self._children)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _child(self, name: str) -> Optional["MetadataNode"]:
        for child in self._children:
            if child.name == name:
                return child
        return None

    def add_child(self, path: str, value=None) -> "MetadataNode":
        """Create (or reuse) the node at ``path`` and return it.

        Intermediate nodes are created as needed. When ``value`` is given
        it replaces the value of the target node.

        Raises
        ------
        ContractViolation
            If any node on the path is frozen and would have to change.
        """
        node = self
        for part in path.split(PATH_SEPARATOR):
            child = node._child(part)
            if child is None:
                require(not node._frozen,
                        f"Metadata contract violated: node '{node.name}' is frozen, cannot add '{part}'")
                child = MetadataNode(part)
                node._children.append(child)
            node = child
        if value is not None:
            require(not node._frozen,
                    f"Metadata contract violated: node '{node.name}' is frozen")
            node._value = format_value(value)
        return node

    def find_child(self, path: str) -> Optional["MetadataNode"]:
        """Node at ``path`` below this node, or None when not found."""
        node = self
        for part in path.split(PATH_SEPARATOR):
            node = node._child(part)
            if node is None:
                return None
        return node

    def freeze(self):
        """Make this subtree read-only."""
        self._frozen = True
        for child in self._children:
            child.freeze()

    def to_dict(self) -> dict:
        """Nested ``{name, value, children}`` mapping for consumers."""
        return {
            "name": self.name,
            "value": self._value,
            "children": [child.to_dict() for child in self._children],
        }

    def __iter__(self):
        return iter(self._children)

    def __len__(self):
        return len(self._children)

    def __repr__(self):
        return f"MetadataNode({self.name!r}, value={self._value!r}, children={len(self._children)})"
