"""Tests for the metadata tree."""

import numpy as np
import pytest

from pcstream.contracts import ContractViolation
from pcstream.core import MetadataNode
from pcstream.core.metadata import format_value

pytestmark = pytest.mark.unit


class TestFormatValue:
    """Test deterministic value rendering."""

    def test_float_fixed_precision(self):
        assert format_value(1.0) == "1.0000000000"
        assert format_value(np.float64(0.1)) == "0.1000000000"

    def test_integers_exact(self):
        assert format_value(737) == "737"
        assert format_value(np.uint8(2)) == "2"

    def test_booleans(self):
        assert format_value(True) == "true"
        assert format_value(np.bool_(False)) == "false"

    def test_strings_and_none(self):
        assert format_value("constant") == "constant"
        assert format_value(None) is None


class TestTree:
    """Test add_child / find_child."""

    def test_add_creates_intermediate_nodes(self):
        root = MetadataNode("root")
        root.add_child("filters.stats:X:count", 1000)
        stage = root.find_child("filters.stats")
        assert stage is not None
        assert stage.value is None
        assert [c.name for c in stage.children] == ["X"]
        assert root.find_child("filters.stats:X:count").value == "1000"

    def test_find_missing_returns_none(self):
        root = MetadataNode("root")
        root.add_child("a:b", 1)
        assert root.find_child("a:c") is None
        assert root.find_child("z") is None

    def test_add_reuses_existing_nodes(self):
        root = MetadataNode("root")
        root.add_child("a:b", 1)
        root.add_child("a:c", 2)
        assert len(root.find_child("a")) == 2
        assert len(root) == 1

    def test_add_updates_value(self):
        root = MetadataNode("root")
        root.add_child("a", 1)
        root.add_child("a", 2)
        assert root.find_child("a").value == "2"

    def test_frozen_subtree_rejects_additions(self):
        root = MetadataNode("root")
        root.add_child("filters.stats:X:count", 1)
        root.find_child("filters.stats").freeze()
        with pytest.raises(ContractViolation, match="frozen"):
            root.add_child("filters.stats:Y:count", 2)
        with pytest.raises(ContractViolation, match="frozen"):
            root.add_child("filters.stats:X:count", 3)
        assert root.find_child("filters.stats:X:count").value == "1"

    def test_siblings_of_frozen_subtree_still_grow(self):
        root = MetadataNode("root")
        root.add_child("readers.faux:num_points", 10)
        root.find_child("readers.faux").freeze()
        root.add_child("filters.stats:X:count", 10)
        assert root.find_child("filters.stats:X:count").value == "10"

    def test_name_with_separator_rejected(self):
        with pytest.raises(ContractViolation):
            MetadataNode("a:b")

    def test_to_dict(self):
        root = MetadataNode("root")
        root.add_child("a:b", 1.5)
        assert root.to_dict() == {
            "name": "root",
            "value": None,
            "children": [{
                "name": "a",
                "value": None,
                "children": [{"name": "b", "value": "1.5000000000", "children": []}],
            }],
        }
