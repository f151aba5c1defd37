"""Tests for pipeline contracts.

These tests verify that contracts raise ContractViolation at the point
of misuse, before any point reaches a later stage.
"""

import pytest

from pcstream.contracts import (
    ContractViolation,
    assert_in_schema,
    assert_state,
    assert_within_capacity,
    require,
)
from pcstream.core import Schema
from pcstream.stages import StageState, StatsFilter

pytestmark = pytest.mark.unit


class TestRequire:
    """Test the base enforcement function."""

    def test_require_passes(self):
        # Should not raise
        require(True, "never shown")

    def test_require_raises_with_message(self):
        with pytest.raises(ContractViolation, match="broken invariant"):
            require(False, "broken invariant")

    def test_contract_violation_is_runtime_error(self):
        assert issubclass(ContractViolation, RuntimeError)


class TestLifecycleContract:
    """Test stage state enforcement."""

    def test_allowed_state_passes(self):
        stage = StatsFilter()
        assert_state(stage, StageState.UNINITIALIZED, action="prepare")

    def test_wrong_state_names_stage_and_states(self):
        stage = StatsFilter({"stage_id": "my.stats"})
        with pytest.raises(ContractViolation, match="cannot read from 'my.stats' in state 'uninitialized'"):
            assert_state(stage, StageState.ITERATING, action="read from")


class TestLayoutContract:
    """Test buffer layout enforcement."""

    def test_index_within_limit_passes(self):
        assert_within_capacity(0, 1, "capacity")

    @pytest.mark.parametrize("index", [-1, 5, 6])
    def test_index_outside_limit_fails(self, index):
        with pytest.raises(ContractViolation, match="outside capacity 5"):
            assert_within_capacity(index, 5, "capacity")

    def test_dimension_in_layout(self):
        schema = Schema()
        dim = schema.add_dimension("X", "float64", "r")
        columns = {dim.handle: (dim, None)}
        assert_in_schema(dim, columns)

    def test_dimension_with_same_handle_other_schema_fails(self):
        first, second = Schema(), Schema()
        mine = first.add_dimension("X", "float64", "r")
        theirs = second.add_dimension("Y", "float64", "q")
        with pytest.raises(ContractViolation, match="q.Y"):
            assert_in_schema(theirs, {mine.handle: (mine, None)})
