"""Test pipeline config resolution and validation with Pydantic."""

import pytest
from pydantic import ValidationError

from pcstream.schemas import PipelineConfig, resolve_config
from pcstream.schemas.resolve import deep_merge

pytestmark = pytest.mark.unit


class TestDeepMerge:
    """Test deep_merge()."""

    def test_nested_merge(self):
        base = {"a": 1, "b": {"c": 2, "d": 3}}
        override = {"b": {"d": 4, "e": 5}, "f": 6}
        assert deep_merge(base, override) == {"a": 1, "b": {"c": 2, "d": 4, "e": 5}, "f": 6}

    def test_base_not_mutated(self):
        base = {"b": {"c": 2}}
        deep_merge(base, {"b": {"c": 3}})
        assert base == {"b": {"c": 2}}

    def test_later_overrides_win(self):
        assert deep_merge({"a": 1}, {"a": 2}, {"a": 3}) == {"a": 3}


class TestResolveConfig:
    """Test resolve_config() precedence."""

    def test_all_defaults(self):
        config = resolve_config()
        assert isinstance(config, PipelineConfig)
        assert config.iterator.chunk_size == 65536
        assert config.logging.level == "INFO"
        assert config.logging.configure is False

    def test_override_applies(self):
        config = resolve_config(None, {"iterator": {"chunk_size": 512}})
        assert config.iterator.chunk_size == 512
        assert config.logging.level == "INFO"

    def test_defaults_from_dict(self):
        config = resolve_config({"logging": {"level": "DEBUG"}})
        assert config.logging.level == "DEBUG"

    def test_none_overrides_skipped(self):
        config = resolve_config(PipelineConfig(), None, {"logging": {"level": "ERROR"}})
        assert config.logging.level == "ERROR"

    def test_invalid_chunk_size_rejected(self):
        with pytest.raises(ValidationError):
            resolve_config(None, {"iterator": {"chunk_size": 0}})

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            resolve_config(None, {"iterator": {"chunksize": 10}})
