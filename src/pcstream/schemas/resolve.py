"""Configuration resolution and merging logic.

Single entrypoint: resolve_config(). It merges override mappings over the
PipelineConfig defaults and returns a validated PipelineConfig.

Precedence (highest to lowest):
1. Later overrides
2. Earlier overrides
3. PipelineConfig defaults
"""

from typing import Optional, Union

from pcstream.schemas.pipeline import PipelineConfig


def deep_merge(base: dict, *overrides: dict) -> dict:
    """Deep merge multiple dictionaries.

    Later dictionaries override earlier ones. Nested dictionaries are
    merged recursively; other values are replaced.

    Examples
    --------
    >>> base = {"a": 1, "b": {"c": 2, "d": 3}}
    >>> override = {"b": {"d": 4, "e": 5}, "f": 6}
    >>> deep_merge(base, override)
    {'a': 1, 'b': {'c': 2, 'd': 4, 'e': 5}, 'f': 6}
    """
    result = base.copy()

    for override in overrides:
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = deep_merge(result[key], value)
            else:
                result[key] = value

    return result


def resolve_config(
    defaults: Optional[Union[dict, PipelineConfig]] = None,
    *overrides: Optional[dict],
) -> PipelineConfig:
    """Resolve the runtime PipelineConfig.

    Parameters
    ----------
    defaults : dict or PipelineConfig, optional
        Base configuration. ``None`` means the built-in defaults.
    *overrides : dict
        Partial nested mappings applied left to right. ``None`` entries
        are skipped.

    Returns
    -------
    PipelineConfig
        Fully validated configuration.

    Raises
    ------
    ValidationError
        If the merged mapping fails Pydantic validation.

    Examples
    --------
    >>> config = resolve_config(None, {"iterator": {"chunk_size": 512}})
    >>> config.iterator.chunk_size
    512
    >>> config.logging.level
    'INFO'
    """
    if defaults is None:
        base = PipelineConfig()
    elif not isinstance(defaults, PipelineConfig):
        base = PipelineConfig.model_validate(defaults)
    else:
        base = defaults

    merged = deep_merge(base.model_dump(), *[o for o in overrides if o])
    return PipelineConfig.model_validate(merged)
