"""Per-stage option schemas.

Each stage validates its options once, at construction, through one of
these models. Dimension lists accept either a list of names or a single
string with names separated by commas and/or whitespace::

    StatsOptions(dimensions="X,readers.faux.Y Z")
"""

import re
from typing import Literal, Optional

from pydantic import Field, field_validator, model_validator

from pcstream.schemas.base import PcstreamBaseModel

_SEPARATORS = re.compile(r"[,\s]+")


def split_names(v):
    """Split a comma/space separated string into names; pass lists through."""
    if v is None:
        return []
    if isinstance(v, str):
        return [name for name in _SEPARATORS.split(v) if name]
    return [str(name).strip() for name in v if str(name).strip()]


class StageOptions(PcstreamBaseModel):
    """Options shared by every stage."""
    stage_id: Optional[str] = Field(
        None, description="Stage identity; defaults to the stage's registered name"
    )

    @field_validator("stage_id")
    @classmethod
    def reject_separator(cls, v):
        """The identity is a metadata path component and a dimension namespace."""
        if v is not None and (not v or ":" in v):
            raise ValueError("stage_id must be non-empty and must not contain ':'")
        return v


class FauxReaderOptions(StageOptions):
    """Synthetic point generator options."""
    bounds: tuple[tuple[float, float, float], tuple[float, float, float]] = (
        (0.0, 0.0, 0.0),
        (1.0, 1.0, 1.0),
    )
    num_points: int = Field(10, ge=0)
    mode: Literal["constant", "random", "ramp"] = "constant"
    seed: int = 0

    @field_validator("mode", mode="before")
    @classmethod
    def normalize_mode(cls, v):
        """Normalize mode names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v

    @model_validator(mode="after")
    def check_bounds_order(self):
        lower, upper = self.bounds
        if any(lo > hi for lo, hi in zip(lower, upper)):
            raise ValueError(f"bounds minimum {lower} exceeds maximum {upper}")
        return self


class ArrayReaderOptions(StageOptions):
    """In-memory column reader options."""
    dtypes: dict[str, str] = Field(
        default_factory=dict,
        description="Optional storage type per column; inferred from the arrays otherwise",
    )


class RescaleOptions(StageOptions):
    """Options for the rescaling transformer.

    Every listed dimension is re-emitted under ``<stage_id>.<name>`` with
    ``value * scale + offset``; the source dimension stays in the schema.
    """
    dimensions: list[str] = Field(default_factory=lambda: ["X", "Y", "Z"])
    scale: float = 1.0
    offset: float = 0.0

    @field_validator("dimensions", mode="before")
    @classmethod
    def split_dimensions(cls, v):
        return split_names(v)


class StatsOptions(StageOptions):
    """Statistics filter options.

    - ``dimensions``: names resolved with base-name fallback
    - ``exact_dimensions``: names requiring a literal qualified match
    - ``count``: dimensions whose distinct values are tallied

    Leaving both ``dimensions`` and ``exact_dimensions`` empty tracks every
    dimension in the schema.
    """
    dimensions: list[str] = Field(default_factory=list)
    exact_dimensions: list[str] = Field(default_factory=list)
    count: list[str] = Field(default_factory=list)
    max_distinct_values: int = Field(
        1024, ge=1, description="Cap on distinct values tallied per counted dimension"
    )

    @field_validator("dimensions", "exact_dimensions", "count", mode="before")
    @classmethod
    def split_dimension_lists(cls, v):
        return split_names(v)

    @property
    def selects_all(self) -> bool:
        return not self.dimensions and not self.exact_dimensions
