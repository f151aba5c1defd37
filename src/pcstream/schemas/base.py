"""Base Pydantic model with strict defaults for pcstream options.

All option and configuration schemas inherit from this base to ensure
consistent validation behavior across stages and the pipeline config.
"""

from pydantic import BaseModel, ConfigDict


class PcstreamBaseModel(BaseModel):
    """Base model for all pcstream configuration schemas.

    Enforces strict validation:
    - No extra fields allowed
    - Validates assignments after initialization
    - Strips whitespace from strings
    """

    model_config = ConfigDict(
        extra='forbid',           # Reject unknown fields
        validate_assignment=True, # Validate on field mutation
        use_enum_values=True,     # Convert enums to values
        str_strip_whitespace=True,# Strip whitespace from strings
    )
