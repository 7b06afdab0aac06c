"""
Contract Validation Module

JSON Schema validation for the plain value encodings.
"""

from .validators import (
    ContractValidator,
    DateRangeValidator,
    SchemaLoader,
    WallClockTimeValidator,
    validate_date_range,
    validate_wall_clock_time,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "WallClockTimeValidator",
    "DateRangeValidator",
    # Functions
    "validate_wall_clock_time",
    "validate_date_range",
]
