"""
Temporal ranges.

Generic lazy range over steppable values, its date specialization,
plain-value definition and parallel consumption through splitting.
"""

from src.chrono.ranges.date_range import LocalDateRange
from src.chrono.ranges.definition import DateRangeDefinition
from src.chrono.ranges.parallel import (
    ParallelConfig,
    parallel_for_each,
    parallel_map,
    partition,
)
from src.chrono.ranges.temporal_range import (
    RANGE_CHARACTERISTICS,
    Characteristics,
    RangeIterator,
    RangeSplitter,
    TemporalRange,
)

__all__ = [
    # Generic range
    "TemporalRange",
    "RangeIterator",
    "RangeSplitter",
    "Characteristics",
    "RANGE_CHARACTERISTICS",
    # Dates
    "LocalDateRange",
    "DateRangeDefinition",
    # Parallel consumption
    "ParallelConfig",
    "partition",
    "parallel_map",
    "parallel_for_each",
]
