"""
Domain value objects.

Contains the wall-clock time-of-day value, step units, fields and clocks.
"""

from src.chrono.domain.clock import Clock, FixedClock, SystemClock
from src.chrono.domain.units import (
    HOURS_PER_DAY,
    MINUTES_PER_DAY,
    MINUTES_PER_HOUR,
    SECONDS_PER_DAY,
    ChronoField,
    ChronoUnit,
    StepUnit,
)
from src.chrono.domain.wall_clock_time import WALL_CLOCK_TIME_PATTERN, WallClockTime

__all__ = [
    # Units module
    "HOURS_PER_DAY",
    "MINUTES_PER_DAY",
    "MINUTES_PER_HOUR",
    "SECONDS_PER_DAY",
    "ChronoField",
    "ChronoUnit",
    "StepUnit",
    # Clocks
    "Clock",
    "FixedClock",
    "SystemClock",
    # Wall-clock time
    "WALL_CLOCK_TIME_PATTERN",
    "WallClockTime",
]
