"""
LocalDateRange — Диапазон календарных дат

Специализация TemporalRange[date]: реализует только фабрики,
остальное поведение наследуется.
"""

from datetime import date

from src.chrono.domain.units import ChronoUnit
from src.chrono.ranges.temporal_range import TemporalRange


class LocalDateRange(TemporalRange[date]):
    """Ежедневный (или еженедельный) диапазон дат [start, end)."""

    @classmethod
    def of(cls, start: date, end_exclusive: date) -> "LocalDateRange":
        """
        Каждый день от start (включительно) до end_exclusive (исключительно).

        Raises:
            NullArgumentError: Если дата не передана
            InvalidRangeError: Если end_exclusive не позже start
        """
        return cls(start, end_exclusive, 1, ChronoUnit.DAYS)

    @classmethod
    def of_days(cls, start: date, days: int) -> "LocalDateRange":
        """
        days дней от start; при отрицательном days — назад во времени.

        of_days(d, -3) даёт d, d - 1, d - 2.
        """
        step = -1 if days < 0 else 1
        return cls.from_length(start, days, step, ChronoUnit.DAYS)

    @classmethod
    def weekly(cls, start: date, end_exclusive: date) -> "LocalDateRange":
        """Каждая неделя от start до end_exclusive (неполная неделя не входит)."""
        return cls(start, end_exclusive, 1, ChronoUnit.WEEKS)
