"""
Clock — Источник текущего момента времени и часового пояса

Используется только WallClockTime.now(). Чтение одного значения:
синхронное, неблокирующее.

- SystemClock: системное время в заданном поясе
- FixedClock: фиксированный момент (для тестов и воспроизводимых расчётов)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional, Protocol


class Clock(Protocol):
    """Capability часов: текущий момент (aware datetime) и пояс."""

    @property
    def zone(self) -> tzinfo:
        ...

    def instant(self) -> datetime:
        ...


def system_default_zone() -> tzinfo:
    """Локальный пояс процесса (фиксированное смещение на текущий момент)."""
    return datetime.now().astimezone().tzinfo or timezone.utc


@dataclass(frozen=True)
class SystemClock:
    """Системные часы в поясе zone (по умолчанию — локальный пояс)."""

    zone: tzinfo = timezone.utc

    @classmethod
    def default_zone(cls) -> "SystemClock":
        return cls(system_default_zone())

    def instant(self) -> datetime:
        return datetime.now(timezone.utc)


@dataclass(frozen=True)
class FixedClock:
    """
    Часы, всегда возвращающие один и тот же момент.

    Naive instant трактуется как UTC.
    """

    fixed_instant: datetime
    zone: tzinfo = timezone.utc

    def instant(self) -> datetime:
        if self.fixed_instant.tzinfo is None:
            return self.fixed_instant.replace(tzinfo=timezone.utc)
        return self.fixed_instant

    def offset(self, duration: timedelta) -> "FixedClock":
        """Новые часы, сдвинутые на duration (исходные не меняются)."""
        return FixedClock(self.fixed_instant + duration, self.zone)

    def with_zone(self, zone: Optional[tzinfo]) -> "FixedClock":
        return FixedClock(self.fixed_instant, zone or timezone.utc)
