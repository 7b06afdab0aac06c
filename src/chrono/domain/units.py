"""
ChronoUnit / ChronoField — Единицы шага и поля времени

Единственный допустимый способ:
- измерить расстояние между двумя временными значениями в единицах (between)
- сдвинуть временное значение на целое число единиц (add_to)
- проверить значение поля времени на допустимый диапазон (check_valid_value)

Поддерживаемые типы значений:
- datetime.date     — только date-based единицы (DAYS, WEEKS, MONTHS, YEARS)
- datetime.datetime — все единицы
- любой объект с методами advance(amount, unit) или plus(amount, unit)
  и until(end, unit)
  (например, WallClockTime) — делегирование самому значению

Календарь: пролептический григорианский (как у datetime.date).
"""

import calendar
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Dict, Final, Optional, Protocol, Tuple, TypeVar

from src.chrono.errors import InvalidFieldError, UnsupportedUnitError

T = TypeVar("T")


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

HOURS_PER_DAY: Final[int] = 24
HOURS_PER_HALF_DAY: Final[int] = HOURS_PER_DAY // 2
MINUTES_PER_HOUR: Final[int] = 60
MINUTES_PER_DAY: Final[int] = MINUTES_PER_HOUR * HOURS_PER_DAY
SECONDS_PER_MINUTE: Final[int] = 60
SECONDS_PER_DAY: Final[int] = SECONDS_PER_MINUTE * MINUTES_PER_DAY
MONTHS_PER_YEAR: Final[int] = 12
DAYS_PER_WEEK: Final[int] = 7

_ONE_MICROSECOND: Final[timedelta] = timedelta(microseconds=1)


# =============================================================================
# STEP UNIT PROTOCOL
# =============================================================================


class StepUnit(Protocol[T]):
    """
    Capability единицы шага, которую требует TemporalRange.

    Любой объект с этими двумя методами может использоваться как unit
    (ChronoUnit реализует протокол для date/datetime/WallClockTime).
    """

    def between(self, start: T, end: T) -> int:
        """Знаковое число целых единиц от start до end (усечение к нулю)."""
        ...

    def add_to(self, value: T, amount: int) -> T:
        """Новое значение: value, сдвинутое на amount единиц."""
        ...


# =============================================================================
# CHRONO UNIT
# =============================================================================


class ChronoUnit(str, Enum):
    """Стандартные единицы шага."""

    MINUTES = "minutes"
    HOURS = "hours"
    HALF_DAYS = "half_days"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"

    @property
    def is_time_based(self) -> bool:
        return self in _TIME_BASED

    @property
    def is_date_based(self) -> bool:
        return not self.is_time_based

    @property
    def duration(self) -> Optional[timedelta]:
        """
        Фиксированная длительность единицы.

        Returns:
            timedelta или None для MONTHS/YEARS (переменная длительность)
        """
        return _FIXED_DURATIONS.get(self)

    def between(self, start: Any, end: Any) -> int:
        """
        Расстояние от start до end в единицах этого типа.

        Результат усекается к нулю: неполная единица не считается.

        Args:
            start: Начальное значение (включительно)
            end: Конечное значение (исключительно)

        Returns:
            Знаковое целое число единиц (отрицательное, если end < start)

        Raises:
            UnsupportedUnitError: Если единица не применима к типу значений
        """
        if isinstance(start, datetime):
            return self._between_datetimes(start, end)
        if isinstance(start, date):
            return self._between_dates(start, end)

        until = getattr(start, "until", None)
        if callable(until):
            return until(end, self)

        raise UnsupportedUnitError(
            f"Unsupported unit {self.name} for value of type {type(start).__name__}"
        )

    def add_to(self, value: Any, amount: int) -> Any:
        """
        Сдвиг значения на amount единиц.

        Args:
            value: Исходное значение
            amount: Знаковое число единиц

        Returns:
            Новое значение того же типа

        Raises:
            UnsupportedUnitError: Если единица не применима к типу значения
        """
        if isinstance(value, date):
            # datetime является подклассом date
            if self.is_time_based and not isinstance(value, datetime):
                raise UnsupportedUnitError(f"Unsupported unit for date: {self.name}")
            if amount == 0:
                return value
            if self is ChronoUnit.MONTHS:
                return _plus_months(value, amount)
            if self is ChronoUnit.YEARS:
                return _plus_months(value, amount * MONTHS_PER_YEAR)
            return value + _FIXED_DURATIONS[self] * amount

        # Шаг диапазона: сначала advance() (сквозной сдвиг), затем plus()
        for method in ("advance", "plus"):
            shift = getattr(value, method, None)
            if callable(shift):
                return shift(amount, self)

        raise UnsupportedUnitError(
            f"Unsupported unit {self.name} for value of type {type(value).__name__}"
        )

    def _between_dates(self, start: date, end: date) -> int:
        if self.is_time_based:
            raise UnsupportedUnitError(f"Unsupported unit for date: {self.name}")
        if isinstance(end, datetime):
            end = end.date()

        if self is ChronoUnit.DAYS:
            return (end - start).days
        if self is ChronoUnit.WEEKS:
            return trunc_div((end - start).days, DAYS_PER_WEEK)

        months = _months_between(start, end, (start.day,), (end.day,))
        if self is ChronoUnit.YEARS:
            return trunc_div(months, MONTHS_PER_YEAR)
        return months

    def _between_datetimes(self, start: datetime, end: Any) -> int:
        if not isinstance(end, datetime):
            raise UnsupportedUnitError(
                f"Cannot measure {self.name} between datetime and {type(end).__name__}"
            )

        duration = _FIXED_DURATIONS.get(self)
        if duration is not None:
            return trunc_div((end - start) // _ONE_MICROSECOND, duration // _ONE_MICROSECOND)

        months = _months_between(
            start, end, (start.day, start.time()), (end.day, end.time())
        )
        if self is ChronoUnit.YEARS:
            return trunc_div(months, MONTHS_PER_YEAR)
        return months


_TIME_BASED: Final = frozenset({ChronoUnit.MINUTES, ChronoUnit.HOURS, ChronoUnit.HALF_DAYS})

_FIXED_DURATIONS: Final[Dict[ChronoUnit, timedelta]] = {
    ChronoUnit.MINUTES: timedelta(minutes=1),
    ChronoUnit.HOURS: timedelta(hours=1),
    ChronoUnit.HALF_DAYS: timedelta(hours=HOURS_PER_HALF_DAY),
    ChronoUnit.DAYS: timedelta(days=1),
    ChronoUnit.WEEKS: timedelta(days=DAYS_PER_WEEK),
}


# =============================================================================
# CHRONO FIELD
# =============================================================================


class ChronoField(str, Enum):
    """Поля времени с допустимыми диапазонами значений."""

    HOUR_OF_DAY = "hour_of_day"
    MINUTE_OF_HOUR = "minute_of_hour"
    MINUTE_OF_DAY = "minute_of_day"
    HOUR_OF_AMPM = "hour_of_ampm"
    CLOCK_HOUR_OF_DAY = "clock_hour_of_day"
    CLOCK_HOUR_OF_AMPM = "clock_hour_of_ampm"
    AMPM_OF_DAY = "ampm_of_day"
    SECOND_OF_MINUTE = "second_of_minute"
    SECOND_OF_DAY = "second_of_day"
    DAY_OF_MONTH = "day_of_month"

    @property
    def value_range(self) -> Tuple[int, int]:
        """Допустимый диапазон (min, max), обе границы включительно."""
        return _FIELD_RANGES[self]

    def is_valid_value(self, value: int) -> bool:
        minimum, maximum = _FIELD_RANGES[self]
        return minimum <= value <= maximum

    def check_valid_value(self, value: int) -> int:
        """
        Проверка значения поля.

        Args:
            value: Проверяемое значение

        Returns:
            value без изменений

        Raises:
            InvalidFieldError: Если значение вне допустимого диапазона
        """
        if not self.is_valid_value(value):
            minimum, maximum = _FIELD_RANGES[self]
            raise InvalidFieldError(
                f"Invalid value for {self.name} (valid values {minimum} - {maximum}): {value}"
            )
        return value


_FIELD_RANGES: Final[Dict[ChronoField, Tuple[int, int]]] = {
    ChronoField.HOUR_OF_DAY: (0, HOURS_PER_DAY - 1),
    ChronoField.MINUTE_OF_HOUR: (0, MINUTES_PER_HOUR - 1),
    ChronoField.MINUTE_OF_DAY: (0, MINUTES_PER_DAY - 1),
    ChronoField.HOUR_OF_AMPM: (0, HOURS_PER_HALF_DAY - 1),
    ChronoField.CLOCK_HOUR_OF_DAY: (1, HOURS_PER_DAY),
    ChronoField.CLOCK_HOUR_OF_AMPM: (1, HOURS_PER_HALF_DAY),
    ChronoField.AMPM_OF_DAY: (0, 1),
    ChronoField.SECOND_OF_MINUTE: (0, SECONDS_PER_MINUTE - 1),
    ChronoField.SECOND_OF_DAY: (0, SECONDS_PER_DAY - 1),
    ChronoField.DAY_OF_MONTH: (1, 31),
}


# =============================================================================
# КАЛЕНДАРНАЯ АРИФМЕТИКА
# =============================================================================


def trunc_div(numerator: int, denominator: int) -> int:
    """Целочисленное деление с усечением к нулю (в отличие от //)."""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def _months_between(start: date, end: date, start_rest: tuple, end_rest: tuple) -> int:
    """
    Полные месяцы от start до end.

    start_rest / end_rest — остаток внутри месяца (день, время): неполный
    последний месяц не засчитывается.
    """
    months = (end.year * MONTHS_PER_YEAR + end.month) - (start.year * MONTHS_PER_YEAR + start.month)
    if months > 0 and end_rest < start_rest:
        months -= 1
    elif months < 0 and end_rest > start_rest:
        months += 1
    return months


def _plus_months(value: date, months: int) -> date:
    """
    Сдвиг на months месяцев.

    День месяца ограничивается последним днём целевого месяца
    (31 января + 1 месяц = 28/29 февраля).
    """
    total = value.year * MONTHS_PER_YEAR + (value.month - 1) + months
    year, month_index = divmod(total, MONTHS_PER_YEAR)
    month = month_index + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)
