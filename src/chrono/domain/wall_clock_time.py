"""
WallClockTime — Время суток (час, минута) без даты и пояса

Immutable value-тип:
- hour ∈ [0, 23], minute ∈ [0, 59] — всегда в допустимых границах
- minute-of-day = hour * 60 + minute — единственный источник порядка и равенства
- 24 значения с minute == 0 кэшируются при импорте модуля (singletons)
- все "мутаторы" (with_*, plus_*, minus_*) возвращают новое или кэшированное значение

Текстовое представление: строго HH:MM, 24-часовой формат, с ведущими нулями.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. of(h, 0) всегда возвращает один и тот же объект
2. of_minute_of_day(h * 60 + m) == of(h, m)
3. Порядок WallClockTime совпадает с порядком minute-of-day
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, ClassVar, Final, Optional, Tuple, Union

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic_core import core_schema

from src.chrono.domain.clock import Clock, SystemClock
from src.chrono.domain.units import (
    HOURS_PER_DAY,
    HOURS_PER_HALF_DAY,
    MINUTES_PER_DAY,
    MINUTES_PER_HOUR,
    SECONDS_PER_DAY,
    SECONDS_PER_MINUTE,
    ChronoField,
    ChronoUnit,
    trunc_div,
)
from src.chrono.errors import (
    InvalidFieldError,
    NullArgumentError,
    UnsupportedFieldError,
    UnsupportedSourceError,
    UnsupportedUnitError,
)

WALL_CLOCK_TIME_PATTERN: Final[str] = r"^([01][0-9]|2[0-3]):[0-5][0-9]$"

_HH_MM: Final = re.compile(r"([0-9]{2}):([0-9]{2})")
_EPOCH: Final[datetime] = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_SECOND: Final[timedelta] = timedelta(seconds=1)
_ONE_MINUTE: Final[timedelta] = timedelta(minutes=1)

_SUPPORTED_FIELDS: Final = frozenset(
    {
        ChronoField.HOUR_OF_DAY,
        ChronoField.MINUTE_OF_HOUR,
        ChronoField.MINUTE_OF_DAY,
        ChronoField.HOUR_OF_AMPM,
        ChronoField.CLOCK_HOUR_OF_DAY,
        ChronoField.CLOCK_HOUR_OF_AMPM,
        ChronoField.AMPM_OF_DAY,
    }
)
_SUPPORTED_UNITS: Final = frozenset({ChronoUnit.MINUTES, ChronoUnit.HOURS, ChronoUnit.HALF_DAYS})


@dataclass(frozen=True, eq=False)
class WallClockTime:
    """
    Время суток с точностью до минуты.

    Создавайте через фабрики (of, of_minute_of_day, parse, now, from_temporal):
    только они используют кэш целых часов. Прямой вызов конструктора тоже
    проверяет поля, но всегда создаёт новый объект.
    """

    hour: int
    minute: int = 0

    MIN: ClassVar["WallClockTime"]
    MAX: ClassVar["WallClockTime"]
    MIDNIGHT: ClassVar["WallClockTime"]
    NOON: ClassVar["WallClockTime"]

    def __post_init__(self) -> None:
        _check_field(ChronoField.HOUR_OF_DAY, self.hour)
        _check_field(ChronoField.MINUTE_OF_HOUR, self.minute)

    # =========================================================================
    # ФАБРИКИ
    # =========================================================================

    @classmethod
    def of(cls, hour: int, minute: int = 0) -> "WallClockTime":
        """
        Время суток из часа и минуты.

        Args:
            hour: Час [0, 23]
            minute: Минута [0, 59]

        Returns:
            Кэшированный singleton при minute == 0, иначе новое значение

        Raises:
            InvalidFieldError: Если час или минута вне допустимого диапазона
        """
        _check_field(ChronoField.HOUR_OF_DAY, hour)
        if minute == 0:
            return _WHOLE_HOURS[hour]
        return cls(hour, minute)

    @classmethod
    def of_minute_of_day(cls, minute_of_day: int) -> "WallClockTime":
        """
        Время суток из minute-of-day.

        Без проверки диапазона: значение вне [0, 1439] заворачивается
        по модулю суток (1440 → 00:00, -1 → 23:59).
        """
        hour, minute = divmod(minute_of_day % MINUTES_PER_DAY, MINUTES_PER_HOUR)
        return _create(hour, minute)

    @classmethod
    def now(cls, clock_or_zone: Union[Clock, tzinfo, None] = None) -> "WallClockTime":
        """
        Текущее время суток.

        Args:
            clock_or_zone: Clock, tzinfo (системные часы в этом поясе)
                или None (системные часы, локальный пояс)

        Returns:
            Время суток текущего момента в поясе часов
        """
        if clock_or_zone is None:
            clock: Clock = SystemClock.default_zone()
        elif isinstance(clock_or_zone, tzinfo):
            clock = SystemClock(clock_or_zone)
        else:
            clock = clock_or_zone
        return cls.of_instant(clock.instant(), clock.zone)

    @classmethod
    def of_instant(cls, instant: datetime, zone: tzinfo) -> "WallClockTime":
        """
        Время суток момента instant в поясе zone.

        Секунда суток считается через floor-деление, поэтому моменты
        до 1970-01-01 обрабатываются корректно. Naive instant трактуется как UTC.

        Raises:
            NullArgumentError: Если instant или zone не переданы
        """
        if instant is None:
            raise NullArgumentError("instant must not be None")
        if zone is None:
            raise NullArgumentError("zone must not be None")
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)

        offset = instant.astimezone(zone).utcoffset() or timedelta(0)
        epoch_second = (instant - _EPOCH) // _ONE_SECOND
        local_second = epoch_second + offset // _ONE_SECOND
        second_of_day = local_second % SECONDS_PER_DAY
        return cls.of_minute_of_day(second_of_day // SECONDS_PER_MINUTE)

    @classmethod
    def from_temporal(cls, source: Any) -> "WallClockTime":
        """
        Время суток из произвольного временного значения.

        Источник опрашивается на minute-of-day (см. _query_minute_of_day):
        WallClockTime, объект с to_minute_of_day(), либо объект с целыми
        атрибутами hour/minute (datetime.time, datetime.datetime).

        Raises:
            NullArgumentError: Если source не передан
            UnsupportedSourceError: Если источник не даёт minute-of-day
        """
        if source is None:
            raise NullArgumentError("source must not be None")
        if isinstance(source, WallClockTime):
            return source

        minute_of_day = _query_minute_of_day(source)
        if minute_of_day is None:
            raise UnsupportedSourceError(
                f"Unable to obtain WallClockTime from {source!r} "
                f"of type {type(source).__name__}"
            )
        return cls.of_minute_of_day(minute_of_day)

    @classmethod
    def parse(cls, text: str) -> "WallClockTime":
        """
        Разбор строки HH:MM (обратная операция к str()).

        Raises:
            InvalidFieldError: Если строка не в формате HH:MM или поля вне диапазона
        """
        match = _HH_MM.fullmatch(text) if isinstance(text, str) else None
        if match is None:
            raise InvalidFieldError(f"Text {text!r} could not be parsed as HH:MM")
        return cls.of(int(match.group(1)), int(match.group(2)))

    # =========================================================================
    # ПОЛЯ
    # =========================================================================

    def to_minute_of_day(self) -> int:
        return self.hour * MINUTES_PER_HOUR + self.minute

    def is_supported_field(self, field: Any) -> bool:
        return field in _SUPPORTED_FIELDS

    def is_supported_unit(self, unit: Any) -> bool:
        return unit in _SUPPORTED_UNITS

    def get(self, field: ChronoField) -> int:
        """
        Значение поля.

        Raises:
            UnsupportedFieldError: Если поле не поддерживается
        """
        if field is ChronoField.HOUR_OF_DAY:
            return self.hour
        if field is ChronoField.MINUTE_OF_HOUR:
            return self.minute
        if field is ChronoField.MINUTE_OF_DAY:
            return self.to_minute_of_day()
        if field is ChronoField.HOUR_OF_AMPM:
            return self.hour % HOURS_PER_HALF_DAY
        if field is ChronoField.CLOCK_HOUR_OF_DAY:
            return HOURS_PER_DAY if self.hour == 0 else self.hour
        if field is ChronoField.CLOCK_HOUR_OF_AMPM:
            clock_hour = self.hour % HOURS_PER_HALF_DAY
            return HOURS_PER_HALF_DAY if clock_hour == 0 else clock_hour
        if field is ChronoField.AMPM_OF_DAY:
            return self.hour // HOURS_PER_HALF_DAY
        raise UnsupportedFieldError(f"Unsupported field: {_name_of(field)}")

    # =========================================================================
    # НОВЫЕ ЗНАЧЕНИЯ
    # =========================================================================

    def with_hour(self, hour: int) -> "WallClockTime":
        if hour == self.hour:
            return self
        _check_field(ChronoField.HOUR_OF_DAY, hour)
        return _create(hour, self.minute)

    def with_minute(self, minute: int) -> "WallClockTime":
        if minute == self.minute:
            return self
        _check_field(ChronoField.MINUTE_OF_HOUR, minute)
        return _create(self.hour, minute)

    def with_field(self, field: ChronoField, value: int) -> "WallClockTime":
        """
        Копия с изменённым полем (HOUR_OF_DAY, MINUTE_OF_HOUR, MINUTE_OF_DAY).

        Raises:
            UnsupportedFieldError: Если поле не поддерживается для изменения
            InvalidFieldError: Если значение вне диапазона поля
        """
        if field is ChronoField.HOUR_OF_DAY:
            return self.with_hour(value)
        if field is ChronoField.MINUTE_OF_HOUR:
            return self.with_minute(value)
        if field is ChronoField.MINUTE_OF_DAY:
            _check_field(ChronoField.MINUTE_OF_DAY, value)
            return self.of_minute_of_day(value)
        raise UnsupportedFieldError(f"Unsupported field: {_name_of(field)}")

    def plus(self, amount: int, unit: Any) -> "WallClockTime":
        """
        Сдвиг на amount единиц (MINUTES, HOURS, HALF_DAYS).

        Единица, не являющаяся ChronoUnit, сама выполняет сдвиг через add_to.

        Raises:
            UnsupportedUnitError: Если ChronoUnit не поддерживается
        """
        if unit is None:
            raise NullArgumentError("unit must not be None")
        if unit is ChronoUnit.MINUTES:
            return self.plus_minutes(amount)
        if unit is ChronoUnit.HOURS:
            return self.plus_hours(amount)
        if unit is ChronoUnit.HALF_DAYS:
            return self.plus_hours((amount % 2) * HOURS_PER_HALF_DAY)
        if isinstance(unit, ChronoUnit):
            raise UnsupportedUnitError(f"Unsupported unit: {unit.name}")
        return unit.add_to(self, amount)

    def minus(self, amount: int, unit: Any) -> "WallClockTime":
        return self.plus(-amount, unit)

    def advance(self, amount: int, unit: Any) -> "WallClockTime":
        """
        Сдвиг по minute-of-day (через границу часа, по модулю суток).

        Шаг TemporalRange: 10:45 + 15 MINUTES = 11:00, в отличие от
        plus_minutes, который заворачивает минуту внутри часа.

        Raises:
            UnsupportedUnitError: Если единица не MINUTES / HOURS / HALF_DAYS
        """
        if unit is None:
            raise NullArgumentError("unit must not be None")
        if not isinstance(unit, ChronoUnit) or unit not in _SUPPORTED_UNITS:
            raise UnsupportedUnitError(f"Unsupported unit: {_name_of(unit)}")
        minutes = amount * (unit.duration // _ONE_MINUTE)
        return self.of_minute_of_day(self.to_minute_of_day() + minutes)

    def plus_hours(self, hours: int) -> "WallClockTime":
        """Сложение часов по модулю суток; минута не меняется."""
        if hours == 0:
            return self
        return _create((self.hour + hours) % HOURS_PER_DAY, self.minute)

    def plus_minutes(self, minutes: int) -> "WallClockTime":
        """
        Сложение минут по модулю часа.

        Минута заворачивается в пределах текущего часа, час не меняется:
        10:50 + 20 минут = 10:10. Для сдвига через границу часа используйте
        of_minute_of_day(t.to_minute_of_day() + minutes).
        """
        if minutes == 0:
            return self
        new_minute = (self.minute + minutes) % MINUTES_PER_HOUR
        if new_minute == self.minute:
            return self
        return _create(self.hour, new_minute)

    def minus_hours(self, hours: int) -> "WallClockTime":
        return self.plus_hours(-(hours % HOURS_PER_DAY))

    def minus_minutes(self, minutes: int) -> "WallClockTime":
        return self.plus_minutes(-(minutes % MINUTES_PER_HOUR))

    def until(self, end: Any, unit: Any) -> int:
        """
        Расстояние до end в единицах unit (MINUTES, HOURS).

        end приводится через from_temporal. Неполный час не считается
        (усечение к нулю).

        Raises:
            UnsupportedUnitError: Если ChronoUnit не поддерживается
        """
        if end is None or unit is None:
            raise NullArgumentError("end and unit must not be None")
        end_time = WallClockTime.from_temporal(end)
        minutes_until = end_time.to_minute_of_day() - self.to_minute_of_day()
        if unit is ChronoUnit.MINUTES:
            return minutes_until
        if unit is ChronoUnit.HOURS:
            return trunc_div(minutes_until, MINUTES_PER_HOUR)
        if isinstance(unit, ChronoUnit):
            raise UnsupportedUnitError(f"Unsupported unit: {unit.name}")
        return unit.between(self, end_time)

    def adjust_into(self, value: Any) -> Any:
        """
        Перенос часа и минуты в value (datetime.time / datetime.datetime).

        Секунды и более мелкие поля value сохраняются.
        """
        if isinstance(value, WallClockTime):
            return self
        replace = getattr(value, "replace", None)
        if not callable(replace):
            raise UnsupportedFieldError(
                f"Cannot adjust value of type {type(value).__name__} to {self}"
            )
        return replace(hour=self.hour, minute=self.minute)

    # =========================================================================
    # СРАВНЕНИЕ
    # =========================================================================

    def compare_to(self, other: "WallClockTime") -> int:
        """Отрицательное, ноль или положительное — как в порядке minute-of-day."""
        if other is None:
            raise NullArgumentError("other must not be None")
        return self.to_minute_of_day() - other.to_minute_of_day()

    def is_after(self, other: "WallClockTime") -> bool:
        return self.compare_to(other) > 0

    def is_before(self, other: "WallClockTime") -> bool:
        return self.compare_to(other) < 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, WallClockTime):
            return NotImplemented
        return self.to_minute_of_day() < other.to_minute_of_day()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, WallClockTime):
            return NotImplemented
        return self.to_minute_of_day() <= other.to_minute_of_day()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, WallClockTime):
            return NotImplemented
        return self.to_minute_of_day() > other.to_minute_of_day()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, WallClockTime):
            return NotImplemented
        return self.to_minute_of_day() >= other.to_minute_of_day()

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, WallClockTime):
            return NotImplemented
        return self.hour == other.hour and self.minute == other.minute

    def __hash__(self) -> int:
        minute_of_day = self.to_minute_of_day()
        return minute_of_day ^ (minute_of_day << 8)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    # =========================================================================
    # PYDANTIC
    # =========================================================================

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        # Валидация из HH:MM / datetime.time / WallClockTime, сериализация в HH:MM
        return core_schema.no_info_plain_validator_function(
            cls._coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls, schema: core_schema.CoreSchema, handler: GetJsonSchemaHandler
    ) -> dict:
        return {"type": "string", "pattern": WALL_CLOCK_TIME_PATTERN}

    @classmethod
    def _coerce(cls, value: Any) -> "WallClockTime":
        if isinstance(value, str):
            return cls.parse(value)
        try:
            return cls.from_temporal(value)
        except (NullArgumentError, UnsupportedSourceError) as exc:
            # pydantic превращает в ValidationError только ValueError
            raise ValueError(str(exc)) from exc


# =============================================================================
# ВСПОМОГАТЕЛЬНЫЕ ФУНКЦИИ
# =============================================================================


def _check_field(field: ChronoField, value: Any) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidFieldError(f"{field.name} must be an integer, got {value!r}")
    return field.check_valid_value(value)


def _create(hour: int, minute: int) -> WallClockTime:
    """Без проверки: вызывающий код гарантирует допустимые поля."""
    if minute == 0:
        return _WHOLE_HOURS[hour]
    return WallClockTime(hour, minute)


def _query_minute_of_day(source: Any) -> Optional[int]:
    """
    Capability-запрос minute-of-day.

    Returns:
        minute-of-day или None, если источник его не предоставляет
    """
    query = getattr(source, "to_minute_of_day", None)
    if callable(query):
        return query()

    hour = getattr(source, "hour", None)
    minute = getattr(source, "minute", None)
    if isinstance(hour, int) and isinstance(minute, int):
        return hour * MINUTES_PER_HOUR + minute
    return None


def _name_of(field: Any) -> str:
    return getattr(field, "name", repr(field))


# =============================================================================
# КЭШ ЦЕЛЫХ ЧАСОВ И КОНСТАНТЫ
# =============================================================================

_WHOLE_HOURS: Final[Tuple[WallClockTime, ...]] = tuple(
    WallClockTime(hour, 0) for hour in range(HOURS_PER_DAY)
)

WallClockTime.MIDNIGHT = _WHOLE_HOURS[0]
WallClockTime.NOON = _WHOLE_HOURS[HOURS_PER_HALF_DAY]
WallClockTime.MIN = _WHOLE_HOURS[0]
WallClockTime.MAX = WallClockTime(HOURS_PER_DAY - 1, MINUTES_PER_HOUR - 1)
