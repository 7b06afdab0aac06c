"""
TemporalRange — Ленивый, делимый, двунаправленный диапазон временных значений

Диапазон производит значения T, начиная со start (включительно), с шагом
step_amount единиц unit, и останавливается перед end (исключительно).

Требования к T:
- полный порядок (<, >, ==)
- единица шага (StepUnit): between(a, b) -> int и add_to(value, amount) -> T

Внутреннее представление — окно смещений [begin, end) от общего origin:
каждый элемент вычисляется как unit.add_to(origin, offset). Поддиапазоны,
полученные делением, сохраняют origin родителя, поэтому последовательность
элементов не зависит от деления даже для неассоциативных единиц (MONTHS).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Публичный конструктор никогда не создаёт бесконечный диапазон
   (InvalidRangeError при compare(start, end) * step_amount >= 0)
2. Диапазон immutable; состояние итерации живёт только в курсорах
3. split(): размеры частей в сумме равны размеру до деления,
   первая часть + вторая часть == исходная последовательность
4. estimate_size() == exact_size() == оставшееся расстояние в единицах
"""

import logging
from enum import IntFlag
from typing import Any, Callable, Final, Generic, Iterator, List, Optional, Tuple, TypeVar

from src.chrono.domain.units import StepUnit
from src.chrono.errors import ExhaustedSequenceError, InvalidRangeError, NullArgumentError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


# =============================================================================
# CHARACTERISTICS
# =============================================================================


class Characteristics(IntFlag):
    """Гарантии последовательности для потребителей."""

    ORDERED = 0x0010
    DISTINCT = 0x0001
    SORTED = 0x0004
    SIZED = 0x0040
    NONNULL = 0x0100
    IMMUTABLE = 0x0400
    SUBSIZED = 0x4000


RANGE_CHARACTERISTICS: Final[Characteristics] = (
    Characteristics.ORDERED
    | Characteristics.DISTINCT
    | Characteristics.SORTED
    | Characteristics.SIZED
    | Characteristics.NONNULL
    | Characteristics.IMMUTABLE
    | Characteristics.SUBSIZED
)


# =============================================================================
# ВСПОМОГАТЕЛЬНЫЕ ФУНКЦИИ СМЕЩЕНИЙ
# =============================================================================


def _is_exhausted(offset: int, end: int, step: int) -> bool:
    """Смещение достигло или прошло end в направлении движения."""
    if step == 0:
        return True
    if step > 0:
        return offset >= end
    return offset <= end


def _element_count(offset: int, end: int, step: int) -> int:
    """ceil(|end - offset| / |step|) или 0, если окно пусто."""
    if _is_exhausted(offset, end, step):
        return 0
    return -(-abs(end - offset) // abs(step))


def _remaining_distance(offset: int, end: int, step: int) -> int:
    if _is_exhausted(offset, end, step):
        return 0
    return abs(end - offset)


def _compare(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


def _unit_name(unit: Any) -> str:
    return getattr(unit, "name", repr(unit))


# =============================================================================
# КУРСОРЫ
# =============================================================================


class RangeIterator(Iterator[T]):
    """
    Однопроходный курсор по окну смещений.

    Исчерпание сообщается штатно для Python (StopIteration) в виде
    ExhaustedSequenceError, в том числе при повторных вызовах next().
    """

    __slots__ = ("_origin", "_current", "_end", "_step", "_unit")

    def __init__(self, origin: T, begin: int, end: int, step: int, unit: StepUnit) -> None:
        self._origin = origin
        self._current = begin
        self._end = end
        self._step = step
        self._unit = unit

    def __iter__(self) -> "RangeIterator[T]":
        return self

    def has_next(self) -> bool:
        return not _is_exhausted(self._current, self._end, self._step)

    def __next__(self) -> T:
        if not self.has_next():
            raise ExhaustedSequenceError("Range iterator is exhausted")
        offset = self._current
        self._current += self._step
        return self._unit.add_to(self._origin, offset)


class RangeSplitter(Generic[T]):
    """
    Делимый курсор для параллельного потребления.

    try_split() оставляет у текущего курсора префикс и возвращает новый курсор
    для суффикса. Курсоры не разделяют изменяемого состояния.
    """

    __slots__ = ("_origin", "_current", "_end", "_step", "_unit")

    def __init__(self, origin: T, begin: int, end: int, step: int, unit: StepUnit) -> None:
        self._origin = origin
        self._current = begin
        self._end = end
        self._step = step
        self._unit = unit

    @property
    def characteristics(self) -> Characteristics:
        return RANGE_CHARACTERISTICS

    def has_characteristics(self, characteristics: Characteristics) -> bool:
        return (characteristics & RANGE_CHARACTERISTICS) == characteristics

    def try_advance(self, action: Callable[[T], Any]) -> bool:
        """
        Передать следующий элемент в action.

        Returns:
            False, если элементов больше нет (action не вызывается)
        """
        if _is_exhausted(self._current, self._end, self._step):
            return False
        offset = self._current
        self._current += self._step
        action(self._unit.add_to(self._origin, offset))
        return True

    def for_each_remaining(self, action: Callable[[T], Any]) -> None:
        while self.try_advance(action):
            pass

    def try_split(self) -> Optional["RangeSplitter[T]"]:
        """
        Деление оставшегося окна пополам по числу элементов.

        Returns:
            Курсор для второй половины или None, если по обе стороны
            не остаётся хотя бы одного элемента
        """
        count = _element_count(self._current, self._end, self._step)
        if count < 2:
            return None
        mid = self._current + (count // 2) * self._step
        suffix = RangeSplitter(self._origin, mid, self._end, self._step, self._unit)
        self._end = mid
        return suffix

    def estimate_size(self) -> int:
        """Оставшееся расстояние в единицах (не число элементов)."""
        return _remaining_distance(self._current, self._end, self._step)

    def exact_size(self) -> int:
        return _remaining_distance(self._current, self._end, self._step)

    def remaining_elements(self) -> int:
        return _element_count(self._current, self._end, self._step)


# =============================================================================
# TEMPORAL RANGE
# =============================================================================


class TemporalRange(Generic[T]):
    """
    Диапазон [start, end) с шагом step_amount единиц unit.

    Конечная точка может быть раньше начальной (итерация назад во времени),
    но тогда step_amount должен быть отрицательным, и наоборот.
    """

    def __init__(self, start: T, end_exclusive: T, step_amount: int, unit: StepUnit) -> None:
        """
        Args:
            start: Начальная точка (включительно)
            end_exclusive: Конечная точка (исключительно)
            step_amount: Число единиц на один шаг (знаковое)
            unit: Единица шага

        Raises:
            NullArgumentError: Если любой аргумент None
            InvalidRangeError: Если итерация никогда не достигнет конца
                (знак шага не совпадает с направлением, нулевой шаг,
                start == end_exclusive)
        """
        if start is None or end_exclusive is None or step_amount is None or unit is None:
            raise NullArgumentError(
                "start, end_exclusive, step_amount and unit must not be None"
            )
        if not isinstance(step_amount, int) or isinstance(step_amount, bool):
            raise InvalidRangeError(f"step_amount must be an integer, got {step_amount!r}")
        if _compare(start, end_exclusive) * step_amount >= 0:
            logger.debug(
                "Rejected range %s -> %s with step %d %s",
                start,
                end_exclusive,
                step_amount,
                _unit_name(unit),
            )
            raise InvalidRangeError(
                f"Endless loop detected: range from {start} to {end_exclusive} "
                f"with step {step_amount} {_unit_name(unit)} never reaches its end"
            )

        self._set_window(start, 0, unit.between(start, end_exclusive), step_amount, unit)

    @classmethod
    def from_length(
        cls, start: T, length: int, step_amount: int, unit: StepUnit
    ) -> "TemporalRange[T]":
        """
        Диапазон из start и длины в единицах, без проверки знаков.

        Доверенная форма: вызывающий код отвечает за согласованность знаков
        length и step_amount. При несогласованных знаках диапазон пуст.

        Raises:
            NullArgumentError: Если start, step_amount или unit равны None
        """
        if start is None or step_amount is None or unit is None:
            raise NullArgumentError("start, step_amount and unit must not be None")
        return cls._window(start, 0, length, step_amount, unit)

    @classmethod
    def _window(
        cls, origin: T, begin: int, end: int, step: int, unit: StepUnit
    ) -> "TemporalRange[T]":
        instance = cls.__new__(cls)
        instance._set_window(origin, begin, end, step, unit)
        return instance

    def _set_window(self, origin: T, begin: int, end: int, step: int, unit: StepUnit) -> None:
        self._origin = origin
        self._begin = begin
        self._end = end
        self._step = step
        self._unit = unit

    # =========================================================================
    # СВОЙСТВА
    # =========================================================================

    @property
    def start(self) -> T:
        return self._unit.add_to(self._origin, self._begin)

    @property
    def length(self) -> int:
        """Знаковое расстояние в единицах от start до конца."""
        return self._end - self._begin

    @property
    def step_amount(self) -> int:
        return self._step

    @property
    def unit(self) -> StepUnit:
        return self._unit

    @property
    def is_ascending(self) -> bool:
        return self._step > 0

    @property
    def characteristics(self) -> Characteristics:
        return RANGE_CHARACTERISTICS

    # =========================================================================
    # ИТЕРАЦИЯ
    # =========================================================================

    def iterator(self) -> RangeIterator[T]:
        """Новый независимый курсор."""
        return RangeIterator(self._origin, self._begin, self._end, self._step, self._unit)

    def __iter__(self) -> RangeIterator[T]:
        return self.iterator()

    def __reversed__(self) -> RangeIterator[T]:
        return self.reversed().iterator()

    def splitter(self) -> RangeSplitter[T]:
        """Новый делимый курсор по всему диапазону."""
        return RangeSplitter(self._origin, self._begin, self._end, self._step, self._unit)

    def stream(self) -> Iterator[T]:
        """Последовательное потребление (ленивый итератор)."""
        return self.iterator()

    def parallel_map(self, function: Callable[[T], R], config: Any = None) -> List[R]:
        """
        Параллельное применение function ко всем элементам.

        См. src.chrono.ranges.parallel.parallel_map. Порядок результатов
        совпадает с порядком элементов.
        """
        from src.chrono.ranges.parallel import parallel_map

        return parallel_map(self, function, config)

    # =========================================================================
    # ДЕЛЕНИЕ И РАЗМЕР
    # =========================================================================

    def split(self) -> Tuple["TemporalRange[T]", Optional["TemporalRange[T]"]]:
        """
        Деление диапазона пополам по числу элементов.

        Точка деления выравнивается на кратное step_amount, поэтому вторая
        половина продолжает ту же сетку значений.

        Returns:
            (первая половина, вторая половина) или (self, None), если
            по обе стороны не остаётся хотя бы одного элемента
        """
        count = self.element_count()
        if count < 2:
            return self, None

        head = count // 2
        mid = self._begin + head * self._step
        first = self._window(self._origin, self._begin, mid, self._step, self._unit)
        second = self._window(self._origin, mid, self._end, self._step, self._unit)
        logger.debug("Split %r into %d + %d elements", self, head, count - head)
        return first, second

    def estimate_size(self) -> int:
        """Оставшееся расстояние в единицах (не число элементов, см. element_count)."""
        return _remaining_distance(self._begin, self._end, self._step)

    def exact_size(self) -> int:
        return _remaining_distance(self._begin, self._end, self._step)

    def element_count(self) -> int:
        return _element_count(self._begin, self._end, self._step)

    def __len__(self) -> int:
        return self.element_count()

    def __bool__(self) -> bool:
        return self.element_count() > 0

    # =========================================================================
    # ЭЛЕМЕНТЫ
    # =========================================================================

    def first(self) -> Optional[T]:
        """Первый элемент или None для пустого диапазона."""
        if self.element_count() == 0:
            return None
        return self.start

    def last(self) -> Optional[T]:
        """Последний элемент или None для пустого диапазона."""
        count = self.element_count()
        if count == 0:
            return None
        return self._unit.add_to(self._origin, self._last_offset(count))

    def reversed(self) -> "TemporalRange[T]":
        """Те же элементы в обратном порядке."""
        count = self.element_count()
        if count == 0:
            return self._window(self._origin, self._begin, self._begin, -self._step, self._unit)
        return self._window(
            self._origin,
            self._last_offset(count),
            self._begin - self._step,
            -self._step,
            self._unit,
        )

    def __contains__(self, value: object) -> bool:
        if value is None or self._step == 0:
            return False
        try:
            offset = self._unit.between(self._origin, value)
        except (TypeError, ValueError):
            return False

        if self._step > 0:
            inside = self._begin <= offset < self._end
        else:
            inside = self._end < offset <= self._begin
        if not inside or (offset - self._begin) % self._step != 0:
            return False
        return self._unit.add_to(self._origin, offset) == value

    def _last_offset(self, count: int) -> int:
        return self._begin + (count - 1) * self._step

    # =========================================================================
    # РАВЕНСТВО
    # =========================================================================

    def _key(self) -> tuple:
        return (self._origin, self._begin, self._end, self._step, self._unit)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TemporalRange):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(start={self.start!r}, length={self.length}, "
            f"step_amount={self._step}, unit={_unit_name(self._unit)})"
        )
