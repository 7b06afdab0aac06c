"""
Unit tests для TemporalRange

Проверяет:
1. Валидацию направления при создании (нет бесконечных диапазонов)
2. Итерацию вперёд и назад, шаг > 1, календарные месяцы
3. Деление (split / try_split): сохранение размеров и последовательности
4. Размеры, исчерпание курсоров, принадлежность, first/last/reversed
5. Произвольные единицы шага (StepUnit) и значения WallClockTime
"""

from datetime import date, datetime, timedelta
from typing import List

import pytest

from src.chrono.domain.units import ChronoUnit
from src.chrono.domain.wall_clock_time import WallClockTime
from src.chrono.errors import ExhaustedSequenceError, InvalidRangeError, NullArgumentError
from src.chrono.ranges.temporal_range import (
    RANGE_CHARACTERISTICS,
    Characteristics,
    TemporalRange,
)

START = date(2019, 1, 1)
END = date(2019, 1, 21)


@pytest.fixture
def daily() -> TemporalRange[date]:
    """20 дней: 2019-01-01 .. 2019-01-20"""
    return TemporalRange(START, END, 1, ChronoUnit.DAYS)


class IntUnit:
    """Единица шага для целых чисел"""

    def between(self, start: int, end: int) -> int:
        return end - start

    def add_to(self, value: int, amount: int) -> int:
        return value + amount


def _split_fully(range_: TemporalRange) -> List[TemporalRange]:
    first, second = range_.split()
    if second is None:
        return [first]
    return _split_fully(first) + _split_fully(second)


# =============================================================================
# СОЗДАНИЕ
# =============================================================================


class TestConstruction:
    """Тесты проверки направления"""

    def test_wrong_direction_rejected(self) -> None:
        """Отрицательный шаг к более поздней дате — бесконечный цикл"""
        with pytest.raises(InvalidRangeError, match="Endless loop"):
            TemporalRange(START, END, -1, ChronoUnit.DAYS)
        with pytest.raises(InvalidRangeError, match="Endless loop"):
            TemporalRange(END, START, 1, ChronoUnit.DAYS)

    def test_empty_range_rejected(self) -> None:
        """start == end отклоняется"""
        with pytest.raises(InvalidRangeError):
            TemporalRange(START, START, 1, ChronoUnit.DAYS)

    def test_zero_step_rejected(self) -> None:
        """Нулевой шаг отклоняется"""
        with pytest.raises(InvalidRangeError):
            TemporalRange(START, END, 0, ChronoUnit.DAYS)

    def test_non_integer_step_rejected(self) -> None:
        """Шаг должен быть целым"""
        with pytest.raises(InvalidRangeError, match="integer"):
            TemporalRange(START, END, 1.5, ChronoUnit.DAYS)
        with pytest.raises(InvalidRangeError, match="integer"):
            TemporalRange(START, END, True, ChronoUnit.DAYS)

    @pytest.mark.parametrize(
        "args",
        [
            (None, END, 1, ChronoUnit.DAYS),
            (START, None, 1, ChronoUnit.DAYS),
            (START, END, None, ChronoUnit.DAYS),
            (START, END, 1, None),
        ],
    )
    def test_none_arguments(self, args: tuple) -> None:
        """None в любом аргументе"""
        with pytest.raises(NullArgumentError):
            TemporalRange(*args)

    def test_error_types_are_builtin_compatible(self) -> None:
        """InvalidRangeError — ValueError, NullArgumentError — TypeError"""
        with pytest.raises(ValueError):
            TemporalRange(START, START, 1, ChronoUnit.DAYS)
        with pytest.raises(TypeError):
            TemporalRange(None, END, 1, ChronoUnit.DAYS)

    def test_properties(self, daily: TemporalRange[date]) -> None:
        """start, length, step_amount, unit"""
        assert daily.start == START
        assert daily.length == 20
        assert daily.step_amount == 1
        assert daily.unit is ChronoUnit.DAYS
        assert daily.is_ascending
        assert daily.characteristics == RANGE_CHARACTERISTICS


# =============================================================================
# ИТЕРАЦИЯ
# =============================================================================


class TestIteration:
    """Тесты итерации"""

    def test_sum_of_day_of_month(self, daily: TemporalRange[date]) -> None:
        """Сумма дней месяца за 2019-01-01 .. 2019-01-20 == 1 + ... + 20"""
        assert sum(value.day for value in daily) == sum(range(1, 21)) == 210

    def test_elements_strictly_increasing(self, daily: TemporalRange[date]) -> None:
        """20 элементов с шагом ровно в один день"""
        values = list(daily)
        assert len(values) == 20
        assert values[0] == START
        assert values[-1] == date(2019, 1, 20)
        for previous, current in zip(values, values[1:]):
            assert current - previous == timedelta(days=1)

    def test_backward(self) -> None:
        """Отрицательный шаг: назад во времени, end не включается"""
        backward = TemporalRange(END, START, -1, ChronoUnit.DAYS)
        assert backward.length == -20
        assert not backward.is_ascending
        assert list(backward) == [END - timedelta(days=k) for k in range(20)]
        assert START not in backward

    def test_step_greater_than_one(self) -> None:
        """Шаг 3 дня: ceil(20 / 3) = 7 элементов"""
        every_third = TemporalRange(START, END, 3, ChronoUnit.DAYS)
        values = list(every_third)
        assert values == [START + timedelta(days=3 * k) for k in range(7)]
        assert len(every_third) == 7
        assert every_third.estimate_size() == 20

    def test_months_from_origin(self) -> None:
        """Месяцы считаются от начала: 31-е число не «сползает»"""
        monthly = TemporalRange(date(2019, 1, 31), date(2019, 7, 1), 1, ChronoUnit.MONTHS)
        assert list(monthly) == [
            date(2019, 1, 31),
            date(2019, 2, 28),
            date(2019, 3, 31),
            date(2019, 4, 30),
            date(2019, 5, 31),
        ]

    def test_datetime_minutes(self) -> None:
        """Каждые 15 минут"""
        quarter = TemporalRange(
            datetime(2019, 1, 1, 9, 0), datetime(2019, 1, 1, 10, 0), 15, ChronoUnit.MINUTES
        )
        assert quarter.length == 60
        assert [value.minute for value in quarter] == [0, 15, 30, 45]

    def test_wall_clock_hours(self) -> None:
        """Диапазон WallClockTime по часам"""
        hours = TemporalRange(WallClockTime.of(8), WallClockTime.of(12), 1, ChronoUnit.HOURS)
        assert [str(value) for value in hours] == ["08:00", "09:00", "10:00", "11:00"]

    def test_wall_clock_minutes_within_hour(self) -> None:
        """Диапазон WallClockTime по минутам в пределах часа"""
        quarters = TemporalRange(
            WallClockTime.of(8, 0), WallClockTime.of(8, 45), 15, ChronoUnit.MINUTES
        )
        assert [str(value) for value in quarters] == ["08:00", "08:15", "08:30"]

    def test_wall_clock_minutes_across_hours(self) -> None:
        """Каждые 15 минут с 10:00 до 12:00: сквозь границу часа, без повторов"""
        quarters = TemporalRange(
            WallClockTime.of(10, 0), WallClockTime.of(12, 0), 15, ChronoUnit.MINUTES
        )
        values = list(quarters)
        assert [str(value) for value in values] == [
            "10:00", "10:15", "10:30", "10:45", "11:00", "11:15", "11:30", "11:45",
        ]
        assert values == sorted(set(values))
        assert len(quarters) == 8
        assert quarters.last() == WallClockTime.of(11, 45)
        assert WallClockTime.of(11, 15) in quarters
        assert WallClockTime.of(11, 20) not in quarters

        first, second = quarters.split()
        assert list(first) + list(second) == values
        assert list(quarters.reversed()) == values[::-1]

    def test_custom_step_unit(self) -> None:
        """Любой объект с between/add_to"""
        evens = TemporalRange(0, 10, 2, IntUnit())
        assert list(evens) == [0, 2, 4, 6, 8]
        assert 4 in evens
        assert 5 not in evens
        assert 10 not in evens

    def test_independent_cursors(self, daily: TemporalRange[date]) -> None:
        """Каждый iterator() — свой курсор, диапазон не меняется"""
        first = daily.iterator()
        second = daily.iterator()
        next(first)
        next(first)
        assert next(second) == START
        assert next(first) == date(2019, 1, 3)
        assert list(daily) == list(daily)
        assert list(daily.stream()) == list(daily)

    def test_exhausted_iterator(self) -> None:
        """next() после последнего элемента — ExhaustedSequenceError (StopIteration)"""
        pair = TemporalRange(START, date(2019, 1, 3), 1, ChronoUnit.DAYS)
        cursor = iter(pair)
        assert cursor.has_next()
        next(cursor)
        next(cursor)
        assert not cursor.has_next()
        with pytest.raises(ExhaustedSequenceError, match="exhausted"):
            next(cursor)
        with pytest.raises(StopIteration):
            next(cursor)


# =============================================================================
# ДЕЛЕНИЕ
# =============================================================================


class TestSplit:
    """Тесты split()"""

    @pytest.mark.parametrize(
        "range_",
        [
            TemporalRange(START, END, 1, ChronoUnit.DAYS),
            TemporalRange(START, END, 3, ChronoUnit.DAYS),
            TemporalRange(END, START, -1, ChronoUnit.DAYS),
            TemporalRange(date(2019, 1, 31), date(2020, 1, 31), 1, ChronoUnit.MONTHS),
            TemporalRange(date(2019, 1, 31), date(2021, 1, 31), 5, ChronoUnit.MONTHS),
        ],
    )
    def test_split_preserves_sequence(self, range_: TemporalRange) -> None:
        """first + second == исходная последовательность, размеры суммируются"""
        first, second = range_.split()
        assert second is not None
        assert list(first) + list(second) == list(range_)
        assert first.exact_size() + second.exact_size() == range_.exact_size()
        assert len(first) + len(second) == len(range_)

    def test_split_fully(self, daily: TemporalRange[date]) -> None:
        """Рекурсивное деление до одиночных элементов"""
        parts = _split_fully(daily)
        assert len(parts) == 20
        assert [value for part in parts for value in part] == list(daily)
        assert all(len(part) == 1 for part in parts)

    def test_single_element_not_split(self) -> None:
        """Один элемент: (self, None)"""
        single = TemporalRange.from_length(START, 1, 1, ChronoUnit.DAYS)
        first, second = single.split()
        assert first is single
        assert second is None

    def test_split_keeps_grid(self) -> None:
        """Вторая часть продолжает сетку шага"""
        every_third = TemporalRange(START, END, 3, ChronoUnit.DAYS)
        _, second = every_third.split()
        assert second.start == date(2019, 1, 10)
        assert second.start in every_third


class TestSplitter:
    """Тесты RangeSplitter"""

    def test_sizes(self, daily: TemporalRange[date]) -> None:
        """estimate_size == exact_size == оставшееся расстояние"""
        splitter = daily.splitter()
        assert splitter.estimate_size() == splitter.exact_size() == 20
        consumed: List[date] = []
        for expected in range(19, 16, -1):
            assert splitter.try_advance(consumed.append)
            assert splitter.exact_size() == expected
        assert consumed == [START, date(2019, 1, 2), date(2019, 1, 3)]

    def test_try_split(self, daily: TemporalRange[date]) -> None:
        """Префикс остаётся, суффикс возвращается; размеры суммируются"""
        splitter = daily.splitter()
        suffix = splitter.try_split()
        assert suffix is not None
        assert splitter.exact_size() + suffix.exact_size() == 20

        values: List[date] = []
        splitter.for_each_remaining(values.append)
        suffix.for_each_remaining(values.append)
        assert values == list(daily)

    def test_try_split_single_element(self) -> None:
        """Один элемент не делится"""
        splitter = TemporalRange.from_length(START, 1, 1, ChronoUnit.DAYS).splitter()
        assert splitter.try_split() is None
        assert splitter.remaining_elements() == 1

    def test_try_advance_exhausted(self) -> None:
        """Исчерпанный курсор: False, action не вызывается"""
        splitter = TemporalRange.from_length(START, 1, 1, ChronoUnit.DAYS).splitter()
        calls: List[date] = []
        assert splitter.try_advance(calls.append)
        assert not splitter.try_advance(calls.append)
        assert calls == [START]
        assert splitter.exact_size() == 0

    def test_characteristics(self, daily: TemporalRange[date]) -> None:
        """ORDERED, SORTED, SIZED, SUBSIZED, ..."""
        splitter = daily.splitter()
        assert splitter.has_characteristics(Characteristics.ORDERED | Characteristics.SORTED)
        assert splitter.has_characteristics(Characteristics.SIZED | Characteristics.SUBSIZED)
        assert splitter.characteristics & Characteristics.IMMUTABLE


# =============================================================================
# ЭЛЕМЕНТЫ И РАЗМЕРЫ
# =============================================================================


class TestElements:
    """Тесты first/last/reversed/contains"""

    def test_first_and_last(self, daily: TemporalRange[date]) -> None:
        """Первый и последний элементы"""
        assert daily.first() == START
        assert daily.last() == date(2019, 1, 20)
        every_third = TemporalRange(START, END, 3, ChronoUnit.DAYS)
        assert every_third.last() == date(2019, 1, 19)

    def test_reversed(self, daily: TemporalRange[date]) -> None:
        """Те же элементы в обратном порядке"""
        assert list(daily.reversed()) == list(reversed(list(daily)))
        assert list(reversed(daily)) == list(reversed(list(daily)))
        every_third = TemporalRange(START, END, 3, ChronoUnit.DAYS)
        assert list(every_third.reversed()) == list(reversed(list(every_third)))

    def test_contains(self, daily: TemporalRange[date]) -> None:
        """Принадлежность: окно и сетка шага"""
        assert date(2019, 1, 5) in daily
        assert END not in daily
        assert date(2018, 12, 31) not in daily
        assert None not in daily
        assert "2019-01-05" not in daily

        every_third = TemporalRange(START, END, 3, ChronoUnit.DAYS)
        assert date(2019, 1, 4) in every_third
        assert date(2019, 1, 5) not in every_third

    def test_from_length(self) -> None:
        """Доверенная форма без проверки знаков"""
        five = TemporalRange.from_length(START, 5, 1, ChronoUnit.DAYS)
        assert list(five) == [START + timedelta(days=k) for k in range(5)]

        mismatched = TemporalRange.from_length(START, -5, 1, ChronoUnit.DAYS)
        assert list(mismatched) == []
        assert len(mismatched) == 0
        assert mismatched.estimate_size() == 0

        with pytest.raises(NullArgumentError):
            TemporalRange.from_length(None, 5, 1, ChronoUnit.DAYS)

    @pytest.mark.parametrize("length", [-5, 0, 5])
    def test_from_length_zero_step_is_empty(self, length: int) -> None:
        """Нулевой шаг в доверенной форме — пустой диапазон, а не бесконечный цикл"""
        stalled = TemporalRange.from_length(START, length, 0, ChronoUnit.DAYS)
        cursor = iter(stalled)
        assert not cursor.has_next()
        with pytest.raises(ExhaustedSequenceError):
            next(cursor)
        assert list(stalled) == []
        assert len(stalled) == 0
        assert stalled.estimate_size() == 0
        assert stalled.first() is None
        assert stalled.split() == (stalled, None)
        assert not stalled.splitter().try_advance(lambda value: None)

    def test_from_length_zero_step_contains_nothing(self) -> None:
        """Принадлежность при нулевом шаге — False без ошибок"""
        stalled = TemporalRange.from_length(START, -5, 0, ChronoUnit.DAYS)
        assert date(2018, 12, 30) not in stalled
        assert START not in stalled

    def test_empty_range(self) -> None:
        """Пустой диапазон: first/last — None"""
        empty = TemporalRange.from_length(START, 0, 1, ChronoUnit.DAYS)
        assert empty.first() is None
        assert empty.last() is None
        assert not empty
        assert list(empty.reversed()) == []


class TestEquality:
    """Тесты равенства"""

    def test_equal_ranges(self, daily: TemporalRange[date]) -> None:
        """Одинаковые параметры — равные диапазоны и hash"""
        same = TemporalRange(START, END, 1, ChronoUnit.DAYS)
        assert daily == same
        assert hash(daily) == hash(same)
        assert daily == TemporalRange.from_length(START, 20, 1, ChronoUnit.DAYS)

    def test_different_ranges(self, daily: TemporalRange[date]) -> None:
        """Другой шаг — другой диапазон"""
        assert daily != TemporalRange(START, END, 2, ChronoUnit.DAYS)
        assert daily != "range"

    def test_repr(self, daily: TemporalRange[date]) -> None:
        """repr с параметрами"""
        assert repr(daily) == (
            "TemporalRange(start=datetime.date(2019, 1, 1), length=20, "
            "step_amount=1, unit=DAYS)"
        )


class TestParallelMap:
    """TemporalRange.parallel_map"""

    def test_order_preserved(self, daily: TemporalRange[date]) -> None:
        """Результаты в порядке элементов"""
        assert daily.parallel_map(lambda value: value.day) == list(range(1, 21))
