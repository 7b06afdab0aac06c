"""
Parallel — Параллельное потребление TemporalRange через деление

Диапазон рекурсивно делится split() на независимые поддиапазоны;
каждый поддиапазон обрабатывается отдельной задачей ThreadPoolExecutor.
Поддиапазоны не разделяют изменяемого состояния, блокировки не нужны.

Порядок результатов parallel_map всегда совпадает с порядком элементов.
Исключение из function пробрасывается вызывающему коду.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Final, List, Optional, TypeVar

from src.chrono.ranges.temporal_range import TemporalRange

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


# =============================================================================
# КОНФИГУРАЦИЯ
# =============================================================================

DEFAULT_MAX_WORKERS: Final[int] = 4
DEFAULT_MIN_SPLIT_SIZE: Final[int] = 2
DEFAULT_MAX_PARTITIONS: Final[int] = 16


@dataclass(frozen=True)
class ParallelConfig:
    """
    Конфигурация параллельного потребления.

    - max_workers: число потоков ThreadPoolExecutor
    - min_split_size: поддиапазон с меньшим числом элементов не делится
    - max_partitions: верхняя граница числа поддиапазонов
    """

    max_workers: int = DEFAULT_MAX_WORKERS
    min_split_size: int = DEFAULT_MIN_SPLIT_SIZE
    max_partitions: int = DEFAULT_MAX_PARTITIONS

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.min_split_size < 2:
            raise ValueError(f"min_split_size must be >= 2, got {self.min_split_size}")
        if self.max_partitions < 1:
            raise ValueError(f"max_partitions must be >= 1, got {self.max_partitions}")


# =============================================================================
# ДЕЛЕНИЕ
# =============================================================================


def partition(
    range_: TemporalRange[T], config: Optional[ParallelConfig] = None
) -> List[TemporalRange[T]]:
    """
    Деление диапазона на поддиапазоны в исходном порядке.

    Делится всегда самый крупный поддиапазон, пока не достигнут
    max_partitions или все части меньше min_split_size.

    Returns:
        Непересекающиеся поддиапазоны; их конкатенация == исходный диапазон
    """
    config = config or ParallelConfig()
    parts: List[TemporalRange[T]] = [range_]

    while len(parts) < config.max_partitions:
        index = max(range(len(parts)), key=lambda i: parts[i].element_count())
        largest = parts[index]
        if largest.element_count() < config.min_split_size:
            break
        first, second = largest.split()
        if second is None:
            break
        parts[index : index + 1] = [first, second]

    return parts


# =============================================================================
# ПАРАЛЛЕЛЬНОЕ ПОТРЕБЛЕНИЕ
# =============================================================================


def parallel_map(
    range_: TemporalRange[T],
    function: Callable[[T], R],
    config: Optional[ParallelConfig] = None,
) -> List[R]:
    """
    Применение function ко всем элементам диапазона в пуле потоков.

    Args:
        range_: Исходный диапазон
        function: Функция для каждого элемента
        config: Конфигурация (default: ParallelConfig())

    Returns:
        Результаты в порядке элементов диапазона
    """
    config = config or ParallelConfig()
    parts = partition(range_, config)
    logger.debug(
        "Dispatching %d partitions of %r to %d workers",
        len(parts),
        range_,
        config.max_workers,
    )

    def consume(part: TemporalRange[T]) -> List[R]:
        return [function(value) for value in part]

    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        chunks = list(executor.map(consume, parts))

    return [result for chunk in chunks for result in chunk]


def parallel_for_each(
    range_: TemporalRange[T],
    action: Callable[[T], Any],
    config: Optional[ParallelConfig] = None,
) -> None:
    """Вызов action для каждого элемента; порядок вызовов не гарантируется."""
    parallel_map(range_, action, config)
