"""
Errors — Иерархия исключений для временных диапазонов и WallClockTime

Все исключения наследуются от TemporalError и дополнительно от наиболее
подходящего встроенного исключения, чтобы общие обработчики
(except ValueError / except TypeError) продолжали работать.

Все ошибки синхронные и немедленные: отложенных путей отказа нет,
повторные попытки нигде не выполняются.
"""


class TemporalError(Exception):
    """Базовое исключение пакета."""


class NullArgumentError(TemporalError, TypeError):
    """Обязательный аргумент не передан (None)."""


class InvalidRangeError(TemporalError, ValueError):
    """
    Параметры диапазона описывают бесконечную или противоречивую итерацию.

    Знак шага не совпадает с направлением к конечной точке, шаг равен нулю
    или начало совпадает с концом. Объект диапазона в этом случае не создаётся.
    """


class ExhaustedSequenceError(TemporalError, StopIteration):
    """
    Запрошен элемент у курсора, который уже выдал последний элемент.

    Наследуется от StopIteration: цикл for завершается штатно, а при ручном
    вызове next() исключение можно перехватить по имени.
    """


class InvalidFieldError(TemporalError, ValueError):
    """Значение поля (час, минута, ...) вне допустимого диапазона."""


class UnsupportedFieldError(TemporalError, ValueError):
    """Запрошено поле, которое тип не поддерживает."""


class UnsupportedUnitError(TemporalError, ValueError):
    """Запрошена единица измерения, которую тип не поддерживает."""


class UnsupportedSourceError(TemporalError, TypeError):
    """Из источника невозможно получить minute-of-day."""
