"""
DateRangeDefinition — Описание диапазона дат как простого значения

Immutable Pydantic модель для передачи диапазона в JSON/dict:
    {"start": "2019-01-01", "end": "2019-01-21", "step_amount": 1, "unit": "days"}

Соответствует схеме date_range.json (src.chrono.contracts).
"""

from datetime import date

from pydantic import BaseModel, Field, field_validator

from src.chrono.domain.units import ChronoUnit
from src.chrono.ranges.temporal_range import TemporalRange


class DateRangeDefinition(BaseModel):
    """
    Параметры диапазона дат.

    Направление (знак step_amount) проверяется при валидации модели,
    поэтому to_range() для валидной модели не бросает InvalidRangeError.
    """

    start: date = Field(..., description="Начальная дата (включительно)")
    end: date = Field(..., description="Конечная дата (исключительно)")
    step_amount: int = Field(
        1, validate_default=True, description="Число единиц на шаг (знаковое, != 0)"
    )
    unit: ChronoUnit = Field(ChronoUnit.DAYS, description="Единица шага (date-based)")

    model_config = {"frozen": True}

    @field_validator("end")
    @classmethod
    def validate_end(cls, v: date, info) -> date:
        """Пустой диапазон (start == end) не допускается."""
        if info.data.get("start") == v:
            raise ValueError(f"end {v} must differ from start")
        return v

    @field_validator("step_amount")
    @classmethod
    def validate_step_direction(cls, v: int, info) -> int:
        """Знак шага должен вести от start к end."""
        if v == 0:
            raise ValueError("step_amount must not be zero")
        start = info.data.get("start")
        end = info.data.get("end")
        if start is not None and end is not None and (end > start) != (v > 0):
            raise ValueError(
                f"step_amount {v} moves away from end {end} (start {start}): endless loop"
            )
        return v

    @field_validator("unit")
    @classmethod
    def validate_date_unit(cls, v: ChronoUnit) -> ChronoUnit:
        if v.is_time_based:
            raise ValueError(f"unit {v.value} is not applicable to dates")
        return v

    def to_range(self) -> TemporalRange[date]:
        """Диапазон по этому описанию."""
        return TemporalRange(self.start, self.end, self.step_amount, self.unit)
