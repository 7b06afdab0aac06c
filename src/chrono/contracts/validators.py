"""
JSON Schema Contract Validators

Проверка простых кодировок значений:
- wall_clock_time.json — строка HH:MM (str(WallClockTime))
- date_range.json — {start, end, step_amount, unit} (DateRangeDefinition)
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator

import jsonschema
from jsonschema import Draft202012Validator, ValidationError

SCHEMA_DIR: Path = Path(__file__).parent / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """Чтение и кэш схем из каталога schema_dir (<name>.json)."""

    def __init__(self, schema_dir: Path = SCHEMA_DIR):
        if not schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {schema_dir}")
        self._schema_dir = schema_dir
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Схема по имени без расширения ('wall_clock_time', 'date_range').

        Raises:
            FileNotFoundError: Нет файла <schema_name>.json
            ValueError: Файл не проходит meta-validation Draft 2020-12
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        schema = json.loads(schema_path.read_text(encoding="utf-8"))

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Validator одной схемы; подклассы фиксируют schema_name."""

    schema_name: str = ""

    def __init__(self) -> None:
        self.schema = _SCHEMA_LOADER.load_schema(self.schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Any) -> None:
        """Raises ValidationError при первом нарушении."""
        self.validator.validate(data)

    def is_valid(self, data: Any) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Any) -> Iterator[ValidationError]:
        return self.validator.iter_errors(data)


class WallClockTimeValidator(ContractValidator):
    schema_name = "wall_clock_time"


class DateRangeValidator(ContractValidator):
    schema_name = "date_range"


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_wall_clock_time(data: Any) -> None:
    WallClockTimeValidator().validate(data)


def validate_date_range(data: Dict[str, Any]) -> None:
    DateRangeValidator().validate(data)
