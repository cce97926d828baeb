"""
Payload contracts пула (JSON Schema)

Payload-ы внешних reader-ов и сериализованные оценки проверяются
по JSON Schema (Draft 2020-12) через jsonschema.

Схемы (src/core/contracts/schema/):
- derivatives_position_info.json — enriched запись derivatives reader
- valuation_snapshot.json — сериализованная оценка пула
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Чтение и meta-валидация схем с кэшированием по имени.

    Схемы лежат рядом с модулем, в schema/.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # schema_name -> schema
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Схема по имени (из кэша или с диска).

        Args:
            schema_name: Имя схемы без расширения (например, 'valuation_snapshot')

        Returns:
            dict схемы

        Raises:
            FileNotFoundError: нет файла схемы
            ValueError: Если схема не проходит meta-валидацию
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


# Общий загрузчик модуля
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Валидатор одного контракта.

    Draft202012Validator строится один раз на экземпляр.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Проверка payload-а.

        Raises:
            ValidationError: payload не соответствует контракту
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        """Итератор по всем ошибкам валидации."""
        return self.validator.iter_errors(data)


class PositionInfoValidator(ContractValidator):
    """Валидатор enriched записи derivatives reader."""

    def __init__(self):
        super().__init__("derivatives_position_info")


class ValuationSnapshotValidator(ContractValidator):
    """Валидатор сериализованной оценки пула."""

    def __init__(self):
        super().__init__("valuation_snapshot")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_position_info(data: Dict[str, Any]) -> None:
    """
    Валидация derivatives_position_info payload.

    Raises:
        ValidationError: payload не соответствует контракту
    """
    PositionInfoValidator().validate(data)


def validate_valuation_snapshot(data: Dict[str, Any]) -> None:
    """
    Валидация valuation_snapshot payload.

    Raises:
        ValidationError: payload не соответствует контракту
    """
    ValuationSnapshotValidator().validate(data)


__all__ = [
    "ValidationError",
    "SchemaLoader",
    "ContractValidator",
    "PositionInfoValidator",
    "ValuationSnapshotValidator",
    "validate_position_info",
    "validate_valuation_snapshot",
]
