"""
JSON Schema Contract Validators

Валидация JSON payload на границах системы (сенсор местоположения,
escrow backend, платёжный процессор) по формальным JSON Schema контрактам.

Схемы (contracts/schema/):
- geo_point.json
- proximity_verdict.json
- escrow_request.json
- payment_intent_request.json
"""

import json
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    По умолчанию ищет схемы в contracts/schema/ относительно корня проекта.
    """

    def __init__(self, schema_dir: Path | None = None):
        # Корень проекта: 4 уровня вверх от этого файла
        self._schema_dir = schema_dir or (
            Path(__file__).parent.parent.parent.parent / "contracts" / "schema"
        )
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла (с кэшированием).

        Args:
            schema_name: Имя схемы без расширения (например, 'geo_point')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-validation
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


_SCHEMA_LOADER: SchemaLoader | None = None


def get_schema_loader() -> SchemaLoader:
    """Глобальный загрузчик, создаётся при первом обращении."""
    global _SCHEMA_LOADER
    if _SCHEMA_LOADER is None:
        _SCHEMA_LOADER = SchemaLoader()
    return _SCHEMA_LOADER


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractName(str, Enum):
    """Контракты на границах библиотеки (имя = файл схемы без .json)."""

    GEO_POINT = "geo_point"
    PROXIMITY_VERDICT = "proximity_verdict"
    ESCROW_REQUEST = "escrow_request"
    PAYMENT_INTENT_REQUEST = "payment_intent_request"


class ContractValidator:
    """Draft 2020-12 валидатор одного контракта."""

    def __init__(self, contract: ContractName | str, loader: SchemaLoader | None = None):
        self.contract = ContractName(contract)
        self.schema = (loader or get_schema_loader()).load_schema(self.contract.value)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        return self.validator.iter_errors(data)


@lru_cache(maxsize=None)
def get_validator(contract: ContractName) -> ContractValidator:
    """Валидатор контракта из глобального загрузчика (кэшируется)."""
    return ContractValidator(contract)


def validate_contract(contract: ContractName | str, data: Dict[str, Any]) -> None:
    """
    Проверка payload по контракту.

    Examples:
        >>> validate_contract(ContractName.PROXIMITY_VERDICT,
        ...                   {"distance_meters": 12.5, "within_range": True})

    Raises:
        ValueError: Неизвестное имя контракта
        ValidationError: Если данные не соответствуют схеме
    """
    get_validator(ContractName(contract)).validate(data)
