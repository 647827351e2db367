"""
Contract Validation Module

Валидация JSON контрактов на границах библиотеки.
"""

from .validators import (
    ContractName,
    ContractValidator,
    SchemaLoader,
    get_schema_loader,
    get_validator,
    validate_contract,
)

__all__ = [
    # Classes
    "ContractName",
    "SchemaLoader",
    "ContractValidator",
    # Functions
    "get_schema_loader",
    "get_validator",
    "validate_contract",
]
