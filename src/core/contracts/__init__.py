"""
Contract Validation Module

Валидация JSON контрактов внешних payload-ов пула.
"""

from .validators import (
    ContractValidator,
    PositionInfoValidator,
    SchemaLoader,
    ValuationSnapshotValidator,
    validate_position_info,
    validate_valuation_snapshot,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "PositionInfoValidator",
    "ValuationSnapshotValidator",
    # Functions
    "validate_position_info",
    "validate_valuation_snapshot",
]
