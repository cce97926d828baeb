"""Gatekeeper — guards операций пула.

- Impact tolerance для операций, переносящих стоимость
- Floor отрицательного virtual supply
- Доступ держателя (оператор, allow-list)
"""

from .gates import (
    Gate00ImpactTolerance,
    Gate01SupplyFloor,
    Gate02HolderAccess,
    check_holder_access,
    check_impact,
    check_supply_floor,
)

__all__ = [
    "Gate00ImpactTolerance",
    "Gate01SupplyFloor",
    "Gate02HolderAccess",
    "check_impact",
    "check_supply_floor",
    "check_holder_access",
]
