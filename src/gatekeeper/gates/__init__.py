"""Gates — индивидуальные гейты операций пула.

- GATE 0: Impact Tolerance (доля стоимости, переносимая одной операцией)
- GATE 1: Supply Floor (отрицательный virtual supply)
- GATE 2: Holder Access (получатель, оператор, allow-list)
"""

from .gate_00_impact_tolerance import Gate00ImpactTolerance, Gate00Result, check_impact
from .gate_01_supply_floor import (
    Gate01Config,
    Gate01Result,
    Gate01SupplyFloor,
    check_supply_floor,
)
from .gate_02_holder_access import Gate02HolderAccess, Gate02Result, check_holder_access

__all__ = [
    "Gate00ImpactTolerance",
    "Gate00Result",
    "check_impact",
    "Gate01SupplyFloor",
    "Gate01Result",
    "Gate01Config",
    "check_supply_floor",
    "Gate02HolderAccess",
    "Gate02Result",
    "check_holder_access",
]
