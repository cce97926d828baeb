"""GATE 1: Supply Floor — ограничение отрицательного virtual supply

Отрицательный virtual supply не может претендовать больше чем на
numerator/denominator (по умолчанию 7/8) реального supply:

    BLOCK если virtual_supply < 0 и -virtual_supply * denominator > total_supply * numerator

Граница включительно: ровно 7/8 проходит.
"""

from dataclasses import dataclass

from src.core.config import SUPPLY_FLOOR_DENOMINATOR, SUPPLY_FLOOR_NUMERATOR
from src.core.errors import SupplyFloorBreachError


@dataclass(frozen=True)
class Gate01Config:
    """Конфигурация GATE 1."""

    numerator: int = SUPPLY_FLOOR_NUMERATOR
    denominator: int = SUPPLY_FLOOR_DENOMINATOR


@dataclass(frozen=True)
class Gate01Result:
    """Результат GATE 1."""

    entry_allowed: bool
    block_reason: str
    details: str


class Gate01SupplyFloor:
    """GATE 1: Supply Floor."""

    def __init__(self, config: Gate01Config | None = None):
        self.config = config or Gate01Config()

    def evaluate(self, total_supply: int, virtual_supply: int) -> Gate01Result:
        if virtual_supply >= 0:
            return Gate01Result(
                entry_allowed=True,
                block_reason="",
                details="GATE 1 PASS: virtual supply non-negative",
            )

        claimed = -virtual_supply * self.config.denominator
        allowed = total_supply * self.config.numerator
        if claimed > allowed:
            return Gate01Result(
                entry_allowed=False,
                block_reason="supply_floor_breach",
                details=(
                    f"GATE 1 BLOCK: virtual supply {virtual_supply} exceeds "
                    f"{self.config.numerator}/{self.config.denominator} of supply {total_supply}"
                ),
            )

        return Gate01Result(
            entry_allowed=True,
            block_reason="",
            details=f"GATE 1 PASS: virtual supply {virtual_supply} within floor",
        )


def check_supply_floor(
    total_supply: int, virtual_supply: int, config: Gate01Config | None = None
) -> Gate01Result:
    """
    GATE 1 с исключением вместо результата.

    Raises:
        SupplyFloorBreachError
    """
    result = Gate01SupplyFloor(config).evaluate(total_supply, virtual_supply)
    if not result.entry_allowed:
        raise SupplyFloorBreachError(result.details)
    return result
