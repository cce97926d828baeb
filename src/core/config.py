"""
PoolConfig — параметры пула и политики guards.

Значения по умолчанию:
- spread 500 bps, допустимо (0, 500]
- lockup 30 дней, допустимо [10 сек, 30 дней]
- минимальный ордер = 10**decimals / 1000
- floor отрицательного virtual supply = 7/8 supply
"""

from dataclasses import dataclass
from typing import Final

from src.core.errors import LockupPeriodInvalidError, PoolConfigError, SpreadInvalidError
from src.core.math.fixed_point import BPS_DENOMINATOR

# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_SPREAD_BPS: Final[int] = 500
MAX_SPREAD_BPS: Final[int] = 500

MIN_LOCKUP_SECONDS: Final[int] = 10
MAX_LOCKUP_SECONDS: Final[int] = 30 * 24 * 60 * 60
DEFAULT_LOCKUP_SECONDS: Final[int] = MAX_LOCKUP_SECONDS

MINIMUM_ORDER_DIVISOR: Final[int] = 1_000

# Доля supply, которую может "занять" отрицательный virtual supply.
# Происхождение 7/8 не задокументировано; сохраняется как политика.
SUPPLY_FLOOR_NUMERATOR: Final[int] = 7
SUPPLY_FLOOR_DENOMINATOR: Final[int] = 8

DEFAULT_IMPACT_TOLERANCE_BPS: Final[int] = 1_000


def validate_spread(spread_bps: int) -> None:
    """Spread должен быть в (0, MAX_SPREAD_BPS]."""
    if not 0 < spread_bps <= MAX_SPREAD_BPS:
        raise SpreadInvalidError(
            f"spread {spread_bps} bps invalid, must be in (0, {MAX_SPREAD_BPS}]"
        )


def validate_lockup(lockup_seconds: int) -> None:
    """Lockup должен быть в [MIN_LOCKUP_SECONDS, MAX_LOCKUP_SECONDS]."""
    if not MIN_LOCKUP_SECONDS <= lockup_seconds <= MAX_LOCKUP_SECONDS:
        raise LockupPeriodInvalidError(
            f"lockup {lockup_seconds}s invalid, must be in "
            f"[{MIN_LOCKUP_SECONDS}, {MAX_LOCKUP_SECONDS}]"
        )


@dataclass(frozen=True)
class PoolConfig:
    """Конфигурация пула.

    Используется при создании пула и guards (minimum order, supply floor,
    impact tolerance для settlement).
    """

    spread_bps: int = DEFAULT_SPREAD_BPS
    lockup_seconds: int = DEFAULT_LOCKUP_SECONDS
    minimum_order_divisor: int = MINIMUM_ORDER_DIVISOR

    supply_floor_numerator: int = SUPPLY_FLOOR_NUMERATOR
    supply_floor_denominator: int = SUPPLY_FLOOR_DENOMINATOR

    default_impact_tolerance_bps: int = DEFAULT_IMPACT_TOLERANCE_BPS

    def validate(self) -> None:
        """
        Проверка всех параметров.

        Raises:
            SpreadInvalidError, LockupPeriodInvalidError, PoolConfigError
        """
        validate_spread(self.spread_bps)
        validate_lockup(self.lockup_seconds)

        if self.minimum_order_divisor <= 0:
            raise PoolConfigError(
                f"minimum_order_divisor must be positive, got {self.minimum_order_divisor}"
            )
        if not 0 < self.supply_floor_numerator < self.supply_floor_denominator:
            raise PoolConfigError(
                "supply floor fraction must be in (0, 1), got "
                f"{self.supply_floor_numerator}/{self.supply_floor_denominator}"
            )
        if not 0 <= self.default_impact_tolerance_bps <= BPS_DENOMINATOR:
            raise PoolConfigError(
                f"default_impact_tolerance_bps must be in [0, {BPS_DENOMINATOR}], "
                f"got {self.default_impact_tolerance_bps}"
            )

    def minimum_order(self, base_decimals: int) -> int:
        """Минимальная сумма ордера в сырых единицах base токена."""
        return 10**base_decimals // self.minimum_order_divisor
