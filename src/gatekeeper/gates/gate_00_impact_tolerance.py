"""GATE 0: Impact Tolerance — ограничение сдвига цены одной операцией

Проверяет, какую долю стоимости пула переносит одна операция:

    stored_total = stored_unitary_value * effective_supply // SCALE
    impact_bps   = amount_value * 10_000 // stored_total

Используется СОХРАНЁННАЯ (не пересчитанная) цена: gate не вызывает
Valuation Engine и не обращается к площадкам.

Правила:
- impact_bps > tolerance_bps → BLOCK
- impact_bps == tolerance_bps → PASS (граница включительно)
- stored_total <= 0 или effective_supply <= 0 → PASS (нечего защищать)
"""

from dataclasses import dataclass

from src.core.domain.pool import PoolState
from src.core.errors import ImpactToleranceExceededError, PriceFeedError, PriceUnavailableError
from src.core.interfaces import PriceService
from src.core.math.fixed_point import mul_div, ratio_bps, validate_bps


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class Gate00Result:
    """Результат GATE 0."""

    entry_allowed: bool
    block_reason: str

    stored_total_value: int
    amount_value: int
    impact_bps: int
    tolerance_bps: int

    details: str


# =============================================================================
# GATE 0
# =============================================================================


class Gate00ImpactTolerance:
    """GATE 0: Impact Tolerance.

    Порядок проверок:
    1. Валидация tolerance_bps
    2. Пустой пул (effective_supply <= 0 или stored_total <= 0) → PASS
    3. Конверсия amount в base (PriceFeedError если котировки нет)
    4. impact_bps vs tolerance_bps
    """

    def __init__(self, prices: PriceService):
        self._prices = prices

    def evaluate(
        self,
        pool: PoolState,
        token: str,
        amount: int,
        tolerance_bps: int,
    ) -> Gate00Result:
        """Оценка impact операции.

        Args:
            pool: состояние пула (сохранённая цена и supply)
            token: переносимый токен
            amount: сумма в сырых единицах token
            tolerance_bps: допустимый impact

        Returns:
            Gate00Result

        Raises:
            ValueError: tolerance_bps вне [0, 10_000]
            PriceFeedError: нет котировки для token
        """
        validate_bps(tolerance_bps, "tolerance_bps")

        stored_total = mul_div(pool.stored_unitary_value(), pool.effective_supply, pool.scale)
        if pool.effective_supply <= 0 or stored_total <= 0:
            return Gate00Result(
                entry_allowed=True,
                block_reason="",
                stored_total_value=stored_total,
                amount_value=0,
                impact_bps=0,
                tolerance_bps=tolerance_bps,
                details="GATE 0 PASS: pool holds no stored value",
            )

        amount_value = self._amount_value(pool, token, amount)
        impact_bps = ratio_bps(amount_value, stored_total)

        if impact_bps > tolerance_bps:
            return Gate00Result(
                entry_allowed=False,
                block_reason="impact_tolerance_exceeded",
                stored_total_value=stored_total,
                amount_value=amount_value,
                impact_bps=impact_bps,
                tolerance_bps=tolerance_bps,
                details=(
                    f"GATE 0 BLOCK: impact {impact_bps} bps > tolerance {tolerance_bps} bps "
                    f"(value {amount_value} of {stored_total})"
                ),
            )

        return Gate00Result(
            entry_allowed=True,
            block_reason="",
            stored_total_value=stored_total,
            amount_value=amount_value,
            impact_bps=impact_bps,
            tolerance_bps=tolerance_bps,
            details=f"GATE 0 PASS: impact {impact_bps} bps <= tolerance {tolerance_bps} bps",
        )

    def _amount_value(self, pool: PoolState, token: str, amount: int) -> int:
        if token == pool.base_token:
            return amount
        try:
            return self._prices.convert(token, amount, pool.base_token)
        except PriceUnavailableError as e:
            raise PriceFeedError(f"cannot value {token} for impact check: {e}") from e


def check_impact(
    prices: PriceService,
    pool: PoolState,
    token: str,
    amount: int,
    tolerance_bps: int,
) -> Gate00Result:
    """
    GATE 0 с исключением вместо результата.

    Raises:
        ImpactToleranceExceededError: impact превышает tolerance
    """
    result = Gate00ImpactTolerance(prices).evaluate(pool, token, amount, tolerance_bps)
    if not result.entry_allowed:
        raise ImpactToleranceExceededError(result.details)
    return result
