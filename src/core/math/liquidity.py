"""
Concentrated Liquidity Math — количества токенов из ликвидности позиции

Целочисленная реализация формул concentrated-liquidity (Q64.96):
- tick → sqrt price (Q96)
- amount0 / amount1 для диапазона [tick_lower, tick_upper]
- количества токенов позиции при текущей цене пула

Все количества округляются вниз: стоимость позиции никогда не завышается.
"""

import math
from typing import Final

from src.core.math.fixed_point import mul_div

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

MIN_TICK: Final[int] = -887272
MAX_TICK: Final[int] = 887272
Q96: Final[int] = 2**96

MIN_SQRT_RATIO: Final[int] = 4295128739
MAX_SQRT_RATIO: Final[int] = 1461446703485210103287273052203988822378723970342


# =============================================================================
# TICK MATH
# =============================================================================


def sqrt_ratio_at_tick(tick: int) -> int:
    """
    sqrt(1.0001^tick) в формате Q64.96.

    Raises:
        ValueError: если tick вне [MIN_TICK, MAX_TICK]
    """
    if tick < MIN_TICK or tick > MAX_TICK:
        raise ValueError(f"Tick {tick} out of bounds [{MIN_TICK}, {MAX_TICK}]")

    sqrt_price_x96 = int(math.pow(1.0001, tick / 2.0) * Q96)
    return max(MIN_SQRT_RATIO, min(MAX_SQRT_RATIO, sqrt_price_x96))


# =============================================================================
# AMOUNT DELTAS
# =============================================================================


def amount0_delta(sqrt_a_x96: int, sqrt_b_x96: int, liquidity: int) -> int:
    """amount0 = L * (sqrt_b - sqrt_a) / (sqrt_a * sqrt_b), округление вниз."""
    if sqrt_a_x96 > sqrt_b_x96:
        sqrt_a_x96, sqrt_b_x96 = sqrt_b_x96, sqrt_a_x96
    if liquidity == 0 or sqrt_a_x96 == sqrt_b_x96:
        return 0

    numerator = liquidity << 96
    return mul_div(numerator, sqrt_b_x96 - sqrt_a_x96, sqrt_b_x96) // sqrt_a_x96


def amount1_delta(sqrt_a_x96: int, sqrt_b_x96: int, liquidity: int) -> int:
    """amount1 = L * (sqrt_b - sqrt_a) / Q96, округление вниз."""
    if sqrt_a_x96 > sqrt_b_x96:
        sqrt_a_x96, sqrt_b_x96 = sqrt_b_x96, sqrt_a_x96
    if liquidity == 0 or sqrt_a_x96 == sqrt_b_x96:
        return 0

    return mul_div(liquidity, sqrt_b_x96 - sqrt_a_x96, Q96)


def amounts_for_liquidity(
    sqrt_price_x96: int,
    tick_lower: int,
    tick_upper: int,
    liquidity: int,
) -> tuple[int, int]:
    """
    Количества (amount0, amount1) позиции при текущей цене пула.

    Три случая:
    - цена ниже диапазона: только token0
    - цена выше диапазона: только token1
    - цена внутри диапазона: оба токена

    Args:
        sqrt_price_x96: текущая sqrt цена пула (Q64.96)
        tick_lower: нижняя граница диапазона
        tick_upper: верхняя граница диапазона
        liquidity: ликвидность позиции

    Returns:
        (amount0, amount1) в сырых единицах токенов
    """
    if tick_lower >= tick_upper:
        raise ValueError(f"tick_lower {tick_lower} must be < tick_upper {tick_upper}")
    if liquidity < 0:
        raise ValueError(f"liquidity must be non-negative, got {liquidity}")

    sqrt_lower = sqrt_ratio_at_tick(tick_lower)
    sqrt_upper = sqrt_ratio_at_tick(tick_upper)

    if sqrt_price_x96 <= sqrt_lower:
        return amount0_delta(sqrt_lower, sqrt_upper, liquidity), 0
    if sqrt_price_x96 >= sqrt_upper:
        return 0, amount1_delta(sqrt_lower, sqrt_upper, liquidity)

    return (
        amount0_delta(sqrt_price_x96, sqrt_upper, liquidity),
        amount1_delta(sqrt_lower, sqrt_price_x96, liquidity),
    )
