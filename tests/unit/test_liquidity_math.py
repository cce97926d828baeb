"""
Тесты для Concentrated Liquidity Math

Проверяет:
1. tick → sqrt price
2. amount0/amount1 deltas
3. Три положения цены относительно диапазона позиции
"""

import pytest

from src.core.math.liquidity import (
    MAX_TICK,
    MIN_TICK,
    Q96,
    amount0_delta,
    amount1_delta,
    amounts_for_liquidity,
    sqrt_ratio_at_tick,
)

LIQUIDITY = 10**18


class TestTickMath:
    def test_tick_zero_is_q96(self) -> None:
        assert sqrt_ratio_at_tick(0) == Q96

    def test_monotonic(self) -> None:
        assert sqrt_ratio_at_tick(-100) < sqrt_ratio_at_tick(0) < sqrt_ratio_at_tick(100)

    def test_out_of_bounds(self) -> None:
        with pytest.raises(ValueError, match="out of bounds"):
            sqrt_ratio_at_tick(MAX_TICK + 1)
        with pytest.raises(ValueError):
            sqrt_ratio_at_tick(MIN_TICK - 1)


class TestAmountDeltas:
    def test_amount1_delta(self) -> None:
        assert amount1_delta(Q96, 2 * Q96, 10**6) == 10**6

    def test_amount0_delta(self) -> None:
        assert amount0_delta(Q96, 2 * Q96, 10**6) == 500_000

    def test_order_independent(self) -> None:
        assert amount0_delta(2 * Q96, Q96, 10**6) == amount0_delta(Q96, 2 * Q96, 10**6)
        assert amount1_delta(2 * Q96, Q96, 10**6) == amount1_delta(Q96, 2 * Q96, 10**6)

    def test_zero_liquidity(self) -> None:
        assert amount0_delta(Q96, 2 * Q96, 0) == 0
        assert amount1_delta(Q96, 2 * Q96, 0) == 0


class TestAmountsForLiquidity:
    def test_price_below_range_only_token0(self) -> None:
        amount0, amount1 = amounts_for_liquidity(
            sqrt_ratio_at_tick(-1_000), -600, 600, LIQUIDITY
        )
        assert amount0 > 0
        assert amount1 == 0

    def test_price_above_range_only_token1(self) -> None:
        amount0, amount1 = amounts_for_liquidity(
            sqrt_ratio_at_tick(1_000), -600, 600, LIQUIDITY
        )
        assert amount0 == 0
        assert amount1 > 0

    def test_price_in_range_both_tokens(self) -> None:
        amount0, amount1 = amounts_for_liquidity(Q96, -600, 600, LIQUIDITY)
        assert amount0 > 0
        assert amount1 > 0

    def test_in_range_amounts_below_full_range_amounts(self) -> None:
        """Внутри диапазона каждая нога меньше, чем при полном выходе из диапазона"""
        in_range = amounts_for_liquidity(Q96, -600, 600, LIQUIDITY)
        below = amounts_for_liquidity(sqrt_ratio_at_tick(-1_000), -600, 600, LIQUIDITY)
        above = amounts_for_liquidity(sqrt_ratio_at_tick(1_000), -600, 600, LIQUIDITY)

        assert in_range[0] < below[0]
        assert in_range[1] < above[1]

    def test_invalid_range(self) -> None:
        with pytest.raises(ValueError, match="must be < tick_upper"):
            amounts_for_liquidity(Q96, 600, 600, LIQUIDITY)

    def test_negative_liquidity(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            amounts_for_liquidity(Q96, -600, 600, -1)
