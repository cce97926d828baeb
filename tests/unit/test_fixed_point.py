"""
Тесты для модуля Fixed-Point

Проверяет:
1. mul_div с округлением вниз/вверх (включая отрицательные значения)
2. Basis points доли и проверку диапазона
3. Конверсию между decimal-представлениями
4. TokenAmount: пара (value, decimals)
"""

import pytest

from src.core.domain.assets import TokenAmount
from src.core.math.fixed_point import (
    BPS_DENOMINATOR,
    bps_of,
    div_ceil,
    div_floor,
    mul_div,
    mul_div_up,
    ratio_bps,
    rescale,
    rescale_up,
    unit,
    validate_bps,
    validate_decimals,
)

# =============================================================================
# MUL / DIV
# =============================================================================


class TestMulDiv:
    """Тесты mul_div / mul_div_up"""

    def test_floor_positive(self) -> None:
        assert mul_div(10, 3, 4) == 7

    def test_floor_negative_rounds_away_from_zero(self) -> None:
        """Убыток учитывается полностью"""
        assert mul_div(-10, 3, 4) == -8

    def test_ceil_positive(self) -> None:
        assert mul_div_up(10, 3, 4) == 8

    def test_ceil_negative(self) -> None:
        assert mul_div_up(-10, 3, 4) == -7

    def test_exact_division_same_both_ways(self) -> None:
        assert mul_div(12, 3, 4) == mul_div_up(12, 3, 4) == 9

    def test_zero_denominator_raises(self) -> None:
        with pytest.raises(ValueError, match="division by zero"):
            mul_div(1, 1, 0)
        with pytest.raises(ValueError, match="division by zero"):
            mul_div_up(1, 1, 0)

    def test_large_values_no_overflow(self) -> None:
        """Python int не переполняется на 256-битных значениях"""
        a = 2**255
        assert mul_div(a, 2**10, 2**10) == a

    def test_div_helpers(self) -> None:
        assert div_floor(7, 2) == 3
        assert div_ceil(7, 2) == 4
        assert div_floor(-7, 2) == -4
        assert div_ceil(-7, 2) == -3


# =============================================================================
# BASIS POINTS
# =============================================================================


class TestBasisPoints:
    """Тесты bps_of / ratio_bps / validate_bps"""

    def test_bps_of(self) -> None:
        assert bps_of(1_000_000, 500) == 50_000

    def test_bps_of_rounds_down(self) -> None:
        assert bps_of(19, 500) == 0
        assert bps_of(21, 500) == 1

    def test_bps_of_full(self) -> None:
        assert bps_of(12345, BPS_DENOMINATOR) == 12345

    def test_bps_out_of_range(self) -> None:
        with pytest.raises(ValueError, match="bps must be in"):
            bps_of(100, 10_001)
        with pytest.raises(ValueError):
            validate_bps(-1)

    def test_ratio_bps(self) -> None:
        assert ratio_bps(100_000, 1_000_000) == 1_000
        assert ratio_bps(101_000, 1_000_000) == 1_010

    def test_ratio_bps_non_positive_whole(self) -> None:
        with pytest.raises(ValueError, match="whole must be positive"):
            ratio_bps(1, 0)


# =============================================================================
# DECIMALS
# =============================================================================


class TestDecimals:
    """Тесты конверсии между decimal-представлениями"""

    def test_unit(self) -> None:
        assert unit(0) == 1
        assert unit(6) == 1_000_000
        assert unit(18) == 10**18

    def test_invalid_decimals(self) -> None:
        with pytest.raises(ValueError, match="decimals must be in"):
            validate_decimals(37)
        with pytest.raises(ValueError):
            unit(-1)

    def test_downscale_exact(self) -> None:
        assert rescale(1_000 * 10**18, 18, 6) == 1_000 * 10**6

    def test_upscale_exact(self) -> None:
        assert rescale(1_000 * 10**6, 6, 18) == 1_000 * 10**18

    def test_same_decimals_identity(self) -> None:
        assert rescale(123, 8, 8) == 123
        assert rescale_up(123, 8, 8) == 123

    def test_downscale_drops_dust(self) -> None:
        assert rescale(1_999_999, 6, 0) == 1
        assert rescale_up(1_999_999, 6, 0) == 2

    def test_negative_amounts_floor(self) -> None:
        assert rescale(-1, 6, 0) == -1
        assert rescale_up(-1, 6, 0) == 0


# =============================================================================
# TOKEN AMOUNT
# =============================================================================


class TestTokenAmount:
    """Тесты пары (value, decimals)"""

    def test_round_trip_18_to_6_is_exact(self) -> None:
        """1000 единиц 18-decimal → 6-decimal → 18-decimal без потерь"""
        original = TokenAmount.from_units(1_000, 18)
        converted = original.rescale(6)

        assert converted == TokenAmount(value=1_000 * 10**6, decimals=6)
        assert converted.rescale(18) == original

    def test_rescale_up(self) -> None:
        amount = TokenAmount(value=1_500_001, decimals=6)
        assert amount.rescale(0).value == 1
        assert amount.rescale_up(0).value == 2

    def test_add_same_decimals(self) -> None:
        total = TokenAmount(value=5, decimals=6) + TokenAmount(value=7, decimals=6)
        assert total == TokenAmount(value=12, decimals=6)

    def test_add_mismatched_decimals_raises(self) -> None:
        with pytest.raises(ValueError, match="different decimals"):
            TokenAmount(value=1, decimals=6) + TokenAmount(value=1, decimals=18)

    def test_is_zero(self) -> None:
        assert TokenAmount(value=0, decimals=6).is_zero()
        assert not TokenAmount(value=-1, decimals=6).is_zero()
