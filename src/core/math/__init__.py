"""
Core math modules

Целочисленные математические примитивы: fixed-point, bps, decimals,
concentrated-liquidity.
"""

# Fixed-point (floor/ceil, bps, decimals)
from src.core.math.fixed_point import (
    BPS_DENOMINATOR,
    MAX_TOKEN_DECIMALS,
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

# Concentrated liquidity
from src.core.math.liquidity import (
    MAX_TICK,
    MIN_TICK,
    Q96,
    amount0_delta,
    amount1_delta,
    amounts_for_liquidity,
    sqrt_ratio_at_tick,
)

__all__ = [
    # Fixed-point
    "BPS_DENOMINATOR",
    "MAX_TOKEN_DECIMALS",
    "mul_div",
    "mul_div_up",
    "div_floor",
    "div_ceil",
    "bps_of",
    "ratio_bps",
    "validate_bps",
    "validate_decimals",
    "unit",
    "rescale",
    "rescale_up",
    # Liquidity
    "MIN_TICK",
    "MAX_TICK",
    "Q96",
    "sqrt_ratio_at_tick",
    "amount0_delta",
    "amount1_delta",
    "amounts_for_liquidity",
]
