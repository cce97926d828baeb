"""
Domain models and value objects.

Contains fundamental domain entities like PoolState, HolderAccount,
ActiveAssets, TokenAmount, PositionEntry, Valuation.
"""

from src.core.domain.assets import NATIVE_TOKEN, NULL_ADDRESS, TokenAmount, is_null
from src.core.domain.pool import (
    ActiveAssets,
    HolderAccount,
    PoolState,
    VenueType,
)
from src.core.domain.position import (
    USD_PRICE_PRECISION,
    DerivativesPosition,
    LiquidityPosition,
    MarketInfo,
    OrderType,
    PendingOrder,
    PositionEntry,
    PositionInfo,
)
from src.core.domain.valuation import NavUpdated, Valuation

__all__ = [
    # Assets
    "NATIVE_TOKEN",
    "NULL_ADDRESS",
    "TokenAmount",
    "is_null",
    # Pool
    "PoolState",
    "HolderAccount",
    "ActiveAssets",
    "VenueType",
    # Positions
    "USD_PRICE_PRECISION",
    "PositionEntry",
    "DerivativesPosition",
    "PositionInfo",
    "PendingOrder",
    "OrderType",
    "MarketInfo",
    "LiquidityPosition",
    # Valuation
    "Valuation",
    "NavUpdated",
]
