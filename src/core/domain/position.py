"""
Position — позиции пула во внешних площадках

Immutable Pydantic модели:
- PositionEntry: нормализованная запись (token, signed amount) для оценки
- Derivatives: открытая позиция, enriched position info, pending ордер, рынок
- LiquidityPosition: concentrated-liquidity позиция

Позиции вычисляются по запросу и никогда не сохраняются.
"""

from enum import Enum
from typing import Final

from pydantic import BaseModel, Field

from src.core.domain.assets import NATIVE_TOKEN
from src.core.domain.pool import VenueType

# Точность USD цен derivatives площадки: USD * 1e30 за одну сырую единицу токена
USD_PRICE_PRECISION: Final[int] = 10**30


# =============================================================================
# NORMALIZED ENTRY
# =============================================================================


class PositionEntry(BaseModel):
    """Нормализованная запись позиции: (token, signed amount)."""

    token: str = Field(..., min_length=1)
    amount: int = Field(..., description="Сумма в сырых единицах token (знаковая)")
    venue: VenueType

    model_config = {"frozen": True}


# =============================================================================
# DERIVATIVES
# =============================================================================


class OrderType(str, Enum):
    """Тип ордера derivatives площадки."""

    MARKET_SWAP = "market_swap"
    LIMIT_SWAP = "limit_swap"
    MARKET_INCREASE = "market_increase"
    LIMIT_INCREASE = "limit_increase"
    STOP_INCREASE = "stop_increase"
    MARKET_DECREASE = "market_decrease"
    LIMIT_DECREASE = "limit_decrease"
    STOP_LOSS_DECREASE = "stop_loss_decrease"
    LIQUIDATION = "liquidation"

    @property
    def is_increase(self) -> bool:
        """Increase ордера резервируют collateral и execution fee."""
        return self in (
            OrderType.MARKET_INCREASE,
            OrderType.LIMIT_INCREASE,
            OrderType.STOP_INCREASE,
        )


class DerivativesPosition(BaseModel):
    """Открытая позиция (raw listing, без PnL)."""

    key: str = Field(..., min_length=1)
    market: str = Field(..., min_length=1)
    collateral_token: str = Field(..., min_length=1)
    collateral_amount: int = Field(..., ge=0)
    is_long: bool

    model_config = {"frozen": True}


class PositionInfo(BaseModel):
    """
    Enriched информация по позиции.

    Все *_usd значения в USD * 1e30; collateral_price — USD * 1e30 за одну
    сырую единицу collateral токена.
    """

    key: str = Field(..., min_length=1)
    market: str = Field(..., min_length=1)
    collateral_token: str = Field(..., min_length=1)
    collateral_amount: int = Field(..., ge=0)
    collateral_price: int = Field(..., ge=0, description="0 = цена недоступна")

    pnl_usd: int = Field(..., description="Нереализованный PnL (знаковый)")
    price_impact_usd: int = Field(..., description="Price impact при закрытии (знаковый)")
    total_cost_usd: int = Field(..., ge=0, description="Borrowing + funding + position fees")

    claimable_long_token_amount: int = Field(default=0, ge=0)
    claimable_short_token_amount: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class PendingOrder(BaseModel):
    """Ещё не исполненный ордер."""

    key: str = Field(..., min_length=1)
    order_type: OrderType
    initial_collateral_token: str = Field(..., min_length=1)
    initial_collateral_amount: int = Field(..., ge=0)
    execution_fee: int = Field(..., ge=0)
    execution_fee_token: str = Field(default=NATIVE_TOKEN, min_length=1)

    model_config = {"frozen": True}


class MarketInfo(BaseModel):
    """Метаданные рынка."""

    market: str = Field(..., min_length=1)
    index_token: str = Field(..., min_length=1)
    long_token: str = Field(..., min_length=1)
    short_token: str = Field(..., min_length=1)

    model_config = {"frozen": True}


# =============================================================================
# CONCENTRATED LIQUIDITY
# =============================================================================


class LiquidityPosition(BaseModel):
    """Concentrated-liquidity позиция, принадлежащая пулу."""

    token_id: int = Field(..., ge=0)
    pool_key: str = Field(..., min_length=1, description="Идентификатор AMM пула для цены")
    token0: str = Field(..., min_length=1)
    token1: str = Field(..., min_length=1)
    tick_lower: int
    tick_upper: int
    liquidity: int = Field(..., ge=0)
    tokens_owed0: int = Field(default=0, ge=0)
    tokens_owed1: int = Field(default=0, ge=0)

    model_config = {"frozen": True}
