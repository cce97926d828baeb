"""
Pool — персистентное состояние пула

Immutable Pydantic модели, хранящиеся в PoolStore:
- PoolState: параметры пула, supply, последняя сохранённая per-share цена
- HolderAccount: баланс shares держателя и окончание lockup
- ActiveAssets: какие токены/площадки учитываются в оценке

Все изменения создают новый экземпляр (model_copy(update=...)).
"""

from enum import Enum

from pydantic import BaseModel, Field, field_validator

from src.core.math.fixed_point import MAX_TOKEN_DECIMALS

# =============================================================================
# ENUMS
# =============================================================================


class VenueType(str, Enum):
    """Тип внешней площадки, позиции которой входят в оценку пула."""

    STAKING = "staking"
    DERIVATIVES = "derivatives"
    LIQUIDITY = "liquidity"


# =============================================================================
# POOL STATE
# =============================================================================


class PoolState(BaseModel):
    """
    Состояние пула.

    effective_supply = total_supply + virtual_supply
    """

    # Идентификация
    pool_id: str = Field(..., min_length=1, description="Идентификатор (и аккаунт) пула")
    base_token: str = Field(..., min_length=1, description="Base актив пула")
    base_decimals: int = Field(..., ge=0, le=MAX_TOKEN_DECIMALS, description="Decimals base актива")

    # Supply
    total_supply: int = Field(default=0, ge=0, description="Реальный supply shares")
    virtual_supply: int = Field(
        default=0, description="Знаковая поправка supply для value in flight"
    )

    # Цена
    unitary_value: int | None = Field(
        default=None, ge=0, description="Последняя сохранённая per-share цена (None до первого депозита)"
    )
    last_valuation_ts: int = Field(default=0, ge=0, description="Время последнего сохранения цены")
    has_minted: bool = Field(default=False, description="Был ли хоть один депозит")

    # Параметры
    spread_bps: int = Field(..., gt=0, description="Spread (bps)")
    lockup_seconds: int = Field(..., gt=0, description="Lockup после депозита (сек)")
    fee_collector: str = Field(..., min_length=1, description="Получатель fee shares")
    allow_list_enabled: bool = Field(default=False, description="Включен ли allow-list gate")

    model_config = {"frozen": True}

    @property
    def scale(self) -> int:
        """SCALE per-share цены (одна целая единица base актива)."""
        return 10**self.base_decimals

    @property
    def effective_supply(self) -> int:
        return self.total_supply + self.virtual_supply

    def stored_unitary_value(self) -> int:
        """Сохранённая цена, либо начальная 1.0 если цены ещё не было."""
        if self.unitary_value is None:
            return self.scale
        return self.unitary_value


# =============================================================================
# HOLDER
# =============================================================================


class HolderAccount(BaseModel):
    """Баланс держателя shares."""

    balance: int = Field(default=0, ge=0, description="Shares")
    lockup_expiry: int = Field(default=0, ge=0, description="Timestamp окончания lockup")

    model_config = {"frozen": True}


# =============================================================================
# ACTIVE ASSETS
# =============================================================================


class ActiveAssets(BaseModel):
    """
    Реестр учитываемых в оценке активов.

    tokens — упорядоченный список без дубликатов (base токен не входит).
    eligible_inputs — токены, допустимые как альтернативный вход issue.
    venues — активные площадки.
    """

    tokens: tuple[str, ...] = Field(default=())
    eligible_inputs: frozenset[str] = Field(default=frozenset())
    venues: frozenset[VenueType] = Field(default=frozenset())

    model_config = {"frozen": True}

    @field_validator("tokens")
    @classmethod
    def validate_unique(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if len(set(v)) != len(v):
            raise ValueError(f"duplicate tokens in active set: {v}")
        return v

    def with_token(self, token: str) -> "ActiveAssets":
        if token in self.tokens:
            return self
        return self.model_copy(update={"tokens": self.tokens + (token,)})

    def without_tokens(self, evicted: set[str]) -> "ActiveAssets":
        if not evicted:
            return self
        return self.model_copy(
            update={"tokens": tuple(t for t in self.tokens if t not in evicted)}
        )

    def with_venue(self, venue: VenueType) -> "ActiveAssets":
        if venue in self.venues:
            return self
        return self.model_copy(update={"venues": self.venues | {venue}})

    def without_venues(self, evicted: set[VenueType]) -> "ActiveAssets":
        if not evicted:
            return self
        return self.model_copy(update={"venues": self.venues - evicted})
