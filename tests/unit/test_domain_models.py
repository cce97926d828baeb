"""
Тесты для Domain Models

Проверяет:
- PoolState: effective_supply, сохранённая цена, immutability
- ActiveAssets: уникальность токенов, идемпотентные вставки/удаления
- Valuation: sentinel
- OrderType: increase ордера
"""

import pytest
from pydantic import ValidationError

from src.core.domain import (
    ActiveAssets,
    HolderAccount,
    OrderType,
    PoolState,
    Valuation,
    VenueType,
    is_null,
    NULL_ADDRESS,
)


@pytest.fixture
def pool() -> PoolState:
    return PoolState(
        pool_id="pool",
        base_token="USDC",
        base_decimals=6,
        spread_bps=500,
        lockup_seconds=3600,
        fee_collector="fees",
    )


class TestPoolState:
    def test_defaults(self, pool: PoolState) -> None:
        assert pool.total_supply == 0
        assert pool.virtual_supply == 0
        assert pool.unitary_value is None
        assert pool.has_minted is False
        assert pool.scale == 10**6

    def test_initial_stored_value_is_one(self, pool: PoolState) -> None:
        assert pool.stored_unitary_value() == 10**6

    def test_effective_supply(self, pool: PoolState) -> None:
        pool = pool.model_copy(update={"total_supply": 1_000, "virtual_supply": -300})
        assert pool.effective_supply == 700

    def test_frozen(self, pool: PoolState) -> None:
        with pytest.raises(ValidationError):
            pool.total_supply = 5

    def test_negative_supply_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PoolState(
                pool_id="pool",
                base_token="USDC",
                base_decimals=6,
                total_supply=-1,
                spread_bps=500,
                lockup_seconds=3600,
                fee_collector="fees",
            )

    def test_holder_defaults(self) -> None:
        account = HolderAccount()
        assert account.balance == 0
        assert account.lockup_expiry == 0


class TestActiveAssets:
    def test_duplicate_tokens_rejected(self) -> None:
        with pytest.raises(ValidationError, match="duplicate"):
            ActiveAssets(tokens=("WETH", "WETH"))

    def test_with_token_idempotent(self) -> None:
        assets = ActiveAssets().with_token("WETH")
        assert assets.with_token("WETH") is assets
        assert assets.tokens == ("WETH",)

    def test_with_token_preserves_order(self) -> None:
        assets = ActiveAssets().with_token("WETH").with_token("DAI").with_token("WBTC")
        assert assets.tokens == ("WETH", "DAI", "WBTC")

    def test_without_tokens(self) -> None:
        assets = ActiveAssets(tokens=("WETH", "DAI", "WBTC"))
        assert assets.without_tokens({"DAI"}).tokens == ("WETH", "WBTC")
        assert assets.without_tokens(set()) is assets

    def test_venues(self) -> None:
        assets = ActiveAssets().with_venue(VenueType.STAKING)
        assert assets.with_venue(VenueType.STAKING) is assets
        assert assets.without_venues({VenueType.STAKING}).venues == frozenset()


class TestValuation:
    def test_unavailable_sentinel(self) -> None:
        sentinel = Valuation.unavailable()
        assert sentinel.timestamp == 0
        assert sentinel.total_value == 0
        assert sentinel.unitary_value == 0
        assert not sentinel.is_available

    def test_available(self) -> None:
        valuation = Valuation(total_value=10, unitary_value=1, timestamp=1)
        assert valuation.is_available


class TestOrderType:
    @pytest.mark.parametrize(
        "order_type",
        [OrderType.MARKET_INCREASE, OrderType.LIMIT_INCREASE, OrderType.STOP_INCREASE],
    )
    def test_increase(self, order_type: OrderType) -> None:
        assert order_type.is_increase

    @pytest.mark.parametrize(
        "order_type",
        [
            OrderType.MARKET_SWAP,
            OrderType.LIMIT_SWAP,
            OrderType.MARKET_DECREASE,
            OrderType.LIMIT_DECREASE,
            OrderType.STOP_LOSS_DECREASE,
            OrderType.LIQUIDATION,
        ],
    )
    def test_not_increase(self, order_type: OrderType) -> None:
        assert not order_type.is_increase


def test_is_null() -> None:
    assert is_null(NULL_ADDRESS)
    assert is_null("")
    assert is_null(None)
    assert not is_null("alice")
