"""
Тесты Valuation Engine

Покрытие:
- Пул только с base активом: unitary == base_balance * SCALE // effective_supply
- Альтернативные токены и позиции площадок, конвертированные в base
- effective_supply <= 0 → сохранённая цена
- total_value <= 0 при положительном supply → 0
- Отказ оракула/площадки → sentinel (timestamp 0)
- Кэширование в transient state операции
"""

import pytest

from src.adapters.memory import (
    InMemoryDerivativesReader,
    InMemoryStakingRegistry,
    InMemoryTokenLedger,
    ManualClock,
    StaticPriceOracle,
)
from src.core.domain import DerivativesPosition, VenueType
from src.core.store import PoolStore
from src.positions import PositionAggregator, VenueReaders
from src.valuation import ValuationEngine

POOL = "pool"
SCALE = 10**6


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def store() -> PoolStore:
    store = PoolStore()
    store.create_pool(POOL, "USDC", 6, fee_collector="fees")
    return store


@pytest.fixture
def tokens() -> InMemoryTokenLedger:
    return InMemoryTokenLedger()


@pytest.fixture
def oracle() -> StaticPriceOracle:
    oracle = StaticPriceOracle()
    oracle.set_price("USDC", 1, 6)
    oracle.set_price("WETH", 2_000, 18)
    oracle.set_price("GRG", "1/2", 18)
    return oracle


@pytest.fixture
def staking() -> InMemoryStakingRegistry:
    return InMemoryStakingRegistry("GRG")


@pytest.fixture
def derivatives() -> InMemoryDerivativesReader:
    return InMemoryDerivativesReader()


@pytest.fixture
def engine(store, tokens, oracle, staking, derivatives) -> ValuationEngine:
    aggregator = PositionAggregator(VenueReaders(staking=staking, derivatives=derivatives))
    return ValuationEngine(store, tokens, oracle, aggregator, ManualClock())


def _set_supply(store: PoolStore, total: int, virtual: int = 0, unitary: int | None = None) -> None:
    pool = store.get_pool(POOL)
    store.put_pool(
        pool.model_copy(
            update={"total_supply": total, "virtual_supply": virtual, "unitary_value": unitary}
        )
    )


# =============================================================================
# TESTS
# =============================================================================


class TestBaseOnly:
    @pytest.mark.parametrize("supply", [1, 7, 999_999, 10**6, 3 * 10**9 + 1, 10**15])
    def test_valuation_consistency(self, store, tokens, engine, supply: int) -> None:
        base_balance = 1_234_567_891
        tokens.mint("USDC", POOL, base_balance)
        _set_supply(store, supply)

        valuation = engine.compute_valuation(POOL)

        assert valuation.total_value == base_balance
        assert valuation.unitary_value == base_balance * SCALE // supply
        assert valuation.effective_supply == supply
        assert valuation.is_available

    def test_virtual_supply_in_divisor(self, store, tokens, engine) -> None:
        tokens.mint("USDC", POOL, 1_000 * SCALE)
        _set_supply(store, 1_000 * SCALE, virtual=-500 * SCALE)

        assert engine.compute_valuation(POOL).unitary_value == 2 * SCALE


class TestFallbacks:
    def test_empty_pool_uses_initial_value(self, engine) -> None:
        valuation = engine.compute_valuation(POOL)
        assert valuation.unitary_value == SCALE
        assert valuation.is_available

    def test_non_positive_effective_supply_uses_stored(self, store, tokens, engine) -> None:
        tokens.mint("USDC", POOL, 100)
        _set_supply(store, 1_000, virtual=-1_000, unitary=1_234_567)

        assert engine.compute_valuation(POOL).unitary_value == 1_234_567

    def test_zero_value_with_supply(self, store, engine) -> None:
        _set_supply(store, 1_000, unitary=SCALE)
        valuation = engine.compute_valuation(POOL)
        assert valuation.total_value == 0
        assert valuation.unitary_value == 0


class TestMultiAsset:
    def test_active_token_converted(self, store, tokens, engine) -> None:
        tokens.mint("USDC", POOL, 1_000 * SCALE)
        tokens.mint("WETH", POOL, 10**18)
        store.put_assets(POOL, store.get_assets(POOL).with_token("WETH"))
        _set_supply(store, 3_000 * SCALE)

        valuation = engine.compute_valuation(POOL)

        assert valuation.total_value == 3_000 * SCALE
        assert valuation.unitary_value == SCALE

    def test_inactive_token_ignored(self, store, tokens, engine) -> None:
        tokens.mint("USDC", POOL, 1_000 * SCALE)
        tokens.mint("WETH", POOL, 10**18)
        _set_supply(store, 1_000 * SCALE)

        assert engine.compute_valuation(POOL).total_value == 1_000 * SCALE

    def test_venue_entries_included(self, store, tokens, staking, engine) -> None:
        tokens.mint("USDC", POOL, 1_000 * SCALE)
        staking.set_stake(POOL, 2_000 * 10**18)
        store.put_assets(POOL, store.get_assets(POOL).with_venue(VenueType.STAKING))
        _set_supply(store, 1_000 * SCALE)

        # 2000 GRG по $0.5 = 1000 USDC
        assert engine.compute_valuation(POOL).total_value == 2_000 * SCALE

    def test_missing_quote_returns_sentinel(self, store, tokens, oracle, engine) -> None:
        tokens.mint("WETH", POOL, 10**18)
        store.put_assets(POOL, store.get_assets(POOL).with_token("WETH"))
        oracle.remove_price("WETH")

        valuation = engine.compute_valuation(POOL)

        assert valuation == valuation.unavailable()
        assert not valuation.is_available

    def test_venue_outage_returns_sentinel(self, store, derivatives, engine) -> None:
        store.put_assets(POOL, store.get_assets(POOL).with_venue(VenueType.DERIVATIVES))
        derivatives.fail_all = True

        assert engine.compute_valuation(POOL).timestamp == 0

    @pytest.mark.parametrize("flag", ["fail_markets", "fail_orders"])
    def test_partial_venue_failure_keeps_value(
        self, store, tokens, derivatives, engine, flag: str
    ) -> None:
        tokens.mint("USDC", POOL, 1_000 * SCALE)
        derivatives.add_position(
            POOL,
            DerivativesPosition(
                key="p1",
                market="ETH-USD",
                collateral_token="USDC",
                collateral_amount=500 * SCALE,
                is_long=True,
            ),
            {
                "key": "p1",
                "market": "ETH-USD",
                "collateral_token": "USDC",
                "collateral_amount": 500 * SCALE,
                "collateral_price": 10**24,
                "pnl_usd": 0,
                "price_impact_usd": 0,
                "total_cost_usd": 0,
                "claimable_long_token_amount": 10**18,
            },
        )
        store.put_assets(POOL, store.get_assets(POOL).with_venue(VenueType.DERIVATIVES))
        _set_supply(store, 1_500 * SCALE)
        setattr(derivatives, flag, True)

        valuation = engine.compute_valuation(POOL)

        assert valuation.is_available
        assert valuation.total_value == 1_500 * SCALE

    def test_base_only_pool_survives_oracle_outage(self, store, tokens, oracle, engine) -> None:
        """Без batched конверсии оракул не вызывается"""
        tokens.mint("USDC", POOL, 1_000 * SCALE)
        _set_supply(store, 1_000 * SCALE)
        oracle.available = False

        assert engine.compute_valuation(POOL).is_available


class TestCaching:
    def test_cached_within_operation(self, store, tokens, engine) -> None:
        tokens.mint("USDC", POOL, 1_000 * SCALE)
        _set_supply(store, 1_000 * SCALE)

        with store.operation(POOL) as state:
            first = engine.compute_valuation(POOL, state)
            tokens.mint("USDC", POOL, 1_000 * SCALE)
            assert engine.compute_valuation(POOL, state) is first
            assert engine.compute_valuation(POOL).unitary_value == 2 * SCALE

    def test_sentinel_not_cached(self, store, tokens, oracle, engine) -> None:
        tokens.mint("WETH", POOL, 10**18)
        store.put_assets(POOL, store.get_assets(POOL).with_token("WETH"))
        _set_supply(store, 2_000 * SCALE)
        oracle.available = False

        with store.operation(POOL) as state:
            assert not engine.compute_valuation(POOL, state).is_available
            assert state.cached_valuation is None
            oracle.available = True
            assert engine.compute_valuation(POOL, state).is_available


def test_stored_total_value(store) -> None:
    _set_supply(store, 10**12, unitary=2 * SCALE)
    assert ValuationEngine.stored_total_value(store.get_pool(POOL)) == 2 * 10**12
