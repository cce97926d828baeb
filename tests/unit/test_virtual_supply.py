"""
Тесты Virtual-Supply Adjuster

Покрытие:
- outbound/inbound сохраняют per-share цену
- GATE 0 на outbound (impact tolerance)
- GATE 1 на каждом уменьшении virtual supply, откат перевода
- Конверсия не-base токена
"""

import pytest

from src.adapters.memory import InMemoryTokenLedger, ManualClock, StaticPriceOracle
from src.core.errors import (
    AmountTooSmallError,
    ImpactToleranceExceededError,
    PriceFeedError,
    SupplyFloorBreachError,
)
from src.core.store import PoolStore
from src.ledger import SmartPool

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
    tokens = InMemoryTokenLedger()
    tokens.mint("USDC", "alice", 10_000 * SCALE)
    tokens.mint("WETH", "bob", 10**18)
    return tokens


@pytest.fixture
def oracle() -> StaticPriceOracle:
    oracle = StaticPriceOracle()
    oracle.set_price("USDC", 1, 6)
    oracle.set_price("WETH", 2_000, 18)
    return oracle


@pytest.fixture
def pool(store, tokens, oracle) -> SmartPool:
    pool = SmartPool(POOL, store, tokens, oracle, ManualClock())
    pool.issue("alice", "alice", 1_000 * SCALE, 0)
    return pool


# =============================================================================
# TESTS
# =============================================================================


class TestOutbound:
    def test_price_unchanged(self, pool, tokens) -> None:
        shares = pool.settlement.record_outbound(POOL, "USDC", 100 * SCALE, "escrow")

        assert shares == 100 * SCALE
        assert pool.state.virtual_supply == -100 * SCALE
        assert tokens.balance_of("USDC", "escrow") == 100 * SCALE
        assert pool.valuation().unitary_value == SCALE

    def test_impact_tolerance(self, pool, tokens) -> None:
        with pytest.raises(ImpactToleranceExceededError):
            pool.settlement.record_outbound(POOL, "USDC", 101 * SCALE, "escrow")

        assert pool.state.virtual_supply == 0
        assert tokens.balance_of("USDC", "escrow") == 0

    def test_explicit_tolerance(self, pool) -> None:
        shares = pool.settlement.record_outbound(
            POOL, "USDC", 500 * SCALE, "escrow", tolerance_bps=5_000
        )
        assert shares == 500 * SCALE

    def test_floor_breach_rolls_back_transfer(self, pool, tokens) -> None:
        with pytest.raises(SupplyFloorBreachError):
            pool.settlement.record_outbound(
                POOL, "USDC", 900 * SCALE, "escrow", tolerance_bps=10_000
            )

        assert tokens.balance_of("USDC", "escrow") == 0
        assert tokens.balance_of("USDC", POOL) == 1_000 * SCALE
        assert pool.state.virtual_supply == 0

    def test_zero_amount(self, pool) -> None:
        with pytest.raises(AmountTooSmallError):
            pool.settlement.record_outbound(POOL, "USDC", 0, "escrow")

    def test_non_base_token(self, pool, oracle) -> None:
        pool.set_eligible_input("WETH", True)
        pool.issue("bob", "bob", 10**18, 0, input_token="WETH")

        # 0.05 WETH = 100 USDC
        shares = pool.settlement.record_outbound(
            POOL, "WETH", 5 * 10**16, "escrow", tolerance_bps=1_000
        )

        assert shares == 100 * SCALE
        assert pool.valuation().unitary_value == SCALE

    def test_missing_price(self, pool, tokens, oracle) -> None:
        tokens.mint("DAI", POOL, 10**18)
        with pytest.raises(PriceFeedError):
            pool.settlement.record_outbound(POOL, "DAI", 10**18, "escrow")


class TestInbound:
    def test_round_trip_restores_virtual_supply(self, pool) -> None:
        pool.settlement.record_outbound(POOL, "USDC", 100 * SCALE, "escrow")

        shares = pool.settlement.record_inbound(POOL, "USDC", 100 * SCALE, "escrow")

        assert shares == 100 * SCALE
        assert pool.state.virtual_supply == 0
        assert pool.valuation().unitary_value == SCALE

    def test_inbound_activates_token(self, pool, tokens) -> None:
        tokens.mint("WETH", "escrow", 10**17)

        pool.settlement.record_inbound(POOL, "WETH", 10**17, "escrow")

        assert "WETH" in pool.get_active_assets()[0]
        assert pool.state.virtual_supply == 200 * SCALE


class TestAdjust:
    def test_seven_eighths_floor(self, pool) -> None:
        assert pool.settlement.adjust(POOL, -875 * SCALE) == -875 * SCALE

        with pytest.raises(SupplyFloorBreachError):
            pool.settlement.adjust(POOL, -1)

        assert pool.state.virtual_supply == -875 * SCALE

    def test_positive_delta(self, pool) -> None:
        assert pool.settlement.adjust(POOL, 10 * SCALE) == 10 * SCALE
