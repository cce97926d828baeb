"""
SmartPool — внешний интерфейс одного пула

Собирает компоненты (aggregator → engine → registry → ledger, settlement)
поверх общего PoolStore и привязывает их к pool_id.

Exposed:
- get_valuation() -> (unitary_value, total_supply)
- get_active_assets() -> (tokens, base_token)
- issue / redeem / refresh_valuation / sweep
- donate, административные операции, settlement
"""

import logging
from typing import Any

from src.core.config import PoolConfig
from src.core.contracts import validate_valuation_snapshot
from src.core.domain.pool import PoolState, VenueType
from src.core.domain.valuation import Valuation
from src.core.interfaces import AllowList, Clock, PriceService, TokenLedger
from src.core.store import PoolStore
from src.ledger.issuance import IssuanceLedger
from src.positions.aggregator import PositionAggregator, VenueReaders
from src.registry.active_assets import ActiveAssetRegistry, SweepResult
from src.settlement.virtual_supply import VirtualSupplyAdjuster
from src.valuation.engine import ValuationEngine

logger = logging.getLogger(__name__)


class SmartPool:
    """Фасад пула."""

    def __init__(
        self,
        pool_id: str,
        store: PoolStore,
        tokens: TokenLedger,
        prices: PriceService,
        clock: Clock,
        readers: VenueReaders | None = None,
        allow_list: AllowList | None = None,
        config: PoolConfig | None = None,
    ):
        store.get_pool(pool_id)

        self.pool_id = pool_id
        self.store = store
        self.tokens = tokens

        self.aggregator = PositionAggregator(readers)
        self.engine = ValuationEngine(store, tokens, prices, self.aggregator, clock)
        self.registry = ActiveAssetRegistry(store, tokens, self.aggregator, self.engine)
        self.ledger = IssuanceLedger(
            store, tokens, prices, self.engine, self.registry, clock, allow_list, config
        )
        self.settlement = VirtualSupplyAdjuster(store, tokens, prices, self.registry, config)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def state(self) -> PoolState:
        return self.store.get_pool(self.pool_id)

    def valuation(self) -> Valuation:
        """Свежая оценка (sentinel при отказе зависимости)."""
        return self.engine.compute_valuation(self.pool_id)

    def get_valuation(self) -> tuple[int, int]:
        """
        (unitary_value, total_supply).

        При недоступной оценке возвращается сохранённая цена.
        """
        pool = self.state
        valuation = self.valuation()
        if valuation.is_available:
            return valuation.unitary_value, pool.total_supply
        return pool.stored_unitary_value(), pool.total_supply

    def valuation_snapshot(self) -> dict[str, Any]:
        """Оценка в виде payload контракта valuation_snapshot."""
        payload = self.valuation().model_dump()
        validate_valuation_snapshot(payload)
        return payload

    def get_active_assets(self) -> tuple[tuple[str, ...], str]:
        """(активные токены, base токен)."""
        return self.store.get_assets(self.pool_id).tokens, self.state.base_token

    def balance_of(self, holder: str) -> int:
        return self.store.get_holder(self.pool_id, holder).balance

    # -------------------------------------------------------------------------
    # Issuance / redemption
    # -------------------------------------------------------------------------

    def issue(
        self,
        caller: str,
        recipient: str,
        amount: int,
        min_shares: int,
        input_token: str | None = None,
        value: int = 0,
    ) -> int:
        return self.ledger.issue(
            self.pool_id, caller, recipient, amount, min_shares, input_token, value
        )

    def redeem(
        self,
        caller: str,
        share_amount: int,
        min_value: int,
        output_token: str | None = None,
    ) -> int:
        return self.ledger.redeem(self.pool_id, caller, share_amount, min_value, output_token)

    def refresh_valuation(self, caller: str) -> int:
        return self.ledger.refresh_valuation(self.pool_id, caller)

    def donate(self, caller: str, token: str, amount: int, value: int = 0) -> int:
        return self.ledger.donate(self.pool_id, caller, token, amount, value)

    # -------------------------------------------------------------------------
    # Active assets
    # -------------------------------------------------------------------------

    def sweep(self) -> SweepResult:
        return self.registry.sweep(self.pool_id)

    def set_eligible_input(self, token: str, eligible: bool) -> None:
        with self.store.operation(self.pool_id):
            self.registry.set_eligible_input(self.pool_id, token, eligible)

    def activate_venue(self, venue: VenueType) -> bool:
        with self.store.operation(self.pool_id):
            return self.registry.activate_venue(self.pool_id, venue)

    # -------------------------------------------------------------------------
    # Admin
    # -------------------------------------------------------------------------

    def change_spread(self, spread_bps: int) -> None:
        self.ledger.change_spread(self.pool_id, spread_bps)

    def change_lockup(self, lockup_seconds: int) -> None:
        self.ledger.change_lockup(self.pool_id, lockup_seconds)

    def set_fee_collector(self, fee_collector: str) -> None:
        self.ledger.set_fee_collector(self.pool_id, fee_collector)

    def set_allow_list(self, enabled: bool) -> None:
        self.ledger.set_allow_list(self.pool_id, enabled)

    def set_operator(self, holder: str, operator: str, approved: bool) -> None:
        self.ledger.set_operator(self.pool_id, holder, operator, approved)
