"""
Virtual-Supply Adjuster — поправка supply для стоимости "в пути"

Когда стоимость временно покидает пул (например, ушла в escrow для
settlement на другой площадке), virtual supply уменьшается на эквивалент
в shares по сохранённой цене. Per-share цена при этом не меняется:

    shares = amount_value * SCALE // stored_unitary_value
    outbound: virtual_supply -= shares
    inbound:  virtual_supply += shares

Guards:
- outbound проходит GATE 0 (impact tolerance) до перевода
- любое уменьшение virtual supply проходит GATE 1 (supply floor)
"""

import logging

from src.core.config import PoolConfig
from src.core.domain.pool import PoolState
from src.core.errors import AmountTooSmallError, PriceFeedError, PriceUnavailableError
from src.core.interfaces import PriceService, TokenLedger
from src.core.math.fixed_point import mul_div
from src.core.store import PoolStore
from src.gatekeeper.gates.gate_00_impact_tolerance import check_impact
from src.gatekeeper.gates.gate_01_supply_floor import Gate01Config, check_supply_floor
from src.registry.active_assets import ActiveAssetRegistry

logger = logging.getLogger(__name__)


class VirtualSupplyAdjuster:
    """Единственный мутатор PoolState.virtual_supply."""

    def __init__(
        self,
        store: PoolStore,
        tokens: TokenLedger,
        prices: PriceService,
        registry: ActiveAssetRegistry,
        config: PoolConfig | None = None,
    ):
        self._store = store
        self._tokens = tokens
        self._prices = prices
        self._registry = registry
        self._config = config or PoolConfig()
        self._floor = Gate01Config(
            numerator=self._config.supply_floor_numerator,
            denominator=self._config.supply_floor_denominator,
        )

    def record_outbound(
        self,
        pool_id: str,
        token: str,
        amount: int,
        escrow: str,
        tolerance_bps: int | None = None,
    ) -> int:
        """
        Перевод из пула в escrow с уменьшением virtual supply.

        Returns:
            Количество shares, на которое уменьшен virtual supply

        Raises:
            ImpactToleranceExceededError, SupplyFloorBreachError,
            InsufficientBalanceError, PriceFeedError
        """
        if tolerance_bps is None:
            tolerance_bps = self._config.default_impact_tolerance_bps

        with self._store.operation(pool_id, self._tokens):
            pool = self._store.get_pool(pool_id)
            if amount <= 0:
                raise AmountTooSmallError(amount, 1)

            check_impact(self._prices, pool, token, amount, tolerance_bps)
            shares = self._shares_for(pool, token, amount)

            self._tokens.transfer(token, pool_id, escrow, amount)

            virtual_supply = pool.virtual_supply - shares
            check_supply_floor(pool.total_supply, virtual_supply, self._floor)
            self._store.put_pool(pool.model_copy(update={"virtual_supply": virtual_supply}))

            logger.info(
                "pool %s: %d %s sent to %s, virtual supply %d -> %d",
                pool_id,
                amount,
                token,
                escrow,
                pool.virtual_supply,
                virtual_supply,
            )
            return shares

    def record_inbound(self, pool_id: str, token: str, amount: int, escrow: str) -> int:
        """
        Возврат из escrow в пул с увеличением virtual supply.

        Returns:
            Количество shares, на которое увеличен virtual supply
        """
        with self._store.operation(pool_id, self._tokens):
            pool = self._store.get_pool(pool_id)
            if amount <= 0:
                raise AmountTooSmallError(amount, 1)

            shares = self._shares_for(pool, token, amount)
            self._tokens.transfer(token, escrow, pool_id, amount)
            self._registry.activate(pool_id, token)

            virtual_supply = pool.virtual_supply + shares
            self._store.put_pool(pool.model_copy(update={"virtual_supply": virtual_supply}))

            logger.info(
                "pool %s: %d %s received from %s, virtual supply %d -> %d",
                pool_id,
                amount,
                token,
                escrow,
                pool.virtual_supply,
                virtual_supply,
            )
            return shares

    def adjust(self, pool_id: str, delta: int) -> int:
        """
        Прямая знаковая поправка virtual supply.

        Returns:
            Новый virtual supply

        Raises:
            SupplyFloorBreachError
        """
        with self._store.operation(pool_id):
            pool = self._store.get_pool(pool_id)
            virtual_supply = pool.virtual_supply + delta
            check_supply_floor(pool.total_supply, virtual_supply, self._floor)
            self._store.put_pool(pool.model_copy(update={"virtual_supply": virtual_supply}))
            logger.debug("pool %s: virtual supply adjusted by %d", pool_id, delta)
            return virtual_supply

    def _shares_for(self, pool: PoolState, token: str, amount: int) -> int:
        if token == pool.base_token:
            amount_value = amount
        else:
            try:
                amount_value = self._prices.convert(token, amount, pool.base_token)
            except PriceUnavailableError as e:
                raise PriceFeedError(f"no price for {token}: {e}") from e

        unitary_value = pool.stored_unitary_value()
        if unitary_value == 0:
            raise PriceFeedError(f"pool {pool.pool_id} has zero stored per-share value")
        return mul_div(amount_value, pool.scale, unitary_value)
