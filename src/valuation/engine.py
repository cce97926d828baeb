"""
Valuation Engine — NAV и per-share цена пула

Алгоритм:
1. base баланс пула
2. балансы активных токенов (кроме base), конвертированные в base одним
   batched вызовом PriceService
3. записи Position Aggregator: base записи складываются напрямую,
   остальные уходят в тот же batch
4. total_value = сумма; effective_supply = total_supply + virtual_supply
5. per-share цена:
   - effective_supply > 0 и total_value > 0 → total_value * SCALE // effective_supply
   - effective_supply <= 0 → сохранённая цена (SCALE если ещё не было)
   - иначе → 0

Failure policy: PriceUnavailableError / VenueReaderError → sentinel
Valuation(timestamp=0). Read path остаётся доступным при отказе оракула.
"""

import logging

from src.core.domain.pool import PoolState
from src.core.domain.valuation import Valuation
from src.core.errors import PriceUnavailableError, VenueReaderError
from src.core.interfaces import Clock, PriceService, TokenLedger
from src.core.math.fixed_point import mul_div
from src.core.store import PoolStore, TransientOperationState
from src.positions.aggregator import PositionAggregator

logger = logging.getLogger(__name__)


class ValuationEngine:
    """Вычисление оценки пула по запросу."""

    def __init__(
        self,
        store: PoolStore,
        tokens: TokenLedger,
        prices: PriceService,
        aggregator: PositionAggregator,
        clock: Clock,
    ):
        self._store = store
        self._tokens = tokens
        self._prices = prices
        self._aggregator = aggregator
        self._clock = clock

    def compute_valuation(
        self, pool_id: str, state: TransientOperationState | None = None
    ) -> Valuation:
        """
        Оценка пула.

        Args:
            pool_id: пул
            state: transient state текущей операции; если передан, результат
                кэшируется в нём и повторно не вычисляется

        Returns:
            Valuation, либо Valuation.unavailable() при отказе зависимости
        """
        if state is not None and state.cached_valuation is not None:
            return state.cached_valuation

        pool = self._store.get_pool(pool_id)

        try:
            total_value = self.total_value(pool)
        except (PriceUnavailableError, VenueReaderError) as e:
            logger.warning("valuation of pool %s unavailable: %s", pool_id, e)
            return Valuation.unavailable()

        valuation = Valuation(
            total_value=total_value,
            unitary_value=self.unitary_value(pool, total_value),
            timestamp=self._clock.now(),
            effective_supply=pool.effective_supply,
        )
        logger.debug(
            "pool %s valuation: total=%d unitary=%d effective_supply=%d",
            pool_id,
            valuation.total_value,
            valuation.unitary_value,
            valuation.effective_supply,
        )

        if state is not None:
            state.cached_valuation = valuation
        return valuation

    def total_value(self, pool: PoolState) -> int:
        """
        Суммарная стоимость пула в сырых единицах base.

        Raises:
            PriceUnavailableError, VenueReaderError
        """
        assets = self._store.get_assets(pool.pool_id)
        base = pool.base_token

        total = self._tokens.balance_of(base, pool.pool_id)
        batch_tokens: list[str] = []
        batch_amounts: list[int] = []

        for token in assets.tokens:
            if token == base:
                continue
            balance = self._tokens.balance_of(token, pool.pool_id)
            if balance != 0:
                batch_tokens.append(token)
                batch_amounts.append(balance)

        for entry in self._aggregator.collect_positions(pool.pool_id, assets.venues):
            if entry.token == base:
                total += entry.amount
            else:
                batch_tokens.append(entry.token)
                batch_amounts.append(entry.amount)

        if batch_tokens:
            total += self._prices.convert_batch(batch_tokens, batch_amounts, base)

        return total

    @staticmethod
    def unitary_value(pool: PoolState, total_value: int) -> int:
        """Per-share цена из total_value (см. правила в docstring модуля)."""
        effective_supply = pool.effective_supply
        if effective_supply <= 0:
            return pool.stored_unitary_value()
        if total_value <= 0:
            return 0
        return mul_div(total_value, pool.scale, effective_supply)

    @staticmethod
    def stored_total_value(pool: PoolState) -> int:
        """Стоимость пула по сохранённой цене (без пересчёта)."""
        return mul_div(pool.stored_unitary_value(), pool.effective_supply, pool.scale)
