"""
Active-Asset Registry — какие токены и площадки входят в оценку

Активация:
- вызывается внутри той же операции, что создала ненулевой баланс
- идемпотентна; no-op для base токена и нулевого баланса

Sweep (purge):
- доступен любому и в любой момент
- удаляет токен только при балансе ровно 0 и если он не является pending
  альтернативным входом текущей операции
- удаляет площадку только если её collector не вернул ни одной записи
- идемпотентен и не меняет оценку пула; изменение оценки → SweepRemovedBackedAssetError

КРИТИЧЕСКИЙ ИНВАРИАНТ:
Токен с ненулевым балансом пула никогда не отсутствует в реестре в момент
оценки. Между шагом, увеличивающим баланс, и активацией нет окна, в котором
sweep мог бы исключить стоимость из следующей оценки.
"""

import logging
from dataclasses import dataclass

from src.core.domain.pool import VenueType
from src.core.errors import PoolInputError, SweepRemovedBackedAssetError, VenueReaderError
from src.core.interfaces import TokenLedger
from src.core.store import PoolStore, TransientOperationState
from src.positions.aggregator import PositionAggregator
from src.valuation.engine import ValuationEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepResult:
    """Результат sweep."""

    evicted_tokens: tuple[str, ...]
    evicted_venues: frozenset[VenueType]

    @property
    def changed(self) -> bool:
        return bool(self.evicted_tokens or self.evicted_venues)


class ActiveAssetRegistry:
    """Реестр активов пула поверх PoolStore."""

    def __init__(
        self,
        store: PoolStore,
        tokens: TokenLedger,
        aggregator: PositionAggregator,
        engine: ValuationEngine,
    ):
        self._store = store
        self._tokens = tokens
        self._aggregator = aggregator
        self._engine = engine

    # -------------------------------------------------------------------------
    # Activation
    # -------------------------------------------------------------------------

    def activate(self, pool_id: str, token: str) -> bool:
        """
        Добавить токен в реестр, если у пула ненулевой баланс.

        Returns:
            True если токен был добавлен
        """
        pool = self._store.get_pool(pool_id)
        if token == pool.base_token:
            return False
        if self._tokens.balance_of(token, pool_id) == 0:
            return False

        assets = self._store.get_assets(pool_id)
        if token in assets.tokens:
            return False

        self._store.put_assets(pool_id, assets.with_token(token))
        logger.info("pool %s: token %s activated", pool_id, token)
        return True

    def activate_venue(self, pool_id: str, venue: VenueType) -> bool:
        """Отметить площадку активной (после открытия позиции)."""
        assets = self._store.get_assets(pool_id)
        if venue in assets.venues:
            return False

        self._store.put_assets(pool_id, assets.with_venue(venue))
        logger.info("pool %s: venue %s activated", pool_id, venue.value)
        return True

    def set_eligible_input(self, pool_id: str, token: str, eligible: bool) -> None:
        """Разрешить/запретить токен как альтернативный вход issue."""
        pool = self._store.get_pool(pool_id)
        if token == pool.base_token:
            raise PoolInputError("base token is always an eligible input")

        assets = self._store.get_assets(pool_id)
        if eligible:
            updated = assets.eligible_inputs | {token}
        else:
            updated = assets.eligible_inputs - {token}
        self._store.put_assets(pool_id, assets.model_copy(update={"eligible_inputs": updated}))

    # -------------------------------------------------------------------------
    # Sweep
    # -------------------------------------------------------------------------

    def sweep(self, pool_id: str, state: TransientOperationState | None = None) -> SweepResult:
        """
        Удаление пустых токенов и площадок.

        Args:
            pool_id: пул
            state: transient state объемлющей операции; без него sweep
                открывает собственную операцию

        Raises:
            SweepRemovedBackedAssetError: оценка до и после sweep различается
        """
        if state is None:
            with self._store.operation(pool_id, self._tokens) as op_state:
                return self._sweep(pool_id, op_state)
        return self._sweep(pool_id, state)

    def _sweep(self, pool_id: str, state: TransientOperationState) -> SweepResult:
        before = self._engine.compute_valuation(pool_id)
        assets = self._store.get_assets(pool_id)

        evicted_tokens = tuple(
            token
            for token in assets.tokens
            if self._tokens.balance_of(token, pool_id) == 0
            and token not in state.pending_inputs
        )
        evicted_venues = {
            venue for venue in assets.venues if self._venue_is_empty(pool_id, venue)
        }

        result = SweepResult(
            evicted_tokens=evicted_tokens, evicted_venues=frozenset(evicted_venues)
        )
        if not result.changed:
            return result

        self._store.put_assets(
            pool_id,
            assets.without_tokens(set(evicted_tokens)).without_venues(evicted_venues),
        )

        after = self._engine.compute_valuation(pool_id)
        if before.is_available and after.is_available and (
            before.total_value != after.total_value
            or before.unitary_value != after.unitary_value
        ):
            raise SweepRemovedBackedAssetError(
                f"sweep changed pool {pool_id} value: "
                f"{before.total_value} -> {after.total_value}"
            )

        logger.info(
            "pool %s swept: tokens=%s venues=%s",
            pool_id,
            list(evicted_tokens),
            sorted(v.value for v in evicted_venues),
        )
        return result

    def _venue_is_empty(self, pool_id: str, venue: VenueType) -> bool:
        try:
            return not self._aggregator.collect_venue(pool_id, venue)
        except VenueReaderError as e:
            logger.warning("pool %s: cannot sweep venue %s: %s", pool_id, venue.value, e)
            return False
