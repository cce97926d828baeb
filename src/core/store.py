"""
PoolStore — персистентное key-value хранилище пулов

Явный repository объект, передаваемый в каждую операцию (никаких глобальных
singleton-ов). Ключ — pool_id.

Атомарность: operation() открывает scope одной top-level операции:
1. Захват per-pool флага "in progress" (повторный вход → ReentrancyError)
2. Snapshot состояния пула и участников (TokenLedger и т.п.)
3. Любое исключение → полный откат, исключение пробрасывается дальше
4. Transient state очищается и флаг освобождается на любом пути выхода
5. Уведомления рассылаются только после успешного commit
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Protocol

from src.core.config import PoolConfig
from src.core.domain.pool import ActiveAssets, HolderAccount, PoolState
from src.core.domain.valuation import NavUpdated, Valuation
from src.core.errors import PoolInputError, ReentrancyError

logger = logging.getLogger(__name__)


class Snapshotable(Protocol):
    """Участник операции, поддерживающий откат."""

    def snapshot(self) -> Any:
        ...

    def restore(self, snapshot: Any) -> None:
        ...


# =============================================================================
# TRANSIENT STATE
# =============================================================================


@dataclass
class TransientOperationState:
    """Scratch-значения одной top-level операции.

    Существуют только в рамках operation(); после выхода всегда очищены.
    """

    pool_id: str
    cached_valuation: Valuation | None = None
    pending_inputs: set[str] = field(default_factory=set)
    events: list[NavUpdated] = field(default_factory=list)

    def clear(self) -> None:
        self.cached_valuation = None
        self.pending_inputs.clear()
        self.events.clear()


@dataclass(frozen=True)
class _PoolSnapshot:
    pool: PoolState
    holders: dict[str, HolderAccount]
    assets: ActiveAssets
    operators: frozenset[tuple[str, str]]


# =============================================================================
# STORE
# =============================================================================


class PoolStore:
    """Хранилище состояния пулов."""

    def __init__(self) -> None:
        self._pools: dict[str, PoolState] = {}
        self._holders: dict[str, dict[str, HolderAccount]] = {}
        self._assets: dict[str, ActiveAssets] = {}
        self._operators: dict[str, frozenset[tuple[str, str]]] = {}

        self._in_progress: set[str] = set()
        self._listeners: list[Callable[[NavUpdated], None]] = []

    # -------------------------------------------------------------------------
    # Pools
    # -------------------------------------------------------------------------

    def create_pool(
        self,
        pool_id: str,
        base_token: str,
        base_decimals: int,
        fee_collector: str,
        config: PoolConfig | None = None,
    ) -> PoolState:
        """
        Создание пула (однократно).

        Raises:
            PoolInputError: если пул уже существует
            SpreadInvalidError, LockupPeriodInvalidError: невалидный config
        """
        if pool_id in self._pools:
            raise PoolInputError(f"pool {pool_id} already initialized")

        config = config or PoolConfig()
        config.validate()

        pool = PoolState(
            pool_id=pool_id,
            base_token=base_token,
            base_decimals=base_decimals,
            spread_bps=config.spread_bps,
            lockup_seconds=config.lockup_seconds,
            fee_collector=fee_collector,
        )
        self._pools[pool_id] = pool
        self._holders[pool_id] = {}
        self._assets[pool_id] = ActiveAssets()
        self._operators[pool_id] = frozenset()

        logger.info("pool %s created, base=%s decimals=%d", pool_id, base_token, base_decimals)
        return pool

    def get_pool(self, pool_id: str) -> PoolState:
        try:
            return self._pools[pool_id]
        except KeyError:
            raise PoolInputError(f"unknown pool {pool_id}") from None

    def put_pool(self, pool: PoolState) -> None:
        self.get_pool(pool.pool_id)
        self._pools[pool.pool_id] = pool

    # -------------------------------------------------------------------------
    # Holders
    # -------------------------------------------------------------------------

    def get_holder(self, pool_id: str, holder: str) -> HolderAccount:
        self.get_pool(pool_id)
        return self._holders[pool_id].get(holder, HolderAccount())

    def put_holder(self, pool_id: str, holder: str, account: HolderAccount) -> None:
        self.get_pool(pool_id)
        self._holders[pool_id][holder] = account

    def holders(self, pool_id: str) -> dict[str, HolderAccount]:
        self.get_pool(pool_id)
        return dict(self._holders[pool_id])

    # -------------------------------------------------------------------------
    # Active assets
    # -------------------------------------------------------------------------

    def get_assets(self, pool_id: str) -> ActiveAssets:
        self.get_pool(pool_id)
        return self._assets[pool_id]

    def put_assets(self, pool_id: str, assets: ActiveAssets) -> None:
        self.get_pool(pool_id)
        self._assets[pool_id] = assets

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def is_operator(self, pool_id: str, holder: str, operator: str) -> bool:
        self.get_pool(pool_id)
        return (holder, operator) in self._operators[pool_id]

    def set_operator(self, pool_id: str, holder: str, operator: str, approved: bool) -> None:
        self.get_pool(pool_id)
        current = self._operators[pool_id]
        if approved:
            self._operators[pool_id] = current | {(holder, operator)}
        else:
            self._operators[pool_id] = current - {(holder, operator)}

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    def subscribe(self, listener: Callable[[NavUpdated], None]) -> None:
        """Подписка на NavUpdated (рассылка после commit операции)."""
        self._listeners.append(listener)

    # -------------------------------------------------------------------------
    # Operation scope
    # -------------------------------------------------------------------------

    def in_operation(self, pool_id: str) -> bool:
        return pool_id in self._in_progress

    @contextmanager
    def operation(
        self, pool_id: str, *participants: Snapshotable
    ) -> Iterator[TransientOperationState]:
        """
        Scope одной top-level операции над пулом.

        Args:
            pool_id: пул
            participants: внешние участники с snapshot()/restore()

        Yields:
            TransientOperationState этой операции

        Raises:
            ReentrancyError: операция над пулом уже выполняется
        """
        self.get_pool(pool_id)
        if pool_id in self._in_progress:
            raise ReentrancyError(f"reentrant call on pool {pool_id}")

        self._in_progress.add(pool_id)
        state = TransientOperationState(pool_id=pool_id)
        saved = self._snapshot(pool_id)
        saved_participants = [(p, p.snapshot()) for p in participants]
        events: list[NavUpdated] = []

        try:
            yield state
            events = list(state.events)
        except BaseException:
            self._restore(pool_id, saved)
            for participant, snapshot in saved_participants:
                participant.restore(snapshot)
            logger.debug("operation on pool %s rolled back", pool_id)
            raise
        finally:
            state.clear()
            self._in_progress.discard(pool_id)

        for event in events:
            for listener in self._listeners:
                listener(event)

    def _snapshot(self, pool_id: str) -> _PoolSnapshot:
        return _PoolSnapshot(
            pool=self._pools[pool_id],
            holders=dict(self._holders[pool_id]),
            assets=self._assets[pool_id],
            operators=self._operators[pool_id],
        )

    def _restore(self, pool_id: str, saved: _PoolSnapshot) -> None:
        self._pools[pool_id] = saved.pool
        self._holders[pool_id] = saved.holders
        self._assets[pool_id] = saved.assets
        self._operators[pool_id] = saved.operators
