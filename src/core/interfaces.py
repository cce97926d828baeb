"""
Интерфейсы внешних коллабораторов пула.

Ядро зависит только от этих Protocol-ов; реализации (RPC, оракулы,
in-memory для тестов) живут снаружи ядра.
"""

from typing import Any, Protocol, Sequence, runtime_checkable

from src.core.domain.position import (
    DerivativesPosition,
    LiquidityPosition,
    MarketInfo,
    PendingOrder,
)


# =============================================================================
# PRICE SERVICE
# =============================================================================


@runtime_checkable
class PriceService(Protocol):
    """
    Сервис конверсии сумм между токенами.

    Ожидания:
    - суммы в сырых единицах, знаковые
    - отсутствие котировки → PriceUnavailableError
    """

    def convert(self, token: str, amount: int, target: str) -> int:
        """Сумма token, выраженная в target."""
        ...

    def convert_batch(
        self, tokens: Sequence[str], amounts: Sequence[int], target: str
    ) -> int:
        """Суммарная стоимость нескольких токенов в target за один вызов."""
        ...


# =============================================================================
# TOKEN LEDGER
# =============================================================================


@runtime_checkable
class TokenLedger(Protocol):
    """
    Балансы и переводы токенов (включая native).

    snapshot()/restore() позволяют откатить переводы при неуспехе операции.
    """

    def balance_of(self, token: str, account: str) -> int:
        ...

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None:
        """Перевод; InsufficientBalanceError если у sender недостаточно."""
        ...

    def snapshot(self) -> Any:
        ...

    def restore(self, snapshot: Any) -> None:
        ...


# =============================================================================
# VENUES
# =============================================================================


@runtime_checkable
class StakingRegistry(Protocol):
    """Staking площадка: stake и награды пула."""

    def staking_token(self) -> str:
        ...

    def total_stake(self, pool_id: str) -> int:
        ...

    def reward_balance(self, pool_id: str) -> int:
        ...


@runtime_checkable
class DerivativesReader(Protocol):
    """
    Read-only reader derivatives площадки.

    Может выбросить VenueReaderError (например, stale upstream oracle).
    """

    def get_positions(self, account: str) -> list[DerivativesPosition]:
        ...

    def get_position_infos(self, account: str) -> list[dict[str, Any]]:
        """Enriched payload (контракт derivatives_position_info)."""
        ...

    def get_orders(self, account: str) -> list[PendingOrder]:
        ...

    def get_market(self, market: str) -> MarketInfo:
        ...


@runtime_checkable
class LiquidityPositionManager(Protocol):
    """Менеджер concentrated-liquidity позиций."""

    def positions_of(self, owner: str) -> list[LiquidityPosition]:
        ...

    def sqrt_price_x96(self, pool_key: str) -> int:
        ...


# =============================================================================
# MISC
# =============================================================================


@runtime_checkable
class AllowList(Protocol):
    """Внешний allow-list (KYC) gate."""

    def is_approved(self, account: str) -> bool:
        ...


@runtime_checkable
class Clock(Protocol):
    """Источник времени (unix seconds)."""

    def now(self) -> int:
        ...
