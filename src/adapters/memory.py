"""
In-memory реализации внешних коллабораторов пула.

Используются в тестах и локальных симуляциях. Каждая реализация
удовлетворяет соответствующему Protocol из src.core.interfaces.
"""

import logging
from fractions import Fraction
from typing import Any, Sequence

from src.core.domain.position import (
    DerivativesPosition,
    LiquidityPosition,
    MarketInfo,
    PendingOrder,
)
from src.core.errors import InsufficientBalanceError, PriceUnavailableError, VenueReaderError

logger = logging.getLogger(__name__)


# =============================================================================
# TOKEN LEDGER
# =============================================================================


class InMemoryTokenLedger:
    """Балансы токенов: (token, account) -> int."""

    def __init__(self) -> None:
        self._balances: dict[tuple[str, str], int] = {}

    def mint(self, token: str, account: str, amount: int) -> None:
        """Создание баланса "из воздуха" (fixture helper)."""
        if amount < 0:
            raise ValueError(f"mint amount must be non-negative, got {amount}")
        key = (token, account)
        self._balances[key] = self._balances.get(key, 0) + amount

    def burn(self, token: str, account: str, amount: int) -> None:
        """Уничтожение баланса (например, потеря на внешней площадке)."""
        balance = self.balance_of(token, account)
        if amount > balance:
            raise InsufficientBalanceError(
                f"{account} holds {balance} of {token}, cannot burn {amount}"
            )
        self._balances[(token, account)] = balance - amount

    def balance_of(self, token: str, account: str) -> int:
        return self._balances.get((token, account), 0)

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"transfer amount must be non-negative, got {amount}")

        balance = self.balance_of(token, sender)
        if amount > balance:
            raise InsufficientBalanceError(
                f"{sender} holds {balance} of {token}, cannot transfer {amount}"
            )

        self._balances[(token, sender)] = balance - amount
        self._balances[(token, recipient)] = self.balance_of(token, recipient) + amount

    def snapshot(self) -> dict[tuple[str, str], int]:
        return dict(self._balances)

    def restore(self, snapshot: Any) -> None:
        self._balances = dict(snapshot)


# =============================================================================
# PRICE SERVICE
# =============================================================================


class StaticPriceOracle:
    """
    Конверсия по фиксированным ценам.

    Цена задаётся за одну целую единицу токена в общей учётной валюте
    (например, USD). Конверсия округляется вниз.
    """

    def __init__(self) -> None:
        self._prices: dict[str, Fraction] = {}
        self._decimals: dict[str, int] = {}
        self.available = True

    def set_price(self, token: str, price: Fraction | int | str, decimals: int) -> None:
        price = Fraction(price)
        if price <= 0:
            raise ValueError(f"price must be positive, got {price}")
        self._prices[token] = price
        self._decimals[token] = decimals

    def remove_price(self, token: str) -> None:
        self._prices.pop(token, None)

    def convert(self, token: str, amount: int, target: str) -> int:
        if not self.available:
            raise PriceUnavailableError("price service unavailable")
        if token == target:
            return amount

        source_price = self._quote(token)
        target_price = self._quote(target)

        value = (
            Fraction(amount)
            * source_price
            * 10 ** self._decimals[target]
            / (target_price * 10 ** self._decimals[token])
        )
        return value.numerator // value.denominator

    def convert_batch(
        self, tokens: Sequence[str], amounts: Sequence[int], target: str
    ) -> int:
        if len(tokens) != len(amounts):
            raise ValueError(
                f"tokens/amounts length mismatch: {len(tokens)} vs {len(amounts)}"
            )
        return sum(
            self.convert(token, amount, target) for token, amount in zip(tokens, amounts)
        )

    def _quote(self, token: str) -> Fraction:
        try:
            return self._prices[token]
        except KeyError:
            raise PriceUnavailableError(f"no quote for {token}") from None


# =============================================================================
# ACCESS / TIME
# =============================================================================


class StaticAllowList:
    """Allow-list с явным набором одобренных аккаунтов."""

    def __init__(self, approved: Sequence[str] = ()) -> None:
        self._approved = set(approved)

    def approve(self, account: str) -> None:
        self._approved.add(account)

    def revoke(self, account: str) -> None:
        self._approved.discard(account)

    def is_approved(self, account: str) -> bool:
        return account in self._approved


class ManualClock:
    """Часы, управляемые из теста."""

    def __init__(self, start: int = 1_700_000_000) -> None:
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> None:
        if seconds < 0:
            raise ValueError(f"cannot move clock backwards by {seconds}s")
        self._now += seconds


# =============================================================================
# VENUES
# =============================================================================


class InMemoryStakingRegistry:
    """Staking площадка с балансами stake/наград по pool_id."""

    def __init__(self, token: str) -> None:
        self._token = token
        self._stakes: dict[str, int] = {}
        self._rewards: dict[str, int] = {}

    def set_stake(self, pool_id: str, amount: int) -> None:
        self._stakes[pool_id] = amount

    def set_rewards(self, pool_id: str, amount: int) -> None:
        self._rewards[pool_id] = amount

    def staking_token(self) -> str:
        return self._token

    def total_stake(self, pool_id: str) -> int:
        return self._stakes.get(pool_id, 0)

    def reward_balance(self, pool_id: str) -> int:
        return self._rewards.get(pool_id, 0)


class InMemoryDerivativesReader:
    """
    Derivatives reader.

    fail_infos / fail_markets / fail_orders / fail_all имитируют revert
    reader-а при stale upstream oracle.
    """

    def __init__(self) -> None:
        self._positions: dict[str, list[DerivativesPosition]] = {}
        self._infos: dict[str, list[dict[str, Any]]] = {}
        self._orders: dict[str, list[PendingOrder]] = {}
        self._markets: dict[str, MarketInfo] = {}

        self.fail_infos = False
        self.fail_markets = False
        self.fail_orders = False
        self.fail_all = False

    def add_market(self, market: MarketInfo) -> None:
        self._markets[market.market] = market

    def add_position(
        self, account: str, position: DerivativesPosition, info: dict[str, Any] | None = None
    ) -> None:
        self._positions.setdefault(account, []).append(position)
        if info is not None:
            self._infos.setdefault(account, []).append(info)

    def add_order(self, account: str, order: PendingOrder) -> None:
        self._orders.setdefault(account, []).append(order)

    def get_positions(self, account: str) -> list[DerivativesPosition]:
        self._check_available()
        return list(self._positions.get(account, []))

    def get_position_infos(self, account: str) -> list[dict[str, Any]]:
        self._check_available()
        if self.fail_infos:
            raise VenueReaderError("position info reader reverted: stale oracle")
        return [dict(info) for info in self._infos.get(account, [])]

    def get_orders(self, account: str) -> list[PendingOrder]:
        self._check_available()
        if self.fail_orders:
            raise VenueReaderError("order listing reverted")
        return list(self._orders.get(account, []))

    def get_market(self, market: str) -> MarketInfo:
        self._check_available()
        if self.fail_markets:
            raise VenueReaderError("market metadata reverted")
        try:
            return self._markets[market]
        except KeyError:
            raise VenueReaderError(f"unknown market {market}") from None

    def _check_available(self) -> None:
        if self.fail_all:
            raise VenueReaderError("derivatives reader unavailable")


class InMemoryLiquidityManager:
    """Менеджер concentrated-liquidity позиций."""

    def __init__(self) -> None:
        self._positions: dict[str, list[LiquidityPosition]] = {}
        self._sqrt_prices: dict[str, int] = {}

    def add_position(self, owner: str, position: LiquidityPosition) -> None:
        self._positions.setdefault(owner, []).append(position)

    def clear_positions(self, owner: str) -> None:
        self._positions.pop(owner, None)

    def set_sqrt_price(self, pool_key: str, sqrt_price_x96: int) -> None:
        self._sqrt_prices[pool_key] = sqrt_price_x96

    def positions_of(self, owner: str) -> list[LiquidityPosition]:
        return list(self._positions.get(owner, []))

    def sqrt_price_x96(self, pool_key: str) -> int:
        try:
            return self._sqrt_prices[pool_key]
        except KeyError:
            raise VenueReaderError(f"no price for liquidity pool {pool_key}") from None
