"""
Issuance/Redemption Ledger — mint/burn shares по per-share цене пула

issue:
    gross_shares = deposit_value * SCALE // unitary_value
    fee_shares   = floor(gross_shares * spread_bps / 10_000)
    net_shares   = gross_shares - fee_shares        → получателю
    fee_shares                                      → fee collector

redeem:
    gross_value = share_amount * unitary_value // SCALE
    net_value   = gross_value - floor(gross_value * spread_bps / 10_000)
    fee shares  = floor(share_amount * spread_bps / 10_000) → fee collector

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Валидация ввода до любой мутации состояния
2. Цена первого депозита — сохранённая (1.0 если её не было); далее свежая оценка
3. Оценка вычисляется ДО перевода депозита (депозит не влияет на свою цену)
4. net_shares + fee_shares == gross_shares
5. Входной токен активируется в той же операции, что и перевод
6. Сохранённая цена не сбрасывается, когда supply доходит до нуля
7. Любая ошибка откатывает всю операцию (PoolStore.operation)
"""

import logging

from src.core.config import PoolConfig, validate_lockup, validate_spread
from src.core.domain.assets import NATIVE_TOKEN, is_null
from src.core.domain.pool import PoolState
from src.core.domain.valuation import NavUpdated
from src.core.errors import (
    AmountTooSmallError,
    InsufficientBalanceError,
    InsufficientSharesError,
    InvalidOperatorError,
    InvalidRecipientError,
    LockupNotElapsedError,
    NativeValueMismatchError,
    OutputBelowMinimumError,
    PoolInputError,
    PriceFeedError,
    PriceUnavailableError,
    SameAsCurrentError,
    SupplyIsNullOrDustError,
    TokenNotActiveError,
)
from src.core.interfaces import AllowList, Clock, PriceService, TokenLedger
from src.core.math.fixed_point import bps_of, mul_div
from src.core.store import PoolStore, TransientOperationState
from src.gatekeeper.gates.gate_02_holder_access import check_holder_access
from src.registry.active_assets import ActiveAssetRegistry
from src.valuation.engine import ValuationEngine

logger = logging.getLogger(__name__)


class IssuanceLedger:
    """Mint/burn shares и административные параметры пула."""

    def __init__(
        self,
        store: PoolStore,
        tokens: TokenLedger,
        prices: PriceService,
        engine: ValuationEngine,
        registry: ActiveAssetRegistry,
        clock: Clock,
        allow_list: AllowList | None = None,
        config: PoolConfig | None = None,
    ):
        self._store = store
        self._tokens = tokens
        self._prices = prices
        self._engine = engine
        self._registry = registry
        self._clock = clock
        self._allow_list = allow_list
        self._config = config or PoolConfig()

    # =========================================================================
    # ISSUE
    # =========================================================================

    def issue(
        self,
        pool_id: str,
        caller: str,
        recipient: str,
        amount: int,
        min_shares: int,
        input_token: str | None = None,
        value: int = 0,
    ) -> int:
        """
        Выпуск shares против депозита.

        Args:
            pool_id: пул
            caller: отправитель депозита
            recipient: получатель shares
            amount: сумма депозита в сырых единицах input_token
            min_shares: минимум net shares (slippage guard)
            input_token: токен депозита; None — base токен пула
            value: приложенная native value (только для native депозита)

        Returns:
            net shares, выпущенные получателю

        Raises:
            PoolInputError: невалидный ввод (см. подклассы)
            PriceFeedError: нет цены для альтернативного входа
            OutputBelowMinimumError: net shares < min_shares
        """
        with self._store.operation(pool_id, self._tokens) as state:
            pool = self._store.get_pool(pool_id)
            token = input_token or pool.base_token

            self._check_issue_inputs(pool, caller, recipient, amount, token, value)
            deposit_value = self._deposit_value(pool, token, amount)

            minimum = self._config.minimum_order(pool.base_decimals)
            if deposit_value < minimum or deposit_value <= 0:
                raise AmountTooSmallError(deposit_value, minimum)

            unitary_value = self._issue_price(pool, token, state)

            gross_shares = mul_div(deposit_value, pool.scale, unitary_value)
            fee_shares = bps_of(gross_shares, pool.spread_bps)
            net_shares = gross_shares - fee_shares

            if net_shares == 0:
                raise AmountTooSmallError(amount, minimum)
            if net_shares < min_shares:
                raise OutputBelowMinimumError(net_shares, min_shares)

            state.pending_inputs.add(token)
            self._tokens.transfer(token, caller, pool_id, amount)
            self._registry.activate(pool_id, token)

            expiry = self._clock.now() + pool.lockup_seconds
            self._credit(pool_id, recipient, net_shares, lockup_expiry=expiry)
            if fee_shares > 0:
                self._credit(pool_id, pool.fee_collector, fee_shares)

            pool = pool.model_copy(
                update={"total_supply": pool.total_supply + gross_shares, "has_minted": True}
            )
            self._persist_unitary_value(pool, unitary_value, caller, state)

            logger.info(
                "pool %s: issued %d shares to %s (fee %d) for %d %s at %d",
                pool_id,
                net_shares,
                recipient,
                fee_shares,
                amount,
                token,
                unitary_value,
            )
            return net_shares

    def _check_issue_inputs(
        self,
        pool: PoolState,
        caller: str,
        recipient: str,
        amount: int,
        token: str,
        value: int,
    ) -> None:
        if amount <= 0:
            raise AmountTooSmallError(amount, self._config.minimum_order(pool.base_decimals))

        check_holder_access(
            caller,
            recipient,
            operator_approved=self._store.is_operator(pool.pool_id, recipient, caller),
            allow_list_approved=self._allow_list_approved(pool, recipient),
        )

        if token != pool.base_token:
            assets = self._store.get_assets(pool.pool_id)
            if token not in assets.eligible_inputs:
                raise TokenNotActiveError(f"{token} is not an eligible input of {pool.pool_id}")

        if token == NATIVE_TOKEN:
            if value != amount:
                raise NativeValueMismatchError(f"value {value} != amount {amount}")
        elif value != 0:
            raise NativeValueMismatchError(f"value {value} sent with {token} deposit")

    def _allow_list_approved(self, pool: PoolState, recipient: str) -> bool:
        if not pool.allow_list_enabled:
            return True
        return self._allow_list is not None and self._allow_list.is_approved(recipient)

    def _deposit_value(self, pool: PoolState, token: str, amount: int) -> int:
        if token == pool.base_token:
            return amount
        try:
            return self._prices.convert(token, amount, pool.base_token)
        except PriceUnavailableError as e:
            raise PriceFeedError(f"no price for input {token}: {e}") from e

    def _issue_price(self, pool: PoolState, token: str, state: TransientOperationState) -> int:
        if not pool.has_minted:
            return pool.stored_unitary_value()

        valuation = self._engine.compute_valuation(pool.pool_id, state)
        if not valuation.is_available:
            if token != pool.base_token:
                raise PriceFeedError(f"valuation of {pool.pool_id} unavailable")
            logger.warning(
                "pool %s: valuation unavailable, issuing at stored value", pool.pool_id
            )
            return pool.stored_unitary_value()

        if valuation.unitary_value == 0:
            raise PriceFeedError(f"pool {pool.pool_id} has zero per-share value")
        return valuation.unitary_value

    # =========================================================================
    # REDEEM
    # =========================================================================

    def redeem(
        self,
        pool_id: str,
        caller: str,
        share_amount: int,
        min_value: int,
        output_token: str | None = None,
    ) -> int:
        """
        Погашение shares.

        Args:
            pool_id: пул
            caller: держатель shares
            share_amount: количество shares к погашению
            min_value: минимум выплаты в единицах output_token
            output_token: токен выплаты; None — base токен

        Returns:
            Выплаченная сумма в сырых единицах output_token

        Raises:
            AmountTooSmallError, TokenNotActiveError: невалидный ввод
            InsufficientSharesError, LockupNotElapsedError,
            OutputBelowMinimumError, InsufficientBalanceError: экономические guards
            PriceFeedError: нет цены для выплаты не в base
        """
        with self._store.operation(pool_id, self._tokens) as state:
            pool = self._store.get_pool(pool_id)
            token = output_token or pool.base_token

            if share_amount <= 0:
                raise AmountTooSmallError(share_amount, 1)

            if token != pool.base_token:
                assets = self._store.get_assets(pool_id)
                if token not in assets.tokens or self._tokens.balance_of(token, pool_id) == 0:
                    raise TokenNotActiveError(f"{token} is not an active asset of {pool_id}")

            holder = self._store.get_holder(pool_id, caller)
            if holder.balance < share_amount:
                raise InsufficientSharesError(
                    f"{caller} holds {holder.balance} shares, redeeming {share_amount}"
                )
            if self._clock.now() < holder.lockup_expiry:
                raise LockupNotElapsedError(
                    f"{caller} locked until {holder.lockup_expiry}, now {self._clock.now()}"
                )

            unitary_value = self._redeem_price(pool, token, state)

            gross_value = mul_div(share_amount, unitary_value, pool.scale)
            net_value = gross_value - bps_of(gross_value, pool.spread_bps)
            fee_shares = bps_of(share_amount, pool.spread_bps)

            output = self._output_amount(pool, token, net_value)
            if output < min_value:
                raise OutputBelowMinimumError(output, min_value)

            available = self._tokens.balance_of(token, pool_id)
            if output > available:
                raise InsufficientBalanceError(
                    f"pool {pool_id} holds {available} of {token}, owes {output}"
                )

            self._store.put_holder(
                pool_id,
                caller,
                holder.model_copy(update={"balance": holder.balance - share_amount}),
            )
            if fee_shares > 0:
                self._credit(pool_id, pool.fee_collector, fee_shares)

            pool = pool.model_copy(
                update={"total_supply": pool.total_supply - share_amount + fee_shares}
            )
            self._tokens.transfer(token, pool_id, caller, output)
            self._persist_unitary_value(pool, unitary_value, caller, state)

            logger.info(
                "pool %s: redeemed %d shares of %s for %d %s (fee shares %d)",
                pool_id,
                share_amount,
                caller,
                output,
                token,
                fee_shares,
            )
            return output

    def _redeem_price(self, pool: PoolState, token: str, state: TransientOperationState) -> int:
        valuation = self._engine.compute_valuation(pool.pool_id, state)
        if valuation.is_available:
            return valuation.unitary_value
        if token != pool.base_token:
            raise PriceFeedError(f"valuation of {pool.pool_id} unavailable")
        logger.warning("pool %s: valuation unavailable, redeeming at stored value", pool.pool_id)
        return pool.stored_unitary_value()

    def _output_amount(self, pool: PoolState, token: str, net_value: int) -> int:
        if token == pool.base_token:
            return net_value
        try:
            return self._prices.convert(pool.base_token, net_value, token)
        except PriceUnavailableError as e:
            raise PriceFeedError(f"no price for output {token}: {e}") from e

    # =========================================================================
    # VALUATION REFRESH / DONATION
    # =========================================================================

    def refresh_valuation(self, pool_id: str, caller: str) -> int:
        """
        Пересчёт и сохранение per-share цены.

        Returns:
            Новая per-share цена

        Raises:
            SupplyIsNullOrDustError: supply пула нулевой
            PriceFeedError: оценка недоступна
        """
        with self._store.operation(pool_id, self._tokens) as state:
            pool = self._store.get_pool(pool_id)
            return self._refresh(pool, caller, state)

    def _refresh(self, pool: PoolState, caller: str, state: TransientOperationState) -> int:
        if pool.total_supply == 0:
            raise SupplyIsNullOrDustError(f"pool {pool.pool_id} has no supply")

        valuation = self._engine.compute_valuation(pool.pool_id, state)
        if not valuation.is_available:
            raise PriceFeedError(f"valuation of {pool.pool_id} unavailable")

        self._persist_unitary_value(pool, valuation.unitary_value, caller, state)
        return valuation.unitary_value

    def donate(
        self, pool_id: str, caller: str, token: str, amount: int, value: int = 0
    ) -> int:
        """
        Перевод в пул без выпуска shares; цена пула растёт.

        Returns:
            Новая per-share цена
        """
        with self._store.operation(pool_id, self._tokens) as state:
            pool = self._store.get_pool(pool_id)
            if amount <= 0:
                raise AmountTooSmallError(amount, 1)
            if token != pool.base_token:
                assets = self._store.get_assets(pool_id)
                if token not in assets.tokens and token not in assets.eligible_inputs:
                    raise TokenNotActiveError(f"{token} cannot be donated to {pool_id}")
                self._deposit_value(pool, token, amount)
            if (token == NATIVE_TOKEN and value != amount) or (
                token != NATIVE_TOKEN and value != 0
            ):
                raise NativeValueMismatchError(f"value {value} does not match donation")
            if pool.total_supply == 0:
                raise SupplyIsNullOrDustError(f"pool {pool_id} has no supply")

            self._tokens.transfer(token, caller, pool_id, amount)
            self._registry.activate(pool_id, token)

            unitary_value = self._refresh(pool, caller, state)
            logger.info("pool %s: %s donated %d %s", pool_id, caller, amount, token)
            return unitary_value

    # =========================================================================
    # ADMIN
    # =========================================================================

    def change_spread(self, pool_id: str, spread_bps: int) -> None:
        with self._store.operation(pool_id):
            pool = self._store.get_pool(pool_id)
            validate_spread(spread_bps)
            if spread_bps == pool.spread_bps:
                raise SameAsCurrentError(f"spread already {spread_bps} bps")
            self._store.put_pool(pool.model_copy(update={"spread_bps": spread_bps}))
            logger.info("pool %s: spread set to %d bps", pool_id, spread_bps)

    def change_lockup(self, pool_id: str, lockup_seconds: int) -> None:
        with self._store.operation(pool_id):
            pool = self._store.get_pool(pool_id)
            validate_lockup(lockup_seconds)
            if lockup_seconds == pool.lockup_seconds:
                raise SameAsCurrentError(f"lockup already {lockup_seconds}s")
            self._store.put_pool(pool.model_copy(update={"lockup_seconds": lockup_seconds}))
            logger.info("pool %s: lockup set to %ds", pool_id, lockup_seconds)

    def set_fee_collector(self, pool_id: str, fee_collector: str) -> None:
        with self._store.operation(pool_id):
            pool = self._store.get_pool(pool_id)
            if is_null(fee_collector):
                raise InvalidRecipientError("fee collector cannot be null")
            if fee_collector == pool.fee_collector:
                raise SameAsCurrentError(f"fee collector already {fee_collector}")
            self._store.put_pool(pool.model_copy(update={"fee_collector": fee_collector}))
            logger.info("pool %s: fee collector set to %s", pool_id, fee_collector)

    def set_allow_list(self, pool_id: str, enabled: bool) -> None:
        with self._store.operation(pool_id):
            pool = self._store.get_pool(pool_id)
            if enabled == pool.allow_list_enabled:
                raise SameAsCurrentError(f"allow list already {'on' if enabled else 'off'}")
            if enabled and self._allow_list is None:
                raise PoolInputError("no allow list provider configured")
            self._store.put_pool(pool.model_copy(update={"allow_list_enabled": enabled}))
            logger.info("pool %s: allow list %s", pool_id, "enabled" if enabled else "disabled")

    def set_operator(self, pool_id: str, holder: str, operator: str, approved: bool) -> None:
        with self._store.operation(pool_id):
            if is_null(operator) or operator == holder:
                raise InvalidOperatorError(f"invalid operator {operator} for {holder}")
            self._store.set_operator(pool_id, holder, operator, approved)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _credit(
        self, pool_id: str, holder: str, shares: int, lockup_expiry: int | None = None
    ) -> None:
        account = self._store.get_holder(pool_id, holder)
        update = {"balance": account.balance + shares}
        if lockup_expiry is not None:
            update["lockup_expiry"] = lockup_expiry
        self._store.put_holder(pool_id, holder, account.model_copy(update=update))

    def _persist_unitary_value(
        self,
        pool: PoolState,
        unitary_value: int,
        caller: str,
        state: TransientOperationState,
    ) -> None:
        previous = pool.unitary_value
        if previous != unitary_value:
            now = self._clock.now()
            pool = pool.model_copy(
                update={"unitary_value": unitary_value, "last_valuation_ts": now}
            )
            state.events.append(
                NavUpdated(
                    pool_id=pool.pool_id,
                    caller=caller,
                    previous_value=previous,
                    unitary_value=unitary_value,
                    timestamp=now,
                )
            )
            logger.info(
                "pool %s: unitary value %s -> %d", pool.pool_id, previous, unitary_value
            )
        self._store.put_pool(pool)


__all__ = ["IssuanceLedger"]
