"""
Иерархия исключений пула.

Категории:
- PoolInputError: невалидный ввод, проверяется до любой мутации состояния
- PoolEconomicError: экономические guards (slippage, lockup, impact, баланс)
- PoolDependencyError: отказ внешней зависимости (оракул, venue reader)
- PoolInvariantError: нарушение инварианта, признак логической ошибки

Любое исключение внутри top-level операции откатывает все её эффекты.
"""


class PoolError(Exception):
    """Базовое исключение пула."""


# =============================================================================
# INPUT VALIDATION
# =============================================================================


class PoolInputError(PoolError, ValueError):
    """Невалидный ввод (проверяется первым)."""


class AmountTooSmallError(PoolInputError):
    """Сумма равна нулю или меньше минимального ордера."""

    def __init__(self, amount: int, minimum: int):
        self.amount = amount
        self.minimum = minimum
        super().__init__(f"amount {amount} smaller than minimum {minimum}")


class InvalidRecipientError(PoolInputError):
    """Пустой получатель."""


class InvalidOperatorError(PoolInputError):
    """Caller не является получателем и не одобрен как оператор."""


class CallerNotAllowedError(PoolInputError):
    """Получатель не одобрен allow-list."""


class TokenNotActiveError(PoolInputError):
    """Токен не допустим как вход/выход операции."""


class NativeValueMismatchError(PoolInputError):
    """Переданная native value не совпадает с amount."""


class SpreadInvalidError(PoolInputError):
    """Spread вне допустимого диапазона."""


class LockupPeriodInvalidError(PoolInputError):
    """Lockup вне допустимого диапазона."""


class SameAsCurrentError(PoolInputError):
    """Административное действие не меняет текущее значение."""


class PoolConfigError(PoolInputError):
    """Невалидная конфигурация пула."""


# =============================================================================
# ECONOMIC GUARDS
# =============================================================================


class PoolEconomicError(PoolError):
    """Сработал экономический guard; операция откатывается целиком."""


class OutputBelowMinimumError(PoolEconomicError):
    """Результат операции ниже минимума, заданного caller."""

    def __init__(self, output: int, minimum: int):
        self.output = output
        self.minimum = minimum
        super().__init__(f"output {output} below minimum {minimum}")


class LockupNotElapsedError(PoolEconomicError):
    """Lockup период держателя ещё не истёк."""


class ImpactToleranceExceededError(PoolEconomicError):
    """Операция сдвигает цену сильнее допустимого."""


class InsufficientBalanceError(PoolEconomicError):
    """У пула недостаточно запрошенного актива."""


class InsufficientSharesError(PoolEconomicError):
    """У держателя недостаточно shares."""


class SupplyIsNullOrDustError(PoolEconomicError):
    """Supply пула нулевой: обновлять цену не от чего."""


# =============================================================================
# EXTERNAL DEPENDENCIES
# =============================================================================


class PoolDependencyError(PoolError):
    """Отказ внешней зависимости."""


class PriceUnavailableError(PoolDependencyError):
    """Сервис конверсии цен недоступен или не имеет котировки."""


class VenueReaderError(PoolDependencyError):
    """Reader внешней площадки недоступен (например, stale oracle)."""


class PriceFeedError(PoolDependencyError):
    """Мутирующая операция требует цену, которой нет."""


# =============================================================================
# INVARIANTS
# =============================================================================


class PoolInvariantError(PoolError):
    """Нарушение инварианта (логическая ошибка, не ввод)."""


class ReentrancyError(PoolInvariantError):
    """Повторный вход в операцию над тем же пулом."""


class SupplyFloorBreachError(PoolInvariantError):
    """Отрицательный virtual supply претендует на слишком большую долю backing."""


class SweepRemovedBackedAssetError(PoolInvariantError):
    """Sweep изменил стоимость пула (удалён актив с backing)."""
