"""
Fixed-Point — целочисленная арифметика с явным округлением

Модуль обеспечивает детерминированные вычисления над суммами в "сырых" единицах
токенов (int, без float):
- mul_div с округлением вниз (floor) и вверх (ceil)
- Basis points (bps) доли и проверка диапазона
- Конверсия между разными decimal-представлениями (rescale)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. float никогда не используется для сумм и цен
2. Направление округления всегда задаётся явно вызывающим кодом
3. Деление на ноль никогда не происходит молча (ValueError)
4. Округление всегда в пользу платёжеспособности пула
"""

from typing import Final

from src.core.errors import PoolInputError

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Знаменатель basis points (100% = 10_000 bps)
BPS_DENOMINATOR: Final[int] = 10_000

# Максимальное количество decimals, допустимое для токена
MAX_TOKEN_DECIMALS: Final[int] = 36


# =============================================================================
# MUL / DIV
# =============================================================================


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    a * b / denominator с округлением вниз (к минус бесконечности).

    Для отрицательных результатов округление идёт "от нуля", т.е. убыток
    всегда учитывается полностью.

    Examples:
        >>> mul_div(10, 3, 4)
        7
        >>> mul_div(-10, 3, 4)
        -8
    """
    if denominator == 0:
        raise ValueError("mul_div: division by zero")
    return (a * b) // denominator


def mul_div_up(a: int, b: int, denominator: int) -> int:
    """
    a * b / denominator с округлением вверх (к плюс бесконечности).

    Examples:
        >>> mul_div_up(10, 3, 4)
        8
        >>> mul_div_up(-10, 3, 4)
        -7
    """
    if denominator == 0:
        raise ValueError("mul_div_up: division by zero")
    return -((-a * b) // denominator)


def div_floor(numerator: int, denominator: int) -> int:
    """Деление с округлением вниз."""
    return mul_div(numerator, 1, denominator)


def div_ceil(numerator: int, denominator: int) -> int:
    """Деление с округлением вверх."""
    return mul_div_up(numerator, 1, denominator)


# =============================================================================
# BASIS POINTS
# =============================================================================


def bps_of(amount: int, bps: int) -> int:
    """
    Доля amount в basis points, округление вниз.

    Examples:
        >>> bps_of(1_000_000, 500)
        50000
        >>> bps_of(19, 500)
        0
    """
    validate_bps(bps)
    return mul_div(amount, bps, BPS_DENOMINATOR)


def ratio_bps(part: int, whole: int) -> int:
    """
    part / whole в basis points, округление вниз.

    Args:
        part: числитель (в тех же единицах, что и whole)
        whole: знаменатель (должен быть > 0)
    """
    if whole <= 0:
        raise ValueError(f"whole must be positive, got {whole}")
    return mul_div(part, BPS_DENOMINATOR, whole)


def validate_bps(bps: int, name: str = "bps") -> None:
    """Проверка 0 <= bps <= 10_000."""
    if not 0 <= bps <= BPS_DENOMINATOR:
        raise PoolInputError(f"{name} must be in [0, {BPS_DENOMINATOR}], got {bps}")


# =============================================================================
# DECIMALS
# =============================================================================


def validate_decimals(decimals: int) -> None:
    """Проверка разумности количества decimals токена."""
    if not 0 <= decimals <= MAX_TOKEN_DECIMALS:
        raise ValueError(
            f"decimals must be in [0, {MAX_TOKEN_DECIMALS}], got {decimals}"
        )


def unit(decimals: int) -> int:
    """
    Одна целая единица токена в сырых единицах (10**decimals).

    Также используется как SCALE для per-share цены пула.
    """
    validate_decimals(decimals)
    return 10**decimals


def rescale(amount: int, from_decimals: int, to_decimals: int) -> int:
    """
    Конверсия суммы между decimal-представлениями с округлением вниз.

    Upscale всегда точен; downscale отбрасывает "пыль" ниже новой точности.

    Examples:
        >>> rescale(1_000 * 10**18, 18, 6)
        1000000000
        >>> rescale(1_000 * 10**6, 6, 18)
        1000000000000000000000
    """
    validate_decimals(from_decimals)
    validate_decimals(to_decimals)

    if from_decimals == to_decimals:
        return amount
    if to_decimals > from_decimals:
        return amount * 10 ** (to_decimals - from_decimals)
    return amount // 10 ** (from_decimals - to_decimals)


def rescale_up(amount: int, from_decimals: int, to_decimals: int) -> int:
    """Конверсия между decimal-представлениями с округлением вверх."""
    validate_decimals(from_decimals)
    validate_decimals(to_decimals)

    if to_decimals >= from_decimals:
        return rescale(amount, from_decimals, to_decimals)
    return div_ceil(amount, 10 ** (from_decimals - to_decimals))
