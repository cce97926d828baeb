"""
TokenAmount — сумма токена вместе с её точностью

Единственный допустимый способ переноса суммы между decimal-представлениями:
сумма всегда путешествует вместе со своими decimals, а конверсия делается
явным методом (rescale / rescale_up).

ЗАПРЕЩЕНО складывать суммы с разными decimals без явной конверсии.
"""

from typing import Final

from pydantic import BaseModel, Field

from src.core.math.fixed_point import MAX_TOKEN_DECIMALS, rescale, rescale_up

# =============================================================================
# ИДЕНТИФИКАТОРЫ
# =============================================================================

# Native валюта (депозит через value, без transfer)
NATIVE_TOKEN: Final[str] = "0x0000000000000000000000000000000000000000"

# Пустой адрес (невалидный получатель)
NULL_ADDRESS: Final[str] = NATIVE_TOKEN


def is_null(account: str | None) -> bool:
    """Пустой ли адрес."""
    return not account or account == NULL_ADDRESS


# =============================================================================
# TOKEN AMOUNT
# =============================================================================


class TokenAmount(BaseModel):
    """
    Пара (value, decimals).

    Immutable модель: конверсия создаёт новый экземпляр.
    """

    value: int = Field(..., description="Сумма в сырых единицах (может быть отрицательной)")
    decimals: int = Field(..., ge=0, le=MAX_TOKEN_DECIMALS, description="Точность")

    model_config = {"frozen": True}

    @classmethod
    def from_units(cls, units: int, decimals: int) -> "TokenAmount":
        """Сумма из целых единиц токена (например, 1000 USDC)."""
        return cls(value=units * 10**decimals, decimals=decimals)

    def rescale(self, decimals: int) -> "TokenAmount":
        """Конверсия в другую точность, округление вниз."""
        return TokenAmount(
            value=rescale(self.value, self.decimals, decimals), decimals=decimals
        )

    def rescale_up(self, decimals: int) -> "TokenAmount":
        """Конверсия в другую точность, округление вверх."""
        return TokenAmount(
            value=rescale_up(self.value, self.decimals, decimals), decimals=decimals
        )

    def __add__(self, other: "TokenAmount") -> "TokenAmount":
        if not isinstance(other, TokenAmount):
            return NotImplemented
        if other.decimals != self.decimals:
            raise ValueError(
                f"Cannot add amounts with different decimals: "
                f"{self.decimals} vs {other.decimals}"
            )
        return TokenAmount(value=self.value + other.value, decimals=self.decimals)

    def is_zero(self) -> bool:
        return self.value == 0
