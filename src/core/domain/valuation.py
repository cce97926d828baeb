"""
Valuation — результат оценки пула

timestamp == 0 означает "оценка недоступна" (sentinel): caller должен
продолжать использовать последнюю сохранённую цену.
"""

from pydantic import BaseModel, Field


class Valuation(BaseModel):
    """Оценка пула (NAV) в base активе."""

    total_value: int = Field(..., description="Суммарная стоимость в сырых единицах base")
    unitary_value: int = Field(..., ge=0, description="Per-share цена (SCALE = 10**base_decimals)")
    timestamp: int = Field(..., ge=0, description="Время оценки; 0 = недоступна")
    effective_supply: int = Field(default=0, description="Supply, использованный как делитель")

    model_config = {"frozen": True}

    @classmethod
    def unavailable(cls) -> "Valuation":
        """Sentinel результат при отказе оракула/площадки."""
        return cls(total_value=0, unitary_value=0, timestamp=0, effective_supply=0)

    @property
    def is_available(self) -> bool:
        return self.timestamp != 0


class NavUpdated(BaseModel):
    """Уведомление об изменении сохранённой per-share цены."""

    pool_id: str
    caller: str
    previous_value: int | None
    unitary_value: int
    timestamp: int

    model_config = {"frozen": True}
