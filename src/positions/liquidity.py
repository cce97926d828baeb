"""Concentrated-liquidity venue: количества токенов позиций пула."""

import logging

from src.core.domain.pool import VenueType
from src.core.domain.position import PositionEntry
from src.core.interfaces import LiquidityPositionManager
from src.core.math.liquidity import amounts_for_liquidity

logger = logging.getLogger(__name__)


def collect_liquidity_positions(
    owner: str, manager: LiquidityPositionManager
) -> list[PositionEntry]:
    """
    Для каждой позиции: количества из ликвидности при текущей цене
    плюс несобранные tokens_owed. Нулевые количества не добавляются.
    """
    entries: list[PositionEntry] = []

    for position in manager.positions_of(owner):
        sqrt_price = manager.sqrt_price_x96(position.pool_key)
        amount0, amount1 = amounts_for_liquidity(
            sqrt_price, position.tick_lower, position.tick_upper, position.liquidity
        )
        amount0 += position.tokens_owed0
        amount1 += position.tokens_owed1

        logger.debug(
            "liquidity position %d: %s=%d %s=%d",
            position.token_id,
            position.token0,
            amount0,
            position.token1,
            amount1,
        )

        if amount0 > 0:
            entries.append(
                PositionEntry(token=position.token0, amount=amount0, venue=VenueType.LIQUIDITY)
            )
        if amount1 > 0:
            entries.append(
                PositionEntry(token=position.token1, amount=amount1, venue=VenueType.LIQUIDITY)
            )

    return entries
