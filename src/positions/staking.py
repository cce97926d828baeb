"""Staking venue: stake + награды пула одной записью."""

from src.core.domain.pool import VenueType
from src.core.domain.position import PositionEntry
from src.core.interfaces import StakingRegistry


def collect_staking_positions(pool_id: str, registry: StakingRegistry) -> list[PositionEntry]:
    """
    Stake и pending награды на staking токене.

    Returns:
        Одна запись, либо пустой список если сумма нулевая
    """
    total = registry.total_stake(pool_id) + registry.reward_balance(pool_id)
    if total == 0:
        return []

    return [
        PositionEntry(
            token=registry.staking_token(),
            amount=total,
            venue=VenueType.STAKING,
        )
    ]
