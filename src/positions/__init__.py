"""Position Aggregator — позиции пула во внешних площадках."""

from .aggregator import DEFAULT_COLLECTORS, PositionAggregator, VenueReaders
from .derivatives import collect_derivatives_positions, net_collateral, parse_position_info
from .liquidity import collect_liquidity_positions
from .staking import collect_staking_positions

__all__ = [
    "PositionAggregator",
    "VenueReaders",
    "DEFAULT_COLLECTORS",
    "collect_staking_positions",
    "collect_derivatives_positions",
    "collect_liquidity_positions",
    "net_collateral",
    "parse_position_info",
]
