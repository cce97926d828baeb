"""In-memory adapters for external collaborators."""

from .memory import (
    InMemoryDerivativesReader,
    InMemoryLiquidityManager,
    InMemoryStakingRegistry,
    InMemoryTokenLedger,
    ManualClock,
    StaticAllowList,
    StaticPriceOracle,
)

__all__ = [
    "InMemoryTokenLedger",
    "StaticPriceOracle",
    "StaticAllowList",
    "ManualClock",
    "InMemoryStakingRegistry",
    "InMemoryDerivativesReader",
    "InMemoryLiquidityManager",
]
