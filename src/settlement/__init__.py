"""Settlement — virtual supply для стоимости в пути."""

from .virtual_supply import VirtualSupplyAdjuster

__all__ = ["VirtualSupplyAdjuster"]
