"""Active-Asset Registry."""

from .active_assets import ActiveAssetRegistry, SweepResult

__all__ = ["ActiveAssetRegistry", "SweepResult"]
