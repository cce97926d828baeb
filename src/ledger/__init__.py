"""Issuance/Redemption Ledger и фасад пула."""

from .issuance import IssuanceLedger
from .pool import SmartPool

__all__ = ["IssuanceLedger", "SmartPool"]
