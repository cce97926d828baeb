"""Valuation Engine — оценка пула (NAV)."""

from .engine import ValuationEngine

__all__ = ["ValuationEngine"]
