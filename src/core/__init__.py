"""
Core domain models, integer math, configuration and the pool store.

This module contains the foundational building blocks that are independent
of external systems (price oracles, venue readers, token ledgers).
"""
