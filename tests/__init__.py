"""
Test suite for pool-nav

Contains:
- tests/unit/          : Unit tests for individual modules
"""
