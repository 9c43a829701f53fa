"""
Test fixtures package for DropLedger tests.

This package provides factory functions for creating test objects:
- common.py: accounts, balance maps, funded registries

Usage:
    from fixtures import make_accounts, make_balance_map

    def test_something():
        a, b = make_accounts(2)
        snapshot = make_balance_map({a: 100, b: 101}).snapshot
"""

from .common import (
    DEFAULT_SUPPLY,
    claim_args,
    make_account,
    make_accounts,
    make_balance_map,
    make_funded_registry,
)

__all__ = [
    "DEFAULT_SUPPLY",
    "claim_args",
    "make_account",
    "make_accounts",
    "make_balance_map",
    "make_funded_registry",
]
