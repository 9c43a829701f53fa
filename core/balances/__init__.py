"""
Module 04 - Balance Map Builder

Turns an account -> entitlement mapping into a DistributionSnapshot
(root, total, per-account claim records) and keeps it current across
add / update / remove.
"""
from .parsing import (
    BalanceRecord,
    derive_flags,
    parse_balance_input,
)
from .balance_map import (
    BalanceMap,
    parse_balance_map,
)
from .io import (
    SnapshotIOError,
    load_balance_input,
    load_snapshot,
    save_balance_input,
    save_snapshot,
)

__all__ = [
    "BalanceRecord",
    "derive_flags",
    "parse_balance_input",
    "BalanceMap",
    "parse_balance_map",
    "SnapshotIOError",
    "load_balance_input",
    "load_snapshot",
    "save_balance_input",
    "save_snapshot",
]
