"""
Module 07 - CLI Mutate Command

Apply add / update / remove batches to a balances document and write the
regenerated snapshot.

Usage:
    dropledger mutate -i balances.json [--add add.json] [--update update.json]
                      [--remove remove.json] -o snapshot.json
                      [--balances-out balances.new.json] [--json]

Batches are applied in the order add, update, remove. --add and --update
files hold account -> amount objects; --remove holds a list of accounts.
Nothing is written unless every batch applies.
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from typing import Any

from core.balances import (
    BalanceMap,
    SnapshotIOError,
    load_balance_input,
    save_balance_input,
    save_snapshot,
)
from core.schemas.errors import DropLedgerException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def _load_mapping(path: str, flag: str) -> dict[str, Any]:
    data = load_balance_input(path)
    if not isinstance(data, dict):
        raise SnapshotIOError(f"{flag} file must hold an object of account -> amount: {path}")
    return data


def _load_account_list(path: str) -> list[str]:
    data = load_balance_input(path)
    if isinstance(data, dict):
        return list(data)
    return [str(item) for item in data]


def mutate_cmd(args: Namespace) -> int:
    """Execute the mutate command."""
    config = args.runtime_config

    if not (args.add or args.update or args.remove):
        print("Error: nothing to do (give --add, --update or --remove)", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        balance_map = BalanceMap(load_balance_input(args.input), config=config.builder)
        old_root = balance_map.snapshot.merkle_root

        if args.add:
            balance_map.add(_load_mapping(args.add, "--add"))
        if args.update:
            balance_map.update(_load_mapping(args.update, "--update"))
        if args.remove:
            balance_map.remove(_load_account_list(args.remove))
    except (SnapshotIOError, DropLedgerException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    snapshot = balance_map.snapshot
    save_snapshot(snapshot, args.out)
    if args.balances_out:
        save_balance_input(balance_map.to_input(), args.balances_out)
        logger.info(f"Wrote balances to {args.balances_out}")

    summary = {
        "old_root": old_root,
        "new_root": snapshot.merkle_root,
        "token_total": snapshot.token_total,
        "claims": len(snapshot.claims),
    }
    if args.json:
        print(json.dumps(summary, indent=2))
    else:
        for key, value in summary.items():
            print(f"{key}: {value}")
    return EXIT_SUCCESS
