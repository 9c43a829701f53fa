"""
Module 07 - CLI Generate Command

Build a distribution snapshot from a balances document.

Usage:
    dropledger generate -i balances.json -o snapshot.json [--pretty] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace

from core.balances import (
    BalanceMap,
    SnapshotIOError,
    load_balance_input,
    save_snapshot,
)
from core.schemas.errors import DropLedgerException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def print_result(snapshot, out_path: str | None, output_json: bool) -> None:
    summary = {
        "merkle_root": snapshot.merkle_root,
        "token_total": snapshot.token_total,
        "claims": len(snapshot.claims),
    }
    if out_path:
        summary["out"] = out_path

    if output_json:
        print(json.dumps(summary, indent=2))
        return
    print(f"merkle_root: {summary['merkle_root']}")
    print(f"token_total: {summary['token_total']}")
    print(f"claims: {summary['claims']}")
    if out_path:
        print(f"written: {out_path}")


def generate_cmd(args: Namespace) -> int:
    """
    Execute the generate command.

    Without --out the snapshot document itself is printed to stdout.
    """
    config = args.runtime_config

    try:
        data = load_balance_input(args.input)
        balance_map = BalanceMap(data, config=config.builder)
    except (SnapshotIOError, DropLedgerException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    snapshot = balance_map.snapshot
    indent = 2 if args.pretty else None

    if args.out is None:
        print(snapshot.to_json(indent=indent))
        return EXIT_SUCCESS

    save_snapshot(snapshot, args.out, indent=indent)
    print_result(snapshot, args.out, args.json)
    return EXIT_SUCCESS
