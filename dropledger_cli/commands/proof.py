"""
Module 07 - CLI Proof Command

Print one account's claim record from a snapshot.

Usage:
    dropledger proof snapshot.json 0xAccount
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from core.balances import SnapshotIOError, load_snapshot


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def proof_cmd(args: Namespace) -> int:
    """Execute the proof command. Output is always JSON."""
    try:
        snapshot = load_snapshot(args.snapshot)
    except SnapshotIOError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    record = snapshot.claim_for(args.account)
    if record is None:
        print(f"Error: no claim for {args.account}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    document = {
        "account": args.account,
        "merkleRoot": snapshot.merkle_root,
        **record.model_dump(exclude_none=True),
    }
    print(json.dumps(document, indent=2))
    return EXIT_SUCCESS
