"""
Module 07 - CLI Verify Command

Re-verify an account's claim from a snapshot, offline.

The claim is checked twice: with the builder's tree code and with the
registry's own proof verifier. Both must accept.

Usage:
    dropledger verify snapshot.json 0xAccount [--amount N] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field

from core.balances import SnapshotIOError, load_snapshot
from core.codec import leaf_hash
from core.merkle import BalanceTree
from core.registry import proof_verifier
from core.schemas.accounts import normalize_address, parse_amount
from core.schemas.errors import DropLedgerException


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


@dataclass
class VerifySummary:
    """Summary of a claim verification for CLI output."""
    account: str = ""
    merkle_root: str = ""
    index: int | None = None
    amount: str = ""
    builder_ok: bool = False
    registry_ok: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def all_ok(self) -> bool:
        return self.builder_ok and self.registry_ok

    def to_dict(self) -> dict:
        d = asdict(self)
        d["ok"] = self.all_ok
        if not d["errors"]:
            del d["errors"]
        return d


def verify_claim(snapshot, account: str, amount: int | None = None) -> VerifySummary:
    """Check the snapshot's record for `account`, optionally with an overridden amount."""
    summary = VerifySummary(account=account, merkle_root=snapshot.merkle_root)

    record = snapshot.claim_for(account)
    if record is None:
        summary.errors.append(f"No claim for {account}")
        return summary

    claimed_amount = record.amount_int if amount is None else amount
    summary.index = record.index
    summary.amount = hex(claimed_amount)

    summary.builder_ok = BalanceTree.verify_proof(
        record.index, account, claimed_amount, record.proof, snapshot.merkle_root
    )
    summary.registry_ok = proof_verifier.verify(
        proof_verifier.normalize_proof(record.proof),
        proof_verifier.normalize_root(snapshot.merkle_root),
        leaf_hash(record.index, account, claimed_amount),
    )

    if not summary.builder_ok:
        summary.errors.append("Builder: proof does not reach the root")
    if not summary.registry_ok:
        summary.errors.append("Registry: Invalid proof")
    return summary


def print_summary_human(summary: VerifySummary) -> None:
    print(f"account: {summary.account}")
    print(f"merkle_root: {summary.merkle_root}")
    if summary.index is not None:
        print(f"index: {summary.index}")
        print(f"amount: {summary.amount}")
    print(f"builder_ok: {str(summary.builder_ok).lower()}")
    print(f"registry_ok: {str(summary.registry_ok).lower()}")
    if summary.errors:
        print(f"\nerrors ({len(summary.errors)}):")
        for err in summary.errors:
            print(f"  ✗ {err}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        0 if the claim verifies, 2 if it does not, 1 on bad input
    """
    try:
        snapshot = load_snapshot(args.snapshot)
        account = normalize_address(args.account)
        amount = parse_amount(args.amount, account=account) if args.amount is not None else None
    except (SnapshotIOError, DropLedgerException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = verify_claim(snapshot, account, amount)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    if summary.all_ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
