"""
Module 04 - Balance Map Builder
File: balance_map.py

Purpose: Own the mutable account -> entitlement mapping and derive a fresh
DistributionSnapshot after every change.

Rules:
- Indices are reassigned on every snapshot by ascending checksummed account
  string (uppercase hex digits sort first); they are dense and 0-based.
- Every mutator is atomic: changes are validated and applied to a working
  copy, the snapshot is rebuilt from the copy, and only then is the copy
  committed. A failed call leaves balances and snapshot untouched.
- Instances are not thread-safe; callers serialize mutations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping, Optional

from core.config.runtime import BuilderConfig
from core.crypto.hashing import to_hex_uint
from core.merkle.merkle_proofs import BalanceEntry, BalanceTree
from core.schemas.accounts import (
    UINT256_MAX,
    is_zero_address,
    normalize_address,
    parse_amount,
)
from core.schemas.errors import BalanceValidationException
from core.schemas.snapshot import ClaimRecord, DistributionSnapshot

from .parsing import BalanceRecord, derive_flags, parse_balance_input


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Holding:
    amount: int
    reasons: str = ""


def _require_account(account: Any) -> str:
    normalized = normalize_address(account)
    if is_zero_address(normalized):
        raise BalanceValidationException(f"Invalid node: {account}", account=normalized)
    return normalized


def _require_positive(amount: int, account: str) -> int:
    if amount <= 0:
        raise BalanceValidationException(
            f"Invalid amount for account: {account}",
            account=account,
            details={"amount": amount},
        )
    return amount


class BalanceMap:
    """
    Mutable entitlement map that always has a current snapshot.

    Example:
        >>> bm = BalanceMap({a: 100, b: 101})
        >>> bm.snapshot.token_total
        '0xc9'
        >>> _ = bm.add({c: 102})
        >>> len(bm.snapshot.claims)
        3
    """

    def __init__(
        self,
        entries: Mapping[str, Any] | Iterable[BalanceRecord] | Iterable[Mapping[str, Any]],
        *,
        config: Optional[BuilderConfig] = None,
    ) -> None:
        self.config = config or BuilderConfig()
        holdings: dict[str, _Holding] = {}

        for record in self._coerce_records(entries):
            account = _require_account(record.account)
            if account in holdings:
                raise BalanceValidationException(f"Duplicate address: {account}", account=account)
            amount = _require_positive(record.amount, account)
            holdings[account] = _Holding(amount=amount, reasons=record.reasons)

        self._snapshot = self._build_snapshot(holdings)
        self._holdings = holdings

    @staticmethod
    def _coerce_records(entries: Any) -> list[BalanceRecord]:
        if isinstance(entries, Mapping):
            return parse_balance_input(entries)
        rows = list(entries)
        if all(isinstance(row, BalanceRecord) for row in rows):
            return rows
        return parse_balance_input(rows)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> DistributionSnapshot:
        return self._snapshot

    @property
    def balances(self) -> dict[str, int]:
        """Copy of account -> amount, in canonical order."""
        return {account: self._holdings[account].amount for account in self._sorted_accounts(self._holdings)}

    def amount_of(self, account: str) -> int:
        """Current entitlement, 0 for unknown accounts."""
        try:
            key = normalize_address(account)
        except BalanceValidationException:
            return 0
        holding = self._holdings.get(key)
        return holding.amount if holding else 0

    def __len__(self) -> int:
        return len(self._holdings)

    def __contains__(self, account: object) -> bool:
        if not isinstance(account, str):
            return False
        try:
            return normalize_address(account) in self._holdings
        except BalanceValidationException:
            return False

    def to_input(self) -> dict[str, int] | list[dict[str, Any]]:
        """
        Builder input that reproduces this map.

        A plain mapping unless some entry carries reasons, in which case the
        record-list shape is used.
        """
        accounts = self._sorted_accounts(self._holdings)
        if any(self._holdings[a].reasons for a in accounts):
            return [
                {
                    "address": a,
                    "earnings": to_hex_uint(self._holdings[a].amount),
                    "reasons": self._holdings[a].reasons,
                }
                for a in accounts
            ]
        return {a: self._holdings[a].amount for a in accounts}

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def add(self, deltas: Mapping[str, Any]) -> DistributionSnapshot:
        """
        Increment existing entitlements, insert new accounts.

        Raises:
            BalanceValidationException: If any delta is zero, any account is
                invalid or zero, or a total would exceed uint256. Nothing is
                applied in that case.
        """
        working = dict(self._holdings)
        for account, raw in self._normalize_batch(deltas).items():
            delta = _require_positive(parse_amount(raw, account=account), account)
            current = working.get(account)
            if current is None:
                working[account] = _Holding(amount=delta)
            else:
                working[account] = replace(current, amount=current.amount + delta)
            if working[account].amount > UINT256_MAX:
                raise BalanceValidationException(
                    f"Amount overflow for account: {account}", account=account
                )
        return self._commit(working, "add")

    def update(self, values: Mapping[str, Any]) -> DistributionSnapshot:
        """
        Replace entitlements of existing accounts.

        Raises:
            BalanceValidationException: If any account is absent, invalid or
                zero, or any amount is zero. Nothing is applied in that case.
        """
        working = dict(self._holdings)
        for account, raw in self._normalize_batch(values).items():
            amount = _require_positive(parse_amount(raw, account=account), account)
            current = working.get(account)
            if current is None:
                raise BalanceValidationException(f"No exist node: {account}", account=account)
            working[account] = replace(current, amount=amount)
        return self._commit(working, "update")

    def remove(self, accounts: Iterable[str]) -> DistributionSnapshot:
        """Delete accounts; absent or malformed identifiers are skipped."""
        working = dict(self._holdings)
        for account in accounts:
            try:
                key = normalize_address(account)
            except BalanceValidationException:
                logger.debug(f"Skipping removal of malformed account {account!r}")
                continue
            if working.pop(key, None) is None:
                logger.debug(f"Skipping removal of absent account {key}")
        return self._commit(working, "remove")

    def rebuild(self) -> DistributionSnapshot:
        """Re-derive the snapshot from current balances (no state change)."""
        return self._build_snapshot(self._holdings)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _normalize_batch(batch: Mapping[str, Any]) -> dict[str, Any]:
        normalized: dict[str, Any] = {}
        for account, value in batch.items():
            key = _require_account(account)
            if key in normalized:
                raise BalanceValidationException(f"Duplicate address: {key}", account=key)
            normalized[key] = value
        return normalized

    def _commit(self, working: dict[str, _Holding], operation: str) -> DistributionSnapshot:
        snapshot = self._build_snapshot(working)
        self._holdings = working
        previous_root = self._snapshot.merkle_root
        self._snapshot = snapshot
        logger.info(
            f"Balance map {operation}: {len(working)} accounts, "
            f"root {previous_root} -> {snapshot.merkle_root}"
        )
        return snapshot

    @staticmethod
    def _sorted_accounts(holdings: Mapping[str, _Holding]) -> list[str]:
        return sorted(holdings)

    def _build_snapshot(self, holdings: Mapping[str, _Holding]) -> DistributionSnapshot:
        accounts = self._sorted_accounts(holdings)
        tree = BalanceTree(BalanceEntry(account=a, amount=holdings[a].amount) for a in accounts)

        claims: dict[str, ClaimRecord] = {}
        total = 0
        for index, account in enumerate(accounts):
            holding = holdings[account]
            total += holding.amount
            claims[account] = ClaimRecord(
                index=index,
                amount=to_hex_uint(holding.amount),
                proof=tree.merkle_proof(index).hex_siblings,
                flags=derive_flags(holding.reasons, self.config.flag_reasons),
            )

        if total > UINT256_MAX:
            raise BalanceValidationException("Token total exceeds uint256", details={"total": str(total)})

        logger.debug(f"Built tree over {len(accounts)} leaves, depth {tree.depth}")
        return DistributionSnapshot(
            merkle_root=tree.hex_root,
            token_total=to_hex_uint(total),
            claims=claims,
        )


def parse_balance_map(
    balances: Mapping[str, Any] | Iterable[Mapping[str, Any]],
    *,
    config: Optional[BuilderConfig] = None,
) -> DistributionSnapshot:
    """One-shot: build the snapshot for an input document."""
    return BalanceMap(balances, config=config).snapshot
