"""
Module 04 - Balance Map Builder
File: parsing.py

Purpose: Turn builder input documents into balance records.

Two input shapes are accepted:

1. Raw mapping (the usual case):
       {"0xAbc…": 100, "0xDef…": "250", "0x123…": "0xfa"}

2. Record list carrying classification reasons:
       [{"address": "0xAbc…", "earnings": "0x64", "reasons": "lp,user"}, ...]

Parsing only normalizes shapes and amounts. Semantic validation (zero
amounts, zero address, duplicates) belongs to BalanceMap.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from core.schemas.accounts import parse_amount
from core.schemas.errors import BalanceValidationException


@dataclass(frozen=True)
class BalanceRecord:
    """One input row: account, raw entitlement, optional reasons string."""
    account: str
    amount: int
    reasons: str = ""


def records_from_mapping(balances: Mapping[str, Any]) -> list[BalanceRecord]:
    """Records from an account -> amount mapping."""
    return [
        BalanceRecord(account=account, amount=parse_amount(value, account=account))
        for account, value in balances.items()
    ]


def records_from_list(rows: Iterable[Mapping[str, Any]]) -> list[BalanceRecord]:
    """Records from {address, earnings, reasons} rows."""
    records: list[BalanceRecord] = []
    for position, row in enumerate(rows):
        if not isinstance(row, Mapping) or "address" not in row or "earnings" not in row:
            raise BalanceValidationException(
                f"Input row {position} must have 'address' and 'earnings'",
                details={"position": position},
            )
        account = row["address"]
        reasons = row.get("reasons") or ""
        if not isinstance(reasons, str):
            raise BalanceValidationException(
                f"Input row {position} has non-string reasons",
                account=str(account),
            )
        records.append(
            BalanceRecord(
                account=account,
                amount=parse_amount(row["earnings"], account=account),
                reasons=reasons,
            )
        )
    return records


def parse_balance_input(data: Any) -> list[BalanceRecord]:
    """
    Parse a decoded JSON input document.

    Raises:
        BalanceValidationException: If the document has neither accepted shape
    """
    if isinstance(data, Mapping):
        return records_from_mapping(data)
    if isinstance(data, list):
        return records_from_list(data)
    raise BalanceValidationException(
        "Invalid JSON: expected an object of account balances or a list of records",
        details={"type": type(data).__name__},
    )


def derive_flags(reasons: str, flag_reasons: Mapping[str, str]) -> dict[str, bool] | None:
    """
    Classification flags for a reasons string.

    Returns None when reasons is empty so the claim record carries no
    flags key at all.
    """
    if reasons == "":
        return None
    return {flag: keyword in reasons for flag, keyword in flag_reasons.items()}
