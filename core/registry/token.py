"""
Module 05 - Claim Registry
File: token.py

Purpose: The fungible-token collaborator.

ClaimRegistry only needs two operations from a token: move an amount out of
its own balance, and report a balance. The caller identity (msg.sender on a
real ledger) is passed explicitly.

InMemoryToken is a minimal ERC-20-style ledger for tests, simulations and
local tooling. It does not model allowances, decimals or events.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from core.schemas.accounts import normalize_address, require_uint256


logger = logging.getLogger(__name__)


@runtime_checkable
class TokenLedger(Protocol):
    """What the registry consumes from a token."""

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        """Move amount from sender to to. False means nothing moved."""
        ...

    def balance_of(self, account: str) -> int:
        ...


class InMemoryToken:
    """
    Fixed-supply token held in a dict.

    The whole supply is minted to `holder` at construction.
    """

    def __init__(self, name: str, symbol: str, supply: int, *, holder: str) -> None:
        self.name = name
        self.symbol = symbol
        self.total_supply = require_uint256(supply, field="supply")
        self._balances: dict[str, int] = {normalize_address(holder): supply}

    def balance_of(self, account: str) -> int:
        return self._balances.get(normalize_address(account), 0)

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        sender_key = normalize_address(sender)
        to_key = normalize_address(to)
        require_uint256(amount, account=to_key)

        available = self._balances.get(sender_key, 0)
        if available < amount:
            logger.warning(
                f"{self.symbol}: transfer amount exceeds balance "
                f"({sender_key} has {available}, needs {amount})"
            )
            return False

        self._balances[sender_key] = available - amount
        self._balances[to_key] = self._balances.get(to_key, 0) + amount
        return True

    def __repr__(self) -> str:
        return f"InMemoryToken({self.name!r}, {self.symbol!r}, supply={self.total_supply})"
