"""
Module 01 - Schemas & Canonicalization
File: accounts.py

Purpose: Account identifier and uint256 amount primitives shared by the
builder and the registry.

Accounts are 160-bit identifiers written as 0x-prefixed hex. The canonical
form is the EIP-55 checksummed string; canonical ordering compares those
checksummed strings character by character, so uppercase hex digits sort
before lowercase ones.
"""

from typing import Any

from eth_utils import is_address, is_checksum_address, to_checksum_address

from .errors import BalanceValidationException


ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

UINT256_MAX = 2**256 - 1


def normalize_address(account: Any) -> str:
    """
    Validate an account identifier and return its checksummed form.

    Accepts lowercase, uppercase or correctly checksummed hex. Mixed-case
    input with a wrong checksum is rejected.

    Raises:
        BalanceValidationException: If the identifier is not a valid address.
    """
    if not isinstance(account, str) or not is_address(account):
        raise BalanceValidationException(
            f"Found invalid address: {account}",
            account=str(account),
        )
    digits = account[2:] if account[:2].lower() == "0x" else account
    if digits != digits.lower() and digits != digits.upper() and not is_checksum_address(account):
        raise BalanceValidationException(
            f"Bad address checksum: {account}",
            account=account,
        )
    return to_checksum_address(account)


def is_zero_address(account: str) -> bool:
    """True for the all-zero identifier, in any casing, with or without 0x."""
    if not isinstance(account, str):
        return False
    digits = account[2:] if account[:2].lower() == "0x" else account
    return len(digits) == 40 and digits.strip("0") == ""


def address_sort_key(account: str) -> str:
    """Checksummed form of an address, used for canonical ordering."""
    return normalize_address(account)


def address_bytes(account: str) -> bytes:
    """20 raw bytes of a validated address."""
    return bytes.fromhex(normalize_address(account)[2:])


def parse_amount(value: Any, account: str | None = None) -> int:
    """
    Parse a raw entitlement into an integer.

    Accepts ints, decimal strings and 0x-prefixed hex strings. Booleans and
    floats are rejected to avoid silent truncation.

    Raises:
        BalanceValidationException: If the value is not a non-negative uint256.
    """
    if isinstance(value, bool):
        raise BalanceValidationException(
            f"Invalid amount for account: {account}",
            account=account,
            details={"value": value},
        )

    if isinstance(value, int):
        amount = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            if text.lower().startswith("0x"):
                amount = int(text, 16)
            elif text.isascii() and text.isdigit():
                amount = int(text)
            else:
                raise ValueError(text)
        except ValueError as e:
            raise BalanceValidationException(
                f"Invalid amount for account: {account}",
                account=account,
                details={"value": value},
            ) from e
    else:
        raise BalanceValidationException(
            f"Invalid amount for account: {account}",
            account=account,
            details={"value": repr(value)},
        )

    require_uint256(amount, account=account)
    return amount


def require_uint256(amount: int, account: str | None = None, field: str = "amount") -> int:
    """Raise unless 0 <= amount <= 2**256 - 1."""
    if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0 or amount > UINT256_MAX:
        raise BalanceValidationException(
            f"{field} out of uint256 range: {amount}",
            account=account,
            details={"field": field},
        )
    return amount
