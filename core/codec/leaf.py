"""
Module 03 - Leaf Codec
Fixed-width encoding and hashing of (index, account, amount) leaves.

Owner: Protocol/Crypto Engineer
Module ID: M03

Encoding (Solidity abi.encodePacked(uint256, address, uint256)):

    offset  0..32   index   uint256 big-endian
    offset 32..52   account 20 raw bytes
    offset 52..84   amount  uint256 big-endian

Every field has a fixed width, so two distinct triples can never produce
the same 84-byte string. The leaf hash is keccak256 of those bytes.

This codec is the one piece shared verbatim by the off-line builder and the
on-ledger registry. Changing it invalidates every published root.
"""
from __future__ import annotations

from eth_abi.packed import encode_packed

from core.crypto.hashing import keccak256
from core.schemas.accounts import normalize_address, require_uint256


LEAF_TYPES: tuple[str, str, str] = ("uint256", "address", "uint256")

ENCODED_LEAF_LENGTH = 32 + 20 + 32


def encode_leaf(index: int, account: str, amount: int) -> bytes:
    """
    Tightly pack a leaf triple.

    Args:
        index: Leaf index (uint256)
        account: 160-bit account identifier (any valid casing)
        amount: Entitlement (uint256)

    Returns:
        84 bytes

    Raises:
        BalanceValidationException: If a field is out of range or the
            account is not a valid address
    """
    require_uint256(index, account=account, field="index")
    require_uint256(amount, account=account, field="amount")
    checksummed = normalize_address(account)
    return encode_packed(list(LEAF_TYPES), [index, checksummed, amount])


def hash_leaf(encoded: bytes) -> bytes:
    """keccak256 of an encoded leaf."""
    return keccak256(encoded)


def leaf_hash(index: int, account: str, amount: int) -> bytes:
    """Encode and hash a leaf in one step."""
    return hash_leaf(encode_leaf(index, account, amount))


__all__ = [
    "LEAF_TYPES",
    "ENCODED_LEAF_LENGTH",
    "encode_leaf",
    "hash_leaf",
    "leaf_hash",
]
