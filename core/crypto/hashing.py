"""
Module 02 - Hashing Utilities
Keccak-256 hashing and hex helpers shared by the builder and the registry.

This module provides:
- keccak256 for raw bytes
- Canonical hashing for objects (via dumps_canonical)
- Commutative pair hashing used for Merkle parents
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Digests are keccak-256 (Ethereum flavour), NOT hashlib.sha3_256
- Pair hashing orders the two children by unsigned value before hashing
- All operations are deterministic
"""
from __future__ import annotations

from typing import Any

from eth_utils import keccak

from core.schemas.canonical import dumps_canonical


HASH_LENGTH = 32


def keccak256(data: bytes) -> bytes:
    """
    Compute the keccak-256 digest of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=data)


def hash_canonical(obj: Any) -> bytes:
    """
    Hash an object using canonical JSON serialization.

    Rule: digest = keccak256(dumps_canonical(obj).encode("utf-8"))

    Used to fingerprint whole snapshot documents, not for leaves.
    """
    canonical_json = dumps_canonical(obj)
    return keccak256(canonical_json.encode("utf-8"))


def hash_pair(a: bytes, b: bytes) -> bytes:
    """
    Hash two sibling digests in commutative order.

    The numerically smaller digest is hashed first. For equal-length
    big-endian digests, byte-wise comparison is unsigned numeric comparison.

    Args:
        a: One child digest (32 bytes)
        b: The other child digest (32 bytes)

    Returns:
        32-byte parent digest, identical for hash_pair(a, b) and hash_pair(b, a)
    """
    if a <= b:
        return keccak256(a + b)
    return keccak256(b + a)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not isinstance(hex_string, str) or not hex_string.startswith(("0x", "0X")):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {str(hex_string)[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def to_hex_uint(value: int) -> str:
    """Minimal 0x-prefixed lowercase hex for a non-negative integer (750 -> '0x2ee')."""
    if value < 0:
        raise ValueError(f"Cannot hex-encode negative integer: {value}")
    return hex(value)


def from_hex_uint(hex_string: str) -> int:
    """Parse a 0x-prefixed hex integer. Odd digit counts are accepted."""
    if not isinstance(hex_string, str) or not hex_string.startswith(("0x", "0X")):
        raise ValueError(f"Hex integer must start with '0x', got: {hex_string!r}")
    return int(hex_string, 16)


__all__ = [
    "HASH_LENGTH",
    "keccak256",
    "hash_canonical",
    "hash_pair",
    "to_hex",
    "from_hex",
    "to_hex_uint",
    "from_hex_uint",
]
