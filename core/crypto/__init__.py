"""
Core cryptographic utilities.

Keccak-256 hashing, commutative pair hashing and hex helpers.
"""
from .hashing import (
    HASH_LENGTH,
    keccak256,
    hash_canonical,
    hash_pair,
    to_hex,
    from_hex,
    to_hex_uint,
    from_hex_uint,
)

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
