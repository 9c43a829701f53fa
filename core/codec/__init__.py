"""
Module 03 - Leaf Codec

Usage:
    from core.codec import leaf_hash

    leaf = leaf_hash(0, "0x70997970C51812dc3A010C7d01b50e0d17dc79C8", 100)
"""
from .leaf import (
    ENCODED_LEAF_LENGTH,
    LEAF_TYPES,
    encode_leaf,
    hash_leaf,
    leaf_hash,
)

__all__ = [
    "ENCODED_LEAF_LENGTH",
    "LEAF_TYPES",
    "encode_leaf",
    "hash_leaf",
    "leaf_hash",
]
