"""
Module 05 - Claim Registry
File: proof_verifier.py

Purpose: The registry's own Merkle proof check.

This sits on the trust boundary and deliberately does not call into
core.merkle. It must stay bit-identical to the builder's combine rule:

    computed = leaf
    for sibling in proof:
        computed = keccak(computed ‖ sibling) if computed <= sibling
                   else keccak(sibling ‖ computed)
    valid = computed == root

The all-zero root is never satisfiable.
"""

from __future__ import annotations

from typing import Sequence

from eth_utils import keccak

from core.schemas.errors import ProofShapeException


DIGEST_LENGTH = 32

ZERO_ROOT = b"\x00" * DIGEST_LENGTH


def _as_digest(value: bytes | str, position: int | None = None, what: str = "Proof element") -> bytes:
    if isinstance(value, str):
        text = value[2:] if value.startswith(("0x", "0X")) else None
        try:
            raw = bytes.fromhex(text) if text is not None else None
        except ValueError:
            raw = None
        if raw is None:
            raise ProofShapeException(f"{what} is not 0x-hex: {value!r}", position=position)
        value = raw
    if not isinstance(value, (bytes, bytearray)) or len(value) != DIGEST_LENGTH:
        raise ProofShapeException(f"{what} must be {DIGEST_LENGTH} bytes", position=position)
    return bytes(value)


def normalize_root(root: bytes | str) -> bytes:
    """32-byte root from bytes or 0x-hex."""
    return _as_digest(root, what="Root")


def normalize_proof(proof: Sequence[bytes | str]) -> list[bytes]:
    """
    Proof as a list of 32-byte digests.

    Raises:
        ProofShapeException: On any element that is not a 32-byte digest
    """
    if isinstance(proof, (str, bytes)):
        raise ProofShapeException("Proof must be a sequence of digests")
    return [_as_digest(element, position=i) for i, element in enumerate(proof)]


def verify(proof: Sequence[bytes], root: bytes, leaf: bytes) -> bool:
    """Fold the proof from the leaf upward and compare with the root."""
    if root == ZERO_ROOT:
        return False

    computed = leaf
    for element in proof:
        if computed <= element:
            computed = keccak(computed + element)
        else:
            computed = keccak(element + computed)
    return computed == root
