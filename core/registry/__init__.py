"""
Module 05 - Claim Registry

The custodian side of a distribution: verifies claims against the active
root, tracks claimed amounts, and releases tokens through a TokenLedger.
"""
from .token import InMemoryToken, TokenLedger
from .events import RegistryEvent
from .proof_verifier import normalize_proof, normalize_root, verify
from .claim_registry import ClaimRegistry, derive_registry_address

__all__ = [
    "InMemoryToken",
    "TokenLedger",
    "RegistryEvent",
    "normalize_proof",
    "normalize_root",
    "verify",
    "ClaimRegistry",
    "derive_registry_address",
]
