"""
Module 01 - Schemas & Canonicalization
File: __init__.py

Purpose: Export the error taxonomy, canonical serialization and account
primitives. Snapshot models live in core.schemas.snapshot and are imported
from there directly (they depend on core.crypto, which depends on this
package).
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
)

# Error models and exceptions
from .errors import (
    AlreadyClaimedException,
    BalanceValidationException,
    BlockedAccountException,
    CanonicalizationException,
    ClaimAmountException,
    DropLedgerError,
    DropLedgerException,
    ErrorCodes,
    InvalidProofException,
    PausedException,
    ProofShapeException,
    StateConflictException,
    TransferFailedException,
    UnauthorizedException,
)

# Account / amount primitives
from .accounts import (
    UINT256_MAX,
    ZERO_ADDRESS,
    address_bytes,
    address_sort_key,
    is_zero_address,
    normalize_address,
    parse_amount,
    require_uint256,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonical_equals",
    "canonicalize_value",
    "dumps_canonical",
    # Errors
    "AlreadyClaimedException",
    "BalanceValidationException",
    "BlockedAccountException",
    "CanonicalizationException",
    "ClaimAmountException",
    "DropLedgerError",
    "DropLedgerException",
    "ErrorCodes",
    "InvalidProofException",
    "PausedException",
    "ProofShapeException",
    "StateConflictException",
    "TransferFailedException",
    "UnauthorizedException",
    # Accounts
    "UINT256_MAX",
    "ZERO_ADDRESS",
    "address_bytes",
    "address_sort_key",
    "is_zero_address",
    "normalize_address",
    "parse_amount",
    "require_uint256",
]
