"""
Module 01 - Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy across the builder and the claim registry.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Validation Errors (builder input, registry arguments)
    BALANCE_VALIDATION_ERROR = "BALANCE_VALIDATION_ERROR"
    PROOF_SHAPE_INVALID = "PROOF_SHAPE_INVALID"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Authorization Errors
    NOT_OWNER = "NOT_OWNER"

    # Proof & Accounting Errors
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"
    CLAIM_AMOUNT_INVALID = "CLAIM_AMOUNT_INVALID"
    ALREADY_CLAIMED = "ALREADY_CLAIMED"
    ACCOUNT_BLOCKED = "ACCOUNT_BLOCKED"

    # Collaborator Errors
    TOKEN_TRANSFER_FAILED = "TOKEN_TRANSFER_FAILED"

    # State Errors
    STATE_CONFLICT = "STATE_CONFLICT"
    REGISTRY_PAUSED = "REGISTRY_PAUSED"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class DropLedgerError(BaseModel):
    """
    Base error model for structured error communication.

    Used where an error has to cross a serialization boundary (CLI JSON
    output, HTTP responses) instead of being raised.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.MERKLE_PROOF_INVALID],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "DropLedgerException":
        """Convert this error model to a raised exception."""
        return DropLedgerException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class DropLedgerException(Exception):
    """
    Base exception for all distribution errors.

    Carries structured error information and can be converted to a
    DropLedgerError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "DROPLEDGER_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> DropLedgerError:
        """Convert this exception to a DropLedgerError model."""
        return DropLedgerError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(DropLedgerException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class BalanceValidationException(DropLedgerException):
    """Invalid address, zero/out-of-range amount, duplicate or unknown account."""

    def __init__(
        self,
        message: str,
        account: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if account is not None:
            full_details["account"] = account
        super().__init__(
            message=message,
            code=ErrorCodes.BALANCE_VALIDATION_ERROR,
            details=full_details,
            retryable=False,
        )


class ProofShapeException(DropLedgerException):
    """A proof element is not a 32-byte digest."""

    def __init__(
        self,
        message: str,
        position: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if position is not None:
            full_details["position"] = position
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_SHAPE_INVALID,
            details=full_details,
            retryable=False,
        )


class UnauthorizedException(DropLedgerException):
    """Non-owner called an owner-only registry operation."""

    def __init__(self, sender: str, details: dict[str, Any] | None = None) -> None:
        full_details = details or {}
        full_details["sender"] = sender
        super().__init__(
            message="Ownable: caller is not the owner",
            code=ErrorCodes.NOT_OWNER,
            details=full_details,
            retryable=False,
        )


class InvalidProofException(DropLedgerException):
    """Exception raised when Merkle proof verification fails."""

    def __init__(
        self,
        message: str = "Invalid proof",
        leaf_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.MERKLE_PROOF_INVALID,
            details=full_details,
            retryable=False,
        )


class ClaimAmountException(DropLedgerException):
    """Requested amount exceeds the remaining entitlement."""

    def __init__(self, message: str = "Invalid amount", details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CLAIM_AMOUNT_INVALID,
            details=details,
            retryable=False,
        )


class AlreadyClaimedException(DropLedgerException):
    """claim_all on an entitlement that has already been (partly) claimed."""

    def __init__(self, message: str = "Drop already claimed.", details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.ALREADY_CLAIMED,
            details=details,
            retryable=False,
        )


class BlockedAccountException(DropLedgerException):
    """Payout requested for a blacklisted account."""

    def __init__(self, account: str, details: dict[str, Any] | None = None) -> None:
        full_details = details or {}
        full_details["account"] = account
        super().__init__(
            message="Blocked account",
            code=ErrorCodes.ACCOUNT_BLOCKED,
            details=full_details,
            retryable=False,
        )


class TransferFailedException(DropLedgerException):
    """The token collaborator refused the transfer (e.g. registry underfunded)."""

    def __init__(
        self,
        message: str = "Token transfer failed",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.TOKEN_TRANSFER_FAILED,
            details=details,
            # Operator can re-fund the registry and the caller can resubmit
            retryable=True,
        )


class StateConflictException(DropLedgerException):
    """Operation requested a state the registry is already in."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.STATE_CONFLICT,
            details=details,
            retryable=False,
        )


class PausedException(DropLedgerException):
    """Claim attempted while the registry is paused."""

    def __init__(self, message: str = "Pausable: paused", details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.REGISTRY_PAUSED,
            details=details,
            retryable=False,
        )
