"""
Module 08 - API Response Models

Pydantic models for API response serialization.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "dropledger-api"
    version: str = "v1"
    snapshot_loaded: bool = False


class SnapshotSummaryResponse(BaseModel):
    """Response for GET /snapshot endpoint."""

    ok: bool = True
    merkle_root: str = Field(..., description="Root of the active distribution")
    token_total: str = Field(..., description="Sum of entitlements, minimal 0x-hex")
    claims: int = Field(..., description="Number of claim records")
    digest: str = Field(..., description="keccak256 of the canonical snapshot document")


class ClaimResponse(BaseModel):
    """Response for GET /claims/{account} endpoint."""

    ok: bool = True
    account: str = Field(..., description="Checksummed account")
    merkle_root: str
    index: int
    amount: str = Field(..., description="Entitlement, minimal 0x-hex")
    proof: list[str] = Field(default_factory=list)
    flags: Optional[dict[str, bool]] = None


class VerifyClaimResponse(BaseModel):
    """Response for POST /verify endpoint."""

    ok: bool = Field(default=True, description="Request was processed")
    valid: bool = Field(..., description="Whether the claim verifies against the snapshot root")
    merkle_root: str


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
