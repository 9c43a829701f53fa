"""API request and response models."""

from api.models.requests import VerifyClaimRequest
from api.models.responses import (
    HealthResponse,
    SnapshotSummaryResponse,
    ClaimResponse,
    VerifyClaimResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "VerifyClaimRequest",
    "HealthResponse",
    "SnapshotSummaryResponse",
    "ClaimResponse",
    "VerifyClaimResponse",
    "ErrorDetail",
    "ErrorResponse",
]
