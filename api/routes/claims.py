"""
Module 08 - Snapshot & Claim Routes

Read access to the served snapshot.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_snapshot
from api.errors import ClaimNotFoundError
from api.models.responses import ClaimResponse, SnapshotSummaryResponse
from core.schemas.accounts import normalize_address
from core.schemas.snapshot import DistributionSnapshot


logger = logging.getLogger(__name__)

router = APIRouter(tags=["claims"])


@router.get("/snapshot", response_model=SnapshotSummaryResponse)
async def snapshot_summary(snapshot: DistributionSnapshot = Depends(get_snapshot)) -> SnapshotSummaryResponse:
    return SnapshotSummaryResponse(
        merkle_root=snapshot.merkle_root,
        token_total=snapshot.token_total,
        claims=len(snapshot.claims),
        digest=snapshot.digest(),
    )


@router.get("/claims/{account}", response_model=ClaimResponse, response_model_exclude_none=True)
async def get_claim(account: str, snapshot: DistributionSnapshot = Depends(get_snapshot)) -> ClaimResponse:
    """
    Claim record for one account.

    Any address casing is accepted; the response carries the checksummed form.
    """
    checksummed = normalize_address(account)
    record = snapshot.claim_for(checksummed)
    if record is None:
        raise ClaimNotFoundError(checksummed)

    return ClaimResponse(
        account=checksummed,
        merkle_root=snapshot.merkle_root,
        index=record.index,
        amount=record.amount,
        proof=list(record.proof),
        flags=record.flags,
    )
