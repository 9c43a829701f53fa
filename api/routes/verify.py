"""
Module 08 - Verify Route

Check an (account, index, amount, proof) claim against the served root,
with the same verifier the registry uses.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_snapshot
from api.models.requests import VerifyClaimRequest
from api.models.responses import VerifyClaimResponse
from core.codec import leaf_hash
from core.registry import proof_verifier
from core.schemas.accounts import normalize_address, parse_amount
from core.schemas.snapshot import DistributionSnapshot


logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])


@router.post("/verify", response_model=VerifyClaimResponse)
async def verify_claim(
    request: VerifyClaimRequest,
    snapshot: DistributionSnapshot = Depends(get_snapshot),
) -> VerifyClaimResponse:
    """
    Verify a claim.

    A claim that does not verify is a normal answer (`valid: false`), not an
    error. Malformed input (bad address, bad amount, proof elements that are
    not 32-byte digests) is rejected with 400.
    """
    account = normalize_address(request.account)
    amount = parse_amount(request.amount, account=account)
    siblings = proof_verifier.normalize_proof(request.proof)

    valid = proof_verifier.verify(
        siblings,
        snapshot.root_bytes,
        leaf_hash(request.index, account, amount),
    )
    logger.info(f"Verify {account} index={request.index}: {'valid' if valid else 'invalid'}")

    return VerifyClaimResponse(ok=True, valid=valid, merkle_root=snapshot.merkle_root)
