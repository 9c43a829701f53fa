"""
Module 08 - API Request Models

Pydantic models for API request validation.
"""

from typing import Union

from pydantic import BaseModel, Field


class VerifyClaimRequest(BaseModel):
    """Request body for POST /verify endpoint."""

    account: str = Field(..., description="Claimant account (any casing)")
    index: int = Field(..., ge=0, description="Leaf index")
    amount: Union[int, str] = Field(
        ...,
        description="Entitlement as integer, decimal string or 0x-hex",
    )
    proof: list[str] = Field(
        default_factory=list,
        description="Sibling digests, 0x-hex",
    )
