"""
Module 01 - Schemas & Canonicalization
File: snapshot.py

Purpose: The distribution snapshot document handed to front-ends.

Wire format (camelCase, amounts as minimal 0x-hex):

    {
      "merkleRoot": "0x…",
      "tokenTotal": "0x2ee",
      "claims": {
        "0xAbC…": {"index": 0, "amount": "0xc8", "proof": ["0x…"], "flags": {...}}
      }
    }

Python-side attribute names are snake_case; aliases carry the wire names.
"""

from __future__ import annotations

import json
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.crypto.hashing import from_hex, from_hex_uint, hash_canonical, to_hex
from .canonical import dumps_canonical


_HASH_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")
_UINT_HEX_RE = re.compile(r"^0x[0-9a-fA-F]+$")


def _check_hash(value: str) -> str:
    if not _HASH_RE.match(value):
        raise ValueError(f"Expected 0x-prefixed 32-byte hex digest, got {value!r}")
    return value.lower()


def _check_uint_hex(value: str) -> str:
    if not _UINT_HEX_RE.match(value):
        raise ValueError(f"Expected 0x-prefixed hex integer, got {value!r}")
    return value.lower()


class ClaimRecord(BaseModel):
    """
    One account's claim data inside a snapshot.

    Everything a claimant needs besides their own identity: the leaf index,
    the entitlement, and the sibling path to the root.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    index: int = Field(..., ge=0, description="Leaf index under the snapshot's root")
    amount: str = Field(..., description="Entitlement as minimal 0x-hex")
    proof: list[str] = Field(
        default_factory=list,
        description="Sibling digests from leaf to root",
    )
    flags: Optional[dict[str, bool]] = Field(
        default=None,
        description="Optional classification flags derived from the input reasons",
    )

    @field_validator("amount")
    @classmethod
    def _amount_is_hex(cls, v: str) -> str:
        return _check_uint_hex(v)

    @field_validator("proof")
    @classmethod
    def _proof_is_hashes(cls, v: list[str]) -> list[str]:
        return [_check_hash(p) for p in v]

    @property
    def amount_int(self) -> int:
        return from_hex_uint(self.amount)

    @property
    def proof_bytes(self) -> list[bytes]:
        return [from_hex(p) for p in self.proof]


class DistributionSnapshot(BaseModel):
    """
    Immutable result of one builder run.

    Attributes:
        merkle_root: Root committing to every (index, account, amount) leaf
        token_total: Sum of all entitlements, minimal 0x-hex
        claims: Checksummed account -> ClaimRecord
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    merkle_root: str = Field(..., alias="merkleRoot")
    token_total: str = Field(..., alias="tokenTotal")
    claims: dict[str, ClaimRecord] = Field(default_factory=dict)

    @field_validator("merkle_root")
    @classmethod
    def _root_is_hash(cls, v: str) -> str:
        return _check_hash(v)

    @field_validator("token_total")
    @classmethod
    def _total_is_hex(cls, v: str) -> str:
        return _check_uint_hex(v)

    @property
    def root_bytes(self) -> bytes:
        return from_hex(self.merkle_root)

    @property
    def total_int(self) -> int:
        return from_hex_uint(self.token_total)

    def claim_for(self, account: str) -> Optional[ClaimRecord]:
        """Look up a claim by account, tolerating any address casing."""
        record = self.claims.get(account)
        if record is not None:
            return record
        lowered = account.lower()
        for key, value in self.claims.items():
            if key.lower() == lowered:
                return value
        return None

    def to_document(self) -> dict:
        """Wire-format dict (camelCase, no null flags)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self, indent: int | None = None) -> str:
        """Serialize to JSON; canonical (sorted, compact) when indent is None."""
        if indent is None:
            return dumps_canonical(self.to_document())
        return json.dumps(self.to_document(), indent=indent, sort_keys=True)

    def digest(self) -> str:
        """Fingerprint of the whole document (keccak of canonical JSON)."""
        return to_hex(hash_canonical(self.to_document()))
