"""
Common test fixtures shared by all modules.

Provides factory functions for core DropLedger structures:
- Deterministic accounts
- BalanceMap / DistributionSnapshot
- A funded ClaimRegistry over an InMemoryToken

Accounts are derived from keccak256 of a seed string, so their checksummed
string order (and therefore their leaf index) is fixed but not the same as their
creation order. Tests look indices up from the snapshot instead of
assuming them.
"""

from typing import Any, Optional

from eth_utils import keccak, to_checksum_address

from core.balances import BalanceMap
from core.config.runtime import BuilderConfig, ClaimKeyPolicy, RegistryConfig
from core.registry import ClaimRegistry, InMemoryToken
from core.schemas.snapshot import DistributionSnapshot


DEFAULT_SUPPLY = 10**24


# =============================================================================
# Accounts
# =============================================================================

def make_account(seed: Any) -> str:
    """Checksummed account derived from a seed."""
    digest = keccak(text=f"wallet{seed}")
    return to_checksum_address("0x" + digest[12:].hex())


def make_accounts(count: int, offset: int = 0) -> list[str]:
    """`count` distinct checksummed accounts."""
    return [make_account(i) for i in range(offset, offset + count)]


# =============================================================================
# Balance map / snapshot
# =============================================================================

def make_balance_map(
    balances: dict[str, Any],
    flag_reasons: Optional[dict[str, str]] = None,
) -> BalanceMap:
    """BalanceMap over an account -> amount mapping."""
    config = BuilderConfig(flag_reasons=flag_reasons) if flag_reasons is not None else None
    return BalanceMap(balances, config=config)


def claim_args(snapshot: DistributionSnapshot, account: str) -> tuple[int, int, list[str]]:
    """(index, total_amount, proof) for an account, ready for registry calls."""
    record = snapshot.claim_for(account)
    assert record is not None, f"no claim for {account}"
    return record.index, record.amount_int, list(record.proof)


# =============================================================================
# Registry
# =============================================================================

def make_funded_registry(
    snapshot: DistributionSnapshot,
    owner: str,
    *,
    funding: Optional[int] = None,
    supply: int = DEFAULT_SUPPLY,
    policy: ClaimKeyPolicy = ClaimKeyPolicy.ACCOUNT,
) -> tuple[InMemoryToken, ClaimRegistry]:
    """
    Token + registry deployed by `owner` with the snapshot's root.

    The registry is funded with the snapshot's token total unless `funding`
    says otherwise.
    """
    token = InMemoryToken("Drop Token", "DROP", supply, holder=owner)
    registry = ClaimRegistry(
        token,
        snapshot.merkle_root,
        sender=owner,
        config=RegistryConfig(claim_key_policy=policy),
    )
    amount = snapshot.total_int if funding is None else funding
    assert token.transfer(owner, registry.address, amount)
    return token, registry
