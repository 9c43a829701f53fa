"""
Module 05 - Claim Registry
File: claim_registry.py

Purpose: Custodian of a distribution. Verifies claims against the active
root, tracks how much of each entitlement has been paid out, and releases
tokens.

Every call is applied whole or not at all: checks run first, state is
written next, and the token transfer runs last with the claimed counter
restored if it fails. Callers serialise calls; nothing here locks.

Claimed-amount accounting is keyed by keccak256(account) by default so
that a new root which reassigns indices cannot hand one account's claimed
total to another. ClaimKeyPolicy.INDEX keys by leaf index instead.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Optional, Sequence

from eth_utils import keccak, to_checksum_address

from core.codec.leaf import leaf_hash
from core.config.runtime import ClaimKeyPolicy, RegistryConfig
from core.schemas.accounts import (
    ZERO_ADDRESS,
    address_bytes,
    is_zero_address,
    normalize_address,
    require_uint256,
)
from core.schemas.errors import (
    AlreadyClaimedException,
    BalanceValidationException,
    BlockedAccountException,
    ClaimAmountException,
    DropLedgerException,
    InvalidProofException,
    PausedException,
    StateConflictException,
    TransferFailedException,
    UnauthorizedException,
)

from .events import RegistryEvent
from .proof_verifier import normalize_proof, normalize_root, verify
from .token import TokenLedger


logger = logging.getLogger(__name__)

_deploy_nonce = itertools.count()


def derive_registry_address(deployer: str, nonce: int) -> str:
    """Address for a registry deployed by `deployer` with the given nonce."""
    digest = keccak(address_bytes(deployer) + nonce.to_bytes(32, "big"))
    return to_checksum_address(digest[12:])


class ClaimRegistry:
    """
    Merkle claim registry for one token.

    Args:
        token: Token ledger the registry pays out of (its own balance)
        initial_root: 32-byte root, bytes or 0x-hex
        sender: Deployer; becomes the owner
        address: Registry's account on the token ledger (derived if omitted)
        config: Registry configuration
    """

    def __init__(
        self,
        token: TokenLedger,
        initial_root: bytes | str,
        *,
        sender: str,
        address: Optional[str] = None,
        config: Optional[RegistryConfig] = None,
    ) -> None:
        owner = normalize_address(sender)
        if is_zero_address(owner):
            raise BalanceValidationException("Ownable: new owner is the zero address", account=owner)

        self.token = token
        self.config = config or RegistryConfig()
        self.address = (
            normalize_address(address)
            if address is not None
            else derive_registry_address(owner, next(_deploy_nonce))
        )
        self.events: list[RegistryEvent] = []

        self._root = normalize_root(initial_root)
        self._owner = owner
        self._paused = False
        self._blocked: set[str] = set()
        self._claimed: dict[bytes, int] = {}

        self._emit("OwnershipTransferred", previous_owner=ZERO_ADDRESS, new_owner=owner)
        logger.info(f"Registry {self.address} deployed by {owner} with root 0x{self._root.hex()}")

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def root(self) -> bytes:
        return self._root

    @property
    def merkle_root(self) -> str:
        return "0x" + self._root.hex()

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def balance(self) -> int:
        """Tokens currently held by the registry."""
        return self.token.balance_of(self.address)

    def claimed_amount(self, index: int, account: str) -> int:
        """Amount already paid out for this entitlement."""
        return self._claimed.get(self._claim_key(index, normalize_address(account)), 0)

    def events_named(self, name: str) -> list[RegistryEvent]:
        return [event for event in self.events if event.name == name]

    # -------------------------------------------------------------------------
    # Owner operations
    # -------------------------------------------------------------------------

    def update_merkle_root(self, new_root: bytes | str, *, sender: str) -> None:
        """Replace the active root. Claimed amounts are kept."""
        self._only_owner(sender)
        root = normalize_root(new_root)
        old_root = self.merkle_root
        self._root = root
        self._emit("MerkleRootUpdated", old_root=old_root, new_root=self.merkle_root)
        logger.info(f"Registry {self.address}: root {old_root} -> {self.merkle_root}")

    def blacklist(self, account: str, *, sender: str) -> None:
        self._only_owner(sender)
        account = self._require_account(account)
        if account in self._blocked:
            raise self._rejected(StateConflictException("Already blocked", details={"account": account}))
        self._blocked.add(account)
        self._emit("Blacklisted", account=account)
        logger.info(f"Registry {self.address}: blocked {account}")

    def whitelist(self, account: str, *, sender: str) -> None:
        self._only_owner(sender)
        account = self._require_account(account)
        if account not in self._blocked:
            raise self._rejected(StateConflictException("Not blocked", details={"account": account}))
        self._blocked.discard(account)
        self._emit("Whitelisted", account=account)
        logger.info(f"Registry {self.address}: unblocked {account}")

    def pause(self, *, sender: str) -> None:
        caller = self._only_owner(sender)
        if self._paused:
            raise self._rejected(StateConflictException("Pausable: paused"))
        self._paused = True
        self._emit("Paused", account=caller)
        logger.info(f"Registry {self.address}: paused")

    def unpause(self, *, sender: str) -> None:
        caller = self._only_owner(sender)
        if not self._paused:
            raise self._rejected(StateConflictException("Pausable: not paused"))
        self._paused = False
        self._emit("Unpaused", account=caller)
        logger.info(f"Registry {self.address}: unpaused")

    def withdraw_token(self, amount: int, *, sender: str) -> None:
        """Sweep `amount` of the registry's tokens to the owner."""
        owner = self._only_owner(sender)
        require_uint256(amount)
        if not self.token.transfer(self.address, owner, amount):
            raise self._rejected(
                TransferFailedException(details={"to": owner, "amount": amount})
            )
        self._emit("TokenWithdrawn", to=owner, amount=amount)
        logger.info(f"Registry {self.address}: withdrew {amount} to {owner}")

    def transfer_ownership(self, new_owner: str, *, sender: str) -> None:
        previous = self._only_owner(sender)
        new_owner = normalize_address(new_owner)
        if is_zero_address(new_owner):
            raise self._rejected(
                BalanceValidationException("Ownable: new owner is the zero address", account=new_owner)
            )
        self._owner = new_owner
        self._emit("OwnershipTransferred", previous_owner=previous, new_owner=new_owner)
        logger.info(f"Registry {self.address}: ownership {previous} -> {new_owner}")

    # -------------------------------------------------------------------------
    # Claims
    # -------------------------------------------------------------------------

    def claim(
        self,
        index: int,
        amount: int,
        total_amount: int,
        proof: Sequence[bytes | str],
        *,
        sender: str,
    ) -> None:
        """
        Pay `amount` of the caller's entitlement.

        Raises:
            PausedException: Registry is paused
            InvalidProofException: (index, sender, total_amount) is not in the active root
            BlockedAccountException: Caller is blacklisted
            ClaimAmountException: Amount is zero or exceeds what remains
            TransferFailedException: Token refused the transfer
        """
        self._when_not_paused()
        account = normalize_address(sender)
        require_uint256(amount, account=account)
        self._verify_claim(index, account, total_amount, proof)
        self._when_not_blocked(account)

        key = self._claim_key(index, account)
        claimed = self._claimed.get(key, 0)
        if amount == 0 or claimed + amount > total_amount:
            raise self._rejected(
                ClaimAmountException(
                    details={"index": index, "amount": amount, "claimed": claimed, "total": total_amount}
                )
            )

        self._claimed[key] = claimed + amount
        self._pay(account, amount, key, claimed)
        self._emit("Claimed", index=index, account=account, amount=amount)
        logger.info(f"Registry {self.address}: {account} claimed {amount} ({claimed + amount}/{total_amount})")

    def claim_all(
        self,
        index: int,
        total_amount: int,
        proof: Sequence[bytes | str],
        *,
        sender: str,
    ) -> None:
        """Pay the whole entitlement in one go. Rejected once anything has been claimed."""
        self._when_not_paused()
        account = normalize_address(sender)
        self._verify_claim(index, account, total_amount, proof)
        self._when_not_blocked(account)

        key = self._claim_key(index, account)
        claimed = self._claimed.get(key, 0)
        if claimed > 0:
            raise self._rejected(
                AlreadyClaimedException(details={"index": index, "account": account, "claimed": claimed})
            )
        if total_amount == 0:
            raise self._rejected(ClaimAmountException(details={"index": index, "total": total_amount}))

        self._claimed[key] = total_amount
        self._pay(account, total_amount, key, claimed)
        self._emit("ClaimedAll", index=index, account=account, amount=total_amount)
        logger.info(f"Registry {self.address}: {account} claimed all {total_amount}")

    def get_claimable_amount(
        self,
        index: int,
        account: str,
        total_amount: int,
        proof: Sequence[bytes | str],
    ) -> int:
        """
        What `account` could still claim under the active root.

        Blocked accounts get 0 without a proof check. Otherwise the proof
        must verify.
        """
        account = normalize_address(account)
        if account in self._blocked:
            return 0
        self._verify_claim(index, account, total_amount, proof)
        claimed = self._claimed.get(self._claim_key(index, account), 0)
        return max(total_amount - claimed, 0)

    def check_account(self, account: str) -> bool:
        """True if the account may claim (i.e. is not blacklisted)."""
        account = self._require_account(account)
        return account not in self._blocked

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _only_owner(self, sender: str) -> str:
        caller = normalize_address(sender)
        if caller != self._owner:
            raise self._rejected(UnauthorizedException(caller))
        return caller

    def _when_not_paused(self) -> None:
        if self._paused:
            raise self._rejected(PausedException())

    def _when_not_blocked(self, account: str) -> None:
        if account in self._blocked:
            raise self._rejected(BlockedAccountException(account))

    def _require_account(self, account: str) -> str:
        account = normalize_address(account)
        if is_zero_address(account):
            raise self._rejected(BalanceValidationException("Invalid address", account=account))
        return account

    def _verify_claim(self, index: int, account: str, total_amount: int, proof: Sequence[bytes | str]) -> None:
        require_uint256(index, account=account, field="index")
        require_uint256(total_amount, account=account, field="total_amount")
        siblings = normalize_proof(proof)
        if not verify(siblings, self._root, leaf_hash(index, account, total_amount)):
            raise self._rejected(InvalidProofException(leaf_index=index, details={"account": account}))

    def _claim_key(self, index: int, account: str) -> bytes:
        if self.config.claim_key_policy == ClaimKeyPolicy.INDEX:
            return index.to_bytes(32, "big")
        return keccak(address_bytes(account))

    def _pay(self, to: str, amount: int, key: bytes, previous: int) -> None:
        try:
            ok = self.token.transfer(self.address, to, amount)
        except Exception:
            self._restore(key, previous)
            raise
        if not ok:
            self._restore(key, previous)
            raise self._rejected(
                TransferFailedException(details={"to": to, "amount": amount, "balance": self.balance})
            )

    def _restore(self, key: bytes, previous: int) -> None:
        if previous:
            self._claimed[key] = previous
        else:
            self._claimed.pop(key, None)

    def _emit(self, name: str, **args: Any) -> None:
        self.events.append(RegistryEvent(name=name, args=args))

    def _rejected(self, exc: DropLedgerException) -> DropLedgerException:
        logger.warning(f"Registry {self.address}: rejected ({exc.code}) {exc.message}")
        return exc

    def __repr__(self) -> str:
        return f"ClaimRegistry(address={self.address!r}, root={self.merkle_root!r}, owner={self._owner!r})"
