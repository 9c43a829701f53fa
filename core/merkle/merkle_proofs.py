"""
Module 02 - Balance Tree
Merkle tree over (account, amount) balance entries.

Owner: Protocol/Crypto Engineer
Module ID: M02

The position of an entry in the input sequence is its leaf index. Leaves are
leaf_hash(index, account, amount) from core.codec.

Example:
    >>> tree = BalanceTree([
    ...     BalanceEntry(account=a, amount=100),
    ...     BalanceEntry(account=b, amount=101),
    ... ])
    >>> proof = tree.get_proof(0, a, 100)
    >>> BalanceTree.verify_proof(0, a, 100, proof, tree.root)
    True
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from core.codec.leaf import leaf_hash
from core.crypto.hashing import from_hex, to_hex
from core.merkle.merkle_tree import (
    EMPTY_TREE_ROOT,
    MerkleProof,
    build_merkle_layers,
    proof_from_layers,
    verify_merkle_proof,
)


@dataclass(frozen=True)
class BalanceEntry:
    """One account's entitlement. Validation happens in the leaf codec."""
    account: str
    amount: int


class BalanceTree:
    """
    Merkle tree over an ordered sequence of balance entries.

    Layers are computed once at construction; proofs are read from them.
    """

    def __init__(self, entries: Iterable[BalanceEntry]) -> None:
        self._entries: list[BalanceEntry] = list(entries)
        self._leaves: list[bytes] = [
            leaf_hash(index, entry.account, entry.amount)
            for index, entry in enumerate(self._entries)
        ]
        self._layers = build_merkle_layers(self._leaves)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def leaves(self) -> list[bytes]:
        return list(self._leaves)

    @property
    def root(self) -> bytes:
        if not self._layers:
            return EMPTY_TREE_ROOT
        return self._layers[-1][0]

    @property
    def hex_root(self) -> str:
        return to_hex(self.root)

    @property
    def depth(self) -> int:
        return len(self._layers)

    def merkle_proof(self, index: int) -> MerkleProof:
        """Full MerkleProof object for the leaf at index."""
        return proof_from_layers(self._layers, index)

    def get_proof(self, index: int, account: str, amount: int) -> list[str]:
        """
        Hex proof for a leaf, after checking the leaf is actually in the tree.

        Raises:
            ValueError: If (index, account, amount) is not the leaf at index
            IndexError: If index is out of range
        """
        proof = self.merkle_proof(index)
        if proof.leaf != leaf_hash(index, account, amount):
            raise ValueError(
                f"Leaf ({index}, {account}, {amount}) is not in the tree"
            )
        return proof.hex_siblings

    @staticmethod
    def verify_proof(
        index: int,
        account: str,
        amount: int,
        proof: Sequence[str | bytes],
        root: str | bytes,
    ) -> bool:
        """Check an (index, account, amount) claim against a root."""
        siblings = [from_hex(p) if isinstance(p, str) else p for p in proof]
        root_bytes = from_hex(root) if isinstance(root, str) else root
        return verify_merkle_proof(leaf_hash(index, account, amount), siblings, root_bytes)


__all__ = [
    "BalanceEntry",
    "BalanceTree",
]
