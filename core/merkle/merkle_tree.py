"""
Module 02 - Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- Deterministic Merkle root computation
- Merkle proof generation for any leaf index
- Merkle proof verification
- Carry-up rule for odd number of nodes

Canonical Commitment Rules (Hard Contracts):
1. Leaf hashing: keccak256(encode_leaf(index, account, amount))
   - Implemented in core.codec.leaf
2. Parent hashing: keccak256(min(a, b) + max(a, b))
   - Children are ordered by unsigned value, so verification needs no
     left/right position, only the sibling digest
3. Odd node count: the last node is carried to the next level unchanged
   (no duplication, no zero padding)
4. Empty leaves: no valid root; EMPTY_TREE_ROOT (32 zero bytes) is
   exported instead and nothing verifies against it
5. Single leaf: root = leaf, proof = []

Determinism Notes:
- No randomness
- Leaf ordering is defined by upstream (the balance map's index assignment)
- This module never sorts leaves - it trusts input order
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from core.crypto.hashing import HASH_LENGTH, hash_pair


# Empty tree sentinel. Not the hash of anything a proof can fold to.
EMPTY_TREE_ROOT: bytes = bytes(HASH_LENGTH)


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf in a Merkle tree.

    Attributes:
        leaf: The leaf hash being proven
        index: The 0-based index of the leaf in the original leaf list
        siblings: Sibling hashes from bottom to top of tree. A level where
            the node was carried up contributes no sibling.
        root: The Merkle root this proof is against
    """
    leaf: bytes
    index: int
    siblings: list[bytes] = field(default_factory=list)
    root: bytes = EMPTY_TREE_ROOT

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")

    def verify(self) -> bool:
        return verify_merkle_proof(self.leaf, self.siblings, self.root)

    @property
    def hex_siblings(self) -> list[str]:
        return ["0x" + s.hex() for s in self.siblings]


def merkle_parent(left: bytes, right: bytes) -> bytes:
    """
    Compute the parent hash of two child nodes.

    Commutative: merkle_parent(a, b) == merkle_parent(b, a).
    """
    return hash_pair(left, right)


def _next_level(level: Sequence[bytes]) -> list[bytes]:
    next_level: list[bytes] = []
    for i in range(0, len(level) - 1, 2):
        next_level.append(merkle_parent(level[i], level[i + 1]))
    if len(level) % 2 == 1:
        next_level.append(level[-1])
    return next_level


def build_merkle_layers(leaves: Sequence[bytes]) -> list[list[bytes]]:
    """
    Build every level of the tree, leaves first, root level last.

    Returns [] for an empty leaf sequence.

    Example: [a, b, c] -> [[a, b, c], [ab, c], [abc]]
    """
    if len(leaves) == 0:
        return []

    layers: list[list[bytes]] = [list(leaves)]
    while len(layers[-1]) > 1:
        layers.append(_next_level(layers[-1]))
    return layers


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """
    Build a Merkle root from a sequence of leaf hashes.

    Algorithm:
    1. If empty: return EMPTY_TREE_ROOT
    2. If single leaf: return the leaf itself
    3. Otherwise pair adjacent nodes level by level, carrying an odd last
       node up unchanged, until a single root remains

    Example: [a, b, c] -> [parent(a,b), c] -> parent(parent(a,b), c)

    Args:
        leaves: Sequence of 32-byte leaf hashes. Order matters and is preserved.

    Returns:
        32-byte Merkle root
    """
    if len(leaves) == 0:
        return EMPTY_TREE_ROOT

    current_level: list[bytes] = list(leaves)
    while len(current_level) > 1:
        current_level = _next_level(current_level)
    return current_level[0]


def proof_from_layers(layers: Sequence[Sequence[bytes]], index: int) -> MerkleProof:
    """
    Extract the proof for one leaf from prebuilt layers.

    Building layers once and extracting every proof from them keeps a full
    snapshot at O(n log n) hashing.

    Raises:
        IndexError: If index is out of range
        ValueError: If the layers are empty
    """
    if len(layers) == 0:
        raise ValueError("Cannot generate proof for empty leaf list")

    leaves = layers[0]
    if index < 0 or index >= len(leaves):
        raise IndexError(
            f"Leaf index {index} out of range for {len(leaves)} leaves"
        )

    siblings: list[bytes] = []
    current_index = index
    for level in layers[:-1]:
        sibling_index = current_index ^ 1
        # Carried-up node at an odd level has no sibling
        if sibling_index < len(level):
            siblings.append(level[sibling_index])
        current_index //= 2

    return MerkleProof(
        leaf=leaves[index],
        index=index,
        siblings=siblings,
        root=layers[-1][0],
    )


def build_merkle_proof(leaves: Sequence[bytes], index: int) -> MerkleProof:
    """
    Generate a Merkle proof for the leaf at the given index.

    Args:
        leaves: Sequence of leaf hashes
        index: 0-based index of the leaf to prove

    Returns:
        MerkleProof with leaf, index, siblings (bottom-up), and root

    Raises:
        IndexError: If index is out of range
        ValueError: If leaves is empty
    """
    return proof_from_layers(build_merkle_layers(leaves), index)


def verify_merkle_proof(leaf: bytes, siblings: Sequence[bytes], root: bytes) -> bool:
    """
    Verify that a leaf folds up to a root.

    Algorithm:
    1. Start with the leaf hash
    2. For each sibling (bottom-up): hash = parent(hash, sibling)
       (commutative, so position is irrelevant)
    3. Compare with the root

    Anything verified against EMPTY_TREE_ROOT is rejected.

    Returns:
        True if the proof is valid, False otherwise
    """
    if root == EMPTY_TREE_ROOT:
        return False

    current_hash = leaf
    for sibling in siblings:
        current_hash = merkle_parent(current_hash, sibling)
    return current_hash == root


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of levels from leaves to root (inclusive).

    A single leaf has depth 1, two or three leaves depth 2, etc.
    Returns 0 for an empty tree.
    """
    if num_leaves == 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1
    return depth


__all__ = [
    "EMPTY_TREE_ROOT",
    "MerkleProof",
    "merkle_parent",
    "build_merkle_layers",
    "build_merkle_root",
    "build_merkle_proof",
    "proof_from_layers",
    "verify_merkle_proof",
    "compute_tree_depth",
]
