"""
Module 02 - Merkle Tree and Commitments
Deterministic Merkle tree construction + proof generation/verification.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- MerkleProof: Dataclass representing a Merkle inclusion proof
- build_merkle_root / build_merkle_layers: Compute root (and levels) from leaf hashes
- build_merkle_proof: Generate proof for a specific leaf
- verify_merkle_proof: Verify a proof against a root
- BalanceTree: Tree over (account, amount) entries

Canonical Commitment Rules:
1. Leaf hashing: keccak256(uint256 index ‖ address account ‖ uint256 amount)
2. Parent hashing: keccak256(min(a, b) ‖ max(a, b))
3. Odd node: carried up unchanged
4. Empty tree: EMPTY_TREE_ROOT (32 zero bytes), verifies nothing
5. Single leaf: root = leaf

Usage:
    from core.merkle import BalanceTree, BalanceEntry

    tree = BalanceTree([BalanceEntry(a, 100), BalanceEntry(b, 101)])
    proof = tree.get_proof(0, a, 100)
    assert BalanceTree.verify_proof(0, a, 100, proof, tree.root)
"""
from .merkle_tree import (
    EMPTY_TREE_ROOT,
    MerkleProof,
    merkle_parent,
    build_merkle_layers,
    build_merkle_root,
    build_merkle_proof,
    proof_from_layers,
    verify_merkle_proof,
    compute_tree_depth,
)

from .merkle_proofs import (
    BalanceEntry,
    BalanceTree,
)


__all__ = [
    # Core types
    "MerkleProof",
    "EMPTY_TREE_ROOT",
    # Core functions
    "merkle_parent",
    "build_merkle_layers",
    "build_merkle_root",
    "build_merkle_proof",
    "proof_from_layers",
    "verify_merkle_proof",
    "compute_tree_depth",
    # Balance trees
    "BalanceEntry",
    "BalanceTree",
]
