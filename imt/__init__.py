"""Indexed Merkle tree with non-membership proofs."""

from .errors import (
    DuplicateValueError,
    IMTError,
    InvalidLevelError,
    InvalidValueError,
    InvariantViolationError,
    NoPredecessorError,
    TreeFileNotFoundError,
    TreeFullError,
    UnknownHashError,
)
from .hashing import DEFAULT_DEPTH, cairo_poseidon2, poseidon2, sha256_hash2, zero_hashes
from .ledger import Leaf
from .proof import NonMembershipProof, verify_non_membership_proof
from .tree import IndexedMerkleTree

__all__ = [
    "IndexedMerkleTree", "DEFAULT_DEPTH", "Leaf", "NonMembershipProof",
    "verify_non_membership_proof", "poseidon2", "cairo_poseidon2", "sha256_hash2",
    "zero_hashes", "IMTError", "DuplicateValueError", "InvalidValueError",
    "InvariantViolationError", "NoPredecessorError", "InvalidLevelError",
    "TreeFileNotFoundError", "TreeFullError", "UnknownHashError",
]
