import logging

from . import persistence
from .errors import (
    DuplicateValueError,
    InvalidLevelError,
    InvalidValueError,
    NoPredecessorError,
    TreeFullError,
)
from .hashing import DEFAULT_DEPTH, default, field_modulus, poseidon2, zero_hashes
from .ledger import SENTINEL, LeafLedger
from .nodes import NodeStore
from .proof import NonMembershipProof, verify_non_membership_proof

logger = logging.getLogger(__name__)


class IndexedMerkleTree:
    """Fixed-depth Merkle tree over a sorted linked list of leaves.

    Leaf ``i`` sits at position ``i`` of level 0 and hashes as
    ``hash2(val, next_val)``. Index 0 is the sentinel leaf with value 0,
    created here and never removed, so every positive value has a
    predecessor.

    Usage:
        tree = IndexedMerkleTree()
        tree.insert(10)
        proof = tree.create_non_membership_proof(25)
        assert tree.verify_non_membership_proof(proof)
    """

    def __init__(self, depth=DEFAULT_DEPTH, hash2=poseidon2):
        self.depth = depth
        self.hash2 = hash2
        self.modulus = field_modulus(hash2)
        self.zeros = zero_hashes(hash2, depth)
        self.zero = self.zeros[depth]
        self.ledger = LeafLedger()
        self.nodes = NodeStore(hash2, self.zeros)
        self._update_leaf_hash(SENTINEL)

    def _update_leaf_hash(self, index):
        leaf = self.ledger[index]
        self.nodes.recompute_path_from(index, self.hash2(leaf.val, leaf.next_val))

    def _check_field(self, x):
        if not isinstance(x, int) or isinstance(x, bool):
            raise InvalidValueError(x, "not an integer")
        if x < 0:
            raise InvalidValueError(x, "field elements are non-negative")
        if self.modulus is not None and x >= self.modulus:
            raise InvalidValueError(x, f"not below the field modulus {self.modulus}")

    def _check_value(self, x):
        self._check_field(x)
        if x == default:
            raise InvalidValueError(x, "0 is reserved for the sentinel leaf")

    def insert(self, x):
        self._check_value(x)
        if self.ledger.contains(x):
            raise DuplicateValueError(x)
        if len(self.ledger) >= 2**self.depth:
            raise TreeFullError(self.depth)

        # hash both spliced leaves first so a hash failure leaves the tree untouched
        p = self.ledger.find_predecessor(x)
        if p is not None:
            pre = self.ledger[p]
            pre_hash = self.hash2(pre.val, x)
            new_hash = self.hash2(x, pre.next_val)

        pre_idx, new_idx = self.ledger.insert(x)
        self.nodes.recompute_path_from(pre_idx, pre_hash)
        self.nodes.recompute_path_from(new_idx, new_hash)
        logger.debug("inserted %d at leaf %d, root %d", x, new_idx, self.root)

    def insert_many(self, values):
        for x in values:
            self.insert(x)

    def contains(self, x):
        return self.ledger.contains(x)

    @property
    def root(self):
        return self.nodes.root

    @property
    def size(self):
        return len(self.ledger)

    def leaves(self):
        return self.ledger.snapshot()

    def sorted_values(self):
        return [leaf.val for leaf in self.ledger.walk()]

    def nodes_at_level(self, level):
        if not isinstance(level, int) or level < 0 or level > self.depth:
            raise InvalidLevelError(level, self.depth)
        return self.nodes.level(level)

    def create_non_membership_proof(self, x):
        self._check_field(x)
        p = self.ledger.find_predecessor(x)
        if p is None:
            raise NoPredecessorError(x)
        path, directions = self.nodes.sibling_path(p)
        logger.debug("proof for %d uses leaf %d", x, p)
        return NonMembershipProof(
            query=x,
            pre_leaf=self.ledger[p].copy(),
            path=tuple(path),
            directions=tuple(directions),
            root=self.root,
        )

    def verify_non_membership_proof(self, proof):
        return verify_non_membership_proof(proof, self.hash2, self.depth)

    def serialize(self):
        return persistence.serialize(self)

    @classmethod
    def deserialize(cls, data, hash2=poseidon2):
        return persistence.deserialize(data, hash2, cls)

    def save_to_file(self, path):
        persistence.save(self, path)

    @classmethod
    def load_from_file(cls, path, hash2=poseidon2):
        return persistence.load(path, hash2, cls)
