"""Non-membership proofs and their stand-alone verification.

A proof shows a committed leaf ``pre_leaf`` with
``pre_leaf.val < query < pre_leaf.next_val`` (``next_val == 0`` meaning no
upper bound), plus the authentication path of that leaf. Since the list of
leaves is sorted, no leaf can hold ``query``.

Verification only looks at the proof itself and a hash function, never at
a live tree.
"""
import logging
from dataclasses import dataclass

from .hashing import DEFAULT_DEPTH, default, field_modulus, poseidon2
from .ledger import Leaf

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NonMembershipProof:
    query: int
    pre_leaf: Leaf
    path: tuple
    directions: tuple
    root: int

    @property
    def depth(self):
        return len(self.path)

    def to_dict(self):
        # json strings are safer than long ints
        return {
            'query': str(self.query),
            'preLeaf': {
                'val': str(self.pre_leaf.val),
                'nextVal': str(self.pre_leaf.next_val),
                'nextIdx': self.pre_leaf.next_idx,
            },
            'path': [str(h) for h in self.path],
            'directions': list(self.directions),
            'root': str(self.root),
        }

    @classmethod
    def from_dict(cls, d):
        pre = d['preLeaf']
        return cls(
            query=int(d['query']),
            pre_leaf=Leaf(int(pre['val']), int(pre['nextVal']), int(pre['nextIdx'])),
            path=tuple(int(h) for h in d['path']),
            directions=tuple(int(b) for b in d['directions']),
            root=int(d['root']),
        )


def _reject(proof, reason):
    logger.debug("non-membership proof for %s rejected: %s", proof.query, reason)
    return False


def _is_field(v, modulus):
    if not isinstance(v, int) or isinstance(v, bool) or v < 0:
        return False
    return modulus is None or v < modulus


def verify_non_membership_proof(proof, hash2=poseidon2, depth=DEFAULT_DEPTH):
    """Check a proof against its own root. Returns False instead of raising.

    The path must have exactly ``depth`` entries, and every value must be a
    canonical element of the hash backend's field: a value and its
    unreduced alias would hash alike but compare differently.
    """
    pre = proof.pre_leaf
    fields = [proof.query, proof.root, pre.val, pre.next_val, *proof.path]
    modulus = field_modulus(hash2)
    if not all(_is_field(v, modulus) for v in fields):
        return _reject(proof, "malformed field element")
    if len(proof.path) != len(proof.directions):
        return _reject(proof, "path and directions differ in length")
    if len(proof.path) != depth:
        return _reject(proof, f"path length {len(proof.path)} != depth {depth}")
    if any(d not in (0, 1) for d in proof.directions):
        return _reject(proof, "direction bits must be 0 or 1")

    try:
        current = hash2(pre.val, pre.next_val)
        for sibling, bit in zip(proof.path, proof.directions):
            if bit:
                current = hash2(sibling, current)
            else:
                current = hash2(current, sibling)
    except (TypeError, ValueError, ArithmeticError) as e:
        return _reject(proof, f"hash failed: {e}")

    if current != proof.root:
        return _reject(proof, "root mismatch")
    if not pre.val < proof.query:
        return _reject(proof, "predecessor is not below the query")
    if pre.next_val != default and not proof.query < pre.next_val:
        return _reject(proof, "query is not below the successor")
    return True
