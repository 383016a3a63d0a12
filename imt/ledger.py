"""Append-only leaf storage kept in value order through an embedded linked list.

A leaf never moves: its position in the tree is the index it was appended
at. Ordering lives only in ``next_val`` / ``next_idx``, and a sorted copy of
the committed values answers predecessor queries with a binary search.
"""
import bisect
import logging
from dataclasses import dataclass, replace

from .errors import DuplicateValueError, InvariantViolationError
from .hashing import default

logger = logging.getLogger(__name__)

SENTINEL = 0  # index of the permanent val=0 leaf


@dataclass
class Leaf:
    val: int
    next_val: int = default
    next_idx: int = SENTINEL

    def copy(self):
        return replace(self)


class LeafLedger:

    def __init__(self):
        self.leaves = [Leaf(default)]
        # (val, index) pairs in ascending val order
        self.sorted = [(default, SENTINEL)]

    @classmethod
    def from_leaves(cls, leaves):
        ledger = cls.__new__(cls)
        ledger.leaves = list(leaves)
        ledger.sorted = sorted((leaf.val, i) for i, leaf in enumerate(ledger.leaves))
        return ledger

    def __len__(self):
        return len(self.leaves)

    def __getitem__(self, index):
        return self.leaves[index]

    def contains(self, x):
        i = bisect.bisect_left(self.sorted, (x,))
        return i < len(self.sorted) and self.sorted[i][0] == x

    def find_predecessor(self, x):
        """Index of the leaf with the greatest val strictly below x, or None."""
        i = bisect.bisect_left(self.sorted, (x,))
        if i == 0:
            return None
        return self.sorted[i-1][1]

    def insert(self, x):
        if self.contains(x):
            raise DuplicateValueError(x)

        p = self.find_predecessor(x)
        if p is None:
            raise InvariantViolationError(f"No predecessor found for {x} - tree not properly initialized")

        pre = self.leaves[p]
        new_idx = len(self.leaves)
        self.leaves.append(Leaf(x, pre.next_val, pre.next_idx))
        pre.next_val = x
        pre.next_idx = new_idx
        bisect.insort(self.sorted, (x, new_idx))

        logger.debug("leaf %d val=%d spliced after leaf %d", new_idx, x, p)
        return p, new_idx

    def walk(self):
        # follow the list from the sentinel; stops at next_val == 0
        leaf = self.leaves[SENTINEL]
        seen = 0
        while leaf.next_val != default:
            seen += 1
            if seen > len(self.leaves):
                raise InvariantViolationError("linked list does not terminate")
            leaf = self.leaves[leaf.next_idx]
            yield leaf

    def snapshot(self):
        return [leaf.copy() for leaf in self.leaves]
