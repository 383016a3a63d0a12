"""JSON persistence for trees.

Document layout::

    {
      "depth": 32,
      "nodes": [["<decimal>", ...], ...],   # one row per level, 0 = leaves
      "leaves": [{"val": "<decimal>", "nextVal": "<decimal>", "nextIdx": 0}, ...]
    }

Loading trusts the document: stored hashes are taken as they are and not
recomputed from the leaves.
"""
import json
import logging
import os

from .errors import TreeFileNotFoundError
from .hashing import poseidon2
from .ledger import Leaf, LeafLedger
from .nodes import NodeStore

logger = logging.getLogger(__name__)


def serialize(tree):
    return {
        'depth': tree.depth,
        'nodes': [[str(h) for h in row] for row in tree.nodes.rows],
        'leaves': [
            {'val': str(leaf.val), 'nextVal': str(leaf.next_val), 'nextIdx': leaf.next_idx}
            for leaf in tree.ledger.leaves
        ],
    }


def deserialize(data, hash2=poseidon2, cls=None):
    if cls is None:
        from .tree import IndexedMerkleTree as cls

    tree = cls(depth=data['depth'], hash2=hash2)
    rows = [[int(h) for h in row] for row in data['nodes']]
    rows += [[] for _ in range(tree.depth + 1 - len(rows))]
    tree.nodes = NodeStore(hash2, tree.zeros, rows)
    tree.ledger = LeafLedger.from_leaves(
        Leaf(int(leaf['val']), int(leaf['nextVal']), int(leaf['nextIdx']))
        for leaf in data['leaves']
    )
    return tree


def save(tree, path):
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    with open(path, 'w', encoding='utf8') as f:
        json.dump(serialize(tree), f, indent=2)
    logger.info("saved tree with %d leaves to %s", tree.size, path)


def load(path, hash2=poseidon2, cls=None):
    try:
        with open(path, 'r', encoding='utf8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise TreeFileNotFoundError(path) from None
    tree = deserialize(data, hash2, cls)
    logger.info("loaded tree with %d leaves from %s", tree.size, path)
    return tree
