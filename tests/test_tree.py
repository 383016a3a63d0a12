"""Tests for the indexed Merkle tree: insertion, introspection, invariants."""

import random

import pytest

from imt.errors import (
    DuplicateValueError,
    InvalidLevelError,
    InvalidValueError,
    TreeFullError,
)
from imt.hashing import DEFAULT_DEPTH, SNARK_SCALAR_FIELD, sha256_hash2, zero_hashes
from imt.ledger import Leaf
from imt.tree import IndexedMerkleTree


class TestInitialState:
    def test_sentinel_only(self, tree):
        assert tree.depth == DEFAULT_DEPTH == 32
        assert tree.size == 1
        assert tree.leaves() == [Leaf(0, 0, 0)]
        assert tree.sorted_values() == []

    def test_root_commits_to_sentinel(self, tree):
        assert isinstance(tree.root, int)
        assert tree.root != tree.zero

    def test_small_tree_root(self):
        h = sha256_hash2
        t = IndexedMerkleTree(depth=1, hash2=h)
        assert t.root == h(h(0, 0), 0)

    def test_zero_table(self, tree):
        assert tree.zeros == zero_hashes(sha256_hash2, 32)
        assert tree.zero == tree.zeros[32]


class TestInsert:
    def test_single_value(self, tree):
        before = tree.root
        tree.insert(42)
        assert tree.size == 2
        assert tree.contains(42)
        assert tree.root != before

    def test_linked_list_out_of_order(self, tree):
        tree.insert_many([10, 30, 20])
        by_val = {leaf.val: leaf for leaf in tree.leaves()}
        assert by_val[0].next_val == 10
        assert by_val[10].next_val == 20
        assert by_val[20].next_val == 30
        assert by_val[30].next_val == 0
        assert tree.sorted_values() == [10, 20, 30]

    def test_leaves_keep_append_positions(self, tree):
        tree.insert_many([50, 10, 30])
        assert [leaf.val for leaf in tree.leaves()] == [0, 50, 10, 30]

    def test_leaf_hashes_at_level_zero(self, tree):
        tree.insert_many([10, 30])
        expected = [sha256_hash2(leaf.val, leaf.next_val) for leaf in tree.leaves()]
        assert tree.nodes_at_level(0) == expected

    def test_duplicate_rejected_state_unchanged(self, filled):
        root, leaves = filled.root, filled.leaves()
        with pytest.raises(DuplicateValueError) as exc:
            filled.insert(30)
        assert exc.value.value == 30
        assert filled.root == root
        assert filled.leaves() == leaves

    @pytest.mark.parametrize("bad", [0, -1, 1.5, "7", True])
    def test_invalid_values(self, tree, bad):
        with pytest.raises(InvalidValueError):
            tree.insert(bad)
        assert tree.size == 1

    def test_capacity(self):
        t = IndexedMerkleTree(depth=2, hash2=sha256_hash2)
        t.insert_many([1, 2, 3])
        with pytest.raises(TreeFullError):
            t.insert(4)
        with pytest.raises(DuplicateValueError):
            t.insert(2)

    def test_hash_failure_leaves_tree_untouched(self):
        def picky(a, b):
            if 13 in (a, b):
                raise ValueError("unhashable")
            return sha256_hash2(a, b)

        t = IndexedMerkleTree(depth=8, hash2=picky)
        t.insert_many([10, 30, 50])
        root, leaves = t.root, t.leaves()
        with pytest.raises(ValueError):
            t.insert(13)
        assert t.root == root
        assert t.leaves() == leaves
        assert not t.contains(13)

    @pytest.mark.parametrize("offset", [0, 1, 30])
    def test_values_outside_field(self, filled, offset):
        root = filled.root
        with pytest.raises(InvalidValueError):
            filled.insert(SNARK_SCALAR_FIELD + offset)
        assert filled.root == root
        assert filled.size == 4

    def test_largest_field_element(self, tree):
        tree.insert(SNARK_SCALAR_FIELD - 1)
        assert tree.sorted_values() == [SNARK_SCALAR_FIELD - 1]

    def test_backend_without_modulus_is_unbounded(self):
        t = IndexedMerkleTree(depth=4, hash2=lambda a, b: (a * 3 + b) % 2**300)
        assert t.modulus is None
        t.insert(2**280)
        assert t.sorted_values() == [2**280]

    def test_large_field_elements(self, tree):
        big = 2**250 + 12345
        tree.insert(big)
        tree.insert(big - 1)
        assert tree.sorted_values() == [big - 1, big]


class TestIntrospection:
    def test_leaves_is_defensive_copy(self, filled):
        leaves = filled.leaves()
        leaves[0].next_val = 999
        leaves.append(Leaf(1))
        assert filled.leaves()[0].next_val == 10
        assert filled.size == 4

    def test_nodes_at_root_level(self, filled):
        assert filled.nodes_at_level(32) == [filled.root]

    @pytest.mark.parametrize("level", [-1, 33, 100])
    def test_invalid_level(self, filled, level):
        with pytest.raises(InvalidLevelError) as exc:
            filled.nodes_at_level(level)
        assert exc.value.level == level


class TestInvariants:
    def test_random_inserts_keep_list_sorted_and_unique(self):
        rng = random.Random(2024)
        t = IndexedMerkleTree(depth=10, hash2=sha256_hash2)
        inserted = set()
        for _ in range(300):
            v = rng.randint(1, 500)
            if v in inserted:
                with pytest.raises(DuplicateValueError):
                    t.insert(v)
            else:
                t.insert(v)
                inserted.add(v)

        vals = [leaf.val for leaf in t.leaves()]
        assert len(vals) == len(set(vals))
        walked = t.sorted_values()
        assert walked == sorted(inserted)
        assert all(a < b for a, b in zip(walked, walked[1:]))

    def test_root_matches_full_rebuild(self):
        h = sha256_hash2
        t = IndexedMerkleTree(depth=4, hash2=h)
        t.insert_many([9, 3, 7, 1, 12])

        level = [h(leaf.val, leaf.next_val) for leaf in t.leaves()]
        level += [0] * (16 - len(level))
        while len(level) > 1:
            level = [h(level[i], level[i + 1]) for i in range(0, len(level), 2)]
        assert level[0] == t.root

    def test_same_sequence_same_root(self):
        a = IndexedMerkleTree(hash2=sha256_hash2)
        b = IndexedMerkleTree(hash2=sha256_hash2)
        a.insert_many([5, 1, 9])
        b.insert_many([5, 1, 9])
        assert a.root == b.root

    def test_insertion_order_changes_geometry_not_contents(self):
        a = IndexedMerkleTree(hash2=sha256_hash2)
        b = IndexedMerkleTree(hash2=sha256_hash2)
        a.insert_many([10, 30])
        b.insert_many([30, 10])
        assert a.sorted_values() == b.sorted_values()
        # positions follow append order, so the commitments differ
        assert a.root != b.root
