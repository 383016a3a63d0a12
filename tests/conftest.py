import pytest

from imt.hashing import sha256_hash2
from imt.tree import IndexedMerkleTree


@pytest.fixture
def tree():
    return IndexedMerkleTree(hash2=sha256_hash2)


@pytest.fixture
def filled():
    t = IndexedMerkleTree(hash2=sha256_hash2)
    t.insert_many([10, 30, 50])
    return t
