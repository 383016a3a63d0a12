"""Sparse level-indexed node storage.

Row ``level`` holds the nodes of that level by position, level 0 the leaf
hashes and level ``depth`` the root. Positions never written read as the
level's zero hash, so the tree behaves as if fully populated with empty
leaves.
"""


class NodeStore:
    def __init__(self, hash2, zeros, rows=None):
        self.hash2 = hash2
        self.zeros = zeros
        self.depth = len(zeros) - 1
        if rows is None:
            rows = [[] for _ in range(self.depth + 1)]
        self.rows = rows

    def get(self, level, index):
        row = self.rows[level]
        if index < len(row):
            return row[index]
        return self.zeros[level]

    def set(self, level, index, value):
        row = self.rows[level]
        while len(row) <= index:
            row.append(self.zeros[level])
        row[index] = value

    @property
    def root(self):
        return self.get(self.depth, 0)

    def level(self, level):
        return list(self.rows[level])

    def recompute_path_from(self, index, leaf_hash):
        """Write leaf_hash at level 0 and rehash every ancestor up to the root."""
        current = leaf_hash
        self.set(0, index, current)

        for level in range(self.depth):
            sibling = self.get(level, index ^ 1)
            if index & 1:
                current = self.hash2(sibling, current)
            else:
                current = self.hash2(current, sibling)
            index //= 2
            self.set(level + 1, index, current)
        return current

    def sibling_path(self, index):
        # (siblings, directions); direction 1 means the node is a right child
        siblings = []
        directions = []
        for level in range(self.depth):
            siblings.append(self.get(level, index ^ 1))
            directions.append(index & 1)
            index //= 2
        return siblings, directions
