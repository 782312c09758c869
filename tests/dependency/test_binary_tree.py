import random

import pytest

from pathoram.dependency import BinaryTree, Block, BucketFullError


class TestBinaryTree:
    def test_init(self):
        tree = BinaryTree(depth=3)
        assert tree.depth == 3
        assert tree.size == len(tree) == 9
        assert tree.root_index == 1
        assert tree.start_leaf == 5
        assert tree.end_leaf == 8
        assert tree.num_leaves == 4

    def test_init_holders(self):
        tree = BinaryTree(depth=4, bucket_size=2, stash_size=7)
        # Only the root is a stash.
        assert tree[1].is_stash
        assert tree[1].capacity == 7
        for index in range(2, tree.size):
            assert not tree[index].is_stash
            assert tree[index].capacity == 2
            assert tree[index].is_empty()

    def test_invalid_depth(self):
        with pytest.raises(ValueError):
            BinaryTree(depth=0)

    def test_get_parent_index(self):
        assert BinaryTree.get_parent_index(index=1) == 0
        assert BinaryTree.get_parent_index(index=16) == 8
        assert BinaryTree.get_parent_index(index=17) == BinaryTree.get_parent_index(index=16)

    def test_get_path_indices(self):
        assert BinaryTree.get_path_indices(index=1) == [1]
        assert BinaryTree.get_path_indices(index=8) == [8, 4, 2, 1]
        assert BinaryTree.get_path_indices(index=5) == [5, 2, 1]
        assert BinaryTree.get_path_indices(index=14)[1:] == BinaryTree.get_path_indices(index=15)[1:]

    def test_is_ancestor_reflexive(self):
        tree = BinaryTree(depth=4)
        for index in range(1, tree.size):
            assert BinaryTree.is_ancestor(index, index)

    def test_is_ancestor_matches_path(self):
        tree = BinaryTree(depth=4)
        for leaf in range(tree.start_leaf, tree.end_leaf + 1):
            ancestors = {index for index in range(1, tree.size) if BinaryTree.is_ancestor(index, leaf)}
            assert ancestors == set(tree.get_leaf_path(leaf=leaf))

    def test_is_ancestor(self):
        assert BinaryTree.is_ancestor(1, 13)
        assert BinaryTree.is_ancestor(3, 13)
        assert BinaryTree.is_ancestor(6, 13)
        assert not BinaryTree.is_ancestor(2, 13)
        assert not BinaryTree.is_ancestor(7, 13)
        # A node is never an ancestor of its parent.
        assert not BinaryTree.is_ancestor(6, 3)

    def test_random_leaf(self):
        tree = BinaryTree(depth=3)
        rng = random.Random(1)
        leaves = [tree.random_leaf(rng=rng) for _ in range(1000)]
        assert all(tree.is_leaf(index=leaf) for leaf in leaves)
        assert set(leaves) == {5, 6, 7, 8}

    def test_get_leaf_path(self):
        tree = BinaryTree(depth=3)
        assert tree.get_leaf_path(leaf=5) == [5, 2, 1]
        assert tree.get_leaf_path(leaf=8) == [8, 4, 2, 1]

        # Non leaves are rejected, not clamped.
        for index in [0, 1, 4, 9]:
            with pytest.raises(ValueError):
                tree.get_leaf_path(leaf=index)

    def test_read_and_clear_path(self):
        tree = BinaryTree(depth=3)
        tree.write_block_to_bucket(index=5, block=Block(address=0, value=True))
        tree.write_block_to_bucket(index=2, block=Block(address=1, value=False))
        tree.write_block_to_bucket(index=1, block=Block(address=2, value=True))
        tree.write_block_to_bucket(index=3, block=Block(address=3, value=True))

        # The path comes back from the leaf to the root.
        path = tree.read_and_clear_path(leaf=5)
        assert path == [[Block(address=0, value=True)], [Block(address=1, value=False)], [Block(address=2, value=True)]]

        # Nodes on the path are now empty, others are untouched.
        assert tree[5].is_empty()
        assert tree[2].is_empty()
        assert tree[1].is_empty()
        assert tree[3].blocks == [Block(address=3, value=True)]

    def test_read_and_clear_invalid_leaf(self):
        tree = BinaryTree(depth=3)
        tree.write_block_to_bucket(index=1, block=Block(address=0, value=True))

        with pytest.raises(ValueError):
            tree.read_and_clear_path(leaf=3)

        # Nothing was cleared.
        assert tree[1].blocks == [Block(address=0, value=True)]

    def test_read_path(self):
        tree = BinaryTree(depth=3)
        tree.write_block_to_bucket(index=4, block=Block(address=0, value=True))
        assert tree.read_path(leaf=8) == [[], [Block(address=0, value=True)], [], []]
        # Reading does not clear.
        assert tree[4].blocks == [Block(address=0, value=True)]

    def test_write_block_to_bucket(self):
        tree = BinaryTree(depth=3)
        for address in range(3):
            tree.write_block_to_bucket(index=2, block=Block(address=address))

        with pytest.raises(BucketFullError):
            tree.write_block_to_bucket(index=2, block=Block(address=3))
        assert len(tree[2]) == 3

        # The stash holds more.
        for address in range(5):
            tree.write_block_to_bucket(index=1, block=Block(address=address))
        with pytest.raises(BucketFullError):
            tree.write_block_to_bucket(index=1, block=Block(address=5))

    def test_write_block_invalid_index(self):
        tree = BinaryTree(depth=3)
        with pytest.raises(ValueError):
            tree.write_block_to_bucket(index=0, block=Block(address=0))
        with pytest.raises(ValueError):
            tree.write_block_to_bucket(index=9, block=Block(address=0))

    def test_write_path(self):
        tree = BinaryTree(depth=3)
        tree.write_path(leaf=6, data=[[Block(address=0)], [], [Block(address=1), Block(address=2)]])
        assert tree.read_path(leaf=6) == [[Block(address=0)], [], [Block(address=1), Block(address=2)]]

        # Check if the provided data to write has the same length.
        with pytest.raises(ValueError, match="Wrong number of buckets on a path."):
            tree.write_path(leaf=6, data=[[], []])

        # Too many blocks for a bucket are refused before anything changes.
        with pytest.raises(BucketFullError):
            tree.write_path(leaf=6, data=[[Block(address=i) for i in range(4)], [], []])
        assert tree[6].blocks == [Block(address=0)]

    def test_iter_blocks(self):
        tree = BinaryTree(depth=3)
        tree.write_block_to_bucket(index=1, block=Block(address=0))
        tree.write_block_to_bucket(index=7, block=Block(address=1))
        tree.write_block_to_bucket(index=7, block=Block(address=2))
        assert sorted(block.address for block in tree.iter_blocks()) == [0, 1, 2]
