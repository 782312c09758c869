"""This module implements the binary tree storage that the path oram reads from and writes to."""
import random
from typing import Iterator, List

from pathoram.dependency.errors import BucketFullError
from pathoram.dependency.helper import BUCKET_SIZE, STASH_SIZE, Block, Holder
from pathoram.dependency.types import Buckets

# The root of the tree is stored at index 1; index 0 is never part of any path.
ROOT_INDEX = 1


class BinaryTree:
    def __init__(self, depth: int, bucket_size: int = BUCKET_SIZE, stash_size: int = STASH_SIZE) -> None:
        """
        Initializes the binary tree based on input parameters.

        The tree is stored as a list of 2 ** depth + 1 holders. The node at index i has children 2i and 2i + 1, the
        root at index 1 is the stash and every other node is a bucket.
        :param depth: The depth of the tree, leaves are the indices in [2 ** (depth - 1) + 1, 2 ** depth].
        :param bucket_size: Size of each bucket in the tree.
        :param stash_size: Size of the stash at the root.
        """
        if depth < 1:
            raise ValueError("The depth of the tree must be at least 1.")

        # Store the parameters.
        self._depth: int = depth
        self._bucket_size: int = bucket_size
        self._stash_size: int = stash_size

        # Compute the size of the tree, which is the length of the storage list.
        self._size: int = pow(2, depth) + 1
        # Compute the first and the last leaf index.
        self._start_leaf: int = pow(2, depth - 1) + 1
        self._end_leaf: int = pow(2, depth)

        # Create the storage, only the root is a stash.
        self._nodes: List[Holder] = [
            Holder.stash(capacity=stash_size) if index == ROOT_INDEX else Holder.bucket(capacity=bucket_size)
            for index in range(self._size)
        ]

    @property
    def depth(self) -> int:
        """Returns the depth of the binary tree."""
        return self._depth

    @property
    def size(self) -> int:
        """Returns the size of the binary tree."""
        return self._size

    @property
    def root_index(self) -> int:
        """Returns the index of the root, where the stash lives."""
        return ROOT_INDEX

    @property
    def start_leaf(self) -> int:
        """Returns the index of the first leaf."""
        return self._start_leaf

    @property
    def end_leaf(self) -> int:
        """Returns the index of the last leaf."""
        return self._end_leaf

    @property
    def num_leaves(self) -> int:
        """Returns the number of leaves."""
        return self._end_leaf - self._start_leaf + 1

    @property
    def bucket_size(self) -> int:
        return self._bucket_size

    @property
    def stash_size(self) -> int:
        return self._stash_size

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, index: int) -> Holder:
        """tree[i] => returns the holder stored at the i-th node."""
        self.__check_index(index=index)
        return self._nodes[index]

    def __check_index(self, index: int) -> None:
        """Raise an error when the index is not a node of the tree."""
        if not ROOT_INDEX <= index < self._size:
            raise ValueError(f"Node {index} is not in the tree, index must be in [{ROOT_INDEX}, {self._size}).")

    def __check_leaf(self, leaf: int) -> None:
        """Raise an error when the index is not a leaf of the tree."""
        if not self.is_leaf(index=leaf):
            raise ValueError(f"Node {leaf} is not a leaf, leaf must be in [{self._start_leaf}, {self._end_leaf}].")

    @staticmethod
    def get_parent_index(index: int) -> int:
        """
        Given index of a node, find where its parent node is stored in the list.

        :param index: The index of a node.
        :return: The index of input node's parent node; the parent of the root is 0.
        """
        return index // 2

    @staticmethod
    def get_path_indices(index: int) -> List[int]:
        """
        Given an index of a node, get the index of the path from itself to the root node.

        :param index: The index of a node.
        :return: A list of index from the input node to the root.
        """
        path = []

        # Do append first to include the input index as well.
        while index >= ROOT_INDEX:
            path.append(index)
            index = BinaryTree.get_parent_index(index=index)

        return path

    @staticmethod
    def is_ancestor(ancestor: int, descendant: int) -> bool:
        """
        Check whether a node lies on the path from another node to the root, the node itself included.

        :param ancestor: The index of the node that may be an ancestor.
        :param descendant: The index of the node whose path is checked.
        :return: True if ancestor is on the path from descendant to the root.
        """
        while descendant > ancestor:
            descendant = BinaryTree.get_parent_index(index=descendant)

        return descendant == ancestor

    def is_leaf(self, index: int) -> bool:
        """Check whether the index is a leaf of this tree."""
        return isinstance(index, int) and self._start_leaf <= index <= self._end_leaf

    def random_leaf(self, rng: random.Random) -> int:
        """
        Draw a leaf uniformly at random.

        The draw decides where a block goes next, so the source has to be unpredictable to whoever watches the paths.
        :param rng: A random source with the randrange method.
        :return: A leaf index in [start_leaf, end_leaf].
        """
        return rng.randrange(self._start_leaf, self._end_leaf + 1)

    def get_leaf_path(self, leaf: int) -> List[int]:
        """
        Given a leaf, get the index of the path from itself to the root node.

        :param leaf: The index of a leaf.
        :return: A list of index from the leaf node to the root.
        """
        self.__check_leaf(leaf=leaf)
        return self.get_path_indices(index=leaf)

    def read_path(self, leaf: int) -> Buckets:
        """
        Given a leaf, grab all blocks along the path without modifying the tree.

        :param leaf: The index of a leaf.
        :return: A list of buckets of blocks, from the leaf to the root.
        """
        return [self._nodes[index].blocks for index in self.get_leaf_path(leaf=leaf)]

    def read_and_clear_path(self, leaf: int) -> Buckets:
        """
        Given a leaf, grab all blocks along the path and empty every node on it.

        :param leaf: The index of a leaf.
        :return: A list of buckets of blocks, from the leaf to the root.
        """
        # Validation happens before any node is cleared.
        path = self.get_leaf_path(leaf=leaf)
        return [self._nodes[index].clear() for index in path]

    def write_path(self, leaf: int, data: Buckets) -> None:
        """
        Given a leaf, write the provided buckets to the path.

        :param leaf: The index of a leaf.
        :param data: A list of buckets of blocks, from the leaf to the root.
        """
        path = self.get_leaf_path(leaf=leaf)

        # Check if the provided data to write has the same length.
        if len(data) != len(path):
            raise ValueError("Wrong number of buckets on a path.")

        # Each bucket replaces whatever the node holds.
        for index, bucket in zip(path, data):
            if len(bucket) > self._nodes[index].capacity:
                raise BucketFullError(f"Node {index} cannot hold {len(bucket)} blocks.")

        for index, bucket in zip(path, data):
            self._nodes[index].clear()
            for block in bucket:
                self._nodes[index].write_block(block=block)

    def write_block_to_bucket(self, index: int, block: Block) -> None:
        """
        Given a node index, write the block into one of its empty slots.

        :param index: The index of the node.
        :param block: The block to write.
        """
        self.__check_index(index=index)

        if self._nodes[index].is_full():
            raise BucketFullError(f"Node {index} is full, it holds {self._nodes[index].capacity} blocks.")

        self._nodes[index].write_block(block=block)

    def iter_blocks(self) -> Iterator[Block]:
        """Go through every block stored in the tree, the stash included."""
        for holder in self._nodes[ROOT_INDEX:]:
            yield from holder.blocks
