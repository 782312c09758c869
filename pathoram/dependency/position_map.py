"""This module defines the position map, which records the leaf every address is currently associated with."""
import random
from typing import Iterator, List, Tuple

from pathoram.dependency.binary_tree import BinaryTree


class PositionMap:
    def __init__(self, num_data: int, tree: BinaryTree, rng: random.Random) -> None:
        """
        Initializes the position map where {i : random_leaf}, for i in [0, num_data).

        :param num_data: The number of addresses.
        :param tree: The tree whose leaves the addresses are mapped to.
        :param rng: The random source used to draw leaves.
        """
        self._tree: BinaryTree = tree
        self._rng: random.Random = rng
        self._leaves: List[int] = [tree.random_leaf(rng=rng) for _ in range(num_data)]

    def __len__(self) -> int:
        return len(self._leaves)

    def __iter__(self) -> Iterator[int]:
        return iter(self._leaves)

    def __getitem__(self, address: int) -> int:
        return self._leaves[address]

    def __setitem__(self, address: int, leaf: int) -> None:
        if not self._tree.is_leaf(index=leaf):
            raise ValueError(f"Node {leaf} is not a leaf of the tree.")
        self._leaves[address] = leaf

    def remap(self, address: int) -> Tuple[int, int]:
        """
        Give an address a fresh leaf, drawn independently of the current one.

        :param address: The address to remap.
        :return: The old leaf and the new leaf.
        """
        old_leaf = self._leaves[address]
        self._leaves[address] = self._tree.random_leaf(rng=self._rng)
        return old_leaf, self._leaves[address]
