"""
Module for defining a parent class for binary tree-based oram.

The TreeBaseOram class sizes the tree, owns the position map and the random source, and validates requests.
Note that we don't use double underscores (name mangling) in this file for private methods because all things defined
here should be accessible to its children classes.
"""

import random
from abc import ABC, abstractmethod
from typing import Any, Optional

from pathoram.dependency import (
    BUCKET_SIZE,
    STASH_SIZE,
    AccessObserver,
    BinaryTree,
    InvalidRequestError,
    PositionMap,
    ReadResult,
    Request,
    system_random,
)


class TreeBaseOram(ABC):
    def __init__(self,
                 num_data: int,
                 rng: Optional[random.Random] = None,
                 bucket_size: int = BUCKET_SIZE,
                 stash_size: int = STASH_SIZE,
                 observer: Optional[AccessObserver] = None):
        """
        Defines the base oram, including its attributes and methods.

        :param num_data: The number of addresses the oram should serve, addresses are in [0, num_data).
        :param rng: The random source for drawing leaves; defaults to the operating system source.
        :param bucket_size: The number of blocks each bucket should hold.
        :param stash_size: The number of blocks the stash at the root should hold.
        :param observer: Optional hooks that get to see every physical access.
        """
        if num_data < 1:
            raise ValueError("The oram must hold at least one address.")

        # Store the useful input values.
        self._num_data: int = num_data
        self._bucket_size: int = bucket_size
        self._stash_size: int = stash_size
        self._observer: AccessObserver = AccessObserver() if observer is None else observer
        self._rng: random.Random = system_random() if rng is None else rng

        # Compute the smallest depth with 2 ** depth >= 2 * num_data.
        self._depth: int = self.compute_depth(num_data=num_data)

        # Create the tree and map every address to a random leaf.
        self._tree: BinaryTree = BinaryTree(depth=self._depth, bucket_size=bucket_size, stash_size=stash_size)
        self._pos_map: PositionMap = PositionMap(num_data=num_data, tree=self._tree, rng=self._rng)

        # Counters kept for experiments.
        self.access_count: int = 0
        self.max_stash: int = 0

    @staticmethod
    def compute_depth(num_data: int) -> int:
        """Find the smallest depth such that the tree has at least twice as many nodes at its bottom as data."""
        return (2 * num_data - 1).bit_length()

    @property
    def num_data(self) -> int:
        return self._num_data

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def tree(self) -> BinaryTree:
        """Return the tree storage."""
        return self._tree

    @property
    def position_map(self) -> PositionMap:
        """Return the position map."""
        return self._pos_map

    @property
    def stash_size(self) -> int:
        """Return the number of blocks currently in the stash."""
        return len(self._tree[self._tree.root_index])

    def _get_new_leaf(self) -> int:
        """Get a random leaf label within the range."""
        return self._tree.random_leaf(rng=self._rng)

    def _check_address(self, address: Any) -> int:
        """
        Make sure the address is an integer within [0, num_data).

        :param address: The address of a request.
        :return: The address, if it is valid.
        """
        # Booleans are integers in Python but never addresses.
        if isinstance(address, bool) or not isinstance(address, int):
            raise InvalidRequestError(f"Address {address!r} is not an integer.")

        if not 0 <= address < self._num_data:
            raise InvalidRequestError(f"Address {address} is out of range [0, {self._num_data}).")

        return address

    @abstractmethod
    def execute(self, request: Request) -> Optional[ReadResult]:
        """
        Perform a read or a write request.

        :param request: A ReadRequest or a WriteRequest.
        :return: A ReadResult for reads, None for writes.
        """
        raise NotImplementedError
