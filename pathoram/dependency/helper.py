"""This module defines the block and the holders (bucket and stash) stored in each node of the binary tree."""
from dataclasses import dataclass
from typing import Any, List, Optional

from pathoram.dependency.errors import BucketFullError

# Number of blocks a bucket can hold.
BUCKET_SIZE = 3
# Number of blocks the stash (the root of the tree) can hold.
STASH_SIZE = 5


@dataclass(frozen=True)
class Block:
    """
    Create the data structure to hold a data record that should be put into the binary tree.

    It has two fields: address, which is the logical address in [0, n), and value, which could be anything.
    """
    address: int
    value: Optional[Any] = None


class Holder:
    def __init__(self, capacity: int, is_stash: bool = False) -> None:
        """
        Initializes a holder with a fixed number of empty slots.

        Buckets and the stash only differ in their capacity, hence they share this class and a tag tells them apart.
        :param capacity: The number of blocks this holder can store.
        :param is_stash: Whether this holder is the stash at the root of the tree.
        """
        if capacity < 1:
            raise ValueError("The capacity of a holder must be at least 1.")

        self._capacity: int = capacity
        self._is_stash: bool = is_stash
        self._slots: List[Optional[Block]] = [None] * capacity

    @classmethod
    def bucket(cls, capacity: int = BUCKET_SIZE) -> "Holder":
        """Create an empty bucket."""
        return cls(capacity=capacity, is_stash=False)

    @classmethod
    def stash(cls, capacity: int = STASH_SIZE) -> "Holder":
        """Create an empty stash."""
        return cls(capacity=capacity, is_stash=True)

    @property
    def capacity(self) -> int:
        """Return the number of slots."""
        return self._capacity

    @property
    def is_stash(self) -> bool:
        """Return whether this holder is the stash."""
        return self._is_stash

    @property
    def slots(self) -> List[Optional[Block]]:
        """Return a copy of the raw slots, where empty slots are None."""
        return list(self._slots)

    @property
    def blocks(self) -> List[Block]:
        """Return the blocks stored in the occupied slots."""
        return [block for block in self._slots if block is not None]

    def __len__(self) -> int:
        """Return the number of occupied slots."""
        return sum(1 for block in self._slots if block is not None)

    def __repr__(self) -> str:
        name = "Stash" if self._is_stash else "Bucket"
        return f"{name}(capacity={self._capacity}, blocks={self.blocks})"

    def is_full(self) -> bool:
        """Check whether every slot is occupied."""
        return all(block is not None for block in self._slots)

    def is_empty(self) -> bool:
        """Check whether no slot is occupied."""
        return all(block is None for block in self._slots)

    def clear(self) -> List[Block]:
        """Empty every slot and return the blocks that were stored."""
        blocks = self.blocks
        self._slots = [None] * self._capacity
        return blocks

    def write_block(self, block: Block) -> None:
        """
        Put the block into the first empty slot.

        :param block: The block to store.
        """
        for index, slot in enumerate(self._slots):
            if slot is None:
                self._slots[index] = block
                return

        # Never overwrite an occupied slot.
        raise BucketFullError(f"Cannot write block {block.address}, all {self._capacity} slots are taken.")
