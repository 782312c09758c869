"""
This module defines the path oram class.

Path oram has the following public methods:
    - execute: perform a ReadRequest or a WriteRequest, hiding from the tree which address is accessed and how.
    - read / write: shortcuts that build the request for the caller.

Every access reads and clears one root-to-leaf path, gives the accessed address a fresh random leaf, and then greedily
writes all blocks found on the path back to it, from the leaf towards the root.
"""

import logging
import random
from typing import Any, Dict, List, Optional, Tuple

from pathoram.dependency import (
    BUCKET_SIZE,
    STASH_SIZE,
    AccessObserver,
    BinaryTree,
    Block,
    Buckets,
    DuplicateBlockError,
    InvalidRequestError,
    ReadRequest,
    ReadResult,
    Request,
    StashOverflowError,
    WriteRequest,
)
from pathoram.oram.tree_base_oram import TreeBaseOram

logger = logging.getLogger(__name__)


class PathOram(TreeBaseOram):
    def __init__(self,
                 num_data: int,
                 rng: Optional[random.Random] = None,
                 bucket_size: int = BUCKET_SIZE,
                 stash_size: int = STASH_SIZE,
                 observer: Optional[AccessObserver] = None):
        """
        Defines the path oram, including its attributes and methods.

        :param num_data: The number of addresses the oram should serve, addresses are in [0, num_data).
        :param rng: The random source for drawing leaves; defaults to the operating system source.
        :param bucket_size: The number of blocks each bucket should hold.
        :param stash_size: The number of blocks the stash at the root should hold.
        :param observer: Optional hooks that get to see every physical access.
        """
        # Initialize the parent TreeBaseOram class.
        super().__init__(
            num_data=num_data,
            rng=rng,
            bucket_size=bucket_size,
            stash_size=stash_size,
            observer=observer
        )

        logger.info(
            "Initializing ORAM for %d addresses with depth %d (%d nodes, leaves %d to %d)",
            num_data, self._depth, self._tree.size - 1, self._tree.start_leaf, self._tree.end_leaf
        )

    @staticmethod
    def __collect_blocks(path: Buckets) -> Dict[int, Block]:
        """
        Gather all blocks read from a path, keyed by their address.

        :param path: A list of buckets of blocks.
        :return: A dictionary mapping each address to its block.
        """
        blocks = {}

        for bucket in path:
            for block in bucket:
                # Each address lives in exactly one place, otherwise something went badly wrong earlier.
                if block.address in blocks:
                    raise DuplicateBlockError(f"Address {block.address} appears twice on the path.")
                blocks[block.address] = block

        return blocks

    def __plan_eviction(self, leaf: int, blocks: Dict[int, Block]) -> Tuple[Dict[int, List[Block]], List[Block]]:
        """
        Decide where each block goes on the path, without touching the tree yet.

        Eligible blocks are taken in address order, so the choice does not depend on which address was accessed.
        :param leaf: The leaf of the path we are evicting data to.
        :param blocks: The blocks to place, keyed by address.
        :return: The blocks for each node on the path, and the blocks that found no room.
        """
        remaining = [blocks[address] for address in sorted(blocks)]
        plan = {}

        # Go from the leaf up to the root, filling each node with as many eligible blocks as it can hold.
        for index in self._tree.get_leaf_path(leaf=leaf):
            capacity = self._tree[index].capacity
            eligible = [
                block for block in remaining if BinaryTree.is_ancestor(index, self._pos_map[block.address])
            ][:capacity]

            plan[index] = eligible
            placed = {block.address for block in eligible}
            remaining = [block for block in remaining if block.address not in placed]

        return plan, remaining

    def __access(self, op: str, address: int, value: Any = None) -> Optional[ReadResult]:
        """
        Perform one oblivious access.

        :param op: An operation, which can be "r" or "w".
        :param address: The address of interest, already validated.
        :param value: If the operation is "w", this is the new value for the address.
        :return: A ReadResult if the operation is "r".
        """
        # Give the address a new leaf before anything else happens.
        leaf, new_leaf = self._pos_map.remap(address=address)

        # Read the whole path from the tree, which leaves it empty.
        path = self._tree.read_and_clear_path(leaf=leaf)
        self._observer.path_read(leaf=leaf, buckets=path)
        blocks = self.__collect_blocks(path=path)

        # Read or write the one value the caller wants.
        result = None
        if op == "r":
            block = blocks.get(address)
            result = ReadResult() if block is None else ReadResult(value=block.value, found=True)
        else:
            blocks[address] = Block(address=address, value=value)

        plan, remaining = self.__plan_eviction(leaf=leaf, blocks=blocks)

        # Put everything back as it was; the caller sees the access as never happened.
        if remaining:
            self._tree.write_path(leaf=leaf, data=path)
            self._pos_map[address] = leaf
            logger.warning(
                "Stash overflow on the path to leaf %d, %d blocks did not fit", leaf, len(remaining)
            )
            raise StashOverflowError(f"Stash overflow! {len(remaining)} blocks could not be evicted.")

        # Write the blocks back, from the leaf to the root.
        for index, bucket in plan.items():
            for block in bucket:
                self._tree.write_block_to_bucket(index=index, block=block)
                self._observer.block_written(index=index, block=block)

        self.access_count += 1
        self.max_stash = max(self.max_stash, self.stash_size)
        logger.debug("Access %d done, address %d moved to leaf %d", self.access_count, address, new_leaf)

        return result

    def execute(self, request: Request) -> Optional[ReadResult]:
        """
        Perform a read or a write request.

        :param request: A ReadRequest or a WriteRequest.
        :return: A ReadResult for reads, None for writes.
        """
        # Reject bad requests before the tree or the position map is touched.
        if isinstance(request, ReadRequest):
            return self.__access(op="r", address=self._check_address(address=request.address))
        elif isinstance(request, WriteRequest):
            return self.__access(op="w", address=self._check_address(address=request.address), value=request.value)
        else:
            raise InvalidRequestError(f"Unknown request {request!r}.")

    def read(self, address: int) -> ReadResult:
        """Read the value stored at the address."""
        return self.execute(request=ReadRequest(address=address))

    def write(self, address: int, value: Any) -> None:
        """Write the value to the address."""
        self.execute(request=WriteRequest(address=address, value=value))
