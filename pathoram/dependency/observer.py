"""
Hooks the oram calls while it touches the tree.

The oram itself never prints anything; whoever wants to see the physical accesses plugs in an observer.
"""
import logging
from typing import List, Tuple

from pathoram.dependency.helper import Block
from pathoram.dependency.types import Buckets

logger = logging.getLogger(__name__)


class AccessObserver:
    """Base observer, every hook does nothing."""

    def path_read(self, leaf: int, buckets: Buckets) -> None:
        """Called after the path to leaf has been read and cleared."""

    def block_written(self, index: int, block: Block) -> None:
        """Called after block has been placed into the node at index."""


class LoggingObserver(AccessObserver):
    """Narrate every physical access as if talking to the memory holding the tree."""

    def __init__(self, level: int = logging.DEBUG):
        self.level = level

    def path_read(self, leaf: int, buckets: Buckets) -> None:
        logger.log(self.level, "Memory, please read and clear the path to leaf %d", leaf)

    def block_written(self, index: int, block: Block) -> None:
        logger.log(self.level, "Memory, please write %r to bucket number %d", block, index)


class TraceObserver(AccessObserver):
    """Record the physical trace: which leaves were read and which nodes were written, in order."""

    def __init__(self):
        self.paths: List[int] = []
        self.writes: List[Tuple[int, int]] = []

    def path_read(self, leaf: int, buckets: Buckets) -> None:
        self.paths.append(leaf)

    def block_written(self, index: int, block: Block) -> None:
        # Only the node is part of the trace; the record keeps the access number it belongs to.
        self.writes.append((len(self.paths) - 1, index))

    def clear(self) -> None:
        self.paths.clear()
        self.writes.clear()
