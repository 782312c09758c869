from dataclasses import dataclass
from typing import Any, List, Union

from pathoram.dependency.helper import Block

Bucket = List[Block]
Buckets = List[Bucket]


@dataclass(frozen=True)
class ReadRequest:
    """Request for reading the value stored at an address."""
    address: int


@dataclass(frozen=True)
class WriteRequest:
    """Request for writing a new value to an address."""
    address: int
    value: Any


Request = Union[ReadRequest, WriteRequest]


@dataclass(frozen=True)
class ReadResult:
    """The outcome of a read; found is False when the address was never written."""
    value: Any = None
    found: bool = False

    def __str__(self) -> str:
        return f"value={self.value}" if self.found else "no value"
