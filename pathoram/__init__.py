"""A Path ORAM: oblivious reads and writes over a binary tree of buckets with a stash at the root."""
from pathoram.dependency import (
    AesCtrRandom,
    BinaryTree,
    Block,
    InvalidRequestError,
    OramError,
    ReadRequest,
    ReadResult,
    StashOverflowError,
    WriteRequest,
)
from pathoram.oram import PathOram
