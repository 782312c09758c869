"""Exceptions raised by the oram and its storage.

Each error also derives from the built-in exception a caller would naturally catch, so code written against
ValueError or MemoryError keeps working.
"""


class OramError(Exception):
    """Base class for every error raised by this package."""


class InvalidRequestError(OramError, ValueError):
    """The request is malformed or its address is outside of the address space."""


class BucketFullError(OramError):
    """A block was written to a bucket (or the stash) that has no empty slot left."""


class StashOverflowError(OramError, MemoryError):
    """Eviction could not place every block on the path, even after reaching the stash."""


class DuplicateBlockError(OramError, AssertionError):
    """Two live blocks share one address; this means the position map or eviction is broken."""
