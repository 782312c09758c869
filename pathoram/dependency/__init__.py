from pathoram.dependency.errors import (
    BucketFullError,
    DuplicateBlockError,
    InvalidRequestError,
    OramError,
    StashOverflowError,
)
from pathoram.dependency.helper import BUCKET_SIZE, STASH_SIZE, Block, Holder
from pathoram.dependency.types import Bucket, Buckets, ReadRequest, ReadResult, Request, WriteRequest
from pathoram.dependency.binary_tree import ROOT_INDEX, BinaryTree
from pathoram.dependency.position_map import PositionMap
from pathoram.dependency.crypto import AesCtrRandom, system_random
from pathoram.dependency.observer import AccessObserver, LoggingObserver, TraceObserver
