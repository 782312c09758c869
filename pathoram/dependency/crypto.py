import os
import random
import secrets
from typing import Optional

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

# 2 ** -53, the spacing of floats in [0.5, 1).
RECIP_BPF = 2 ** -53


def system_random() -> random.Random:
    """Return the random source used by default, backed by the operating system."""
    return secrets.SystemRandom()


class AesCtrRandom(random.Random):
    """A random source whose bits are an AES-CTR keystream, using the cryptography package.

    Without the key the output is unpredictable; with the key the whole sequence can be replayed, which makes leaf
    assignment reproducible in tests without falling back to a weak generator.
    """

    # The counter block starts from zero for every seed.
    NONCE_SIZE = 16

    def __init__(self, key: Optional[bytes] = None, key_byte_length: int = 16):
        """Class for drawing random numbers from an AES-CTR keystream.

        :param key: The AES key to use; it will be randomly generated if not provided.
        :param key_byte_length: The length of AES key to use (16, 24, or 32 bytes).
        """
        if key is not None:
            key_byte_length = len(key)

        if key_byte_length not in [16, 24, 32]:
            raise ValueError("The AES key length must be 16, 24, or 32 bytes.")

        self.__key = os.urandom(key_byte_length) if key is None else key
        self.__encryptor = None

        # The parent constructor calls seed, which starts the keystream.
        super().__init__()

    @property
    def key(self) -> bytes:
        """Get the current AES key."""
        return self.__key

    def seed(self, *args, **kwargs) -> None:
        """Restart the keystream from the beginning; the key stays the same."""
        self.__encryptor = Cipher(algorithms.AES(self.__key), modes.CTR(b"\x00" * self.NONCE_SIZE)).encryptor()

    def __read(self, num_bytes: int) -> bytes:
        """Take the next bytes from the keystream."""
        return self.__encryptor.update(b"\x00" * num_bytes)

    def getrandbits(self, k: int) -> int:
        """Return a non-negative integer with k random bits."""
        if k < 0:
            raise ValueError("Number of bits must be non-negative.")

        num_bytes = (k + 7) // 8
        return int.from_bytes(self.__read(num_bytes), byteorder="big") >> (num_bytes * 8 - k)

    def random(self) -> float:
        """Return the next random floating point number in [0, 1)."""
        return (int.from_bytes(self.__read(7), byteorder="big") >> 3) * RECIP_BPF

    def getstate(self):
        raise NotImplementedError("AesCtrRandom state is the key, it cannot be saved.")

    def setstate(self, state):
        raise NotImplementedError("AesCtrRandom state is the key, it cannot be restored.")
