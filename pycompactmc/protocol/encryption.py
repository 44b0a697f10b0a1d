"""
Stream encryption

Once login encryption is on, every byte in both directions passes through
AES in CFB8 mode. The protocol uses the shared secret as both key and IV.

The wrappers start as pass-through and are switched on with ``set_key``.
The reader looks up its decryptor after the inner read returns, so a read
that was already blocked when encryption was enabled decrypts what arrives.
"""

import logging
from typing import Optional

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

logger = logging.getLogger(__name__)

KEY_SIZE = 16


def create_cipher(key: bytes) -> Cipher:
    """Build the AES/CFB8 cipher for a shared secret"""
    if not isinstance(key, (bytes, bytearray)):
        raise TypeError("Encryption key must be bytes")
    if len(key) != KEY_SIZE:
        raise ValueError(f"Encryption key must be {KEY_SIZE} bytes, got {len(key)}")
    key = bytes(key)
    return Cipher(algorithms.AES(key), modes.CFB8(key))


class CipherReader:
    """Decrypts everything read from an inner stream once a key is set"""

    def __init__(self, inner, key: Optional[bytes] = None):
        self.inner = inner
        self._decryptor = None
        if key is not None:
            self.set_key(key)

    @property
    def encrypted(self) -> bool:
        return self._decryptor is not None

    def set_key(self, key: bytes) -> None:
        # Single attribute assignment: the reader sees either the old
        # decryptor or a fully built new one
        self._decryptor = create_cipher(key).decryptor()

    def read(self, size: int) -> bytes:
        data = self.inner.read(size)
        decryptor = self._decryptor
        if decryptor is None:
            return data
        return decryptor.update(data)


class CipherWriter:
    """Encrypts everything written to an inner stream once a key is set"""

    def __init__(self, inner, key: Optional[bytes] = None):
        self.inner = inner
        self._encryptor = None
        if key is not None:
            self.set_key(key)

    @property
    def encrypted(self) -> bool:
        return self._encryptor is not None

    def set_key(self, key: bytes) -> None:
        self._encryptor = create_cipher(key).encryptor()

    def write(self, data: bytes) -> None:
        encryptor = self._encryptor
        if encryptor is not None:
            data = encryptor.update(data)
        self.inner.write(data)
