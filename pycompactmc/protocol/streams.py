"""
Byte streams over a connected socket

The reader and writer are the only objects that touch the socket's data path.
Encryption wraps them (see encryption.py) without changing their interface:
``read(n)`` returns exactly n bytes, ``write(data)`` sends all of it.
"""

import socket
import logging

from ..errors import TransportError

logger = logging.getLogger(__name__)


class SocketReader:
    """Blocking exact-size reads from a socket"""

    def __init__(self, sock: socket.socket):
        self.socket = sock

    def read(self, size: int) -> bytes:
        data = bytearray()
        while len(data) < size:
            try:
                chunk = self.socket.recv(size - len(data))
            except OSError as e:
                raise TransportError(f"Receive failed: {e}") from e
            if not chunk:
                raise TransportError("Connection closed by remote")
            data.extend(chunk)
        return bytes(data)


class SocketWriter:
    """Writes whole buffers to a socket"""

    def __init__(self, sock: socket.socket):
        self.socket = sock

    def write(self, data: bytes) -> None:
        try:
            self.socket.sendall(data)
        except OSError as e:
            raise TransportError(f"Send failed: {e}") from e
