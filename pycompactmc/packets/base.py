#!/usr/bin/env python3
"""
Base classes for packet definitions

Outbound packets are plain values: they know their packet ID and write their
body. Inbound packets are built from a body buffer by ``from_reader`` and then
``handle`` is called once with the session that received them.
"""

import struct
from abc import ABC, abstractmethod
from typing import ClassVar, TYPE_CHECKING

from ..errors import PacketDecodeError, MalformedVarInt
from ..protocol.codec import decode_varint, encode_varint, encode_string

if TYPE_CHECKING:
    from ..session.session import Session


class PacketReader:
    """Reads protocol types from a packet body"""

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    def _take(self, count: int) -> bytes:
        if count < 0 or self.pos + count > len(self.data):
            raise PacketDecodeError(
                f"Need {count} bytes at offset {self.pos}, only {self.bytes_left()} left"
            )
        data = self.data[self.pos:self.pos + count]
        self.pos += count
        return data

    def read_byte(self) -> int:
        return self._take(1)[0]

    def read_bool(self) -> bool:
        return self.read_byte() != 0

    def read_varint(self) -> int:
        try:
            value, size = decode_varint(self.data, self.pos)
        except MalformedVarInt as e:
            raise PacketDecodeError(f"Bad VarInt at offset {self.pos}: {e}") from e
        self.pos += size
        return value

    def read_unsigned_short(self) -> int:
        return struct.unpack('>H', self._take(2))[0]

    def read_int(self) -> int:
        return struct.unpack('>i', self._take(4))[0]

    def read_long(self) -> int:
        return struct.unpack('>q', self._take(8))[0]

    def read_string(self) -> str:
        """Read a VarInt length-prefixed UTF-8 string"""
        length = self.read_varint()
        raw = self._take(length)
        try:
            return raw.decode('utf-8')
        except UnicodeDecodeError as e:
            raise PacketDecodeError(f"String is not valid UTF-8: {e}") from e

    def read_byte_array(self) -> bytes:
        """Read a VarInt length-prefixed byte array"""
        return self._take(self.read_varint())

    def read_bytes(self, count: int) -> bytes:
        return self._take(count)

    def read_remaining(self) -> bytes:
        data = self.data[self.pos:]
        self.pos = len(self.data)
        return data

    def bytes_left(self) -> int:
        return len(self.data) - self.pos

    def has_data(self) -> bool:
        return self.pos < len(self.data)


class PacketWriter:
    """Builds a packet body"""

    def __init__(self):
        self.buffer = bytearray()

    def write_byte(self, value: int) -> 'PacketWriter':
        self.buffer.append(value & 0xFF)
        return self

    def write_bool(self, value: bool) -> 'PacketWriter':
        return self.write_byte(1 if value else 0)

    def write_varint(self, value: int) -> 'PacketWriter':
        self.buffer.extend(encode_varint(value))
        return self

    def write_unsigned_short(self, value: int) -> 'PacketWriter':
        self.buffer.extend(struct.pack('>H', value & 0xFFFF))
        return self

    def write_int(self, value: int) -> 'PacketWriter':
        self.buffer.extend(struct.pack('>i', value))
        return self

    def write_long(self, value: int) -> 'PacketWriter':
        self.buffer.extend(struct.pack('>q', value))
        return self

    def write_string(self, value: str) -> 'PacketWriter':
        self.buffer.extend(encode_string(value))
        return self

    def write_byte_array(self, data: bytes) -> 'PacketWriter':
        self.buffer.extend(encode_varint(len(data)))
        self.buffer.extend(data)
        return self

    def write_bytes(self, data: bytes) -> 'PacketWriter':
        self.buffer.extend(data)
        return self

    def to_bytes(self) -> bytes:
        return bytes(self.buffer)


class OutboundPacket(ABC):
    """Packet sent from client to server"""

    packet_id: ClassVar[int]

    @abstractmethod
    def write(self, writer: PacketWriter) -> None:
        """Write the packet body (without ID)"""

    def to_bytes(self) -> bytes:
        writer = PacketWriter()
        self.write(writer)
        return writer.to_bytes()


class InboundPacket(ABC):
    """Packet received from the server"""

    packet_id: ClassVar[int]

    @classmethod
    @abstractmethod
    def from_reader(cls, reader: PacketReader) -> 'InboundPacket':
        """Decode the packet body"""

    @abstractmethod
    def handle(self, session: 'Session') -> None:
        """Act on the packet; runs on the session's reader thread"""
