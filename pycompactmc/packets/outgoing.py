"""
Client to server packets (protocol 340)
"""

from dataclasses import dataclass

from ..protocol.states import State
from .base import OutboundPacket, PacketWriter


@dataclass
class HandshakePacket(OutboundPacket):
    """First packet on every connection; selects the next state"""
    packet_id = 0x00

    protocol_version: int
    host: str
    port: int
    next_state: State

    def write(self, writer: PacketWriter) -> None:
        if self.next_state.wire_id is None:
            raise ValueError(f"Cannot hand off to state {self.next_state.name}")
        writer.write_varint(self.protocol_version)
        writer.write_string(self.host)
        writer.write_unsigned_short(self.port)
        writer.write_varint(self.next_state.wire_id)


@dataclass
class LoginStartPacket(OutboundPacket):
    packet_id = 0x00

    username: str

    def write(self, writer: PacketWriter) -> None:
        writer.write_string(self.username)


@dataclass
class KeepAlivePacket(OutboundPacket):
    """Echo of a server keep-alive"""
    packet_id = 0x0B

    keep_alive_id: int

    def write(self, writer: PacketWriter) -> None:
        writer.write_varint(self.keep_alive_id)


@dataclass
class StatusRequestPacket(OutboundPacket):
    packet_id = 0x00

    def write(self, writer: PacketWriter) -> None:
        pass


@dataclass
class PingPacket(OutboundPacket):
    packet_id = 0x01

    payload: int

    def write(self, writer: PacketWriter) -> None:
        writer.write_long(self.payload)
