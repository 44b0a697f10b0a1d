#!/usr/bin/env python3
"""
LOGIN state packets (server to client)

The login sequence ends either with Login Success, which moves the session to
PLAY, or with a Disconnect carrying the reason. Set Compression may arrive
before Login Success; every frame after it uses the compressed layout.
"""

import logging
from dataclasses import dataclass

from ...protocol.states import State
from ...events import EventType
from ..base import InboundPacket, PacketReader
from ..registry import inbound_packet

logger = logging.getLogger(__name__)


@inbound_packet(State.LOGIN, 0x00)
@dataclass
class LoginDisconnectPacket(InboundPacket):
    packet_id = 0x00

    reason: str

    @classmethod
    def from_reader(cls, reader: PacketReader) -> 'LoginDisconnectPacket':
        return cls(reader.read_string())

    def handle(self, session) -> None:
        session.handle_disconnect(self.reason)


@inbound_packet(State.LOGIN, 0x01)
@dataclass
class EncryptionRequestPacket(InboundPacket):
    """Sent by online-mode servers; key negotiation is not implemented"""
    packet_id = 0x01

    server_id: str
    public_key: bytes
    verify_token: bytes

    @classmethod
    def from_reader(cls, reader: PacketReader) -> 'EncryptionRequestPacket':
        server_id = reader.read_string()
        public_key = reader.read_byte_array()
        verify_token = reader.read_byte_array()
        return cls(server_id, public_key, verify_token)

    def handle(self, session) -> None:
        session.handle_disconnect("Protocol Encryption is not supported!")


@inbound_packet(State.LOGIN, 0x02)
@dataclass
class LoginSuccessPacket(InboundPacket):
    packet_id = 0x02

    uuid: str
    username: str

    @classmethod
    def from_reader(cls, reader: PacketReader) -> 'LoginSuccessPacket':
        uuid = reader.read_string()
        username = reader.read_string()
        return cls(uuid, username)

    def handle(self, session) -> None:
        logger.info(f"Successfully connected to {session.host}:{session.port}")
        logger.info(f"Username: {self.username} UUID: {self.uuid}")
        session.state = State.PLAY
        session.events.emit(EventType.LOGIN_SUCCESS, {'uuid': self.uuid, 'username': self.username})


@inbound_packet(State.LOGIN, 0x03)
@dataclass
class SetCompressionPacket(InboundPacket):
    packet_id = 0x03

    threshold: int

    @classmethod
    def from_reader(cls, reader: PacketReader) -> 'SetCompressionPacket':
        return cls(reader.read_varint())

    def handle(self, session) -> None:
        # Set directly on the reader thread: the very next frame it reads
        # must already use the new layout
        session.compression_threshold = self.threshold


__all__ = [
    'LoginDisconnectPacket', 'EncryptionRequestPacket',
    'LoginSuccessPacket', 'SetCompressionPacket',
]
