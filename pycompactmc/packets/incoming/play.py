"""
PLAY state packets (server to client)

Only what keeps a client connected: keep-alive echo and disconnect.
"""

from dataclasses import dataclass

from ...protocol.states import State
from ...events import EventType
from ..base import InboundPacket, PacketReader
from ..outgoing import KeepAlivePacket
from ..registry import inbound_packet


@inbound_packet(State.PLAY, 0x1F)
@dataclass
class KeepAliveRequestPacket(InboundPacket):
    packet_id = 0x1F

    keep_alive_id: int

    @classmethod
    def from_reader(cls, reader: PacketReader) -> 'KeepAliveRequestPacket':
        return cls(reader.read_varint())

    def handle(self, session) -> None:
        session.send_packet(KeepAlivePacket(self.keep_alive_id))
        session.events.emit(EventType.KEEP_ALIVE, self.keep_alive_id)


@inbound_packet(State.PLAY, 0x1A)
@dataclass
class PlayDisconnectPacket(InboundPacket):
    packet_id = 0x1A

    reason: str

    @classmethod
    def from_reader(cls, reader: PacketReader) -> 'PlayDisconnectPacket':
        return cls(reader.read_string())

    def handle(self, session) -> None:
        session.handle_disconnect(self.reason)
