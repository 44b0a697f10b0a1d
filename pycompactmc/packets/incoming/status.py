"""
STATUS state packets (server to client)

Server list ping: the response carries the server's JSON status document,
the pong echoes the ping payload and ends the exchange.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict

from ...errors import PacketDecodeError
from ...protocol.states import State
from ...events import EventType
from ..base import InboundPacket, PacketReader
from ..registry import inbound_packet

logger = logging.getLogger(__name__)


@inbound_packet(State.STATUS, 0x00)
@dataclass
class StatusResponsePacket(InboundPacket):
    packet_id = 0x00

    status: Dict[str, Any]

    @classmethod
    def from_reader(cls, reader: PacketReader) -> 'StatusResponsePacket':
        raw = reader.read_string()
        try:
            status = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PacketDecodeError(f"Status response is not JSON: {e}") from e
        if not isinstance(status, dict):
            raise PacketDecodeError("Status response is not a JSON object")
        return cls(status)

    def handle(self, session) -> None:
        version = self.status.get('version', {})
        players = self.status.get('players', {})
        logger.info(
            f"Server status: {version.get('name', '?')} "
            f"({players.get('online', '?')}/{players.get('max', '?')} players)"
        )
        session.server_status = self.status
        session.events.emit(EventType.STATUS_RECEIVED, self.status)


@inbound_packet(State.STATUS, 0x01)
@dataclass
class PongPacket(InboundPacket):
    packet_id = 0x01

    payload: int

    @classmethod
    def from_reader(cls, reader: PacketReader) -> 'PongPacket':
        return cls(reader.read_long())

    def handle(self, session) -> None:
        session.events.emit(EventType.PONG, self.payload)
        # The server closes the connection after a pong
        session.close()
