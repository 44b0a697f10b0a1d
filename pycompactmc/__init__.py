"""
pycompactmc - A compact Python client for the Minecraft Java-edition protocol

Does the bare minimum to stay connected: handshake, login, keep-alive echo and
disconnect handling. Everything else is added by registering packet types.

Usage:
    from pycompactmc import new_session, EventType

    session = new_session("Steve", "localhost", 25565)
    session.events.subscribe(EventType.LOGIN_SUCCESS, lambda info: print(info))
    session.login()
    ...
    session.close()

Custom packets:
    from pycompactmc import InboundPacket, State, register_inbound_packet

    class ChatMessage(InboundPacket):
        packet_id = 0x0F

        def __init__(self, message):
            self.message = message

        @classmethod
        def from_reader(cls, reader):
            return cls(reader.read_string())

        def handle(self, session):
            print(self.message)

    register_inbound_packet(ChatMessage, ChatMessage.packet_id, State.PLAY)

Register packet types before creating sessions.
"""

__version__ = "1.0.0"
__author__ = "pycompactmc Contributors"

from .config import ClientConfig, ConfigValidationError, PROTOCOL_VERSION
from .errors import (
    ErrorCategory, ProtocolClientError, TransportError, ConnectError, FramingError,
    MalformedVarInt, CompressionError, PacketTooLargeError,
    PacketDecodeError, SessionClosedError,
)
from .events import EventType, EventManager, DisconnectEvent
from .protocol import State
from .packets import (
    PacketReader, PacketWriter, InboundPacket, OutboundPacket,
    PacketRegistry, DEFAULT_REGISTRY, register_inbound_packet, inbound_packet,
    HandshakePacket, LoginStartPacket, KeepAlivePacket,
)
from .session import Session, new_session
from .utils import configure_logging, chat_to_text

__all__ = [
    # Session
    'Session', 'new_session',

    # Configuration
    'ClientConfig', 'ConfigValidationError', 'PROTOCOL_VERSION',

    # Errors
    'ErrorCategory', 'ProtocolClientError', 'TransportError', 'ConnectError', 'FramingError',
    'MalformedVarInt', 'CompressionError', 'PacketTooLargeError',
    'PacketDecodeError', 'SessionClosedError',

    # Events
    'EventType', 'EventManager', 'DisconnectEvent',

    # Packets
    'State',
    'PacketReader', 'PacketWriter', 'InboundPacket', 'OutboundPacket',
    'PacketRegistry', 'DEFAULT_REGISTRY', 'register_inbound_packet', 'inbound_packet',
    'HandshakePacket', 'LoginStartPacket', 'KeepAlivePacket',

    # Utilities
    'configure_logging', 'chat_to_text',
]
