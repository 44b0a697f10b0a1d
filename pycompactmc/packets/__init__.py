"""
Packet definitions and the inbound packet registry
"""

from .base import PacketReader, PacketWriter, InboundPacket, OutboundPacket
from .registry import (
    PacketRegistry, DEFAULT_REGISTRY, register_inbound_packet, inbound_packet
)
from .outgoing import (
    HandshakePacket, LoginStartPacket, KeepAlivePacket,
    StatusRequestPacket, PingPacket,
)
from .incoming import (
    LoginDisconnectPacket, EncryptionRequestPacket,
    LoginSuccessPacket, SetCompressionPacket,
    KeepAliveRequestPacket, PlayDisconnectPacket,
    StatusResponsePacket, PongPacket,
)

__all__ = [
    'PacketReader', 'PacketWriter', 'InboundPacket', 'OutboundPacket',
    'PacketRegistry', 'DEFAULT_REGISTRY', 'register_inbound_packet', 'inbound_packet',
    'HandshakePacket', 'LoginStartPacket', 'KeepAlivePacket',
    'StatusRequestPacket', 'PingPacket',
    'LoginDisconnectPacket', 'EncryptionRequestPacket',
    'LoginSuccessPacket', 'SetCompressionPacket',
    'KeepAliveRequestPacket', 'PlayDisconnectPacket',
    'StatusResponsePacket', 'PongPacket',
]
