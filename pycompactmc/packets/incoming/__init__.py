"""
Built-in inbound packets

Importing this package registers every built-in packet in the default registry.
"""

from .login import (
    LoginDisconnectPacket, EncryptionRequestPacket,
    LoginSuccessPacket, SetCompressionPacket,
)
from .play import KeepAliveRequestPacket, PlayDisconnectPacket
from .status import StatusResponsePacket, PongPacket

__all__ = [
    'LoginDisconnectPacket', 'EncryptionRequestPacket',
    'LoginSuccessPacket', 'SetCompressionPacket',
    'KeepAliveRequestPacket', 'PlayDisconnectPacket',
    'StatusResponsePacket', 'PongPacket',
]
