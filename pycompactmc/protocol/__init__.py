"""
Protocol layer - wire codec, protocol states and socket streams
"""

from .codec import (
    encode_varint, decode_varint, read_varint,
    encode_string, decode_string,
    encode_frame, decode_frame, read_frame,
    COMPRESSION_DISABLED, MAX_PACKET_SIZE,
)
from .states import State, PACKET_STATES
from .streams import SocketReader, SocketWriter
from .encryption import CipherReader, CipherWriter, create_cipher

__all__ = [
    'encode_varint', 'decode_varint', 'read_varint',
    'encode_string', 'decode_string',
    'encode_frame', 'decode_frame', 'read_frame',
    'COMPRESSION_DISABLED', 'MAX_PACKET_SIZE',
    'State', 'PACKET_STATES',
    'SocketReader', 'SocketWriter',
    'CipherReader', 'CipherWriter', 'create_cipher',
]
