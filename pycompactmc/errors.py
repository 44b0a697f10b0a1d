"""
Error types for pycompactmc

Transport and framing errors are fatal to a session: the stream cannot be
resynchronized once either happens. Decode and handler errors are reported
and the session keeps reading.
"""

from enum import Enum
from typing import Optional


class ErrorCategory(Enum):
    """Error categories"""
    TRANSPORT = "transport"
    FRAMING = "framing"
    DECODE = "decode"
    CONNECT = "connect"

    @property
    def is_fatal(self) -> bool:
        return self in (ErrorCategory.TRANSPORT, ErrorCategory.FRAMING, ErrorCategory.CONNECT)


class ProtocolClientError(Exception):
    """Base class for all pycompactmc errors"""
    category: Optional[ErrorCategory] = None


class TransportError(ProtocolClientError):
    """Socket or stream I/O failed, or the peer closed the connection"""
    category = ErrorCategory.TRANSPORT


class ConnectError(TransportError):
    """The TCP connection to the server could not be opened"""
    category = ErrorCategory.CONNECT


class FramingError(ProtocolClientError):
    """A frame could not be read from the stream"""
    category = ErrorCategory.FRAMING


class MalformedVarInt(FramingError):
    """VarInt ran past its 5 byte limit"""


class CompressionError(FramingError):
    """Compressed payload did not inflate to its declared size"""


class PacketTooLargeError(FramingError):
    """Declared frame length is negative or over the configured limit"""


class PacketDecodeError(ProtocolClientError):
    """Packet body does not match the packet's layout"""
    category = ErrorCategory.DECODE


class SessionClosedError(ProtocolClientError):
    """Operation attempted on a session that has already closed"""
    category = ErrorCategory.TRANSPORT
