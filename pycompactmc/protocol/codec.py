#!/usr/bin/env python3
"""
Framing codec for the Minecraft wire protocol

Encodes and decodes the small self-describing units the protocol is built on:

- VarInt: 7 bits per byte, least significant group first, 0x80 marks
  continuation, never longer than 5 bytes
- String: VarInt byte length followed by UTF-8 bytes
- Frame: VarInt length prefix around a packet ID and body, optionally
  zlib-compressed once the server has sent a compression threshold

Stream functions accept any object with a ``read(n)`` method.
"""

import struct
import zlib
import logging
from typing import Tuple

from ..errors import (
    TransportError, MalformedVarInt, CompressionError, PacketTooLargeError
)

logger = logging.getLogger(__name__)

VARINT_MAX_BYTES = 5
MAX_PACKET_SIZE = 2097152  # 2 MiB, vanilla server limit
COMPRESSION_DISABLED = -1


# =============================================================================
# VarInt
# =============================================================================

def encode_varint(value: int) -> bytes:
    """Encode a 32-bit integer (signed or unsigned) as a VarInt"""
    if value < -(1 << 31) or value >= (1 << 32):
        raise ValueError(f"VarInt out of 32-bit range: {value}")

    value &= 0xFFFFFFFF
    result = bytearray()
    while True:
        if value & ~0x7F == 0:
            result.append(value)
            return bytes(result)
        result.append((value & 0x7F) | 0x80)
        value >>= 7


def _to_signed(value: int) -> int:
    if value & 0x80000000:
        return value - (1 << 32)
    return value


def decode_varint(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """Decode a VarInt from a buffer

    Returns:
        (value, bytes_consumed), value as a signed 32-bit integer
    """
    value = 0
    length = 0
    while True:
        if length >= VARINT_MAX_BYTES:
            raise MalformedVarInt("VarInt is longer than 5 bytes")
        if offset + length >= len(data):
            raise MalformedVarInt("Buffer ended inside a VarInt")
        byte = data[offset + length]
        value |= (byte & 0x7F) << (7 * length)
        length += 1
        if not byte & 0x80:
            break
    return _to_signed(value & 0xFFFFFFFF), length


def read_varint(stream) -> Tuple[int, int]:
    """Read a VarInt from a stream

    Returns:
        (value, bytes_consumed)
    """
    value = 0
    length = 0
    while True:
        if length >= VARINT_MAX_BYTES:
            raise MalformedVarInt("Incoming VarInt was too big")
        byte = read_exact(stream, 1)[0]
        value |= (byte & 0x7F) << (7 * length)
        length += 1
        if not byte & 0x80:
            break
    return _to_signed(value & 0xFFFFFFFF), length


# =============================================================================
# Strings and fixed-width values
# =============================================================================

def encode_string(value: str) -> bytes:
    data = value.encode('utf-8')
    return encode_varint(len(data)) + data


def decode_string(data: bytes, offset: int = 0) -> Tuple[str, int]:
    """Decode a length-prefixed UTF-8 string

    Returns:
        (string, bytes_consumed) where bytes_consumed includes the prefix
    """
    length, prefix = decode_varint(data, offset)
    start = offset + prefix
    if length < 0 or start + length > len(data):
        raise ValueError(f"String length {length} exceeds buffer")
    return data[start:start + length].decode('utf-8'), prefix + length


def encode_unsigned_short(value: int) -> bytes:
    return struct.pack('>H', value & 0xFFFF)


def encode_long(value: int) -> bytes:
    return struct.pack('>q', value)


def read_exact(stream, size: int) -> bytes:
    """Read exactly ``size`` bytes or raise TransportError"""
    if size == 0:
        return b''
    try:
        data = stream.read(size)
    except (OSError, ValueError) as e:
        raise TransportError(f"Stream read failed: {e}") from e
    if data is None or len(data) < size:
        raise TransportError("Stream closed while reading")
    return data


# =============================================================================
# Compression
# =============================================================================

def zlib_compress(data: bytes) -> bytes:
    return zlib.compress(data)


def zlib_uncompress(data: bytes, expected_length: int) -> bytes:
    """Inflate ``data`` and require exactly ``expected_length`` bytes out"""
    decompressor = zlib.decompressobj()
    try:
        # Cap output one past the expected size so an oversized payload is
        # detected without inflating all of it
        result = decompressor.decompress(data, expected_length + 1)
    except zlib.error as e:
        raise CompressionError(f"Invalid zlib data: {e}") from e

    if len(result) > expected_length:
        raise CompressionError(f"Inflated data exceeds declared length {expected_length}")
    if len(result) < expected_length:
        raise CompressionError(f"Inflated {len(result)} bytes, expected {expected_length}")
    return result


# =============================================================================
# Frames
# =============================================================================

def encode_frame(packet_id: int, body: bytes, compression_threshold: int = COMPRESSION_DISABLED) -> bytes:
    """Build a complete length-prefixed frame

    Args:
        packet_id: Packet ID for the current state
        body: Serialized packet body
        compression_threshold: Negative for the uncompressed layout, otherwise
            ID + body of at least this many bytes is zlib-compressed
    """
    data = encode_varint(packet_id) + body

    if compression_threshold < 0:
        return encode_varint(len(data)) + data

    if len(data) >= compression_threshold:
        payload = encode_varint(len(data)) + zlib_compress(data)
    else:
        # Sent below the threshold: data length 0 means "not compressed"
        payload = encode_varint(0) + data
    return encode_varint(len(payload)) + payload


def _check_length(length: int, max_size: int) -> None:
    if length < 0 or length > max_size:
        raise PacketTooLargeError(f"Invalid frame length {length} (limit {max_size})")


def read_frame(stream, compression_threshold: int = COMPRESSION_DISABLED,
               max_size: int = MAX_PACKET_SIZE) -> Tuple[int, bytes]:
    """Read one frame from a stream

    Returns:
        (packet_id, body) with ID and length prefixes stripped
    """
    total_length, _ = read_varint(stream)
    _check_length(total_length, max_size)

    if compression_threshold < 0:
        packet_id, id_size = read_varint(stream)
        if id_size > total_length:
            raise PacketTooLargeError(f"Packet ID overruns frame of {total_length} bytes")
        return packet_id, read_exact(stream, total_length - id_size)

    data_length, data_length_size = read_varint(stream)
    if data_length_size > total_length:
        raise PacketTooLargeError(f"Data length overruns frame of {total_length} bytes")
    remaining = total_length - data_length_size

    if data_length == 0:
        packet_id, id_size = read_varint(stream)
        if id_size > remaining:
            raise PacketTooLargeError(f"Packet ID overruns frame of {total_length} bytes")
        return packet_id, read_exact(stream, remaining - id_size)

    _check_length(data_length, max_size)
    compressed = read_exact(stream, remaining)
    data = zlib_uncompress(compressed, data_length)
    packet_id, id_size = decode_varint(data)
    return packet_id, data[id_size:]


def _decode_prefix(frame: bytes, what: str) -> Tuple[int, int]:
    """Decode a VarInt that must end inside ``frame``"""
    try:
        return decode_varint(frame)
    except MalformedVarInt as e:
        if len(frame) < VARINT_MAX_BYTES:
            raise PacketTooLargeError(f"{what} overruns frame of {len(frame)} bytes") from e
        raise


def decode_frame(data: bytes, compression_threshold: int = COMPRESSION_DISABLED) -> Tuple[int, bytes, int]:
    """Decode one frame from the start of a buffer

    Returns:
        (packet_id, body, bytes_consumed)
    """
    total_length, prefix = decode_varint(data)
    end = prefix + total_length
    if total_length < 0 or end > len(data):
        raise PacketTooLargeError(f"Frame of {total_length} bytes exceeds buffer")

    frame = data[prefix:end]

    if compression_threshold < 0:
        packet_id, id_size = _decode_prefix(frame, "Packet ID")
        return packet_id, frame[id_size:], end

    data_length, data_length_size = _decode_prefix(frame, "Data length")
    payload = frame[data_length_size:]
    if data_length == 0:
        packet_id, id_size = _decode_prefix(payload, "Packet ID")
        return packet_id, payload[id_size:], end

    inflated = zlib_uncompress(payload, data_length)
    packet_id, id_size = decode_varint(inflated)
    return packet_id, inflated[id_size:], end
