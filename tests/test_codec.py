"""
Tests for VarInt, string and frame encoding
"""

import io
import random
import zlib

import pytest

from pycompactmc.errors import (
    TransportError, MalformedVarInt, CompressionError, PacketTooLargeError, FramingError
)
from pycompactmc.protocol.encryption import CipherReader, CipherWriter, create_cipher
from pycompactmc.protocol.codec import (
    encode_varint, decode_varint, read_varint, encode_string, decode_string,
    encode_frame, read_frame, decode_frame, zlib_uncompress, read_exact,
)


class TestVarInt:
    """Test VarInt encoding"""

    @pytest.mark.parametrize("value,encoded", [
        (0, b'\x00'),
        (1, b'\x01'),
        (127, b'\x7f'),
        (128, b'\x80\x01'),
        (255, b'\xff\x01'),
        (25565, b'\xdd\xc7\x01'),
        (2097151, b'\xff\xff\x7f'),
        (2147483647, b'\xff\xff\xff\xff\x07'),
        (-1, b'\xff\xff\xff\xff\x0f'),
        (-2147483648, b'\x80\x80\x80\x80\x08'),
    ])
    def test_known_values(self, value, encoded):
        assert encode_varint(value) == encoded
        assert decode_varint(encoded) == (value, len(encoded))
        assert read_varint(io.BytesIO(encoded)) == (value, len(encoded))

    def test_unsigned_input_decodes_signed(self):
        data = encode_varint(0xFFFFFFFF)
        assert data == b'\xff\xff\xff\xff\x0f'
        assert decode_varint(data)[0] == -1

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            encode_varint(1 << 32)
        with pytest.raises(ValueError):
            encode_varint(-(1 << 31) - 1)

    def test_sixth_byte_rejected(self):
        data = b'\x80\x80\x80\x80\x80\x01'
        with pytest.raises(MalformedVarInt):
            decode_varint(data)
        with pytest.raises(MalformedVarInt):
            read_varint(io.BytesIO(data))

    def test_malformed_varint_is_framing_error(self):
        assert issubclass(MalformedVarInt, FramingError)

    def test_truncated_buffer(self):
        with pytest.raises(MalformedVarInt):
            decode_varint(b'\x80\x80')

    def test_truncated_stream(self):
        with pytest.raises(TransportError):
            read_varint(io.BytesIO(b'\x80'))

    def test_decode_at_offset(self):
        assert decode_varint(b'\xaa\x80\x01', 1) == (128, 2)

    def test_random_round_trip(self):
        rng = random.Random(340)
        values = [rng.randrange(-(1 << 31), 1 << 31) for _ in range(5000)]
        for value in values:
            encoded = encode_varint(value)
            assert 1 <= len(encoded) <= 5
            assert decode_varint(encoded) == (value, len(encoded))


class TestStrings:
    """Test length-prefixed strings"""

    def test_ascii(self):
        assert encode_string("Steve") == b'\x05Steve'
        assert decode_string(b'\x05Steve') == ("Steve", 6)

    def test_length_counts_bytes(self):
        encoded = encode_string("é")
        assert encoded == b'\x02\xc3\xa9'
        assert decode_string(encoded) == ("é", 3)

    def test_empty(self):
        assert encode_string("") == b'\x00'

    def test_non_bmp(self):
        text = "gg \U0001F600\U0001F525"
        encoded = encode_string(text)
        assert encoded[0] == 3 + 4 + 4
        assert decode_string(encoded) == (text, len(encoded))

    def test_random_round_trip(self):
        rng = random.Random(25565)
        alphabet = "abcXYZ09 _\u00e9\u4e2d\U0001F600\U00010348"
        for _ in range(500):
            text = "".join(rng.choice(alphabet) for _ in range(rng.randrange(0, 40)))
            encoded = encode_string(text)
            assert decode_string(encoded) == (text, len(encoded))

    def test_length_past_buffer(self):
        with pytest.raises(ValueError):
            decode_string(b'\x05abc')


class TestReadExact:

    def test_short_read(self):
        with pytest.raises(TransportError):
            read_exact(io.BytesIO(b'ab'), 3)

    def test_stream_error_wrapped(self):
        class Broken:
            def read(self, size):
                raise OSError("reset")

        with pytest.raises(TransportError):
            read_exact(Broken(), 1)

    def test_zero(self):
        assert read_exact(io.BytesIO(b''), 0) == b''


class TestUncompressedFrames:
    """Test the frame layout before compression is enabled"""

    def test_encode(self):
        assert encode_frame(0x1F, b'\x2a') == b'\x02\x1f\x2a'

    def test_read(self):
        stream = io.BytesIO(b'\x02\x1f\x2a\x01\x00')
        assert read_frame(stream) == (0x1F, b'\x2a')
        assert read_frame(stream) == (0x00, b'')

    def test_decode_reports_consumed(self):
        assert decode_frame(b'\x02\x1f\x2a\xff') == (0x1F, b'\x2a', 3)

    def test_decode_zero_length_frame(self):
        with pytest.raises(PacketTooLargeError):
            decode_frame(b'\x00\x05')

    def test_decode_id_overruns_frame(self):
        with pytest.raises(PacketTooLargeError):
            decode_frame(b'\x01\x80\x01')

    def test_truncated_body(self):
        with pytest.raises(TransportError):
            read_frame(io.BytesIO(b'\x05\x1f\x2a'))

    def test_negative_length(self):
        with pytest.raises(PacketTooLargeError):
            read_frame(io.BytesIO(encode_varint(-1)))

    def test_length_over_limit(self):
        with pytest.raises(PacketTooLargeError):
            read_frame(io.BytesIO(encode_varint(100) + b'\x00' * 100), max_size=50)


class TestCompressedFrames:
    """Test the frame layout after Set Compression"""

    def test_below_threshold_sent_literal(self):
        assert encode_frame(0x0B, b'\x2a', 256) == b'\x03\x00\x0b\x2a'

    def test_below_threshold_read(self):
        assert read_frame(io.BytesIO(b'\x03\x00\x0b\x2a'), 256) == (0x0B, b'\x2a')

    def test_above_threshold_compressed(self):
        body = b'x' * 300
        frame = encode_frame(0x20, body, 256)

        length, prefix = decode_varint(frame)
        assert length == len(frame) - prefix
        data_length, size = decode_varint(frame, prefix)
        assert data_length == 301
        assert zlib.decompress(frame[prefix + size:]) == b'\x20' + body

        assert read_frame(io.BytesIO(frame), 256) == (0x20, body)

    def test_exactly_threshold_compressed(self):
        # ID byte plus 9 body bytes reaches the threshold of 10
        frame = encode_frame(0x01, b'a' * 9, 10)
        data_length, _ = decode_varint(frame, 1)
        assert data_length == 10
        assert read_frame(io.BytesIO(frame), 10) == (0x01, b'a' * 9)

    def test_one_below_threshold_literal(self):
        frame = encode_frame(0x01, b'a' * 8, 10)
        assert frame[1] == 0

    def test_threshold_zero_compresses_everything(self):
        frame = encode_frame(0x00, b'', 0)
        assert decode_varint(frame, 1)[0] == 1
        assert read_frame(io.BytesIO(frame), 0) == (0x00, b'')

    def test_size_mismatch(self):
        compressed = zlib.compress(b'\x20' + b'y' * 50)
        payload = encode_varint(100) + compressed
        frame = encode_varint(len(payload)) + payload
        with pytest.raises(CompressionError):
            read_frame(io.BytesIO(frame), 0)

    def test_oversized_inflate(self):
        with pytest.raises(CompressionError):
            zlib_uncompress(zlib.compress(b'z' * 64), 10)

    def test_corrupt_zlib(self):
        with pytest.raises(CompressionError):
            zlib_uncompress(b'not zlib at all', 10)

    def test_decode_empty_compressed_frame(self):
        with pytest.raises(PacketTooLargeError):
            decode_frame(b'\x00\x00', 0)
        with pytest.raises(PacketTooLargeError):
            decode_frame(b'\x01\x00\x05', 0)

    def test_decode_compressed(self):
        frame = encode_frame(0x05, b'q' * 40, 16)
        packet_id, body, consumed = decode_frame(frame + b'\x00', 16)
        assert (packet_id, body, consumed) == (0x05, b'q' * 40, len(frame))


class _Buffer:
    """Minimal write/read stream"""

    def __init__(self):
        self.data = bytearray()

    def write(self, data):
        self.data.extend(data)

    def read(self, size):
        chunk = bytes(self.data[:size])
        del self.data[:size]
        return chunk


class TestCipherStreams:
    """Test AES/CFB8 stream wrappers"""

    KEY = bytes(range(16))

    def test_pass_through_without_key(self):
        buffer = _Buffer()
        CipherWriter(buffer).write(b'\x02\x1f\x2a')
        assert bytes(buffer.data) == b'\x02\x1f\x2a'
        assert not CipherReader(buffer).encrypted

    def test_frames_survive_encryption(self):
        buffer = _Buffer()
        writer = CipherWriter(buffer, self.KEY)
        writer.write(encode_frame(0x1F, b'\x2a'))
        writer.write(encode_frame(0x0B, b'x' * 300, 256))
        assert bytes(buffer.data[:3]) != b'\x02\x1f\x2a'

        reader = CipherReader(buffer, self.KEY)
        assert reader.encrypted
        assert read_frame(reader) == (0x1F, b'\x2a')
        assert read_frame(reader, 256) == (0x0B, b'x' * 300)

    def test_key_and_iv_are_the_shared_secret(self):
        encryptor = create_cipher(self.KEY).encryptor()
        buffer = _Buffer()
        CipherWriter(buffer, self.KEY).write(b'hello')
        assert bytes(buffer.data) == encryptor.update(b'hello')

    def test_enable_mid_stream(self):
        buffer = _Buffer()
        writer = CipherWriter(buffer)
        writer.write(b'\x01\x00')
        writer.set_key(self.KEY)
        writer.write(b'\x01\x00')

        reader = CipherReader(buffer)
        assert read_frame(reader) == (0x00, b'')
        reader.set_key(self.KEY)
        assert read_frame(reader) == (0x00, b'')

    @pytest.mark.parametrize("key", [b'', b'x' * 15, b'x' * 32])
    def test_bad_key_length(self, key):
        with pytest.raises(ValueError):
            create_cipher(key)

    def test_key_must_be_bytes(self):
        with pytest.raises(TypeError):
            create_cipher("0123456789abcdef")
