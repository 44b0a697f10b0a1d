"""
Tests for packet bodies
"""

import json

import pytest

from pycompactmc.errors import PacketDecodeError
from pycompactmc.packets import (
    PacketReader, PacketWriter,
    HandshakePacket, LoginStartPacket, KeepAlivePacket, StatusRequestPacket, PingPacket,
    LoginDisconnectPacket, EncryptionRequestPacket, LoginSuccessPacket, SetCompressionPacket,
    KeepAliveRequestPacket, PlayDisconnectPacket, StatusResponsePacket, PongPacket,
)
from pycompactmc.protocol.states import State


class TestPacketReader:
    """Test reading protocol types"""

    def test_mixed_fields(self):
        data = (PacketWriter()
                .write_varint(300)
                .write_string("hi")
                .write_unsigned_short(25565)
                .write_long(-2)
                .write_bool(True)
                .write_byte_array(b'\x01\x02')
                .to_bytes())
        reader = PacketReader(data)

        assert reader.read_varint() == 300
        assert reader.read_string() == "hi"
        assert reader.read_unsigned_short() == 25565
        assert reader.read_long() == -2
        assert reader.read_bool() is True
        assert reader.read_byte_array() == b'\x01\x02'
        assert not reader.has_data()

    def test_read_past_end(self):
        reader = PacketReader(b'\x01')
        reader.read_byte()
        with pytest.raises(PacketDecodeError):
            reader.read_byte()

    def test_string_longer_than_body(self):
        with pytest.raises(PacketDecodeError):
            PacketReader(b'\x05ab').read_string()

    def test_bad_varint(self):
        with pytest.raises(PacketDecodeError):
            PacketReader(b'\x80\x80\x80\x80\x80\x01').read_varint()

    def test_invalid_utf8(self):
        with pytest.raises(PacketDecodeError):
            PacketReader(b'\x01\xff').read_string()

    def test_remaining(self):
        reader = PacketReader(b'\x01\x02\x03')
        reader.read_byte()
        assert reader.bytes_left() == 2
        assert reader.read_remaining() == b'\x02\x03'
        assert reader.bytes_left() == 0


class TestOutgoingPackets:
    """Test client to server packet bodies"""

    def test_handshake_login(self):
        packet = HandshakePacket(340, "localhost", 25565, State.LOGIN)
        assert packet.packet_id == 0x00
        assert packet.to_bytes() == b'\xd4\x02' + b'\x09localhost' + b'\x63\xdd' + b'\x02'

    def test_handshake_status(self):
        assert HandshakePacket(340, "a", 1, State.STATUS).to_bytes()[-1] == 1

    def test_handshake_rejects_handshaking(self):
        with pytest.raises(ValueError):
            HandshakePacket(340, "a", 1, State.HANDSHAKING).to_bytes()

    def test_login_start(self):
        packet = LoginStartPacket("Steve")
        assert packet.packet_id == 0x00
        assert packet.to_bytes() == b'\x05Steve'

    def test_keep_alive(self):
        packet = KeepAlivePacket(42)
        assert packet.packet_id == 0x0B
        assert packet.to_bytes() == b'\x2a'

    def test_status_request(self):
        assert StatusRequestPacket().to_bytes() == b''

    def test_ping(self):
        packet = PingPacket(1)
        assert packet.packet_id == 0x01
        assert packet.to_bytes() == b'\x00' * 7 + b'\x01'


class TestIncomingPackets:
    """Test server to client packet decoding"""

    def test_login_disconnect(self):
        body = PacketWriter().write_string('{"text":"Server full"}').to_bytes()
        packet = LoginDisconnectPacket.from_reader(PacketReader(body))
        assert packet.reason == '{"text":"Server full"}'

    def test_encryption_request(self):
        body = (PacketWriter()
                .write_string("")
                .write_byte_array(b'KEY')
                .write_byte_array(b'\x01\x02\x03\x04')
                .to_bytes())
        packet = EncryptionRequestPacket.from_reader(PacketReader(body))
        assert packet.server_id == ""
        assert packet.public_key == b'KEY'
        assert packet.verify_token == b'\x01\x02\x03\x04'

    def test_login_success(self):
        body = PacketWriter().write_string("uuid-1").write_string("Steve").to_bytes()
        packet = LoginSuccessPacket.from_reader(PacketReader(body))
        assert (packet.uuid, packet.username) == ("uuid-1", "Steve")

    def test_login_success_truncated(self):
        body = PacketWriter().write_string("uuid-1").to_bytes()
        with pytest.raises(PacketDecodeError):
            LoginSuccessPacket.from_reader(PacketReader(body))

    def test_set_compression(self):
        packet = SetCompressionPacket.from_reader(PacketReader(b'\x80\x02'))
        assert packet.threshold == 256

    def test_keep_alive_request(self):
        assert KeepAliveRequestPacket.from_reader(PacketReader(b'\x2a')).keep_alive_id == 42

    def test_play_disconnect(self):
        body = PacketWriter().write_string("Kicked").to_bytes()
        assert PlayDisconnectPacket.from_reader(PacketReader(body)).reason == "Kicked"

    def test_status_response(self):
        document = {'version': {'name': '1.12.2', 'protocol': 340}, 'players': {'max': 20, 'online': 1}}
        body = PacketWriter().write_string(json.dumps(document)).to_bytes()
        assert StatusResponsePacket.from_reader(PacketReader(body)).status == document

    @pytest.mark.parametrize("raw", ["not json", "[1, 2]"])
    def test_status_response_rejects(self, raw):
        body = PacketWriter().write_string(raw).to_bytes()
        with pytest.raises(PacketDecodeError):
            StatusResponsePacket.from_reader(PacketReader(body))

    def test_pong(self):
        body = PacketWriter().write_long(1234567890123).to_bytes()
        assert PongPacket.from_reader(PacketReader(body)).payload == 1234567890123
