#!/usr/bin/env python3
"""
Custom Packet Example - extend the client with your own inbound packets

Registers a handler for the 1.12.2 play-state chat message packet and prints
every message. Registration must happen before the session is created.
"""

import argparse

from pycompactmc import (
    InboundPacket, PacketReader, State, inbound_packet, new_session, chat_to_text
)


@inbound_packet(State.PLAY, 0x0F)
class ChatMessagePacket(InboundPacket):
    packet_id = 0x0F

    def __init__(self, message: str, position: int):
        self.message = message
        self.position = position

    @classmethod
    def from_reader(cls, reader: PacketReader) -> 'ChatMessagePacket':
        return cls(reader.read_string(), reader.read_byte())

    def handle(self, session) -> None:
        print(f"[chat] {chat_to_text(self.message)}")


def main():
    parser = argparse.ArgumentParser(description="Print chat messages")
    parser.add_argument("username", help="Offline-mode username")
    parser.add_argument("--server", default="localhost", help="Server to connect to")
    parser.add_argument("--port", type=int, default=25565, help="Port to connect to")
    args = parser.parse_args()

    with new_session(args.username, args.server, args.port) as session:
        session.login()
        try:
            session.wait_closed()
        except KeyboardInterrupt:
            pass


if __name__ == "__main__":
    main()
