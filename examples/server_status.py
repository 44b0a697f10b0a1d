#!/usr/bin/env python3
"""
Server Status - server list ping

Usage:
    python server_status.py --server myserver.com
"""

import argparse
import json
import time

from pycompactmc import new_session, EventType, chat_to_text


def main():
    parser = argparse.ArgumentParser(description="Query a server's status")
    parser.add_argument("--server", default="localhost", help="Server to query")
    parser.add_argument("--port", type=int, default=25565, help="Port to query")
    args = parser.parse_args()

    session = new_session("status", args.server, args.port)
    sent_at = {}

    def on_status(status):
        description = status.get('description', '')
        if not isinstance(description, str):
            description = chat_to_text(json.dumps(description))
        players = status.get('players', {})
        print(f"{status.get('version', {}).get('name', '?')}: {description}")
        print(f"Players: {players.get('online', '?')}/{players.get('max', '?')}")
        sent_at['ping'] = time.monotonic()
        session.ping()

    def on_pong(_payload):
        print(f"Latency: {(time.monotonic() - sent_at['ping']) * 1000:.0f} ms")

    session.events.subscribe(EventType.STATUS_RECEIVED, on_status)
    session.events.subscribe(EventType.PONG, on_pong)
    session.request_status()
    session.wait_closed(10.0)
    session.close()


if __name__ == "__main__":
    main()
