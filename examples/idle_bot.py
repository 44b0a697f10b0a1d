#!/usr/bin/env python3
"""
Idle Bot - log in and stay connected

The session answers keep-alives on its own; this bot only logs in and waits
until the server disconnects it or Ctrl+C is pressed.

Usage:
    python idle_bot.py Steve
    python idle_bot.py Steve --server myserver.com --port 25565
"""

import argparse
import logging

from pycompactmc import new_session, EventType, configure_logging


def main():
    parser = argparse.ArgumentParser(description="Idle pycompactmc bot")
    parser.add_argument("username", help="Offline-mode username")
    parser.add_argument("--server", default="localhost", help="Server to connect to")
    parser.add_argument("--port", type=int, default=25565, help="Port to connect to")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    configure_logging(logging.DEBUG if args.debug else logging.INFO)

    session = new_session(args.username, args.server, args.port)
    session.events.subscribe(EventType.LOGIN_SUCCESS,
                             lambda info: print(f"✅ Logged in as {info['username']} ({info['uuid']})"))
    session.events.subscribe(EventType.KEEP_ALIVE,
                             lambda keep_alive_id: print(f"💓 Keep-alive {keep_alive_id}"))
    session.events.subscribe(EventType.DISCONNECTED,
                             lambda event: print(f"👋 Disconnected: {event.reason}"))
    session.login()

    try:
        session.wait_closed()
    except KeyboardInterrupt:
        session.close()
        session.wait_closed(2.0)


if __name__ == "__main__":
    main()
