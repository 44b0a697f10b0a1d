"""
Protocol states

The state decides which packet ID table applies to a frame. The wire ID is
only ever sent inside the Handshake packet's "next state" field.
"""

from enum import Enum
from typing import Optional


class State(Enum):
    """Protocol phase of a connection"""
    HANDSHAKING = "handshaking"
    STATUS = "status"
    LOGIN = "login"
    PLAY = "play"

    @property
    def wire_id(self) -> Optional[int]:
        return _WIRE_IDS.get(self)

    @classmethod
    def from_wire_id(cls, wire_id: int) -> 'State':
        for state, value in _WIRE_IDS.items():
            if value == wire_id:
                return state
        raise ValueError(f"Unknown state id: {wire_id}")


_WIRE_IDS = {
    State.PLAY: 0,
    State.STATUS: 1,
    State.LOGIN: 2,
}

# States that own an inbound packet table
PACKET_STATES = (State.STATUS, State.LOGIN, State.PLAY)
