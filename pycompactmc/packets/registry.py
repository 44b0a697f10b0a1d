"""
Inbound packet registry and dispatcher.

Maps (state, packet ID) to a factory that builds an inbound packet from its
body. Register every packet type before starting sessions: registration takes
a lock, lookups do not.
"""
from typing import Dict, Callable, Optional, List, Type
import threading
import logging

from ..errors import PacketDecodeError, SessionClosedError
from ..protocol.states import State, PACKET_STATES
from .base import InboundPacket, PacketReader

logger = logging.getLogger(__name__)

PacketFactory = Callable[[PacketReader], InboundPacket]


class PacketRegistry:
    """
    Per-state packet tables. The same ID may mean different packets in
    different states; within a state the last registration wins.
    """

    def __init__(self):
        self._tables: Dict[State, Dict[int, PacketFactory]] = {state: {} for state in PACKET_STATES}
        self._lock = threading.Lock()

    def _table(self, state: State) -> Dict[int, PacketFactory]:
        if state not in self._tables:
            raise ValueError(f"State {state} has no inbound packet table")
        return self._tables[state]

    def register(self, state: State, packet_id: int, factory: PacketFactory) -> None:
        """
        Register a packet factory.

        Args:
            state: Protocol state the ID belongs to
            packet_id: Packet ID within that state
            factory: Callable taking a PacketReader over the body and returning
                an InboundPacket
        """
        if not callable(factory):
            raise TypeError(f"Packet factory for {state.name} 0x{packet_id:02X} is not callable")

        with self._lock:
            table = self._table(state)
            if packet_id in table:
                logger.debug(f"Overriding {state.name} packet 0x{packet_id:02X}")
            table[packet_id] = factory

        logger.debug(f"Registered {getattr(factory, '__qualname__', factory)} for {state.name} packet 0x{packet_id:02X}")

    def register_packet(self, packet_type: Type[InboundPacket], packet_id: int, state: State) -> None:
        """Register an InboundPacket class by its ``from_reader`` constructor"""
        from_reader = getattr(packet_type, 'from_reader', None)
        if from_reader is None or not callable(from_reader):
            raise TypeError(f"{packet_type!r} does not have a from_reader(reader) constructor")
        self.register(state, packet_id, from_reader)

    def unregister(self, state: State, packet_id: int) -> bool:
        """
        Remove a registration.

        Returns:
            True if a factory was registered
        """
        with self._lock:
            return self._table(state).pop(packet_id, None) is not None

    def lookup(self, state: State, packet_id: int) -> Optional[PacketFactory]:
        table = self._tables.get(state)
        if table is None:
            return None
        return table.get(packet_id)

    def registered_ids(self, state: State) -> List[int]:
        return sorted(self._tables.get(state, {}))

    def copy(self) -> 'PacketRegistry':
        """Independent registry starting with the same registrations"""
        clone = PacketRegistry()
        with self._lock:
            for state, table in self._tables.items():
                clone._tables[state].update(table)
        return clone

    def dispatch(self, state: State, packet_id: int, body: bytes, session) -> bool:
        """
        Decode and handle one packet on the calling thread.

        Unknown IDs are skipped. Decode and handler failures are logged; the
        frame has already been consumed, so the stream stays in sync.

        Returns:
            True if the packet was decoded and handled
        """
        factory = self.lookup(state, packet_id)
        if factory is None:
            logger.debug(f"Ignoring unknown {state.name} packet 0x{packet_id:02X} ({len(body)} bytes)")
            return False

        reader = PacketReader(body)
        try:
            packet = factory(reader)
        except PacketDecodeError as e:
            logger.error(f"Failed to decode {state.name} packet 0x{packet_id:02X}: {e}")
            return False
        except Exception:
            logger.exception(f"Failed to instantiate {state.name} packet 0x{packet_id:02X}")
            return False

        if reader.has_data():
            logger.debug(f"{type(packet).__name__} left {reader.bytes_left()} bytes unread")

        try:
            packet.handle(session)
        except SessionClosedError as e:
            # Replies queued by a handler while the session shuts down
            logger.debug(f"{type(packet).__name__} dropped during shutdown: {e}")
            return False
        except Exception:
            logger.exception(f"Handler for {type(packet).__name__} failed")
            return False
        return True


DEFAULT_REGISTRY = PacketRegistry()


def register_inbound_packet(packet_type: Type[InboundPacket], packet_id: int, state: State) -> None:
    """Register a packet type in the process-wide default registry"""
    DEFAULT_REGISTRY.register_packet(packet_type, packet_id, state)


def inbound_packet(state: State, packet_id: int, registry: Optional[PacketRegistry] = None):
    """
    Class decorator registering an inbound packet.

    Usage:
        @inbound_packet(State.PLAY, 0x0F)
        class ChatMessage(InboundPacket):
            ...
    """
    def decorator(packet_type):
        (registry or DEFAULT_REGISTRY).register_packet(packet_type, packet_id, state)
        return packet_type
    return decorator
