"""
Events - session notifications for callers
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Callable, Any, Optional

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Session event types"""
    CONNECTED = "connected"
    CONNECTION_FAILED = "connection_failed"
    STATE_CHANGED = "state_changed"
    LOGIN_SUCCESS = "login_success"
    COMPRESSION_ENABLED = "compression_enabled"
    ENCRYPTION_ENABLED = "encryption_enabled"
    KEEP_ALIVE = "keep_alive"
    STATUS_RECEIVED = "status_received"
    PONG = "pong"
    PACKET_RECEIVED = "packet_received"
    PACKET_SENT = "packet_sent"
    DISCONNECTED = "disconnected"


@dataclass
class DisconnectEvent:
    """Payload of DISCONNECTED"""
    reason: str
    cause: Optional[BaseException] = None


class EventManager:
    """Simple event manager

    Handlers run on whichever session thread emits the event, so they should
    return quickly.
    """

    def __init__(self):
        self._handlers: Dict[EventType, List[Callable]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_type: EventType, handler: Callable):
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: EventType, handler: Callable) -> bool:
        with self._lock:
            handlers = self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                return True
            return False

    def emit(self, event_type: EventType, data: Any = None):
        with self._lock:
            handlers = list(self._handlers.get(event_type, []))
        for handler in handlers:
            try:
                handler(data)
            except Exception:
                logger.exception(f"Event handler for {event_type.value} failed")
