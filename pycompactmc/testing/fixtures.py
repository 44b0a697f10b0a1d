"""
Helpers for tests that drive a real session
"""

import threading
import time
from typing import Any, Callable, List, Optional, Tuple

from ..events import EventType


def wait_for(predicate: Callable[[], Any], timeout: float = 5.0, interval: float = 0.01) -> bool:
    """Poll until predicate() is true or the timeout passes"""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return bool(predicate())


class EventRecorder:
    """Records every event a session emits, in order"""

    def __init__(self, session):
        self.session = session
        self.events_received: List[Tuple[EventType, Any]] = []
        self._lock = threading.Lock()
        for event_type in EventType:
            session.events.subscribe(event_type, self._recorder(event_type))

    def _recorder(self, event_type: EventType):
        def record(data):
            with self._lock:
                self.events_received.append((event_type, data))
        return record

    def get_events_of_type(self, event_type: EventType) -> List[Any]:
        with self._lock:
            return [data for kind, data in self.events_received if kind == event_type]

    def wait_for_event(self, event_type: EventType, timeout: float = 5.0) -> Optional[Any]:
        """Wait for the first event of a type and return its data"""
        if not wait_for(lambda: self.get_events_of_type(event_type), timeout):
            return None
        return self.get_events_of_type(event_type)[0]
