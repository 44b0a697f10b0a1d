"""
Client Configuration - connection and session settings
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any

from ..protocol.codec import MAX_PACKET_SIZE
from .validation import (
    validate_host, validate_port, validate_username, validate_timeout, validate_log_level
)

PROTOCOL_VERSION = 340  # 1.12.2


@dataclass
class ClientConfig:
    """Client configuration settings"""

    # Connection settings
    host: str = "localhost"
    port: int = 25565
    username: str = "Player"
    protocol_version: int = PROTOCOL_VERSION
    connect_timeout: float = 10.0

    # Threading
    task_poll_interval: float = 0.05
    join_timeout: float = 2.0

    # Logging
    log_level: str = "INFO"
    log_packets: bool = False

    # Advanced
    max_packet_size: int = MAX_PACKET_SIZE

    def validate(self) -> 'ClientConfig':
        """Validate and normalize settings in place"""
        self.host = validate_host(self.host)
        self.port = validate_port(self.port)
        self.username = validate_username(self.username)
        self.connect_timeout = validate_timeout(self.connect_timeout)
        self.task_poll_interval = validate_timeout(self.task_poll_interval)
        self.join_timeout = validate_timeout(self.join_timeout)
        self.log_level = validate_log_level(self.log_level)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ClientConfig':
        """Create from dictionary"""
        return cls(**data)

    def update(self, **kwargs):
        """Update configuration values"""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
