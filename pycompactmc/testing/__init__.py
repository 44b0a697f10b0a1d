"""
Testing infrastructure for pycompactmc
"""

from .mock_server import MockMinecraftServer, MockClient, ServerScenario, Handshake
from .fixtures import EventRecorder, wait_for

__all__ = [
    'MockMinecraftServer', 'MockClient', 'ServerScenario', 'Handshake',
    'EventRecorder', 'wait_for',
]
