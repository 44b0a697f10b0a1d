"""
Shared fixtures
"""

import pytest

from pycompactmc.testing import MockMinecraftServer


@pytest.fixture
def server():
    """Mock server on a free local port"""
    with MockMinecraftServer() as mock:
        yield mock
