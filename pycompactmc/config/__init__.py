"""
Configuration system for pycompactmc
"""

from .client_config import ClientConfig, PROTOCOL_VERSION
from .validation import ConfigValidationError

__all__ = ['ClientConfig', 'ConfigValidationError', 'PROTOCOL_VERSION']
