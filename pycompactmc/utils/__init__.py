"""
pycompactmc Utilities - logging setup and chat text helpers
"""

from .chat import chat_to_text
from .logging_config import configure_logging, ModuleLogger

__all__ = [
    'chat_to_text',
    'configure_logging',
    'ModuleLogger',
]
