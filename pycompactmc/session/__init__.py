"""
Session Module - connection lifetime, threading and state machine
"""

from .session import Session, new_session

__all__ = [
    'Session',
    'new_session',
]
