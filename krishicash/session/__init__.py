"""
Session Management - Game controllers and in-memory sessions.
"""

from .controller import GameController
from .manager import SessionManager, Session, SessionState

__all__ = [
    "GameController",
    "SessionManager",
    "Session",
    "SessionState",
]
