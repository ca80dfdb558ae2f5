"""
Session Manager - Creates and tracks game sessions.

LIFECYCLE:
1. Caller creates a session -> a GameController with a fresh game
2. During the game every action goes through that controller
3. The controller saves after each month through the session's store
4. Ending a session drops the controller; its save stays in the store

Sessions themselves live in memory. What survives a restart is the save
document, which a new session can load.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
import logging
import time
import uuid

from ..engine_core.rng import SeededRandomSource
from ..engine_core.state import GamePhase
from ..persistence.store import MemorySaveStore, SaveStore
from .controller import GameController

logger = logging.getLogger(__name__)

StoreFactory = Callable[[str], SaveStore]


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Reached the ended phase
    ABANDONED = "abandoned"  # Ended before the game finished


@dataclass
class Session:
    """
    An in-memory game session.

    Contains:
    - The controller that owns the game state
    - Session metadata
    """
    session_id: str
    controller: GameController
    created_at: float
    last_active: float = 0.0
    state: SessionState = SessionState.ACTIVE
    seed: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        return (
            self.state == SessionState.ACTIVE
            and self.controller.state.phase != GamePhase.ENDED
        )

    def touch(self):
        self.last_active = time.time()


def _memory_store(session_id: str) -> SaveStore:
    return MemorySaveStore()


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions, each with its own controller and save store
    - Track active sessions
    - Clean up stale sessions
    """

    def __init__(self, store_factory: StoreFactory | None = None):
        self._sessions: dict[str, Session] = {}
        self.store_factory = store_factory or _memory_store

    def create_session(
        self,
        seed: int | None = None,
        resume: bool = False,
        session_id: str | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            seed: Seed for the event draws (None for an unseeded game)
            resume: Load the store's saved game into the new session
            session_id: Reuse a known id, e.g. to resume its save

        Returns:
            New Session, or the live one when resuming an id still in memory

        Raises:
            ValueError: session_id is already live and resume is not set
        """
        if session_id is not None and session_id in self._sessions:
            if not resume:
                raise ValueError(f"Session {session_id} already exists")
            session = self._sessions[session_id]
            session.touch()
            return session

        session_id = session_id or str(uuid.uuid4())
        controller = GameController(
            store=self.store_factory(session_id),
            rng=SeededRandomSource(seed),
        )
        if resume:
            controller.load()

        now = time.time()
        session = Session(
            session_id=session_id,
            controller=controller,
            created_at=now,
            last_active=now,
            seed=seed,
        )
        self._sessions[session_id] = session
        logger.info("Created session %s (seed=%s, resume=%s)", session_id, seed, resume)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        session = self._sessions.get(session_id)
        if session is not None:
            session.touch()
            if session.controller.state.phase == GamePhase.ENDED:
                session.state = SessionState.GAME_OVER
        return session

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and drop it from memory.

        Returns False if there was no such session.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        if session.controller.state.phase == GamePhase.ENDED or reason == "completed":
            session.state = SessionState.GAME_OVER
        else:
            session.state = SessionState.ABANDONED
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        """
        End sessions idle for longer than max_age_seconds.

        Returns the removed session IDs.
        """
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in self._sessions.items()
            if current_time - session.last_active > max_age_seconds
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return to_remove

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
