"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Client starts a session -> ephemeral session (in-memory only)
2. During play:
   - Client forwards taps to the session's GameSession
   - Mismatch resets fire on the manager's scheduler
   - Client may restart, which deals a new game in the same session
3. Session ends -> pending timer cancelled, ALL state deleted

PERSISTENCE RULES:
- NO database for gameplay
- Game state never outlives the process
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence
import logging
import uuid
import time

from ..engine_core.state import GameResult
from .controller import GameSession, DEFAULT_MATCH_REWARD, DEFAULT_MISMATCH_DELAY_MS
from .scheduler import Scheduler, ManualScheduler


logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a hosted session."""
    ACTIVE = "active"  # Game in progress
    COMPLETED = "completed"  # Last game finished, restart allowed
    ENDED = "ended"  # Ended by the client or cleaned up


@dataclass
class Session:
    """
    An ephemeral hosted session.

    Contains:
    - The GameSession (engine façade)
    - Session metadata

    The session is destroyed when it ends.
    State is NOT persisted.
    """
    session_id: str
    game: GameSession
    created_at: float

    state: SessionState = SessionState.ACTIVE
    last_activity: float = 0.0
    games_played: int = 1
    last_result: GameResult | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        """Check if session is still usable."""
        return self.state in {SessionState.ACTIVE, SessionState.COMPLETED}

    def touch(self):
        self.last_activity = time.time()


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with a dealt game
    - Track active sessions
    - Clean up ended or idle sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        match_reward: int = DEFAULT_MATCH_REWARD,
        mismatch_delay_ms: int = DEFAULT_MISMATCH_DELAY_MS,
    ):
        self.scheduler = scheduler or ManualScheduler()
        self.match_reward = match_reward
        self.mismatch_delay_ms = mismatch_delay_ms
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        pair_count: int | None = None,
        seed: int | None = None,
        symbols: Sequence[str] | None = None,
    ) -> Session:
        """
        Create a new session and deal its first game.

        Args:
            pair_count: Pairs on the board (engine default if None)
            seed: Shuffle seed for a reproducible deal
            symbols: Custom symbol pool

        Returns:
            New Session with a game in progress

        Raises:
            InvalidConfiguration: the board cannot be dealt (no session created)
        """
        game = GameSession(
            scheduler=self.scheduler,
            match_reward=self.match_reward,
            mismatch_delay_ms=self.mismatch_delay_ms,
        )
        game.new_game(pool=symbols, pair_count=pair_count, seed=seed)

        now = time.time()
        session = Session(
            session_id=str(uuid.uuid4()),
            game=game,
            created_at=now,
            last_activity=now,
        )
        game.on_complete(lambda result: self._on_game_complete(session, result))

        self._sessions[session.session_id] = session
        logger.info("Created session %s", session.session_id)
        return session

    def restart_session(
        self,
        session_id: str,
        pair_count: int | None = None,
        seed: int | None = None,
        symbols: Sequence[str] | None = None,
    ) -> Session | None:
        """Deal a new game into an existing session."""
        session = self.get_session(session_id)
        if session is None:
            return None
        session.game.new_game(pool=symbols, pair_count=pair_count, seed=seed)
        session.state = SessionState.ACTIVE
        session.games_played += 1
        session.touch()
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and clean up.

        The pending reset timer is cancelled and the session is removed
        from memory.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False
        session.game.close()
        session.state = SessionState.ENDED
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_idle_seconds: int = 3600) -> int:
        """
        End sessions idle for longer than max_idle_seconds.

        Returns the number of sessions removed.
        """
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in self._sessions.items()
            if current_time - session.last_activity > max_idle_seconds
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)

    def _on_game_complete(self, session: Session, result: GameResult):
        session.state = SessionState.COMPLETED
        session.last_result = result
