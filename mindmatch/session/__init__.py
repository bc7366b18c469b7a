"""
Session Module - Hosts memory games.

A GameSession is one board at a time:
- Created when the player starts playing
- Deals a new deck on every new_game()
- Owns the deferred mismatch reset timer
- Notifies observers when the board is cleared

Sessions are EPHEMERAL:
- No persistence to database
- A new game discards the previous one
"""

from .controller import GameSession, DEFAULT_MATCH_REWARD, DEFAULT_MISMATCH_DELAY_MS
from .manager import SessionManager, Session, SessionState
from .scheduler import (
    Scheduler,
    ScheduledCall,
    ManualScheduler,
    AsyncioScheduler,
)

__all__ = [
    "GameSession",
    "DEFAULT_MATCH_REWARD",
    "DEFAULT_MISMATCH_DELAY_MS",
    "SessionManager",
    "Session",
    "SessionState",
    "Scheduler",
    "ScheduledCall",
    "ManualScheduler",
    "AsyncioScheduler",
]
