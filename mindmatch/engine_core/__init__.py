"""
Engine Core - Deterministic memory-game state management.

The engine is the runtime that:
1. Deals a paired deck from a symbol pool
2. Manages GameState
3. Applies player selections via the reducer
4. Reports when a mismatched pair needs a deferred reset
"""

from .state import GameState, GamePhase, Card, CardView, GameSnapshot, GameResult
from .action import Action, ActionType, ActionResult, SelectionOutcome
from .reducer import Reducer, apply_action
from .deck import generate_deck, validate_configuration, DEFAULT_SYMBOL_POOL, DEFAULT_PAIR_COUNT
from .errors import (
    GameError,
    InvalidConfiguration,
    InsufficientSymbols,
    InvalidSelection,
    NoActiveGame,
)

__all__ = [
    "GameState",
    "GamePhase",
    "Card",
    "CardView",
    "GameSnapshot",
    "GameResult",
    "Action",
    "ActionType",
    "ActionResult",
    "SelectionOutcome",
    "Reducer",
    "apply_action",
    "generate_deck",
    "validate_configuration",
    "DEFAULT_SYMBOL_POOL",
    "DEFAULT_PAIR_COUNT",
    "GameError",
    "InvalidConfiguration",
    "InsufficientSymbols",
    "InvalidSelection",
    "NoActiveGame",
]
