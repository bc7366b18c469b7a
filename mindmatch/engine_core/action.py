"""
Action System - Actions and results.

Actions represent:
1. Player input (selecting a card)
2. System events (the deferred mismatch reset firing)

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions in the system."""
    SELECT_CARD = "select_card"
    RESET_MISMATCH = "reset_mismatch"


class SelectionOutcome(Enum):
    """What an accepted (or ignored) action did to the board."""
    IGNORED = "ignored"  # Valid id, nothing actionable
    REVEALED = "revealed"  # First card of a pair turned up
    MATCHED = "matched"
    MISMATCHED = "mismatched"  # Reset scheduled
    COMPLETED = "completed"  # Final pair matched
    RESET = "reset"  # Mismatched cards turned back down


@dataclass(frozen=True)
class Action:
    """
    A complete action to be applied to the game state.

    Actions are applied atomically by the reducer.
    """
    action_type: ActionType
    card_id: int | None = None
    generation: int | None = None

    @classmethod
    def select(cls, card_id: int) -> Action:
        """Factory for a player tap."""
        return cls(action_type=ActionType.SELECT_CARD, card_id=card_id)

    @classmethod
    def reset_mismatch(cls, generation: int) -> Action:
        """Factory for the deferred reset, tagged with its game generation."""
        return cls(action_type=ActionType.RESET_MISMATCH, generation=generation)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action succeeded
    - New state (unchanged state for ignored input)
    - Errors (if failed)
    - Whether the caller must schedule a deferred reset
    """
    success: bool
    new_state: Any | None = None  # GameState
    outcome: SelectionOutcome | None = None
    error: str | None = None
    error_code: str | None = None

    reset_required: bool = False
    state_changes: list[str] = field(default_factory=list)  # Human-readable changes

    @property
    def changed(self) -> bool:
        return self.success and self.outcome != SelectionOutcome.IGNORED

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def ignored(cls, state: Any, reason: str) -> ActionResult:
        """Input that is valid but not actionable right now."""
        return cls(
            success=True,
            new_state=state,
            outcome=SelectionOutcome.IGNORED,
            state_changes=[reason],
        )

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        outcome: SelectionOutcome,
        changes: list[str] | None = None,
        reset_required: bool = False,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            outcome=outcome,
            state_changes=changes or [],
            reset_required=reset_required,
        )
