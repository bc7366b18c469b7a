"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Validates before applying
- Returns ActionResult with success/failure
- Never schedules anything itself; a mismatch sets reset_required and the
  owning session arranges the deferred reset

Transition table for SELECT_CARD:

    phase            card                 -> result
    ---------------  -------------------  --------------------------------
    EVALUATING       any                  IGNORED
    COMPLETE         any                  IGNORED
    any              matched / face up    IGNORED
    AWAITING_FIRST   face down            REVEALED, AWAITING_SECOND
    AWAITING_SECOND  face down, same sym  MATCHED (or COMPLETED)
    AWAITING_SECOND  face down, diff sym  MISMATCHED, EVALUATING

RESET_MISMATCH(generation) turns the two selected cards back down and returns
to AWAITING_FIRST, provided the state is EVALUATING and the generation is
current.
"""

from __future__ import annotations
import logging

from .state import GameState, GamePhase
from .action import Action, ActionType, ActionResult, SelectionOutcome


logger = logging.getLogger(__name__)


class Reducer:
    """
    Reducer applies actions to game state.

    Stateless - all state is in GameState.
    """

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            return ActionResult.failure(validation_error, error_code="INVALID_ACTION")

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
            )

        result = handler(state, action)
        if result.outcome == SelectionOutcome.IGNORED:
            logger.debug("Ignored %s: %s", action.action_type.value, "; ".join(result.state_changes))
        elif result.success:
            logger.debug(
                "%s -> %s: %s (moves=%d score=%d)",
                action.action_type.value,
                result.outcome.value,
                "; ".join(result.state_changes),
                result.new_state.moves,
                result.new_state.score,
            )
        return result

    def _validate_action(self, state: GameState, action: Action) -> str | None:
        """
        Validate that an action is well formed for this board.

        Returns error message if invalid, None if valid. Actions that are
        well formed but not actionable are handled as no-ops, not errors.
        """
        if action.action_type == ActionType.SELECT_CARD:
            card_id = action.card_id
            if isinstance(card_id, bool) or not isinstance(card_id, int):
                return f"Card id must be an integer, got {card_id!r}"
            if not state.in_range(card_id):
                return f"Card id {card_id} out of range [0, {state.card_count})"

        if action.action_type == ActionType.RESET_MISMATCH:
            if action.generation is None:
                return "Reset action carries no generation"

        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.SELECT_CARD: self._handle_select,
            ActionType.RESET_MISMATCH: self._handle_reset,
        }
        return handlers.get(action_type)

    def _handle_select(self, state: GameState, action: Action) -> ActionResult:
        """Handle a card tap."""
        if state.phase == GamePhase.EVALUATING:
            return ActionResult.ignored(state, "Pairing decision in flight")
        if state.phase == GamePhase.COMPLETE:
            return ActionResult.ignored(state, "Game is complete")

        card = state.card(action.card_id)
        if card.matched:
            return ActionResult.ignored(state, f"Card {card.id} already matched")
        if card.face_up:
            return ActionResult.ignored(state, f"Card {card.id} already face up")

        if state.first_selection is None:
            new_state = state.with_cards(card.flipped(True))._copy_with(
                first_selection=card.id,
                phase=GamePhase.AWAITING_SECOND,
            )
            return ActionResult.success_with_state(
                new_state,
                SelectionOutcome.REVEALED,
                changes=[f"Revealed card {card.id}"],
            )

        return self._evaluate_pair(state, state.card(state.first_selection), card)

    def _evaluate_pair(self, state: GameState, first, second) -> ActionResult:
        """Second card of an attempt: count the move and compare."""
        moves = state.moves + 1

        if first.symbol == second.symbol:
            new_state = state.with_cards(first.as_matched(), second.as_matched())._copy_with(
                first_selection=None,
                second_selection=None,
                moves=moves,
                score=state.score + state.match_reward,
            )
            changes = [f"Matched cards {first.id} and {second.id}"]

            # Completion is checked only here, so it is entered exactly once
            if new_state.all_matched:
                new_state = new_state._copy_with(phase=GamePhase.COMPLETE)
                changes.append("All pairs matched")
                return ActionResult.success_with_state(
                    new_state, SelectionOutcome.COMPLETED, changes=changes
                )

            new_state = new_state._copy_with(phase=GamePhase.AWAITING_FIRST)
            return ActionResult.success_with_state(
                new_state, SelectionOutcome.MATCHED, changes=changes
            )

        new_state = state.with_cards(second.flipped(True))._copy_with(
            second_selection=second.id,
            moves=moves,
            phase=GamePhase.EVALUATING,
        )
        return ActionResult.success_with_state(
            new_state,
            SelectionOutcome.MISMATCHED,
            changes=[f"Cards {first.id} and {second.id} do not match"],
            reset_required=True,
        )

    def _handle_reset(self, state: GameState, action: Action) -> ActionResult:
        """Handle the deferred mismatch reset."""
        if action.generation != state.generation:
            return ActionResult.ignored(
                state, f"Stale reset for generation {action.generation}"
            )
        if state.phase != GamePhase.EVALUATING:
            return ActionResult.ignored(state, "No mismatch awaiting reset")

        first = state.card(state.first_selection)
        second = state.card(state.second_selection)
        new_state = state.with_cards(first.flipped(False), second.flipped(False))._copy_with(
            first_selection=None,
            second_selection=None,
            phase=GamePhase.AWAITING_FIRST,
        )
        return ActionResult.success_with_state(
            new_state,
            SelectionOutcome.RESET,
            changes=[f"Turned cards {first.id} and {second.id} back down"],
        )


def apply_action(state: GameState, action: Action) -> ActionResult:
    """Convenience function to apply an action."""
    return Reducer().apply(state, action)
