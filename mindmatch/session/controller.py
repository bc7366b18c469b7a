"""
Game Session - Public façade over the memory-game engine.

A GameSession owns one GameState at a time:
- new_game() deals a deck and installs a fresh state
- select_card() feeds player taps through the reducer
- get_state() hands out frozen snapshots
- on_complete() observers hear about the finished game exactly once

The only asynchronous piece is the mismatch reset. It is scheduled on the
injected Scheduler, tagged with the game generation, and cancelled when a new
game starts. A stale callback that slips through compares generations and
does nothing.
"""

from __future__ import annotations
import logging
import random
from typing import Callable, Sequence

from ..engine_core.action import Action, SelectionOutcome
from ..engine_core.deck import generate_deck, DEFAULT_SYMBOL_POOL, DEFAULT_PAIR_COUNT
from ..engine_core.errors import InvalidConfiguration, InvalidSelection, NoActiveGame
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameState, GameSnapshot, GameResult
from .scheduler import Scheduler, ScheduledCall, ManualScheduler


logger = logging.getLogger(__name__)

DEFAULT_MATCH_REWARD = 10
DEFAULT_MISMATCH_DELAY_MS = 1000

CompletionCallback = Callable[[GameResult], None]
ChangeCallback = Callable[[GameSnapshot], None]


class GameSession:
    """
    Session controller for the memory game.

    Usage:
        session = GameSession(scheduler=ManualScheduler())
        session.on_complete(lambda result: print(result.score, result.moves))
        session.new_game(seed=42)

        outcome = session.select_card(0)
        snapshot = session.get_state()
    """

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        match_reward: int = DEFAULT_MATCH_REWARD,
        mismatch_delay_ms: int = DEFAULT_MISMATCH_DELAY_MS,
        symbol_pool: Sequence[str] = DEFAULT_SYMBOL_POOL,
        pair_count: int = DEFAULT_PAIR_COUNT,
    ):
        if match_reward <= 0:
            raise InvalidConfiguration(f"match_reward must be positive, got {match_reward}")
        if mismatch_delay_ms < 0:
            raise InvalidConfiguration(
                f"mismatch_delay_ms must be non-negative, got {mismatch_delay_ms}"
            )

        self.scheduler = scheduler or ManualScheduler()
        self.match_reward = match_reward
        self.mismatch_delay_ms = mismatch_delay_ms
        self.symbol_pool = tuple(symbol_pool)
        self.pair_count = pair_count

        self._reducer = Reducer()
        self._state: GameState | None = None
        self._generation = 0
        self._pending_reset: ScheduledCall | None = None
        self._completion_observers: list[CompletionCallback] = []
        self._change_observers: list[ChangeCallback] = []
        self._completion_notified = False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def new_game(
        self,
        pool: Sequence[str] | None = None,
        pair_count: int | None = None,
        rng: random.Random | None = None,
        seed: int | None = None,
    ) -> GameSnapshot:
        """
        Start a new game, superseding any game in progress.

        The deck is built first, so a configuration error leaves the
        current game untouched.

        Raises:
            InvalidConfiguration: pair_count/pool cannot produce a board
        """
        pool = self.symbol_pool if pool is None else tuple(pool)
        pair_count = self.pair_count if pair_count is None else pair_count
        if rng is None:
            rng = random.Random(seed)

        cards = generate_deck(pool, pair_count, rng)

        self._cancel_pending_reset()
        self._generation += 1
        self._state = GameState.create(
            cards,
            generation=self._generation,
            match_reward=self.match_reward,
        )
        self._completion_notified = False

        logger.info(
            "Started game generation=%d with %d pairs",
            self._generation,
            pair_count,
        )
        snapshot = self._state.snapshot()
        self._notify_change(snapshot)
        return snapshot

    def close(self):
        """Release the pending timer. The session can still start new games."""
        self._cancel_pending_reset()

    # =========================================================================
    # Input
    # =========================================================================

    def select_card(self, card_id: int) -> SelectionOutcome:
        """
        Handle a tap on a card.

        Returns the outcome. SelectionOutcome.IGNORED means the tap was valid
        but not actionable (matched card, pending card, board locked).

        Raises:
            NoActiveGame: new_game() has not been called
            InvalidSelection: card_id outside [0, card count)
        """
        state = self._require_state()
        result = self._reducer.apply(state, Action.select(card_id))
        if not result.success:
            raise InvalidSelection(result.error)

        if result.outcome == SelectionOutcome.IGNORED:
            return result.outcome

        self._state = result.new_state
        if result.reset_required:
            self._schedule_reset()

        self._notify_change(self._state.snapshot())
        if result.outcome == SelectionOutcome.COMPLETED:
            self._notify_complete()
        return result.outcome

    # =========================================================================
    # Observation
    # =========================================================================

    def get_state(self) -> GameSnapshot:
        """Frozen snapshot of the current game."""
        return self._require_state().snapshot()

    @property
    def has_game(self) -> bool:
        return self._state is not None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_reset_pending(self) -> bool:
        return self._pending_reset is not None and not self._pending_reset.cancelled

    @property
    def result(self) -> GameResult | None:
        """Final score and moves once the game is complete."""
        if self._state is None or not self._state.is_complete:
            return None
        return self._state.result()

    def on_complete(self, callback: CompletionCallback):
        """
        Register a completion observer.

        Called once per game, at the transition into COMPLETE, with the
        final GameResult.
        """
        self._completion_observers.append(callback)

    def on_change(self, callback: ChangeCallback):
        """Register an observer for every accepted state change."""
        self._change_observers.append(callback)

    # =========================================================================
    # Internals
    # =========================================================================

    def _require_state(self) -> GameState:
        if self._state is None:
            raise NoActiveGame("No game in progress - call new_game() first")
        return self._state

    def _schedule_reset(self):
        generation = self._generation

        def fire():
            if self._pending_reset is handle:
                self._pending_reset = None
            self._apply_reset(generation)

        handle = self.scheduler.after(self.mismatch_delay_ms, fire)
        self._pending_reset = handle

    def _apply_reset(self, generation: int):
        if self._state is None:
            return
        result = self._reducer.apply(self._state, Action.reset_mismatch(generation))
        if result.outcome != SelectionOutcome.RESET:
            logger.debug("Reset for generation %d skipped", generation)
            return
        self._state = result.new_state
        self._notify_change(self._state.snapshot())

    def _cancel_pending_reset(self):
        if self._pending_reset is not None:
            self._pending_reset.cancel()
            self._pending_reset = None

    def _notify_change(self, snapshot: GameSnapshot):
        for callback in list(self._change_observers):
            try:
                callback(snapshot)
            except Exception:
                logger.warning("Change observer %r failed", callback, exc_info=True)

    def _notify_complete(self):
        if self._completion_notified:
            return
        self._completion_notified = True
        result = self._state.result()
        logger.info(
            "Game generation=%d complete: score=%d moves=%d",
            self._generation,
            result.score,
            result.moves,
        )
        for callback in list(self._completion_observers):
            try:
                callback(result)
            except Exception:
                logger.warning("Completion observer %r failed", callback, exc_info=True)
