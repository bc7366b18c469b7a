"""
Tests for the session controller.

Tests:
- Full game scenario with deferred reset
- Move/score accounting
- No-op laws
- Completion notification
- Timer cancellation and generation guard
- Configuration errors
"""

import random

import pytest

from ..engine_core.action import SelectionOutcome
from ..engine_core.errors import InvalidConfiguration, InvalidSelection, NoActiveGame
from ..engine_core.state import GamePhase, GameResult
from ..session import GameSession, ManualScheduler
from ..session.scheduler import Scheduler, ScheduledCall
from .conftest import REWARD, DELAY_MS, solve


class UncancellableCall(ScheduledCall):
    """Fire-and-forget handle: cancel() has no effect."""

    def cancel(self):
        pass

    @property
    def cancelled(self):
        return False


class FireAndForgetScheduler(Scheduler):
    """Scheduler whose timers can't be cancelled."""

    def __init__(self):
        self.callbacks = []

    def after(self, duration_ms, callback):
        self.callbacks.append(callback)
        return UncancellableCall()

    def fire_all(self):
        callbacks, self.callbacks = self.callbacks, []
        for callback in callbacks:
            callback()


class TestScenario:
    """The two-pair walkthrough on an [A, B, A, B] board."""

    def test_full_game(self, abab_session, scheduler, completions):
        session = abab_session

        assert session.select_card(0) == SelectionOutcome.REVEALED
        state = session.get_state()
        assert state.cards[0].face_up
        assert state.phase == GamePhase.AWAITING_SECOND

        assert session.select_card(1) == SelectionOutcome.MISMATCHED
        state = session.get_state()
        assert (state.moves, state.score) == (1, 0)
        assert state.phase == GamePhase.EVALUATING
        assert session.is_reset_pending

        scheduler.advance(DELAY_MS)
        state = session.get_state()
        assert not state.cards[0].face_up
        assert not state.cards[1].face_up
        assert state.phase == GamePhase.AWAITING_FIRST
        assert not session.is_reset_pending

        session.select_card(0)
        assert session.select_card(2) == SelectionOutcome.MATCHED
        state = session.get_state()
        assert (state.moves, state.score) == (2, REWARD)
        assert state.cards[0].matched and state.cards[2].matched

        session.select_card(1)
        assert session.select_card(3) == SelectionOutcome.COMPLETED
        state = session.get_state()
        assert (state.moves, state.score) == (3, 2 * REWARD)
        assert state.phase == GamePhase.COMPLETE

        assert completions == [GameResult(score=2 * REWARD, moves=3)]
        assert session.result == GameResult(score=2 * REWARD, moves=3)

    def test_reset_waits_for_full_delay(self, abab_session, scheduler):
        abab_session.select_card(0)
        abab_session.select_card(1)

        scheduler.advance(DELAY_MS - 1)
        assert abab_session.get_state().phase == GamePhase.EVALUATING

        scheduler.advance(1)
        assert abab_session.get_state().phase == GamePhase.AWAITING_FIRST

    def test_match_is_synchronous(self, abab_session, scheduler):
        abab_session.select_card(0)
        abab_session.select_card(2)

        assert scheduler.pending_count == 0
        assert abab_session.get_state().phase == GamePhase.AWAITING_FIRST


class TestNoOpLaws:
    """Ignored input never changes the board."""

    def test_double_tap_pending_card(self, abab_session):
        abab_session.select_card(0)
        before = abab_session.get_state()

        assert abab_session.select_card(0) == SelectionOutcome.IGNORED
        assert abab_session.get_state() == before

    def test_tap_matched_card(self, abab_session):
        abab_session.select_card(0)
        abab_session.select_card(2)
        before = abab_session.get_state()

        assert abab_session.select_card(0) == SelectionOutcome.IGNORED
        assert abab_session.select_card(2) == SelectionOutcome.IGNORED
        assert abab_session.get_state() == before

    def test_input_rejected_during_delay(self, abab_session, scheduler):
        abab_session.select_card(0)
        abab_session.select_card(1)
        before = abab_session.get_state()

        for card_id in range(4):
            assert abab_session.select_card(card_id) == SelectionOutcome.IGNORED
        assert abab_session.get_state() == before

        scheduler.advance(DELAY_MS)
        assert abab_session.select_card(2) == SelectionOutcome.REVEALED

    def test_ignored_input_not_broadcast(self, abab_session):
        changes = []
        abab_session.on_change(changes.append)
        abab_session.select_card(0)
        abab_session.select_card(0)
        assert len(changes) == 1


class TestAccounting:
    """Moves count attempts, score counts matches."""

    @pytest.mark.parametrize("seed", range(10))
    def test_random_play_keeps_invariants(self, session, scheduler, seed):
        session.new_game(pair_count=6, seed=seed)
        rng = random.Random(seed)
        attempts = 0
        matches = 0
        completed = []
        session.on_complete(completed.append)

        for _ in range(2000):
            if session.get_state().is_complete:
                break
            outcome = session.select_card(rng.randrange(12))
            if outcome in {SelectionOutcome.MATCHED, SelectionOutcome.COMPLETED}:
                attempts += 1
                matches += 1
            elif outcome == SelectionOutcome.MISMATCHED:
                attempts += 1
                scheduler.advance(DELAY_MS)

            state = session.get_state()
            assert state.moves == attempts
            assert state.score == matches * REWARD
            assert len([c for c in state.cards if c.face_up and not c.matched]) <= 2
            assert (state.phase == GamePhase.COMPLETE) == all(c.matched for c in state.cards)
            assert (state.phase == GamePhase.EVALUATING) == (
                len([c for c in state.cards if c.face_up and not c.matched]) == 2
            )

        assert session.get_state().is_complete
        assert len(completed) == 1

    def test_perfect_game(self, session, completions):
        session.new_game(pair_count=8, seed=7)
        solve(session)

        state = session.get_state()
        assert state.is_complete
        assert state.moves == 8
        assert state.pairs_matched == 8
        assert completions == [GameResult(score=8 * REWARD, moves=8)]

    def test_custom_reward(self, scheduler, identity_rng):
        session = GameSession(scheduler=scheduler, match_reward=25)
        session.new_game(pool=["A", "B"], pair_count=2, rng=identity_rng)
        session.select_card(0)
        session.select_card(2)
        assert session.get_state().score == 25


class TestCompletion:
    """The completion observer fires exactly once per game."""

    def test_fires_once_per_game(self, session, completions):
        session.new_game(pair_count=2, seed=1)
        solve(session)
        for card_id in range(4):
            session.select_card(card_id)
        assert len(completions) == 1

        session.new_game(pair_count=2, seed=2)
        solve(session)
        assert len(completions) == 2

    def test_failing_observer_does_not_break_game(self, session):
        def explode(result):
            raise RuntimeError("observer failure")

        results = []
        session.on_complete(explode)
        session.on_complete(results.append)
        session.new_game(pair_count=2, seed=3)
        solve(session)

        assert session.get_state().is_complete
        assert len(results) == 1

    def test_abandoned_game_never_completes(self, session, completions):
        session.new_game(pair_count=2, seed=1)
        session.select_card(0)
        session.new_game(pair_count=2, seed=1)
        assert completions == []
        assert session.result is None


class TestNewGame:
    """Starting games and superseding them."""

    def test_fresh_state(self, session):
        snapshot = session.new_game(pair_count=4, seed=1)

        assert snapshot.moves == 0
        assert snapshot.score == 0
        assert snapshot.phase == GamePhase.AWAITING_FIRST
        assert len(snapshot.cards) == 8
        assert not any(c.face_up for c in snapshot.cards)

    def test_default_board(self, session):
        assert len(session.new_game().cards) == 16

    def test_seeded_deal_reproducible(self, session):
        first = [c.symbol for c in session.new_game(seed=99).cards]
        second = [c.symbol for c in session.new_game(seed=99).cards]
        assert first == second

    def test_new_game_cancels_pending_reset(self, abab_session, scheduler, identity_rng):
        abab_session.select_card(0)
        abab_session.select_card(1)
        assert scheduler.pending_count == 1

        abab_session.new_game(pool=["A", "B"], pair_count=2, rng=identity_rng)
        assert scheduler.pending_count == 0
        assert not abab_session.is_reset_pending

        abab_session.select_card(0)
        abab_session.select_card(1)
        scheduler.advance(DELAY_MS // 2)
        assert abab_session.get_state().phase == GamePhase.EVALUATING

    def test_stale_callback_ignored_without_cancellation(self, identity_rng):
        scheduler = FireAndForgetScheduler()
        session = GameSession(scheduler=scheduler)
        session.new_game(pool=["A", "B"], pair_count=2, rng=identity_rng)
        session.select_card(0)
        session.select_card(1)
        stale = list(scheduler.callbacks)

        session.new_game(pool=["A", "B"], pair_count=2, rng=identity_rng)
        session.select_card(0)
        session.select_card(1)
        before = session.get_state()

        stale[0]()
        assert session.get_state() == before
        assert session.get_state().phase == GamePhase.EVALUATING

        scheduler.fire_all()
        assert session.get_state().phase == GamePhase.AWAITING_FIRST

    def test_generation_increments(self, session):
        session.new_game(pair_count=2, seed=1)
        session.new_game(pair_count=2, seed=1)
        assert session.generation == 2
        assert session.get_state().generation == 2


class TestErrors:
    """Errors are distinct from ignored input."""

    def test_select_before_new_game(self, session):
        with pytest.raises(NoActiveGame):
            session.select_card(0)

    def test_get_state_before_new_game(self, session):
        assert not session.has_game
        with pytest.raises(NoActiveGame):
            session.get_state()

    @pytest.mark.parametrize("card_id", [-1, 4, 99])
    def test_out_of_range_selection(self, abab_session, card_id):
        before = abab_session.get_state()
        with pytest.raises(InvalidSelection):
            abab_session.select_card(card_id)
        assert abab_session.get_state() == before

    def test_configuration_error_on_first_game(self, session):
        with pytest.raises(InvalidConfiguration):
            session.new_game(pool=["a", "b", "c"], pair_count=5)
        assert not session.has_game

    def test_configuration_error_leaves_game_intact(self, abab_session, scheduler):
        abab_session.select_card(0)
        abab_session.select_card(1)
        before = abab_session.get_state()

        with pytest.raises(InvalidConfiguration):
            abab_session.new_game(pool=["a", "b", "c"], pair_count=5)

        assert abab_session.get_state() == before
        assert abab_session.is_reset_pending
        scheduler.advance(DELAY_MS)
        assert abab_session.get_state().phase == GamePhase.AWAITING_FIRST

    @pytest.mark.parametrize("pair_count", [0, -3])
    def test_non_positive_pairs(self, session, pair_count):
        with pytest.raises(InvalidConfiguration):
            session.new_game(pair_count=pair_count)

    def test_empty_pool(self, session):
        with pytest.raises(InvalidConfiguration):
            session.new_game(pool=[], pair_count=2)

    def test_bad_reward_rejected(self):
        with pytest.raises(InvalidConfiguration):
            GameSession(match_reward=0)


class TestSnapshots:
    """Snapshots are read-only."""

    def test_snapshot_is_frozen(self, abab_session):
        snapshot = abab_session.get_state()
        with pytest.raises(AttributeError):
            snapshot.score = 100
        with pytest.raises(AttributeError):
            snapshot.cards[0].face_up = True

    def test_snapshot_detached_from_engine(self, abab_session):
        snapshot = abab_session.get_state()
        abab_session.select_card(0)
        assert not snapshot.cards[0].face_up
        assert abab_session.get_state().cards[0].face_up

    def test_change_observer_sees_reset(self, abab_session, scheduler):
        phases = []
        abab_session.on_change(lambda snap: phases.append(snap.phase))
        abab_session.select_card(0)
        abab_session.select_card(1)
        scheduler.advance(DELAY_MS)

        assert phases == [
            GamePhase.AWAITING_SECOND,
            GamePhase.EVALUATING,
            GamePhase.AWAITING_FIRST,
        ]
