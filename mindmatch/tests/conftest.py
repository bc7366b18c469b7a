"""
Pytest fixtures for MindMatch tests.
"""

import random

import pytest

from ..engine_core.state import GameState, Card
from ..session import GameSession, ManualScheduler


REWARD = 10
DELAY_MS = 1000


class IdentityRandom(random.Random):
    """Random whose Fisher-Yates draws always keep items in place."""

    def randrange(self, start, stop=None, step=1):
        return start


@pytest.fixture
def identity_rng() -> random.Random:
    return IdentityRandom()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def session(scheduler) -> GameSession:
    """Session with no game dealt yet."""
    return GameSession(scheduler=scheduler, match_reward=REWARD, mismatch_delay_ms=DELAY_MS)


@pytest.fixture
def abab_session(session, identity_rng) -> GameSession:
    """Two-pair game dealt as [A, B, A, B]."""
    session.new_game(pool=["A", "B"], pair_count=2, rng=identity_rng)
    return session


@pytest.fixture
def abab_state() -> GameState:
    """Reducer-level [A, B, A, B] board."""
    cards = [Card(id=i, symbol=s) for i, s in enumerate("ABAB")]
    return GameState.create(cards, generation=1, match_reward=REWARD)


@pytest.fixture
def completions(session) -> list:
    """Collect completion results of the session fixture."""
    results = []
    session.on_complete(results.append)
    return results


def solve(session: GameSession):
    """Play a dealt game to completion without mistakes."""
    snapshot = session.get_state()
    positions: dict[str, list[int]] = {}
    for card in snapshot.cards:
        if not card.matched:
            positions.setdefault(card.symbol, []).append(card.id)
    for first, second in positions.values():
        session.select_card(first)
        session.select_card(second)
