"""
Game State - The authoritative record of one memory game.

Design principles:
- Immutable-friendly: all mutations return new state
- Owned by exactly one GameSession
- Snapshots handed to callers are frozen copies
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum


class GamePhase(Enum):
    """Selection state machine phases."""
    AWAITING_FIRST = "awaiting_first"
    AWAITING_SECOND = "awaiting_second"  # One card revealed, unmatched
    EVALUATING = "evaluating"  # Two mismatched cards shown, reset pending
    COMPLETE = "complete"


@dataclass(frozen=True)
class Card:
    """
    A card on the board.

    The id is the card's position in the deck.
    """
    id: int
    symbol: str
    face_up: bool = False
    matched: bool = False

    def flipped(self, face_up: bool) -> Card:
        """Return a copy with a different face."""
        return replace(self, face_up=face_up)

    def as_matched(self) -> Card:
        """Return a matched copy. Matched cards stay face up."""
        return replace(self, face_up=True, matched=True)

    @property
    def is_revealed_unmatched(self) -> bool:
        return self.face_up and not self.matched


@dataclass(frozen=True)
class GameResult:
    """Final tally handed to completion observers."""
    score: int
    moves: int


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state that the engine operates on.
    All state changes go through the reducer.
    """
    cards: tuple[Card, ...]
    first_selection: int | None = None
    second_selection: int | None = None
    moves: int = 0
    score: int = 0
    phase: GamePhase = GamePhase.AWAITING_FIRST
    generation: int = 0
    match_reward: int = 10

    @classmethod
    def create(cls, cards, generation: int = 0, match_reward: int = 10) -> GameState:
        """Fresh state for a newly dealt deck."""
        return cls(
            cards=tuple(cards),
            generation=generation,
            match_reward=match_reward,
        )

    @property
    def card_count(self) -> int:
        return len(self.cards)

    @property
    def pairs_total(self) -> int:
        return len(self.cards) // 2

    @property
    def pairs_matched(self) -> int:
        return sum(1 for c in self.cards if c.matched) // 2

    @property
    def all_matched(self) -> bool:
        return all(c.matched for c in self.cards)

    @property
    def is_complete(self) -> bool:
        return self.phase == GamePhase.COMPLETE

    @property
    def revealed_unmatched(self) -> list[int]:
        """Ids of cards currently face up but not yet matched."""
        return [c.id for c in self.cards if c.is_revealed_unmatched]

    def in_range(self, card_id: int) -> bool:
        return 0 <= card_id < len(self.cards)

    def card(self, card_id: int) -> Card:
        return self.cards[card_id]

    def with_cards(self, *updated: Card) -> GameState:
        """Return new state with the given cards replaced by id."""
        new_cards = list(self.cards)
        for card in updated:
            new_cards[card.id] = card
        return replace(self, cards=tuple(new_cards))

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def result(self) -> GameResult:
        return GameResult(score=self.score, moves=self.moves)

    def snapshot(self) -> GameSnapshot:
        """Read-only view for presentation."""
        return GameSnapshot(
            cards=tuple(
                CardView(id=c.id, symbol=c.symbol, face_up=c.face_up, matched=c.matched)
                for c in self.cards
            ),
            moves=self.moves,
            score=self.score,
            phase=self.phase,
            pending_selection=self.first_selection,
            pairs_total=self.pairs_total,
            pairs_matched=self.pairs_matched,
            generation=self.generation,
        )


@dataclass(frozen=True)
class CardView:
    """Card as seen by the presentation layer."""
    id: int
    symbol: str
    face_up: bool
    matched: bool

    @property
    def visible_symbol(self) -> str | None:
        """The symbol if the card is showing, else None."""
        return self.symbol if self.face_up or self.matched else None


@dataclass(frozen=True)
class GameSnapshot:
    """
    Immutable snapshot of a GameState.

    Returned by GameSession.get_state(). Built from tuples of frozen
    dataclasses, so callers cannot reach back into the engine.
    """
    cards: tuple[CardView, ...]
    moves: int
    score: int
    phase: GamePhase
    pending_selection: int | None
    pairs_total: int
    pairs_matched: int
    generation: int

    @property
    def is_complete(self) -> bool:
        return self.phase == GamePhase.COMPLETE
