"""
Deck Generator - Builds a shuffled, paired deck from a symbol pool.
"""

from __future__ import annotations
import random
from typing import Sequence

from .errors import InsufficientSymbols, InvalidConfiguration
from .state import Card


MIN_PAIR_COUNT = 2
DEFAULT_PAIR_COUNT = 8

DEFAULT_SYMBOL_POOL: tuple[str, ...] = (
    # Fruit
    "🍎", "🍌", "🍇", "🍓", "🍍", "🥝", "🍒", "🍑",
    # Vehicles
    "🚗", "🚲", "🚂", "🚁", "🚀", "⛵", "🚤", "🚢",
    # Animals
    "🐶", "🐱", "🐭", "🐹", "🐰", "🦊", "🐻", "🐼",
    # Balls
    "⚽", "🏀", "🏈", "⚾", "🎾", "🏐", "🏉", "🎱",
)


def _distinct(pool: Sequence[str]) -> list[str]:
    seen = set()
    symbols = []
    for symbol in pool:
        if symbol not in seen:
            seen.add(symbol)
            symbols.append(symbol)
    return symbols


def validate_configuration(pool: Sequence[str], pair_count: int) -> list[str]:
    """
    Check that a board can be dealt.

    Returns the distinct symbols of the pool, in pool order.
    """
    if isinstance(pair_count, bool) or not isinstance(pair_count, int):
        raise InvalidConfiguration(f"pair_count must be an integer, got {pair_count!r}")
    if pair_count <= 0:
        raise InvalidConfiguration(f"pair_count must be positive, got {pair_count}")
    symbols = _distinct(pool)
    if not symbols:
        raise InvalidConfiguration("Symbol pool is empty")
    if pair_count > len(symbols):
        raise InsufficientSymbols(pair_count, len(symbols))
    if pair_count < MIN_PAIR_COUNT:
        raise InvalidConfiguration(
            f"A board needs at least {MIN_PAIR_COUNT} pairs, got {pair_count}"
        )
    return symbols


def _fisher_yates(items: list, rng: random.Random, stop: int | None = None) -> list:
    """
    In-place Fisher-Yates shuffle.

    With ``stop`` set, only the first ``stop`` slots are drawn, which is a
    uniform sample without replacement.
    """
    n = len(items)
    stop = n if stop is None else stop
    for i in range(min(stop, n - 1)):
        j = rng.randrange(i, n)
        items[i], items[j] = items[j], items[i]
    return items


def generate_deck(
    pool: Sequence[str],
    pair_count: int,
    rng: random.Random | None = None,
) -> tuple[Card, ...]:
    """
    Deal a paired deck.

    Args:
        pool: Universe of face values (duplicates are collapsed)
        pair_count: Number of distinct symbols on the board
        rng: Randomness source; a fresh unseeded Random if omitted

    Returns:
        2 * pair_count face-down cards, ids equal to their positions

    Raises:
        InsufficientSymbols: pool has fewer distinct symbols than pair_count
        InvalidConfiguration: pair_count not a usable positive integer
    """
    symbols = validate_configuration(pool, pair_count)
    rng = rng or random.Random()

    chosen = _fisher_yates(symbols, rng, stop=pair_count)[:pair_count]
    instances = _fisher_yates(chosen + chosen, rng)

    return tuple(Card(id=i, symbol=symbol) for i, symbol in enumerate(instances))
