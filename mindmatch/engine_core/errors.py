"""
Engine errors.

Only structurally invalid calls raise. Taps the player simply cannot act on
(matched card, pending card, board locked during a mismatch) are no-ops and
never reach this module.
"""


class GameError(Exception):
    """Base class for all engine errors."""
    error_code = "GAME_ERROR"


class InvalidConfiguration(GameError, ValueError):
    """Raised by new_game when the requested board cannot be built."""
    error_code = "INVALID_CONFIGURATION"


class InsufficientSymbols(InvalidConfiguration):
    """The symbol pool holds fewer distinct symbols than requested pairs."""
    error_code = "INSUFFICIENT_SYMBOLS"

    def __init__(self, pair_count: int, available: int):
        self.pair_count = pair_count
        self.available = available
        super().__init__(
            f"Requested {pair_count} pairs but the pool has only {available} distinct symbols"
        )


class InvalidSelection(GameError, IndexError):
    """Raised by select_card for ids outside the deck."""
    error_code = "INVALID_SELECTION"


class NoActiveGame(GameError):
    """select_card was called before any game was started."""
    error_code = "NO_ACTIVE_GAME"
