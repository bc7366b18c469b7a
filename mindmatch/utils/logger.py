"""Logging utilities and terminal board display."""

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mindmatch.engine_core.state import GameSnapshot


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


class BoardDisplay:
    """Render a game snapshot as a text grid."""

    def __init__(self, columns: int = 4, hidden: str = "??"):
        self.columns = columns
        self.hidden = hidden

    def render(self, snapshot: "GameSnapshot") -> str:
        """Render the board and the score line."""
        cells = []
        for card in snapshot.cards:
            face = card.visible_symbol or self.hidden
            marker = "*" if card.matched else " "
            cells.append(f"{card.id:>2}:{face}{marker}")

        rows = [
            "  ".join(cells[i:i + self.columns])
            for i in range(0, len(cells), self.columns)
        ]
        rows.append(
            f"Score: {snapshot.score}  Moves: {snapshot.moves}  "
            f"Pairs: {snapshot.pairs_matched}/{snapshot.pairs_total}"
        )
        return "\n".join(rows)

    def print_board(self, snapshot: "GameSnapshot") -> None:
        print(self.render(snapshot))
