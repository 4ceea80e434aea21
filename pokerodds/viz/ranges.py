"""Range display and visualization utilities."""

from typing import Optional

import numpy as np
from rich.console import Console
from rich.table import Table
from rich.style import Style
from rich.text import Text

from pokerodds.game.cards import RANK_STR
from pokerodds.game.ranges import Range, parse_range


# Standard hand matrix layout (13x13)
RANKS = "AKQJT98765432"

# Total two-card combos in a deck: C(52, 2)
TOTAL_COMBOS = 1326

# Pre-computed hand matrix positions
# Pairs on diagonal, suited above, offsuit below
HAND_MATRIX = []
for i, r1 in enumerate(RANKS):
    row = []
    for j, r2 in enumerate(RANKS):
        if i == j:
            row.append(f"{r1}{r2}")  # Pair
        elif i < j:
            row.append(f"{r1}{r2}s")  # Suited (above diagonal)
        else:
            row.append(f"{r2}{r1}o")  # Offsuit (below diagonal)
    HAND_MATRIX.append(row)


def matrix_position(high: int, low: int, suited: bool) -> tuple[int, int]:
    """Row/column of a hand class in HAND_MATRIX."""
    hi = RANKS.index(RANK_STR[high])
    lo = RANKS.index(RANK_STR[low])
    if suited:
        return hi, lo
    return lo, hi


class RangeDisplay:
    """Display a poker range as a 13x13 matrix in the terminal."""

    def __init__(self, hand_range: Range, console: Optional[Console] = None):
        self.range = hand_range
        self.console = console or Console()

    @classmethod
    def from_string(cls, range_str: str, console: Optional[Console] = None) -> "RangeDisplay":
        return cls(parse_range(range_str), console=console)

    def combo_matrix(self) -> np.ndarray:
        """
        Combos per matrix cell.

        Hand classes fill their cell with all their combos; specific cards
        count one combo in their class cell.
        """
        matrix = np.zeros((13, 13), dtype=int)
        for hand in self.range:
            row, col = matrix_position(hand.high, hand.low, hand.suited)
            matrix[row, col] += hand.combo_count
        return matrix

    @property
    def combo_fraction(self) -> float:
        """Share of all starting combos covered by the range (0-1)."""
        return self.range.combo_count / TOTAL_COMBOS

    def display_terminal(self, title: str = "Range") -> None:
        """Display range in terminal using rich."""
        matrix = self.combo_matrix()
        table = Table(
            title=title,
            show_header=False,
            caption=(
                f"{len(self.range)} hands, {self.range.combo_count} combos "
                f"({self.combo_fraction * 100:.1f}%)"
            ),
        )

        for _ in RANKS:
            table.add_column(justify="center")

        for i in range(13):
            row = []
            for j in range(13):
                hand = HAND_MATRIX[i][j]
                if matrix[i, j] == 0:
                    style = Style(bgcolor="grey30", color="grey50")
                elif i == j:
                    style = Style(bgcolor="blue", color="white")
                elif i < j:
                    style = Style(bgcolor="green", color="white")
                else:
                    style = Style(bgcolor="yellow", color="black")
                row.append(Text(hand.center(3), style=style))
            table.add_row(*row)

        self.console.print(table)


def display_range(range_str: str, title: str = "Range", console: Optional[Console] = None) -> None:
    """
    Convenience function to display a range.

    Args:
        range_str: Range notation, e.g. "77+,AJs+,KQo"
        title: Display title
        console: Console to print to (default: stdout)
    """
    RangeDisplay.from_string(range_str, console=console).display_terminal(title=title)
