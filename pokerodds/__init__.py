"""
pokerodds: Heads-up Hold'em Equity Calculator

Monte Carlo equity for two starting hands or two ranges of starting
hands, with compact range notation ("77+", "A5s+", "KQo") and an
optional partial board.
"""

__version__ = "0.1.0"

from .errors import (
    PokerOddsError,
    InvalidNotation,
    InvalidRangeToken,
    EmptyRange,
    InvalidBoard,
    NoValidCombinations,
)
from .game import (
    parse_hand_notation,
    parse_range,
    parse_board,
    evaluate5,
    evaluate_best5,
    compare,
    simulate_hand_vs_hand,
    simulate_range_vs_range,
)

__all__ = [
    # Errors
    "PokerOddsError",
    "InvalidNotation",
    "InvalidRangeToken",
    "EmptyRange",
    "InvalidBoard",
    "NoValidCombinations",
    # Parsing
    "parse_hand_notation",
    "parse_range",
    "parse_board",
    # Evaluation
    "evaluate5",
    "evaluate_best5",
    "compare",
    # Simulation
    "simulate_hand_vs_hand",
    "simulate_range_vs_range",
]
