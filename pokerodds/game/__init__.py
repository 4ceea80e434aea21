"""Game representation module."""

from .cards import (
    Card,
    Hand,
    StartingHand,
    Deck,
    parse_board,
    parse_hand_notation,
)
from .ranges import POSITION_RANGES, Range, parse_range, position_range
from .evaluator import (
    EvaluatedHand,
    HandCategory,
    Outcome,
    compare,
    evaluate5,
    evaluate_best5,
)
from .equity import (
    EquityCalculator,
    EquityConfig,
    EquityResult,
    RangeEquityResult,
    calculate_hand_strength,
    simulate_hand_vs_hand,
    simulate_range_vs_range,
)

__all__ = [
    "Card",
    "Hand",
    "StartingHand",
    "Deck",
    "parse_board",
    "parse_hand_notation",
    "POSITION_RANGES",
    "Range",
    "parse_range",
    "position_range",
    "EvaluatedHand",
    "HandCategory",
    "Outcome",
    "compare",
    "evaluate5",
    "evaluate_best5",
    "EquityCalculator",
    "EquityConfig",
    "EquityResult",
    "RangeEquityResult",
    "calculate_hand_strength",
    "simulate_hand_vs_hand",
    "simulate_range_vs_range",
]
