"""
Five-card poker hand evaluation.

Hands are reduced to a category plus a tuple of tie-break ranks, so two
evaluated hands compare with ordinary tuple ordering:

- Straight / straight flush: (top rank,), with A-5-4-3-2 topping at 5
- Quads: (quad rank, kicker)
- Full house: (trips rank, pair rank)
- Flush / high card: all five ranks, descending
- Trips: (trips rank, kicker, kicker)
- Two pair: (high pair, low pair, kicker)
- One pair: (pair rank, kicker, kicker, kicker)
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum, IntEnum
from itertools import combinations

from .cards import Card


class HandCategory(IntEnum):
    """Hand categories, weakest first."""
    HIGH_CARD = 0
    ONE_PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8


CATEGORY_NAMES = {
    HandCategory.HIGH_CARD: "High Card",
    HandCategory.ONE_PAIR: "Pair",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.FLUSH: "Flush",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
}

WHEEL = [14, 5, 4, 3, 2]


@dataclass(frozen=True, order=True)
class EvaluatedHand:
    """Category plus tie-break ranks. Higher compares as stronger."""
    category: HandCategory
    values: tuple[int, ...]

    @property
    def name(self) -> str:
        return CATEGORY_NAMES[self.category]

    def __str__(self) -> str:
        return f"{self.name} {self.values}"


class Outcome(Enum):
    """Result of comparing hand A against hand B."""
    A_WINS = 1
    TIE = 0
    B_WINS = -1


def evaluate5(cards: list[Card]) -> EvaluatedHand:
    """
    Evaluate exactly five distinct cards.

    Raises:
        ValueError: if not given five distinct cards
    """
    if len(cards) != 5 or len(set(cards)) != 5:
        raise ValueError(f"Need exactly 5 distinct cards, got {list(cards)}")
    return _evaluate5(cards)


def evaluate_best5(cards: list[Card]) -> EvaluatedHand:
    """
    Evaluate the best five-card hand from 5 to 7 cards.

    Every five-card subset is scored and the strongest kept.
    """
    if not 5 <= len(cards) <= 7:
        raise ValueError(f"Need 5 to 7 cards, got {len(cards)}")
    if len(set(cards)) != len(cards):
        raise ValueError(f"Duplicate cards detected: {list(cards)}")
    if len(cards) == 5:
        return _evaluate5(cards)
    return max(_evaluate5(subset) for subset in combinations(cards, 5))


def compare(a: EvaluatedHand, b: EvaluatedHand) -> Outcome:
    """Compare two evaluated hands: category first, then tie-breaks in order."""
    if a.category != b.category:
        return Outcome.A_WINS if a.category > b.category else Outcome.B_WINS

    for value_a, value_b in zip(a.values, b.values):
        if value_a != value_b:
            return Outcome.A_WINS if value_a > value_b else Outcome.B_WINS

    if len(a.values) != len(b.values):
        return Outcome.A_WINS if len(a.values) > len(b.values) else Outcome.B_WINS
    return Outcome.TIE


def _evaluate5(cards) -> EvaluatedHand:
    ranks = sorted((c.rank for c in cards), reverse=True)
    is_flush = len({c.suit for c in cards}) == 1
    counts = Counter(ranks)

    straight_top = 0
    if len(counts) == 5:
        if ranks[0] - ranks[4] == 4:
            straight_top = ranks[0]
        elif ranks == WHEEL:
            straight_top = 5

    if straight_top and is_flush:
        return EvaluatedHand(HandCategory.STRAIGHT_FLUSH, (straight_top,))

    # Bigger groups first, then higher rank
    groups = sorted(counts.items(), key=lambda item: (item[1], item[0]), reverse=True)
    shape = [count for _, count in groups]
    grouped = tuple(rank for rank, _ in groups)

    if shape[0] == 4:
        return EvaluatedHand(HandCategory.FOUR_OF_A_KIND, grouped)
    if shape == [3, 2]:
        return EvaluatedHand(HandCategory.FULL_HOUSE, grouped)
    if is_flush:
        return EvaluatedHand(HandCategory.FLUSH, tuple(ranks))
    if straight_top:
        return EvaluatedHand(HandCategory.STRAIGHT, (straight_top,))
    if shape[0] == 3:
        return EvaluatedHand(HandCategory.THREE_OF_A_KIND, grouped)
    if shape[:2] == [2, 2]:
        return EvaluatedHand(HandCategory.TWO_PAIR, grouped)
    if shape[0] == 2:
        return EvaluatedHand(HandCategory.ONE_PAIR, grouped)
    return EvaluatedHand(HandCategory.HIGH_CARD, tuple(ranks))
