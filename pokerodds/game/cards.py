"""Card, combo and starting hand representation utilities."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

import numpy as np
from treys import Card as TreysCard

from pokerodds.errors import InvalidBoard, InvalidNotation


class Rank(IntEnum):
    """Card ranks (2-14 where 14 is Ace)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


class Suit(IntEnum):
    """Card suits."""
    CLUBS = 0
    DIAMONDS = 1
    HEARTS = 2
    SPADES = 3


# Mapping for string conversion
RANK_STR = {
    2: "2", 3: "3", 4: "4", 5: "5", 6: "6", 7: "7", 8: "8", 9: "9",
    10: "T", 11: "J", 12: "Q", 13: "K", 14: "A"
}
STR_RANK = {v: k for k, v in RANK_STR.items()}

SUIT_STR = {0: "c", 1: "d", 2: "h", 3: "s"}
STR_SUIT = {v: k for k, v in SUIT_STR.items()}

MAX_BOARD_CARDS = 5


def parse_rank(char: str) -> int:
    """Parse a single rank character ('A', 'k', 'T', '9', ...)."""
    rank = STR_RANK.get(char.upper())
    if rank is None:
        raise InvalidNotation(f"Invalid rank: {char}")
    return rank


@dataclass(frozen=True)
class Card:
    """A playing card."""
    rank: int  # 2-14
    suit: int  # 0-3

    def __str__(self) -> str:
        return f"{RANK_STR[self.rank]}{SUIT_STR[self.suit]}"

    def __repr__(self) -> str:
        return str(self)

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Parse card from string like 'As', 'Th', '2c'."""
        if len(s) != 2:
            raise InvalidNotation(f"Invalid card string: {s}")
        rank_char = s[0].upper()
        suit_char = s[1].lower()

        if rank_char not in STR_RANK:
            raise InvalidNotation(f"Invalid rank: {rank_char}")
        if suit_char not in STR_SUIT:
            raise InvalidNotation(f"Invalid suit: {suit_char}")

        return cls(rank=STR_RANK[rank_char], suit=STR_SUIT[suit_char])

    def to_treys(self) -> int:
        """Convert to treys library card format."""
        return TreysCard.new(str(self))


@dataclass(frozen=True)
class Hand:
    """A concrete two-card holding (one combo)."""
    card1: Card
    card2: Card

    def __post_init__(self):
        if self.card1 == self.card2:
            raise InvalidNotation(f"Hand cannot hold {self.card1} twice")
        # Ensure card1 has higher or equal rank
        if (self.card1.rank, self.card1.suit) < (self.card2.rank, self.card2.suit):
            first, second = self.card2, self.card1
            object.__setattr__(self, "card1", first)
            object.__setattr__(self, "card2", second)

    @property
    def cards(self) -> tuple[Card, Card]:
        return (self.card1, self.card2)

    @property
    def is_pair(self) -> bool:
        """Check if hand is a pocket pair."""
        return self.card1.rank == self.card2.rank

    @property
    def is_suited(self) -> bool:
        """Check if hand is suited."""
        return self.card1.suit == self.card2.suit

    @property
    def canonical(self) -> str:
        """
        Get canonical hand notation (e.g., 'AKs', 'QQ', '72o').

        This groups equivalent hands regardless of specific suits.
        """
        r1 = RANK_STR[self.card1.rank]
        r2 = RANK_STR[self.card2.rank]

        if self.is_pair:
            return f"{r1}{r2}"
        elif self.is_suited:
            return f"{r1}{r2}s"
        else:
            return f"{r1}{r2}o"

    def overlaps(self, cards) -> bool:
        """Check whether this combo shares a card with ``cards``."""
        return self.card1 in cards or self.card2 in cards

    def __str__(self) -> str:
        return f"{self.card1}{self.card2}"

    def __repr__(self) -> str:
        return f"Hand({self.card1}, {self.card2})"

    @classmethod
    def from_string(cls, s: str) -> "Hand":
        """Parse specific cards like 'AsKh'."""
        s = "".join(s.split())
        if len(s) != 4:
            raise InvalidNotation(f"Invalid hand string: {s}")
        return cls(Card.from_string(s[:2]), Card.from_string(s[2:]))

    def to_treys(self) -> list[int]:
        """Convert to treys library format."""
        return [self.card1.to_treys(), self.card2.to_treys()]


@dataclass(frozen=True)
class StartingHand:
    """
    A starting hand specification.

    Either a concrete holding (``holding`` is set, e.g. 'AsKh') or a hand
    class described by its two ranks and suitedness (e.g. 'AKs', 'QQ').
    High == low is a pocket pair; pairs can never be suited.
    """
    high: int
    low: int
    suited: bool = False
    holding: Optional[Hand] = None

    def __post_init__(self):
        for rank in (self.high, self.low):
            if rank not in RANK_STR:
                raise InvalidNotation(f"Invalid rank value: {rank}")
        if self.high < self.low:
            high, low = self.low, self.high
            object.__setattr__(self, "high", high)
            object.__setattr__(self, "low", low)
        if self.high == self.low and self.suited:
            name = RANK_STR[self.high]
            raise InvalidNotation(
                f"Invalid hand: {name}{name}s. Pocket pairs cannot be suited "
                f"(use {name}{name} instead)"
            )

    @classmethod
    def from_holding(cls, hand: Hand) -> "StartingHand":
        """Wrap a concrete combo."""
        return cls(
            high=hand.card1.rank,
            low=hand.card2.rank,
            suited=hand.is_suited,
            holding=hand,
        )

    @classmethod
    def from_string(cls, s: str) -> "StartingHand":
        return parse_hand_notation(s)

    @property
    def is_concrete(self) -> bool:
        return self.holding is not None

    @property
    def is_pair(self) -> bool:
        return self.high == self.low

    @property
    def key(self) -> tuple[int, int, bool]:
        """Canonical identity: pairs by rank, others by (high, low, suited)."""
        return (self.high, self.low, self.suited)

    @property
    def notation(self) -> str:
        if self.holding is not None:
            return str(self.holding)
        high = RANK_STR[self.high]
        low = RANK_STR[self.low]
        if self.is_pair:
            return f"{high}{low}"
        return f"{high}{low}{'s' if self.suited else 'o'}"

    @property
    def display_name(self) -> str:
        """Human readable name, e.g. 'Pocket As' or 'AK suited'."""
        high = RANK_STR[self.high]
        if self.is_pair:
            return f"Pocket {high}s"
        suitedness = "suited" if self.suited else "offsuit"
        return f"{high}{RANK_STR[self.low]} {suitedness}"

    def combos(self) -> list[Hand]:
        """
        Enumerate every physical two-card combo this hand stands for.

        Concrete holdings yield themselves; pairs yield 6 combos, suited
        hands 4 and offsuit hands 12. Order is deterministic.
        """
        if self.holding is not None:
            return [self.holding]

        suits = list(Suit)
        if self.is_pair:
            return [
                Hand(Card(self.high, s1), Card(self.high, s2))
                for i, s1 in enumerate(suits)
                for s2 in suits[i + 1:]
            ]
        if self.suited:
            return [Hand(Card(self.high, s), Card(self.low, s)) for s in suits]
        return [
            Hand(Card(self.high, s1), Card(self.low, s2))
            for s1 in suits
            for s2 in suits
            if s1 != s2
        ]

    @property
    def combo_count(self) -> int:
        if self.holding is not None:
            return 1
        if self.is_pair:
            return 6
        return 4 if self.suited else 12

    def __str__(self) -> str:
        return self.notation


def parse_hand_notation(text: str) -> StartingHand:
    """
    Parse a single starting hand.

    Accepted forms (case and whitespace insensitive):
        'QQ'   - pocket pair
        'AKs'  - suited hand class ('KAs' is the same hand)
        'AKo'  - offsuit hand class
        'AsKh' - specific cards
    """
    if text is None:
        raise InvalidNotation("Hand text is empty")
    s = "".join(text.split())

    if len(s) == 4:
        return StartingHand.from_holding(Hand.from_string(s))

    if len(s) == 2:
        r1 = parse_rank(s[0])
        r2 = parse_rank(s[1])
        if r1 != r2:
            raise InvalidNotation(
                f"Invalid hand: {s}. Add 's' for suited or 'o' for offsuit"
            )
        return StartingHand(high=r1, low=r2)

    if len(s) == 3:
        r1 = parse_rank(s[0])
        r2 = parse_rank(s[1])
        indicator = s[2].lower()
        if indicator not in ("s", "o"):
            raise InvalidNotation(
                f"Invalid suit indicator in {s}. Use 's' for suited or 'o' for offsuit"
            )
        return StartingHand(high=r1, low=r2, suited=indicator == "s")

    raise InvalidNotation(
        f"Invalid hand format: {s}. Use format like: 22, AKo, AKs, or specific cards AsKh"
    )


def parse_board(text: Optional[str]) -> tuple[Card, ...]:
    """
    Parse board cards like 'As Kd 2c' or 'askd2c'.

    Returns an empty tuple for blank input.
    """
    if not text or not text.strip():
        return ()

    cleaned = "".join(text.split())
    if len(cleaned) % 2:
        raise InvalidBoard(f"Invalid board card format: {text}")

    cards: list[Card] = []
    for i in range(0, len(cleaned), 2):
        token = cleaned[i:i + 2]
        try:
            card = Card.from_string(token)
        except InvalidNotation as exc:
            raise InvalidBoard(f"Invalid card in board: {token}") from exc
        if card in cards:
            raise InvalidBoard(f"Duplicate board card: {card}")
        cards.append(card)

    if len(cards) > MAX_BOARD_CARDS:
        raise InvalidBoard(
            f"Too many board cards: {len(cards)}. Maximum is {MAX_BOARD_CARDS}."
        )

    return tuple(cards)


class Deck:
    """A standard 52-card deck driven by an injectable random generator."""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.cards: list[Card] = []
        self.reset()

    def reset(self) -> None:
        """Reset deck to full 52 cards."""
        self.cards = [
            Card(rank, suit)
            for rank in range(2, 15)
            for suit in range(4)
        ]

    def sample(self, n: int) -> list[Card]:
        """Draw n distinct random cards without removing them."""
        if n > len(self.cards):
            raise ValueError(f"Cannot sample {n} cards, only {len(self.cards)} remaining")
        if n == 0:
            return []
        picks = self.rng.choice(len(self.cards), size=n, replace=False)
        return [self.cards[i] for i in picks]

    def remove(self, cards) -> None:
        """Remove specific cards from the deck."""
        for card in cards:
            if card in self.cards:
                self.cards.remove(card)

    def __len__(self) -> int:
        return len(self.cards)
