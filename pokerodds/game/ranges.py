"""Hand range parsing and representation."""

import logging
from typing import Iterable, Iterator

from pokerodds.errors import EmptyRange, InvalidNotation, InvalidRangeToken
from .cards import STR_RANK, StartingHand, parse_hand_notation

logger = logging.getLogger(__name__)


# Default 6-max opening ranges by position
POSITION_RANGES = {
    "UTG": "A4s+,K9s+,QTs+,77+,AJo+,JTs",
    "UTG+1": "A3s+,K9s+,QTs+,77+,AJo+,JTs",
    "UTG+2": "A3s+,K5s+,Q9s+,77+,ATo+,JTs,T9s,KJo+",
    "LJ": "A2s+,K5s+,Q9s+,J9s+,66+,T9s,ATo+",
    "HJ": "A2s+,K5s+,Q8s+,J9s+,55+,T9s,A9o+,T8s",
    "CO": "A5o,A8o+,KTo+,QTo+,JTo+,A2s+,K2s+,Q5s+,J7s+,T8s+,44+,87s,97s,98s",
    "BTN": (
        "A3o+,A8o+,K8o+,QTo+,JTo+,A2s+,K2s+,Q5s+,J7s+,T8s+,22+,"
        "87s,97s,98s,54s,65s,75s,96s+,T8o"
    ),
    "SB": (
        "A3o+,A8o+,K8o+,QTo+,JTo+,A2s+,K2s+,Q5s+,J7s+,T8s+,22+,"
        "87s,97s,98s,54s,65s,75s,96s+"
    ),
    "BB": (
        "22+,A2+,K2+,Q2+,J2+,T2+,92+,82+,72+,62+,52+,42+,32+,"
        "A2s+,K2s+,Q2s+,J2s+,T2s+,92s+,82s+,72s+,62s+,52s+,42s+,32s+"
    ),
}


class Range:
    """
    A set of starting hands keyed by canonical identity.

    Insertion order is preserved for display. Adding a hand whose key is
    already present is a no-op.
    """

    def __init__(self, hands: Iterable[StartingHand] = ()):
        self._hands: dict[tuple[int, int, bool], StartingHand] = {}
        for hand in hands:
            self.add(hand)

    def add(self, hand: StartingHand) -> bool:
        """Add a hand. Returns False if an equivalent hand was already present."""
        if hand.key in self._hands:
            return False
        self._hands[hand.key] = hand
        return True

    @property
    def hands(self) -> list[StartingHand]:
        return list(self._hands.values())

    @property
    def combo_count(self) -> int:
        """Total number of physical combos in the range."""
        return sum(hand.combo_count for hand in self._hands.values())

    def to_string(self) -> str:
        """Serialize to comma-separated notation that parses back to this range."""
        return ",".join(hand.notation for hand in self._hands.values())

    @classmethod
    def from_string(cls, range_str: str) -> "Range":
        return parse_range(range_str)

    def __contains__(self, item) -> bool:
        if isinstance(item, str):
            item = parse_hand_notation(item)
        return item.key in self._hands

    def __iter__(self) -> Iterator[StartingHand]:
        return iter(self._hands.values())

    def __len__(self) -> int:
        return len(self._hands)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Range):
            return NotImplemented
        # Notation tells a specific holding ('AsKh') apart from its class ('AKo')
        return {h.notation for h in self} == {h.notation for h in other}

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Range({self.to_string()!r})"


def parse_range(range_str: str) -> Range:
    """
    Parse a hand range string into a Range.

    Examples:
        "AA" -> AA
        "AKs" -> AKs
        "TT+" -> TT, JJ, QQ, KK, AA
        "ATs+" -> ATs, AJs, AQs, AKs
        "AT+" -> ATo, AJo, AQo, AKo
        "22-55" -> 22, 33, 44, 55
    """
    if not range_str or not range_str.strip():
        raise EmptyRange("Range string cannot be empty")

    tokens = [t.strip() for t in range_str.split(",")]
    tokens = [t for t in tokens if t]
    if not tokens:
        raise EmptyRange(f"Range string has no hands: {range_str!r}")

    result = Range()
    for token in tokens:
        for hand in _parse_token(token):
            result.add(hand)

    logger.debug("Parsed %d tokens into %d hands", len(tokens), len(result))
    return result


def position_range(position: str) -> Range:
    """Return the preset opening range for a table position (e.g. 'BTN')."""
    key = position.strip().upper()
    if key not in POSITION_RANGES:
        raise ValueError(
            f"Unknown position: {position}. Choose from {', '.join(POSITION_RANGES)}"
        )
    return parse_range(POSITION_RANGES[key])


def _parse_token(token: str) -> list[StartingHand]:
    """Expand a single range token."""
    token = "".join(token.split())

    if token.endswith("+"):
        return _expand_plus(token, token[:-1])

    if "-" in token:
        return _expand_span(token)

    try:
        return [parse_hand_notation(token)]
    except InvalidNotation as exc:
        raise InvalidRangeToken(f"Invalid hand in range: {token}. {exc}") from exc


def _rank(token: str, char: str) -> int:
    rank = STR_RANK.get(char.upper())
    if rank is None:
        raise InvalidRangeToken(f"Invalid cards in range: {token}")
    return rank


def _expand_plus(token: str, base: str) -> list[StartingHand]:
    # Pair plus: "55+"
    if len(base) == 2 and base[0].upper() == base[1].upper():
        start_rank = _rank(token, base[0])
        return [StartingHand(rank, rank) for rank in range(start_rank, 15)]

    if len(base) == 3:
        r1 = _rank(token, base[0])
        r2 = _rank(token, base[1])
        indicator = base[2].lower()
        if indicator not in ("s", "o"):
            raise InvalidRangeToken(
                f"Invalid suit indicator in range: {token}. "
                "Use 's' for suited or 'o' for offsuit"
            )
        if r1 == r2:
            kind = "suited" if indicator == "s" else "offsuit"
            raise InvalidRangeToken(f"Pocket pairs cannot be {kind}: {token}")
        return _kicker_run(max(r1, r2), min(r1, r2), indicator == "s")

    # No suit indicator: "AT+" defaults to offsuit
    if len(base) == 2:
        r1 = _rank(token, base[0])
        r2 = _rank(token, base[1])
        return _kicker_run(max(r1, r2), min(r1, r2), False)

    raise InvalidRangeToken(f"Invalid range format: {token}")


def _kicker_run(high: int, low: int, suited: bool) -> list[StartingHand]:
    """Every hand with the given high card and a kicker from ``low`` to high-1."""
    return [StartingHand(high, kicker, suited) for kicker in range(low, high)]


def _expand_span(token: str) -> list[StartingHand]:
    """Expand dash notation: '22-55' or 'A2s-A5s'."""
    parts = token.split("-")
    if len(parts) != 2:
        raise InvalidRangeToken(f"Invalid range format: {token}")
    try:
        first, last = (parse_hand_notation(p) for p in parts)
    except InvalidNotation as exc:
        raise InvalidRangeToken(f"Invalid hand in range: {token}. {exc}") from exc

    if first.is_concrete or last.is_concrete:
        raise InvalidRangeToken(f"Dash ranges need hand classes, not cards: {token}")

    if first.is_pair and last.is_pair:
        low, high = sorted((first.high, last.high))
        return [StartingHand(rank, rank) for rank in range(low, high + 1)]

    if (
        first.is_pair
        or last.is_pair
        or first.high != last.high
        or first.suited != last.suited
    ):
        raise InvalidRangeToken(
            f"Dash range ends must share the high card and suitedness: {token}"
        )

    low, high = sorted((first.low, last.low))
    return [StartingHand(first.high, kicker, first.suited) for kicker in range(low, high + 1)]

