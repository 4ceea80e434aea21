"""Monte Carlo equity calculation."""

import logging
import time
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np
from treys import Evaluator

from pokerodds.errors import EmptyRange, InvalidBoard, NoValidCombinations
from .cards import Card, Deck, Hand, StartingHand, parse_board, parse_hand_notation
from .evaluator import EvaluatedHand, Outcome, evaluate_best5
from .ranges import Range, parse_range

logger = logging.getLogger(__name__)

HandLike = Union[str, Hand, StartingHand]
RangeLike = Union[str, Range]
BoardLike = Union[None, str, Sequence[Card]]

# treys integer for every card, so runouts convert without string parsing
TREYS_CARDS = {card: card.to_treys() for card in Deck().cards}


@dataclass
class EquityConfig:
    """Configuration for equity simulations."""
    max_hand_pairs: int = 200          # Range matchups used before sampling kicks in
    combos_per_pair: int = 10          # Combo draws per range matchup
    min_runouts_per_combo: int = 20    # Floor on board runouts per accepted combo draw
    time_limit: Optional[float] = None  # Seconds before stopping early (None = no limit)
    deadline_check_interval: int = 500  # Trials between deadline checks


@dataclass(frozen=True)
class EquityResult:
    """Outcome of a heads-up simulation. Equities are percentages."""
    equity_a: float
    equity_b: float
    wins_a: int
    wins_b: int
    ties: int
    trials: int

    @property
    def win_pct_a(self) -> float:
        return self.wins_a / self.trials * 100

    @property
    def win_pct_b(self) -> float:
        return self.wins_b / self.trials * 100

    @property
    def tie_pct(self) -> float:
        return self.ties / self.trials * 100


@dataclass(frozen=True)
class RangeEquityResult(EquityResult):
    """
    Outcome of a range-vs-range simulation.

    Equities are the combo-weighted average over sampled matchups; the
    win/tie counts are raw runout tallies. The sample sizes tell callers
    how much to trust the estimate.
    """
    hands_a: int = 0
    hands_b: int = 0
    hand_pairs_sampled: int = 0
    combos_sampled: int = 0


class EquityCalculator:
    """
    Heads-up equity via Monte Carlo simulation.

    Showdowns are scored with the treys lookup-table evaluator. All
    randomness comes from one numpy Generator, so a fixed seed reproduces
    results exactly.
    """

    def __init__(
        self,
        config: Optional[EquityConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.config = config or EquityConfig()
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.evaluator = Evaluator()

    def hand_vs_hand(
        self,
        hand_a: StartingHand,
        hand_b: StartingHand,
        trials: int = 10000,
        board: Sequence[Card] = (),
    ) -> EquityResult:
        """
        Calculate equity of hand_a vs hand_b.

        Each trial picks one non-conflicting combo pair uniformly and deals
        the rest of the board at random.

        Args:
            hand_a: First hand (concrete cards or a hand class)
            hand_b: Second hand
            trials: Number of Monte Carlo trials
            board: Fixed board cards (0-5)

        Returns:
            EquityResult with both sides' equity in percent
        """
        if trials < 1:
            raise ValueError(f"trials must be at least 1, got {trials}")

        board = tuple(board)
        valid = _valid_combos(hand_a, hand_b, set(board))
        if not valid:
            raise NoValidCombinations(
                f"{hand_a} and {hand_b} cannot be dealt together"
                + (f" on {_board_str(board)}" if board else "")
            )
        logger.debug("Found %d valid combinations for %s vs %s", len(valid), hand_a, hand_b)

        needed = 5 - len(board)
        board_treys = [TREYS_CARDS[c] for c in board]
        prepared: dict[int, tuple[Deck, list[int], list[int]]] = {}
        picks = self.rng.integers(len(valid), size=trials)
        deadline = self._deadline()

        wins_a = wins_b = ties = 0
        for played, idx in enumerate(picks, start=1):
            idx = int(idx)
            if idx not in prepared:
                combo_a, combo_b = valid[idx]
                prepared[idx] = (
                    self._deck_without(combo_a.cards + combo_b.cards + board),
                    combo_a.to_treys(),
                    combo_b.to_treys(),
                )
            deck, hole_a, hole_b = prepared[idx]

            runout = [TREYS_CARDS[c] for c in deck.sample(needed)]
            outcome = self._showdown(hole_a, hole_b, board_treys + runout)
            if outcome is Outcome.A_WINS:
                wins_a += 1
            elif outcome is Outcome.B_WINS:
                wins_b += 1
            else:
                ties += 1

            if (
                deadline is not None
                and played % self.config.deadline_check_interval == 0
                and time.monotonic() >= deadline
            ):
                logger.debug("Time limit reached after %d of %d trials", played, trials)
                break

        total = wins_a + wins_b + ties
        return EquityResult(
            equity_a=(wins_a + ties / 2) / total * 100,
            equity_b=(wins_b + ties / 2) / total * 100,
            wins_a=wins_a,
            wins_b=wins_b,
            ties=ties,
            trials=total,
        )

    def range_vs_range(
        self,
        range_a: Range,
        range_b: Range,
        board: Sequence[Card] = (),
        target_trials: int = 20000,
    ) -> RangeEquityResult:
        """
        Calculate equity of range_a vs range_b.

        Hand matchups are sampled when the ranges are large. Each matchup
        draws a few distinct combo pairs from those that can be dealt on
        the board, and each draw plays a batch of random runouts. Matchup
        equities are weighted by how many physical combos the two hand
        classes represent. Only matchups with no dealable combo pair at all
        are skipped.

        Args:
            range_a: First range
            range_b: Second range
            board: Fixed board cards (0-5)
            target_trials: Approximate total runouts to play

        Returns:
            RangeEquityResult with weighted equities and sample sizes
        """
        if target_trials < 1:
            raise ValueError(f"target_trials must be at least 1, got {target_trials}")

        hands_a = range_a.hands
        hands_b = range_b.hands
        if not hands_a or not hands_b:
            raise EmptyRange("Both ranges must contain at least one hand")

        board = tuple(board)
        board_cards = set(board)
        board_treys = [TREYS_CARDS[c] for c in board]
        needed = 5 - len(board)
        config = self.config

        pairs = self._select_pairs(hands_a, hands_b)
        runouts = max(
            config.min_runouts_per_combo,
            target_trials // (len(pairs) * config.combos_per_pair),
        )
        logger.debug(
            "Testing %d hand pairs with %d runouts per combo", len(pairs), runouts
        )

        deadline = self._deadline()
        weighted_a = weighted_b = total_weight = 0.0
        wins_a = wins_b = ties = 0
        combos_sampled = 0
        pairs_tested = 0

        for hand_a, hand_b in pairs:
            pairs_tested += 1
            valid = _valid_combos(hand_a, hand_b, board_cards)
            if not valid:
                logger.debug("No dealable combos for %s vs %s", hand_a, hand_b)
                continue

            weight = hand_a.combo_count * hand_b.combo_count
            draws = min(config.combos_per_pair, len(valid))
            for idx in self.rng.choice(len(valid), size=draws, replace=False):
                combo_a, combo_b = valid[int(idx)]
                deck = self._deck_without(combo_a.cards + combo_b.cards + board)
                hole_a = combo_a.to_treys()
                hole_b = combo_b.to_treys()

                a = b = t = 0
                for _ in range(runouts):
                    runout = [TREYS_CARDS[c] for c in deck.sample(needed)]
                    outcome = self._showdown(hole_a, hole_b, board_treys + runout)
                    if outcome is Outcome.A_WINS:
                        a += 1
                    elif outcome is Outcome.B_WINS:
                        b += 1
                    else:
                        t += 1

                weighted_a += (a + t / 2) / runouts * 100 * weight
                weighted_b += (b + t / 2) / runouts * 100 * weight
                total_weight += weight
                wins_a += a
                wins_b += b
                ties += t
                combos_sampled += 1

                if deadline is not None and time.monotonic() >= deadline:
                    break

            if combos_sampled and deadline is not None and time.monotonic() >= deadline:
                logger.debug(
                    "Time limit reached after %d of %d hand pairs", pairs_tested, len(pairs)
                )
                break

        if combos_sampled == 0:
            raise NoValidCombinations(
                "No valid hand combinations found. Check for card conflicts."
            )

        return RangeEquityResult(
            equity_a=weighted_a / total_weight,
            equity_b=weighted_b / total_weight,
            wins_a=wins_a,
            wins_b=wins_b,
            ties=ties,
            trials=wins_a + wins_b + ties,
            hands_a=len(hands_a),
            hands_b=len(hands_b),
            hand_pairs_sampled=pairs_tested,
            combos_sampled=combos_sampled,
        )

    def _select_pairs(
        self,
        hands_a: list[StartingHand],
        hands_b: list[StartingHand],
    ) -> list[tuple[StartingHand, StartingHand]]:
        """All hand matchups, or a distinct random sample when there are too many."""
        total = len(hands_a) * len(hands_b)
        cap = self.config.max_hand_pairs
        if total <= cap:
            return [(a, b) for a in hands_a for b in hands_b]

        logger.debug("Sampling %d of %d hand pairs", cap, total)
        width = len(hands_b)
        picks = self.rng.choice(total, size=cap, replace=False)
        return [(hands_a[int(i) // width], hands_b[int(i) % width]) for i in picks]

    def _deck_without(self, used) -> Deck:
        deck = Deck(self.rng)
        deck.remove(used)
        return deck

    def _deadline(self) -> Optional[float]:
        if self.config.time_limit is None:
            return None
        return time.monotonic() + self.config.time_limit

    def _showdown(self, hole_a: list[int], hole_b: list[int], board: list[int]) -> Outcome:
        """Score two treys holdings on a full board. treys ranks run 1 (best) to 7462."""
        rank_a = self.evaluator.evaluate(hole_a, board)
        rank_b = self.evaluator.evaluate(hole_b, board)
        if rank_a < rank_b:
            return Outcome.A_WINS
        if rank_b < rank_a:
            return Outcome.B_WINS
        return Outcome.TIE


def _valid_combos(
    hand_a: StartingHand,
    hand_b: StartingHand,
    board_cards: set[Card],
) -> list[tuple[Hand, Hand]]:
    """Every combo pair of the two hands that can be dealt together on the board."""
    return [
        (combo_a, combo_b)
        for combo_a in hand_a.combos()
        for combo_b in hand_b.combos()
        if not combo_a.overlaps(combo_b.cards)
        and not combo_a.overlaps(board_cards)
        and not combo_b.overlaps(board_cards)
    ]


def simulate_hand_vs_hand(
    hand_a: HandLike,
    hand_b: HandLike,
    trials: int = 10000,
    board: BoardLike = None,
    seed: Optional[int] = None,
    config: Optional[EquityConfig] = None,
) -> EquityResult:
    """
    Simulate two starting hands against each other.

    Example:
        >>> result = simulate_hand_vs_hand("AA", "22", trials=20000, seed=7)
        >>> round(result.equity_a)  # doctest: +SKIP
        81
    """
    calculator = EquityCalculator(config=config, seed=seed)
    return calculator.hand_vs_hand(
        _as_hand(hand_a), _as_hand(hand_b), trials, _as_board(board)
    )


def simulate_range_vs_range(
    range_a: RangeLike,
    range_b: RangeLike,
    board: BoardLike = None,
    target_trials: int = 20000,
    seed: Optional[int] = None,
    config: Optional[EquityConfig] = None,
) -> RangeEquityResult:
    """Simulate two ranges against each other on an optional board."""
    parsed_a = _as_range(range_a)
    parsed_b = _as_range(range_b)
    cards = _as_board(board)
    calculator = EquityCalculator(config=config, seed=seed)
    return calculator.range_vs_range(parsed_a, parsed_b, cards, target_trials)


def calculate_hand_strength(hand: HandLike, board: BoardLike) -> EvaluatedHand:
    """
    Best made hand for specific hole cards on a board of 3 to 5 cards.

    Raises:
        ValueError: if the hand is not concrete or the board is too short
    """
    starting = _as_hand(hand)
    cards = _as_board(board)
    if starting.holding is None:
        raise ValueError(f"Need specific hole cards, got {starting}")
    if len(cards) < 3:
        raise ValueError("Board must have at least 3 cards")
    if starting.holding.overlaps(cards):
        raise InvalidBoard(f"{starting} shares a card with {_board_str(cards)}")
    return evaluate_best5(list(starting.holding.cards + cards))


def _as_hand(hand: HandLike) -> StartingHand:
    if isinstance(hand, StartingHand):
        return hand
    if isinstance(hand, Hand):
        return StartingHand.from_holding(hand)
    return parse_hand_notation(hand)


def _as_range(value: RangeLike) -> Range:
    if isinstance(value, Range):
        return value
    return parse_range(value)


def _as_board(board: BoardLike) -> tuple[Card, ...]:
    if board is None or isinstance(board, str):
        return parse_board(board)
    cards = tuple(board)
    if len(set(cards)) != len(cards):
        raise InvalidBoard(f"Duplicate board card in {_board_str(cards)}")
    if len(cards) > 5:
        raise InvalidBoard(f"Too many board cards: {len(cards)}. Maximum is 5.")
    return cards


def _board_str(board: Sequence[Card]) -> str:
    return " ".join(str(c) for c in board)
