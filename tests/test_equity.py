"""Tests for equity calculations."""

import numpy as np
import pytest
from treys import Card as TreysCard, Evaluator

from pokerodds.errors import (
    EmptyRange, InvalidBoard, InvalidNotation, InvalidRangeToken, NoValidCombinations
)
from pokerodds.game.cards import Card, Deck, Hand, parse_board, parse_hand_notation
from pokerodds.game.equity import (
    TREYS_CARDS, EquityCalculator, EquityConfig, RangeEquityResult,
    calculate_hand_strength, simulate_hand_vs_hand, simulate_range_vs_range
)
from pokerodds.game.evaluator import HandCategory, Outcome, compare, evaluate_best5
from pokerodds.game.ranges import parse_range


def hand(text):
    return parse_hand_notation(text)


class TestHandVsHand:
    def test_hand_vs_hand_river(self, calculator, board_river):
        # AA vs KK on K-high board - KK wins
        result = calculator.hand_vs_hand(hand("AsAh"), hand("KhKc"), 50, board_river)

        # KK has trips, AA has one pair
        assert result.equity_b == 100.0
        assert result.equity_a == 0.0
        assert result.wins_b == result.trials == 50

    def test_hand_vs_hand_flop(self, calculator, board_flop):
        # Overpair vs underpair on flop
        result = calculator.hand_vs_hand(hand("AsAh"), hand("JsJh"), 2000, board_flop)

        # AA should be heavily favored
        assert result.equity_a > 80
        assert result.equity_b < 20

    def test_hand_vs_hand_tie(self, calculator, board_river):
        # Same hand should tie
        result = calculator.hand_vs_hand(hand("AcKh"), hand("AdKc"), 20, board_river)

        assert result.equity_a == result.equity_b == 50.0
        assert result.ties == 20

    def test_aces_vs_deuces_preflop(self):
        result = simulate_hand_vs_hand("AA", "22", trials=20000, seed=11)
        # Known heads-up benchmark: ~81.5%
        assert 78 < result.equity_a < 85

    def test_aces_vs_aces(self):
        # AhAd vs AcAs style matchups exist, so this must succeed
        result = simulate_hand_vs_hand("AA", "AA", trials=3000, seed=5)
        assert 46 < result.equity_a < 54
        assert result.ties > result.wins_a + result.wins_b

    def test_identical_concrete_hands(self):
        with pytest.raises(NoValidCombinations):
            simulate_hand_vs_hand("AsKh", "AsKh", trials=100)

    def test_shared_card(self):
        with pytest.raises(NoValidCombinations):
            simulate_hand_vs_hand("AsKh", "AsQd", trials=100)

    def test_board_blocks_hand(self):
        with pytest.raises(NoValidCombinations, match="As"):
            simulate_hand_vs_hand("AsAh", "KK", trials=100, board="As 7d 2c")

    def test_counts_partition_trials(self):
        result = simulate_hand_vs_hand("AKs", "QQ", trials=1500, seed=3)
        assert result.wins_a + result.wins_b + result.ties == result.trials == 1500
        assert result.equity_a + result.equity_b == pytest.approx(100.0)
        assert result.win_pct_a + result.win_pct_b + result.tie_pct == pytest.approx(100.0)

    def test_seed_reproducible(self):
        first = simulate_hand_vs_hand("AKo", "JTs", trials=500, seed=77)
        second = simulate_hand_vs_hand("AKo", "JTs", trials=500, seed=77)
        assert first == second

    def test_invalid_notation(self):
        with pytest.raises(InvalidNotation):
            simulate_hand_vs_hand("AAs", "KK", trials=10)

    def test_trials_must_be_positive(self, calculator):
        with pytest.raises(ValueError, match="trials"):
            calculator.hand_vs_hand(hand("AA"), hand("KK"), 0)

    def test_accepts_parsed_inputs(self):
        board = [Card.from_string("2d"), Card.from_string("7c"), Card.from_string("Jh")]
        result = simulate_hand_vs_hand(
            Hand.from_string("AsAh"), hand("KK"), trials=200, board=board, seed=1
        )
        assert result.trials == 200

    def test_duplicate_board_cards(self):
        board = [Card.from_string("2d"), Card.from_string("2d")]
        with pytest.raises(InvalidBoard):
            simulate_hand_vs_hand("AA", "KK", trials=10, board=board)

    def test_flush_draw(self, calculator):
        # Flush draw on flop
        board = parse_board("Qs 7s 2h")
        result = calculator.hand_vs_hand(hand("AsKs"), hand("QhQd"), 3000, board)

        # Flush draw should have reasonable equity (around 35%)
        assert 25 < result.equity_a < 50

    def test_straight_draw(self, calculator):
        # Open-ended straight draw
        board = parse_board("9s 8d 2c")
        result = calculator.hand_vs_hand(hand("JhTh"), hand("KsKd"), 3000, board)

        # OESD should have about 30% equity
        assert 20 < result.equity_a < 45

    def test_time_limit_stops_early(self):
        config = EquityConfig(time_limit=0.0, deadline_check_interval=1)
        calculator = EquityCalculator(config=config, seed=1)
        result = calculator.hand_vs_hand(hand("AA"), hand("KK"), 10000)
        assert result.trials == 1


class TestRangeVsRange:
    def test_pair_vs_pair(self):
        result = simulate_range_vs_range("AA", "KK", target_trials=5000, seed=8)
        assert isinstance(result, RangeEquityResult)
        assert 74 < result.equity_a < 90
        assert result.hands_a == result.hands_b == 1
        assert result.hand_pairs_sampled == 1
        assert result.combos_sampled >= 1

    def test_result_counts(self):
        result = simulate_range_vs_range("QQ+,AKs", "JJ,AQs", target_trials=2000, seed=2)
        assert result.hands_a == 4
        assert result.hands_b == 2
        assert result.hand_pairs_sampled == 8
        assert result.wins_a + result.wins_b + result.ties == result.trials
        assert result.equity_a + result.equity_b == pytest.approx(100.0)

    def test_board_cards_never_reused(self, monkeypatch):
        board = [c.to_treys() for c in parse_board("Ah Kd 2c")]
        seen = []
        original = EquityCalculator._showdown

        def spy(self, hole_a, hole_b, community):
            seen.append((hole_a, hole_b, community))
            return original(self, hole_a, hole_b, community)

        monkeypatch.setattr(EquityCalculator, "_showdown", spy)
        simulate_range_vs_range("AA,KK,AKs", "22+,A2s+", board="Ah Kd 2c",
                                target_trials=500, seed=4)

        assert seen
        for hole_a, hole_b, community in seen:
            assert community[:3] == board
            assert len(set(community)) == 5
            assert len(set(hole_a + hole_b + community)) == 9

    def test_board_blocks_every_combo(self):
        with pytest.raises(NoValidCombinations):
            simulate_range_vs_range("AA", "KK", board="As Ah Ad", target_trials=100, seed=1)

    @pytest.mark.parametrize("seed", range(25))
    def test_board_blocks_most_combos(self, seed):
        # Only AdAc survives for AA and three KK combos remain; always dealable
        result = simulate_range_vs_range(
            "AA", "KK", board="As Ah Kd", target_trials=200, seed=seed
        )
        assert result.combos_sampled == 3
        assert result.hand_pairs_sampled == 1

    def test_blocked_matchups_are_skipped(self):
        config = EquityConfig(min_runouts_per_combo=1)
        calculator = EquityCalculator(config=config, seed=6)
        result = calculator.range_vs_range(
            parse_range("AsAh,KK"), parse_range("QQ"), parse_board("As 7d 2c"), 50
        )
        # AsAh vs QQ cannot be dealt; KK vs QQ plays on
        assert result.hand_pairs_sampled == 2
        assert result.combos_sampled == config.combos_per_pair

    def test_draws_are_distinct_combo_pairs(self, monkeypatch):
        seen = []

        def record(self, hole_a, hole_b, community):
            seen.append((tuple(hole_a), tuple(hole_b)))
            return Outcome.TIE

        monkeypatch.setattr(EquityCalculator, "_showdown", record)
        config = EquityConfig(combos_per_pair=10, min_runouts_per_combo=1)
        calculator = EquityCalculator(config=config, seed=3)
        calculator.range_vs_range(parse_range("AKs"), parse_range("QQ"), (), 1)

        assert len(seen) == 10
        assert len(set(seen)) == 10

    def test_combo_weighting(self, monkeypatch):
        # Range A wins against pairs, loses against everything else
        def rigged(self, hole_a, hole_b, community):
            ranks = {TreysCard.get_rank_int(c) for c in hole_b}
            return Outcome.A_WINS if len(ranks) == 1 else Outcome.B_WINS

        monkeypatch.setattr(EquityCalculator, "_showdown", rigged)
        config = EquityConfig(combos_per_pair=1, min_runouts_per_combo=1)
        calculator = EquityCalculator(config=config, seed=0)
        result = calculator.range_vs_range(parse_range("AA"), parse_range("KK,QJs"), (), 1)

        # AA vs KK carries 6*6 = 36 combos, AA vs QJs 6*4 = 24
        assert result.equity_a == pytest.approx(100 * 36 / 60)

    def test_samples_distinct_pairs_when_large(self):
        config = EquityConfig(max_hand_pairs=20)
        calculator = EquityCalculator(config=config, seed=9)
        hands_a = parse_range("22+,A2s+").hands
        hands_b = parse_range("K2s+,Q2s+").hands

        pairs = calculator._select_pairs(hands_a, hands_b)
        assert len(pairs) == 20
        assert len({(a.key, b.key) for a, b in pairs}) == 20

    def test_pair_cap(self):
        config = EquityConfig(max_hand_pairs=15, combos_per_pair=2, min_runouts_per_combo=1)
        calculator = EquityCalculator(config=config, seed=10)
        result = calculator.range_vs_range(
            parse_range("22+,A2s+"), parse_range("K2s+,Q2s+"), (), 1
        )
        assert result.hand_pairs_sampled == 15
        assert result.hands_a == 25
        assert result.hands_b == 21

    def test_all_pairs_below_cap(self):
        config = EquityConfig(min_runouts_per_combo=1)
        calculator = EquityCalculator(config=config, seed=10)
        result = calculator.range_vs_range(parse_range("TT+"), parse_range("AKs,AQs"), (), 1)
        assert result.hand_pairs_sampled == 10

    def test_seed_reproducible(self):
        first = simulate_range_vs_range("TT+", "AJs+", target_trials=800, seed=21)
        second = simulate_range_vs_range("TT+", "AJs+", target_trials=800, seed=21)
        assert first == second

    def test_time_limit_stops_after_first_combo(self):
        config = EquityConfig(time_limit=0.0, min_runouts_per_combo=1)
        calculator = EquityCalculator(config=config, seed=1)
        result = calculator.range_vs_range(parse_range("TT+"), parse_range("AKs,AQs"), (), 100)
        assert result.combos_sampled == 1
        assert result.hand_pairs_sampled == 1

    def test_errors(self):
        with pytest.raises(EmptyRange):
            simulate_range_vs_range("", "AA")
        with pytest.raises(InvalidRangeToken):
            simulate_range_vs_range("AAs+", "KK")
        with pytest.raises(InvalidBoard):
            simulate_range_vs_range("AA", "KK", board="As Kd 2c 3h 4h 5h")

    def test_target_trials_must_be_positive(self, calculator):
        with pytest.raises(ValueError, match="target_trials"):
            calculator.range_vs_range(parse_range("AA"), parse_range("KK"), (), 0)


class TestHandStrength:
    def test_calculate_hand_strength(self, board_river):
        kk = calculate_hand_strength("KhKc", board_river)  # Trips
        aa = calculate_hand_strength("AsAh", board_river)  # One pair

        assert kk.category == HandCategory.THREE_OF_A_KIND
        assert aa.category == HandCategory.ONE_PAIR
        assert kk > aa

    def test_get_hand_class(self, board_river):
        assert calculate_hand_strength("KhKc", board_river).name == "Three of a Kind"

    def test_flop(self, board_flop):
        assert calculate_hand_strength("Kh7c", board_flop).category == HandCategory.TWO_PAIR

    def test_needs_three_board_cards(self):
        with pytest.raises(ValueError, match="at least 3"):
            calculate_hand_strength("AhAd", "As Kh")

    def test_needs_specific_cards(self, board_river):
        with pytest.raises(ValueError, match="specific"):
            calculate_hand_strength("AKs", board_river)

    def test_overlap_with_board(self, board_river):
        with pytest.raises(InvalidBoard):
            calculate_hand_strength("KsQh", board_river)


class TestShowdown:
    def test_uses_treys_evaluator(self, calculator):
        assert isinstance(calculator.evaluator, Evaluator)

    def test_agrees_with_structured_evaluator(self, calculator):
        deck = Deck(np.random.default_rng(31))

        for _ in range(300):
            dealt = deck.sample(9)
            hole_a, hole_b, board = dealt[:2], dealt[2:4], dealt[4:]

            expected = compare(evaluate_best5(hole_a + board), evaluate_best5(hole_b + board))
            outcome = calculator._showdown(
                [TREYS_CARDS[c] for c in hole_a],
                [TREYS_CARDS[c] for c in hole_b],
                [TREYS_CARDS[c] for c in board],
            )
            assert outcome is expected, f"{hole_a} vs {hole_b} on {board}"

    def test_split_pot(self, calculator):
        # Board plays for both
        board = [c.to_treys() for c in parse_board("As Ks Qs Js Ts")]
        hole_a = Hand.from_string("2c3d").to_treys()
        hole_b = Hand.from_string("4h5c").to_treys()
        assert calculator._showdown(hole_a, hole_b, board) is Outcome.TIE
