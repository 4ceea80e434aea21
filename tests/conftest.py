"""Pytest configuration and fixtures."""

import pytest

from pokerodds.game.cards import parse_board
from pokerodds.game.equity import EquityCalculator


@pytest.fixture
def calculator():
    """Seeded calculator so simulation tests are reproducible."""
    return EquityCalculator(seed=1234)


@pytest.fixture
def board_flop():
    return parse_board("Ks 7d 2c")


@pytest.fixture
def board_river():
    return parse_board("Ks 7d 2c 9h 3s")
