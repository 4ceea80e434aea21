"""Error types raised for malformed or impossible inputs."""


class PokerOddsError(ValueError):
    """Base class for all pokerodds input errors."""


class InvalidNotation(PokerOddsError):
    """A single starting hand could not be parsed."""


class InvalidRangeToken(PokerOddsError):
    """A token inside a range string is malformed."""


class EmptyRange(PokerOddsError):
    """A range string contains no hands."""


class InvalidBoard(PokerOddsError):
    """Board text is malformed, repeats a card, or has more than 5 cards."""


class NoValidCombinations(PokerOddsError):
    """The two sides (and board) can never be dealt together."""
