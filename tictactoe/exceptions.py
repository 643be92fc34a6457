"""
Errors raised by the TicTacToe engine.
Both are recoverable: the caller fixes the input and tries again.
"""


class TicTacToeError(Exception):
    """Base class for engine errors."""


class IllegalMove(TicTacToeError):
    """A move was rejected. The session is left unchanged."""


class InvalidConfiguration(TicTacToeError):
    """Unknown mode, difficulty or mark. No game is started."""
