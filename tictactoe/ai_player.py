"""
AI player for the TicTacToe engine.
Dispatches to a move selection strategy based on difficulty.
"""

import logging
from typing import Optional, Union

import numpy as np

from .config import Difficulty, parse_enum
from .game_state import Board, Mark
from .strategies import RandomStrategy, HeuristicStrategy, OptimalStrategy

logger = logging.getLogger(__name__)


class AIPlayer:
    """
    Chooses moves for the computer player.

        easy      -> RandomStrategy
        difficult -> HeuristicStrategy
        hard      -> OptimalStrategy

    All strategies share one random generator, so passing a seed makes
    every AI decision reproducible.
    """

    def __init__(self, seed: Union[int, np.random.Generator, None] = None):
        """
        Initialize the AI player.

        Args:
            seed: Seed (or ready-made Generator) for the shared random source.
        """
        self.rng = np.random.default_rng(seed)
        self.random = RandomStrategy(self.rng)
        self.strategies = {
            Difficulty.EASY: self.random,
            Difficulty.DIFFICULT: HeuristicStrategy(self.rng),
            Difficulty.HARD: OptimalStrategy(self.rng),
        }

    def choose_move(self, board: Board, ai_mark: Mark, difficulty: Difficulty) -> Optional[int]:
        """
        Get a move for ai_mark.

        Args:
            board: Current board (left unchanged).
            ai_mark: The mark the AI plays.
            difficulty: Which strategy to use (member or name, any case).

        Returns:
            An empty cell index, or None only if the board is full.

        Raises:
            InvalidConfiguration: unknown difficulty.
        """
        difficulty = parse_enum(Difficulty, difficulty, "difficulty")
        strategy = self.strategies[difficulty]
        move = strategy.choose(board, ai_mark)

        if not self._is_legal(board, move):
            logger.warning(
                "%s returned unusable move %r, falling back to random",
                type(strategy).__name__, move
            )
            move = self.random.choose(board, ai_mark)

        logger.debug("AI (%s, %s) picks %s", ai_mark.value, difficulty.value, move)
        return move

    @staticmethod
    def _is_legal(board: Board, move) -> bool:
        return (
            isinstance(move, int)
            and not isinstance(move, bool)
            and 0 <= move < len(board)
            and board[move] is None
        )
