"""
Move selection strategies for the TicTacToe AI.

- RandomStrategy: any legal move
- HeuristicStrategy: win, block, center, scored corner, side
- OptimalStrategy: full minimax with alpha-beta pruning

Every strategy works on a private copy of the board and undoes each
trial placement, so the caller's board is never changed.
"""

import logging
from typing import Optional, List, Sequence

import numpy as np

from .config import GameConfig
from .game_state import Board, Mark
from .win_checker import WinChecker

logger = logging.getLogger(__name__)


class RandomStrategy:
    """Picks uniformly among the empty cells."""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.win_checker = WinChecker()

    def choose(self, board: Board, ai_mark: Optional[Mark] = None) -> Optional[int]:
        """Return a random empty cell, or None if the board is full."""
        return self.pick(self.win_checker.legal_moves(board))

    def pick(self, cells: Sequence[int]) -> Optional[int]:
        if not cells:
            return None
        return int(cells[self.rng.integers(len(cells))])


class HeuristicStrategy:
    """
    A decent but beatable player.

    Decision ladder (first step that applies wins):
    1. Take an immediate win
    2. Block the opponent's immediate win
    3. Take the center
    4. Take the corner with the best shallow-minimax score
    5. Take a random side
    6. Any random cell
    """

    def __init__(self, rng: Optional[np.random.Generator] = None,
                 depth: int = GameConfig.HEURISTIC_DEPTH):
        self.random = RandomStrategy(rng)
        self.depth = depth
        self.win_checker = WinChecker()

    def choose(self, board: Board, ai_mark: Mark) -> Optional[int]:
        opponent = ai_mark.opposite()
        scratch = list(board)
        empty = self.win_checker.legal_moves(scratch)

        # 1: immediate win
        move = self._find_winning_cell(scratch, empty, ai_mark)
        if move is not None:
            return move

        # 2: block opponent win
        move = self._find_winning_cell(scratch, empty, opponent)
        if move is not None:
            return move

        # 3: center
        if scratch[GameConfig.CENTER] is None:
            return GameConfig.CENTER

        # 4: corners, scored with a shallow lookahead
        corners = [i for i in GameConfig.CORNERS if scratch[i] is None]
        if corners:
            best_corner = corners[0]
            best_score = float('-inf')
            for corner in corners:
                scratch[corner] = ai_mark
                score = self._limited_minimax(scratch, ai_mark, self.depth, False)
                scratch[corner] = None
                if score > best_score:
                    best_score = score
                    best_corner = corner
            logger.debug("Corner %d scored %s", best_corner, best_score)
            return best_corner

        # 5: sides
        sides = [i for i in GameConfig.SIDES if scratch[i] is None]
        if sides:
            return self.random.pick(sides)

        return self.random.choose(scratch)

    def _find_winning_cell(self, board: Board, empty: List[int], mark: Mark) -> Optional[int]:
        """First empty cell that completes a line for mark."""
        for index in empty:
            board[index] = mark
            winner = self.win_checker.check_winner(board)
            board[index] = None
            if winner == mark:
                return index
        return None

    def _limited_minimax(self, board: Board, ai_mark: Mark, depth: int, is_ai_turn: bool) -> float:
        """
        Minimax without pruning, cut off after `depth` plies.

        Returns:
            +/-WIN_SCORE for a win found within depth, 0 for a draw,
            otherwise the static score at the cutoff.
        """
        outcome = self.win_checker.evaluate(board)
        if outcome.is_win:
            return GameConfig.WIN_SCORE if outcome.winner == ai_mark else -GameConfig.WIN_SCORE
        if outcome.is_draw:
            return 0

        if depth == 0:
            return self._static_score(board, ai_mark)

        mark = ai_mark if is_ai_turn else ai_mark.opposite()
        scores = []
        for index in self.win_checker.legal_moves(board):
            board[index] = mark
            scores.append(self._limited_minimax(board, ai_mark, depth - 1, not is_ai_turn))
            board[index] = None

        return max(scores) if is_ai_turn else min(scores)

    def _static_score(self, board: Board, ai_mark: Mark) -> int:
        """Center and corner ownership, from the AI's point of view."""
        opponent = ai_mark.opposite()

        score = 0
        if board[GameConfig.CENTER] == ai_mark:
            score += GameConfig.CENTER_WEIGHT
        elif board[GameConfig.CENTER] == opponent:
            score -= GameConfig.CENTER_WEIGHT

        for corner in GameConfig.CORNERS:
            if board[corner] == ai_mark:
                score += GameConfig.CORNER_WEIGHT
            elif board[corner] == opponent:
                score -= GameConfig.CORNER_WEIGHT

        return score


class OptimalStrategy:
    """
    An AI that plays TicTacToe using the Minimax algorithm.

    The AI will always play optimally - it will win if possible,
    block the opponent if needed, and never lose (at worst, draw).
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.random = RandomStrategy(rng)
        self.win_checker = WinChecker()

        # Keep track of how many positions we've evaluated (for debugging)
        self.moves_evaluated = 0

    def choose(self, board: Board, ai_mark: Mark) -> Optional[int]:
        """
        Get the best move for the current position.

        Args:
            board: Current board.
            ai_mark: The mark the AI plays.

        Returns:
            Cell index of the best move, or None if no moves available.
        """
        self.moves_evaluated = 0

        # Opening book: any corner, no search needed
        if all(cell is None for cell in board):
            return self.random.pick(GameConfig.CORNERS)

        score, move = self._minimax(
            list(board), ai_mark,
            is_maximizing=True,
            alpha=float('-inf'),
            beta=float('inf'),
            depth=0
        )

        logger.debug(
            "AI evaluated %d positions. Best move: %s (score: %s)",
            self.moves_evaluated, move, score
        )
        return move

    def _minimax(
        self,
        board: Board,
        ai_mark: Mark,
        is_maximizing: bool,
        alpha: float,
        beta: float,
        depth: int
    ):
        """
        Minimax algorithm with alpha-beta pruning.

        Args:
            board: Scratch board; every trial placement is undone.
            ai_mark: The maximizing mark.
            is_maximizing: True if it's the AI's turn.
            alpha: Alpha value for pruning.
            beta: Beta value for pruning.
            depth: Plies from the root.

        Returns:
            (score, index) where index is None at terminal nodes.
        """
        self.moves_evaluated += 1

        outcome = self.win_checker.evaluate(board)
        if outcome.is_win:
            if outcome.winner == ai_mark:
                return GameConfig.WIN_SCORE - depth, None  # Prefer faster wins
            return -GameConfig.WIN_SCORE + depth, None     # Prefer slower losses
        if outcome.is_draw:
            return 0, None

        mark = ai_mark if is_maximizing else ai_mark.opposite()
        best_move = None
        best_score = float('-inf') if is_maximizing else float('inf')

        for index in self.win_checker.legal_moves(board):
            board[index] = mark
            score, _ = self._minimax(board, ai_mark, not is_maximizing, alpha, beta, depth + 1)
            board[index] = None

            if is_maximizing:
                if score > best_score:
                    best_score, best_move = score, index
                alpha = max(alpha, score)
            else:
                if score < best_score:
                    best_score, best_move = score, index
                beta = min(beta, score)

            if beta <= alpha:
                break  # Prune

        return best_score, best_move
