"""
Win checker for the TicTacToe engine.
Legal moves, wins, and draws for a 9-cell board.
"""

from typing import Optional, List, Sequence

from .game_state import Board, Line, Mark, Outcome


class WinChecker:
    """
    Checks for win conditions in TicTacToe.

    Win condition: 3 identical marks in a row
    (horizontally, vertically, or diagonally)

    Every method is pure: the board passed in is only read.
    """

    # All possible winning lines, in scan order
    WINNING_LINES: Sequence[Line] = (
        # Rows
        (0, 1, 2),
        (3, 4, 5),
        (6, 7, 8),
        # Columns
        (0, 3, 6),
        (1, 4, 7),
        (2, 5, 8),
        # Diagonals
        (0, 4, 8),
        (2, 4, 6),
    )

    def legal_moves(self, board: Board) -> List[int]:
        """
        Get all empty cells on the board.

        Returns:
            Cell indices in ascending order (empty if the board is full).
        """
        return [index for index, cell in enumerate(board) if cell is None]

    def evaluate(self, board: Board) -> Outcome:
        """
        Classify the board.

        The first complete line in WINNING_LINES order wins, so boards
        with two complete lines always report the same one.

        Args:
            board: The game board.

        Returns:
            A WIN outcome with winner and line, DRAW, or IN_PROGRESS.
        """
        for line in self.WINNING_LINES:
            winner = self._check_line(board, line)
            if winner is not None:
                return Outcome.win(winner, line)

        if all(cell is not None for cell in board):
            return Outcome.draw()

        return Outcome.in_progress()

    def check_winner(self, board: Board) -> Optional[Mark]:
        """Get the winning mark, or None if no winner yet."""
        return self.evaluate(board).winner

    def get_winning_line(self, board: Board) -> Optional[Line]:
        """Get the winning line if there is one."""
        return self.evaluate(board).line

    def check_draw(self, board: Board) -> bool:
        """True if the board is full and nobody has won."""
        return self.evaluate(board).is_draw

    def _check_line(self, board: Board, line: Line) -> Optional[Mark]:
        a, b, c = line
        if board[a] is not None and board[a] == board[b] == board[c]:
            return board[a]
        return None
