"""
Game state for the TicTacToe engine.
Marks, outcomes, the move audit trail, and the live board of a game.
"""

from enum import Enum
from typing import Optional, List, Tuple
from dataclasses import dataclass, field


class Mark(Enum):
    """The two players' symbols."""
    X = "X"
    O = "O"

    def opposite(self) -> "Mark":
        """Get the other mark."""
        return Mark.O if self == Mark.X else Mark.X


# A board is 9 cells in row-major order (index = row * 3 + col)
Board = List[Optional[Mark]]

Line = Tuple[int, int, int]


def empty_board() -> Board:
    """A fresh board with all 9 cells empty."""
    return [None] * 9


class GameStatus(Enum):
    """Classification of a board."""
    IN_PROGRESS = "in_progress"
    WIN = "win"
    DRAW = "draw"


@dataclass(frozen=True)
class Outcome:
    """
    The result of evaluating a board.

    winner and line are only set when status is WIN.
    """
    status: GameStatus
    winner: Optional[Mark] = None
    line: Optional[Line] = None

    @classmethod
    def in_progress(cls) -> "Outcome":
        return cls(GameStatus.IN_PROGRESS)

    @classmethod
    def win(cls, winner: Mark, line: Line) -> "Outcome":
        return cls(GameStatus.WIN, winner, tuple(line))

    @classmethod
    def draw(cls) -> "Outcome":
        return cls(GameStatus.DRAW)

    @property
    def is_win(self) -> bool:
        return self.status == GameStatus.WIN

    @property
    def is_draw(self) -> bool:
        return self.status == GameStatus.DRAW

    @property
    def is_terminal(self) -> bool:
        return self.status != GameStatus.IN_PROGRESS

    def __str__(self) -> str:
        if self.is_win:
            return f"{self.winner.value} wins"
        if self.is_draw:
            return "Draw"
        return "In progress"


@dataclass(frozen=True)
class Move:
    """
    A move in the game.
    """
    index: int          # Cell (0-8)
    mark: Mark          # Who made the move
    move_number: int    # Which move this is (0-8)


@dataclass
class GameState:
    """
    The complete state of one game.

    Tracks:
    - The 9-cell board
    - Current player
    - Whether the game is still running
    - Move history
    - The terminal outcome, once there is one
    """

    board: Board = field(default_factory=empty_board)

    # X always moves first
    current_player: Mark = Mark.X

    running: bool = False

    moves: List[Move] = field(default_factory=list)

    outcome: Optional[Outcome] = None

    def place(self, index: int) -> Move:
        """
        Write the current player's mark and record it.
        Validation is the caller's job (see MoveValidator).
        """
        move = Move(index=index, mark=self.current_player, move_number=len(self.moves))
        self.board[index] = self.current_player
        self.moves.append(move)
        return move

    def switch_player(self):
        self.current_player = self.current_player.opposite()

    def copy(self) -> "GameState":
        """Create a copy of the game state."""
        return GameState(
            board=list(self.board),
            current_player=self.current_player,
            running=self.running,
            moves=list(self.moves),
            outcome=self.outcome
        )
