"""
Move validator for the TicTacToe engine.
Validates that moves follow the rules.
"""

import numbers
from typing import Optional
from dataclasses import dataclass

from .config import GameConfig
from .game_state import GameState, Mark


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None


class MoveValidator:
    """
    Validates TicTacToe moves.

    Rules:
    1. Game must be running
    2. Index must be a cell (0-8)
    3. Can only place on empty cells
    4. When a turn is enforced, the acting mark must be the current player
    """

    def validate_move(
        self,
        game_state: GameState,
        index,
        acting_mark: Optional[Mark] = None,
        enforce_turn: bool = False
    ) -> ValidationResult:
        """
        Validate a move.

        Args:
            game_state: Current game state.
            index: Cell to mark (0-8).
            acting_mark: Mark of whoever submitted the move.
            enforce_turn: Reject the move if acting_mark is not on turn.

        Returns:
            ValidationResult with is_valid and error_message.
        """
        if not game_state.running:
            return ValidationResult(
                is_valid=False,
                error_message="Game not running. Start a new game."
            )

        # bool is an int subclass, but True is not a cell
        if isinstance(index, bool) or not isinstance(index, numbers.Integral):
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid cell {index!r}. Must be an integer 0-{GameConfig.CELL_COUNT - 1}."
            )

        if not 0 <= index < GameConfig.CELL_COUNT:
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid cell {index}. Must be 0-{GameConfig.CELL_COUNT - 1}."
            )

        occupant = game_state.board[index]
        if occupant is not None:
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell {index} is already occupied by {occupant.value}."
            )

        if enforce_turn and acting_mark != game_state.current_player:
            who = acting_mark.value if isinstance(acting_mark, Mark) else acting_mark
            return ValidationResult(
                is_valid=False,
                error_message=f"It's not {who}'s turn ({game_state.current_player.value} to play)."
            )

        return ValidationResult(is_valid=True)
