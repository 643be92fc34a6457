"""
Game configuration for the TicTacToe engine.
Board geometry, AI scoring constants, and turn delays.
"""

from enum import Enum
from typing import Optional, Union
from dataclasses import dataclass

from .exceptions import InvalidConfiguration
from .game_state import Mark


class Mode(Enum):
    """Who is playing."""
    PVP = "pvp"   # Human vs human
    PVC = "pvc"   # Human vs computer


class Difficulty(Enum):
    """AI difficulty levels."""
    EASY = "easy"            # Random moves
    DIFFICULT = "difficult"  # Heuristics + shallow lookahead
    HARD = "hard"            # Full minimax


class GameConfig:
    """
    Configuration class for the game engine.
    Change these values to tune the AI and pacing.
    """

    # ==================== BOARD SETTINGS ====================
    BOARD_SIZE = 3
    CELL_COUNT = BOARD_SIZE * BOARD_SIZE

    CENTER = 4
    CORNERS = (0, 2, 6, 8)
    SIDES = (1, 3, 5, 7)

    # ==================== AI SCORING ====================
    # Terminal scores for the searches (optimal search adjusts by depth)
    WIN_SCORE = 100

    # Heuristic lookahead for the "difficult" level (plies)
    HEURISTIC_DEPTH = 3

    # Static evaluation weights at the heuristic depth cutoff
    CENTER_WEIGHT = 6
    CORNER_WEIGHT = 3

    # ==================== TURN PACING ====================
    # Delay before the AI answers a move (milliseconds)
    AI_MOVE_DELAY_MS = 420
    # Delay before the AI opens when the human plays O
    AI_OPENING_DELAY_MS = 250

    # ==================== HISTORY ====================
    HISTORY_LIMIT = 12

    # ==================== DEFAULTS ====================
    DEFAULT_MODE = Mode.PVP
    DEFAULT_DIFFICULTY = Difficulty.EASY
    DEFAULT_HUMAN_MARK = Mark.X


def parse_enum(enum_cls, value, what: str):
    """Accept an enum member or its value in any case; else InvalidConfiguration."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        text = value.strip()
        for candidate in (text, text.lower(), text.upper()):
            try:
                return enum_cls(candidate)
            except ValueError:
                continue
    choices = ", ".join(member.value for member in enum_cls)
    raise InvalidConfiguration(f"Unknown {what} {value!r}. Expected one of: {choices}")


@dataclass(frozen=True)
class GameSettings:
    """
    Options chosen before a game starts.

    difficulty and human_mark only matter in PVC mode.
    """
    mode: Mode = GameConfig.DEFAULT_MODE
    difficulty: Difficulty = GameConfig.DEFAULT_DIFFICULTY
    human_mark: Mark = GameConfig.DEFAULT_HUMAN_MARK

    @property
    def ai_mark(self) -> Optional[Mark]:
        """The mark the computer plays, or None in PVP mode."""
        if self.mode != Mode.PVC:
            return None
        return self.human_mark.opposite()

    @classmethod
    def parse(
        cls,
        mode: Union[Mode, str] = GameConfig.DEFAULT_MODE,
        difficulty: Union[Difficulty, str, None] = None,
        human_mark: Union[Mark, str, None] = None
    ) -> "GameSettings":
        """
        Build settings from raw selections (enum members or strings).

        Raises:
            InvalidConfiguration: if any value is not recognised.
        """
        return cls(
            mode=parse_enum(Mode, mode, "mode"),
            difficulty=(
                GameConfig.DEFAULT_DIFFICULTY if difficulty is None
                else parse_enum(Difficulty, difficulty, "difficulty")
            ),
            human_mark=(
                GameConfig.DEFAULT_HUMAN_MARK if human_mark is None
                else parse_enum(Mark, human_mark, "mark")
            ),
        )
