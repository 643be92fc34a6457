"""
TicTacToe Engine
================
Game rules, a turn-taking session, and three AI opponents
(easy: random, difficult: heuristic, hard: minimax with alpha-beta).

Rendering and input are left to whoever drives the session.
"""

from .exceptions import TicTacToeError, IllegalMove, InvalidConfiguration
from .game_state import Mark, Move, Outcome, GameStatus, GameState, empty_board
from .config import GameConfig, GameSettings, Mode, Difficulty
from .win_checker import WinChecker
from .move_validator import MoveValidator, ValidationResult
from .strategies import RandomStrategy, HeuristicStrategy, OptimalStrategy
from .ai_player import AIPlayer
from .scheduler import DeferredQueue, AsyncioScheduler
from .session import GameSession, SessionStatus
from .scoreboard import Scoreboard, GameHistory, GameRecord

__version__ = "1.0.0"
