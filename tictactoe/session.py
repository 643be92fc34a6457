"""
Game session for the TicTacToe engine.

Turn-taking state machine: owns the live game, validates and applies
moves, and schedules AI turns as deferred actions.

    IDLE -> RUNNING -> TERMINAL -> (start) RUNNING
"""

import logging
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from .ai_player import AIPlayer
from .config import GameConfig, GameSettings, Mode, Difficulty
from .exceptions import IllegalMove, InvalidConfiguration
from .game_state import Board, GameState, Mark, Move, Outcome
from .move_validator import MoveValidator
from .scheduler import DeferredQueue
from .win_checker import WinChecker

logger = logging.getLogger(__name__)

# Called with the terminal outcome and the game's moves
OutcomeObserver = Callable[[Outcome, Tuple[Move, ...]], None]


class SessionStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    TERMINAL = "terminal"


class GameSession:
    """
    Main controller for a game of TicTacToe.

    Game flow:
    1. start() resets the board; X always moves first
    2. submit_move() validates and applies a move
    3. After each move the board is evaluated; a win or draw ends the game
       and is pushed to every subscribed observer
    4. In PVC mode, when the AI is on turn its move is scheduled on the
       scheduler and applied later through submit_move()
    """

    def __init__(
        self,
        scheduler=None,
        ai: Optional[AIPlayer] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize the session.

        Args:
            scheduler: Anything with after(delay_ms, callback) and
                after_cancel(handle), e.g. DeferredQueue or a tkinter root.
            ai: The AI player to use (built from seed if omitted).
            seed: Seed for the AI's random choices.
        """
        self.scheduler = scheduler if scheduler is not None else DeferredQueue()
        self.ai = ai if ai is not None else AIPlayer(seed)
        self.validator = MoveValidator()
        self.win_checker = WinChecker()

        self._state = GameState()
        self._settings: Optional[GameSettings] = None
        self._observers: List[OutcomeObserver] = []

        # Bumped on every start so stale AI callbacks can recognise themselves
        self._generation = 0
        self._pending_ai = None

    # ==================== READ ACCESSORS ====================

    @property
    def board(self) -> Board:
        """A copy of the current board."""
        return list(self._state.board)

    @property
    def current_player(self) -> Mark:
        return self._state.current_player

    @property
    def running(self) -> bool:
        return self._state.running

    @property
    def status(self) -> SessionStatus:
        if self._settings is None:
            return SessionStatus.IDLE
        return SessionStatus.RUNNING if self._state.running else SessionStatus.TERMINAL

    @property
    def last_outcome(self) -> Optional[Outcome]:
        """Outcome of the finished game, or None while playing."""
        return self._state.outcome

    @property
    def moves(self) -> Tuple[Move, ...]:
        """Audit trail of the current game, oldest first."""
        return tuple(self._state.moves)

    @property
    def settings(self) -> Optional[GameSettings]:
        return self._settings

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def ai_mark(self) -> Optional[Mark]:
        return self._settings.ai_mark if self._settings is not None else None

    def snapshot(self) -> GameState:
        """A detached copy of the whole game state."""
        return self._state.copy()

    # ==================== OBSERVERS ====================

    def subscribe(self, observer: OutcomeObserver) -> OutcomeObserver:
        """
        Call observer(outcome, moves) whenever a game ends.

        An exception from an observer is logged and does not reach the
        caller of submit_move.
        """
        self._observers.append(observer)
        return observer

    def unsubscribe(self, observer: OutcomeObserver):
        if observer in self._observers:
            self._observers.remove(observer)

    # ==================== GAME FLOW ====================

    def start(
        self,
        mode: Union[Mode, str] = GameConfig.DEFAULT_MODE,
        difficulty: Union[Difficulty, str, None] = None,
        human_mark: Union[Mark, str, None] = None
    ):
        """
        Start a new game from raw selections.

        Raises:
            InvalidConfiguration: on an unknown mode, difficulty or mark.
        """
        self.start_game(GameSettings.parse(mode, difficulty, human_mark))

    def start_game(self, settings: Union[GameSettings, dict]):
        """
        Start (or restart) a game.

        Any AI move still pending from the previous game is discarded.

        Args:
            settings: GameSettings, or a dict with mode / difficulty /
                human_mark keys.

        Raises:
            InvalidConfiguration: settings are not usable. Nothing changes.
        """
        if isinstance(settings, dict):
            unknown = set(settings) - {"mode", "difficulty", "human_mark"}
            if unknown:
                raise InvalidConfiguration(f"Unknown setting(s): {', '.join(sorted(unknown))}")
            settings = GameSettings.parse(**settings)
        elif not isinstance(settings, GameSettings):
            raise InvalidConfiguration(f"Expected GameSettings, got {type(settings).__name__}")

        self._cancel_pending_ai()
        self._generation += 1
        self._settings = settings
        self._state = GameState(running=True)

        logger.info(
            "Game %d started: mode=%s difficulty=%s human=%s",
            self._generation, settings.mode.value,
            settings.difficulty.value, settings.human_mark.value
        )

        # AI plays X when the human chose O, so it opens
        if self._is_ai_turn():
            self._schedule_ai_move(GameConfig.AI_OPENING_DELAY_MS)

    def submit_move(self, index: int, mark: Optional[Mark] = None) -> Outcome:
        """
        Place the current player's mark at index.

        Args:
            index: Cell (0-8).
            mark: Who is moving. Required in PVC mode, where it must be
                the current player; ignored in PVP mode.

        Returns:
            The board's outcome after the move (IN_PROGRESS if the game goes on).

        Raises:
            IllegalMove: the move was rejected and nothing changed.
        """
        enforce_turn = self._settings is not None and self._settings.mode == Mode.PVC
        result = self.validator.validate_move(self._state, index, mark, enforce_turn=enforce_turn)
        if not result.is_valid:
            logger.debug("Rejected move %r by %s: %s", index, mark, result.error_message)
            raise IllegalMove(result.error_message)

        move = self._state.place(int(index))
        logger.debug("%s plays %d", move.mark.value, move.index)

        outcome = self.win_checker.evaluate(self._state.board)
        if outcome.is_terminal:
            self._finish(outcome)
        else:
            self._state.switch_player()
            if self._is_ai_turn():
                self._schedule_ai_move(GameConfig.AI_MOVE_DELAY_MS)

        return outcome

    # ==================== INTERNALS ====================

    def _finish(self, outcome: Outcome):
        self._state.running = False
        self._state.outcome = outcome
        logger.info("Game %d over: %s", self._generation, outcome)

        # Observer errors are logged; the result above stands
        moves = self.moves
        for observer in list(self._observers):
            try:
                observer(outcome, moves)
            except Exception:
                logger.exception("Outcome observer %r failed", observer)

    def _is_ai_turn(self) -> bool:
        return (
            self._state.running
            and self.ai_mark is not None
            and self._state.current_player == self.ai_mark
        )

    def _schedule_ai_move(self, delay_ms: int):
        token = (self._generation, len(self._state.moves))
        self._pending_ai = self.scheduler.after(delay_ms, lambda: self._play_ai_move(token))

    def _cancel_pending_ai(self):
        if self._pending_ai is not None:
            self.scheduler.after_cancel(self._pending_ai)
            self._pending_ai = None

    def _play_ai_move(self, token: Tuple[int, int]):
        """Deferred AI turn. No-op if the game moved on since scheduling."""
        if token != (self._generation, len(self._state.moves)) or not self._is_ai_turn():
            logger.debug("Discarding stale AI move scheduled for %s", token)
            return

        self._pending_ai = None
        ai_mark = self.ai_mark
        move = self.ai.choose_move(self.board, ai_mark, self._settings.difficulty)
        if move is None:
            return

        self.submit_move(move, ai_mark)
