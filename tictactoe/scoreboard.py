"""
Score and history observers.

Both subscribe to a GameSession and update themselves from the
outcome events it emits; the session never holds a score.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, Dict, List, Tuple

from .config import GameConfig
from .game_state import Mark, Move, Outcome


class Scoreboard:
    """Running tallies of X wins, O wins and draws."""

    def __init__(self):
        self.scores: Dict[str, int] = {Mark.X.value: 0, Mark.O.value: 0, "draw": 0}

    def attach(self, session) -> "Scoreboard":
        session.subscribe(self)
        return self

    def __call__(self, outcome: Outcome, moves: Tuple[Move, ...] = ()):
        if outcome.is_win:
            self.scores[outcome.winner.value] += 1
        elif outcome.is_draw:
            self.scores["draw"] += 1

    @property
    def x(self) -> int:
        return self.scores[Mark.X.value]

    @property
    def o(self) -> int:
        return self.scores[Mark.O.value]

    @property
    def draws(self) -> int:
        return self.scores["draw"]

    def reset(self):
        for key in self.scores:
            self.scores[key] = 0


@dataclass(frozen=True)
class GameRecord:
    """One finished game."""
    outcome: Outcome
    moves: Tuple[Move, ...]
    finished_at: datetime = field(default_factory=datetime.now)

    @property
    def summary(self) -> str:
        when = self.finished_at.strftime("%H:%M:%S")
        if self.outcome.is_win:
            return f"{self.outcome.winner.value} won - {when}"
        return f"Draw - {when}"


class GameHistory:
    """The most recent finished games, newest first."""

    def __init__(self, limit: int = GameConfig.HISTORY_LIMIT):
        self._records: Deque[GameRecord] = deque(maxlen=limit)

    def attach(self, session) -> "GameHistory":
        session.subscribe(self)
        return self

    def __call__(self, outcome: Outcome, moves: Tuple[Move, ...] = ()):
        self._records.appendleft(GameRecord(outcome=outcome, moves=tuple(moves)))

    @property
    def records(self) -> List[GameRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)
