import asyncio
import logging

import pytest

from tictactoe import (
    AsyncioScheduler,
    DeferredQueue,
    Difficulty,
    GameConfig,
    GameHistory,
    GameSession,
    GameSettings,
    IllegalMove,
    InvalidConfiguration,
    Mark,
    Mode,
    Outcome,
    Scoreboard,
    SessionStatus,
)

X, O = Mark.X, Mark.O

DRAW_SEQUENCE = [0, 1, 2, 4, 3, 5, 7, 6, 8]


@pytest.fixture
def queue():
    return DeferredQueue()


@pytest.fixture
def session(queue):
    return GameSession(scheduler=queue, seed=42)


class _ForgetfulScheduler:
    """Queues callbacks but ignores cancellation."""

    def __init__(self):
        self.callbacks = []

    def after(self, delay_ms, callback):
        self.callbacks.append(callback)
        return len(self.callbacks)

    def after_cancel(self, handle):
        pass

    def run_all(self):
        callbacks, self.callbacks = self.callbacks, []
        for callback in callbacks:
            callback()


class _RecordingAsyncioScheduler(AsyncioScheduler):
    """Keeps every TimerHandle it hands out."""

    def __init__(self):
        super().__init__()
        self.handles = []

    def after(self, delay_ms, callback):
        handle = super().after(delay_ms, callback)
        self.handles.append(handle)
        return handle


# ==================== LIFECYCLE ====================

def test_new_session_is_idle(session):
    assert session.status == SessionStatus.IDLE
    assert not session.running
    assert session.last_outcome is None
    assert session.board == [None] * 9

    with pytest.raises(IllegalMove):
        session.submit_move(0, X)


def test_start_resets_board_and_x_moves_first(session):
    session.start("pvp")
    session.submit_move(4)
    session.start("pvp")

    assert session.status == SessionStatus.RUNNING
    assert session.board == [None] * 9
    assert session.current_player == X
    assert session.moves == ()


def test_start_game_accepts_dict(session):
    session.start_game({"mode": "pvc", "difficulty": "easy", "human_mark": "x"})

    assert session.settings == GameSettings(Mode.PVC, Difficulty.EASY, X)
    assert session.ai_mark == O


def test_pvp_turns_alternate(session):
    session.start(Mode.PVP)

    session.submit_move(0)
    session.submit_move(4)

    assert session.board[0] == X
    assert session.board[4] == O
    assert session.current_player == X
    assert [(m.index, m.mark, m.move_number) for m in session.moves] == [(0, X, 0), (4, O, 1)]


def test_win_ends_game_with_line(session):
    session.start("pvp")
    for index in [0, 3, 1, 4]:
        session.submit_move(index)

    outcome = session.submit_move(2)

    assert outcome == Outcome.win(X, (0, 1, 2))
    assert session.last_outcome == outcome
    assert not session.running
    assert session.status == SessionStatus.TERMINAL
    with pytest.raises(IllegalMove):
        session.submit_move(5)


def test_draw_updates_only_draw_tally(session):
    scoreboard = Scoreboard().attach(session)

    # One X win first so the tallies are not all zero
    session.start("pvp")
    for index in [0, 3, 1, 4, 2]:
        session.submit_move(index)
    assert (scoreboard.x, scoreboard.o, scoreboard.draws) == (1, 0, 0)

    session.start("pvp")
    outcomes = [session.submit_move(index) for index in DRAW_SEQUENCE]

    assert all(not o.is_terminal for o in outcomes[:-1])
    assert outcomes[-1] == Outcome.draw()
    assert session.last_outcome.is_draw
    assert (scoreboard.x, scoreboard.o, scoreboard.draws) == (1, 0, 1)


# ==================== REJECTED MOVES ====================

@pytest.mark.parametrize("index", [-1, 9, 100, "4", 2.0, None, True])
def test_bad_index_rejected(session, index):
    session.start("pvp")

    with pytest.raises(IllegalMove):
        session.submit_move(index)


def test_occupied_cell_rejected_without_change(session):
    session.start("pvp")
    session.submit_move(4)
    before = session.snapshot()

    with pytest.raises(IllegalMove, match="occupied"):
        session.submit_move(4)

    assert session.snapshot() == before


def test_out_of_turn_rejected_in_pvc(session, queue):
    session.start("pvc", "hard", "X")
    session.submit_move(0, X)
    before = session.snapshot()

    with pytest.raises(IllegalMove, match="turn"):
        session.submit_move(1, X)

    assert session.snapshot() == before
    assert session.current_player == O
    assert session.running


def test_pvc_requires_acting_mark(session):
    session.start("pvc", "easy", "X")

    with pytest.raises(IllegalMove):
        session.submit_move(0)

    assert session.board == [None] * 9


# ==================== CONFIGURATION ====================

@pytest.mark.parametrize("kwargs", [
    {"mode": "chess"},
    {"mode": "pvc", "difficulty": "impossible"},
    {"mode": "pvc", "human_mark": "Z"},
])
def test_invalid_configuration_starts_nothing(session, kwargs):
    with pytest.raises(InvalidConfiguration):
        session.start(**kwargs)

    assert session.status == SessionStatus.IDLE


def test_invalid_restart_keeps_running_game(session):
    session.start("pvp")
    session.submit_move(4)
    before = session.snapshot()

    with pytest.raises(InvalidConfiguration):
        session.start_game({"mode": "pvp", "colour": "red"})

    assert session.snapshot() == before
    assert session.running


# ==================== AI TURNS ====================

def test_hard_ai_answers_corner_with_center(session, queue):
    session.start(mode="pvc", difficulty="hard", human_mark="X")

    outcome = session.submit_move(0, X)

    # The reply is deferred, not applied during submit_move
    assert not outcome.is_terminal
    assert session.board[4] is None
    assert queue.pending() == 1

    queue.run_pending()

    assert session.board[4] == O
    assert session.moves[-1].index == 4
    assert session.current_player == X


def test_ai_waits_for_its_delay(session, queue):
    session.start("pvc", "easy", "X")
    session.submit_move(4, X)

    assert queue.advance(GameConfig.AI_MOVE_DELAY_MS - 1) == 0
    assert len(session.moves) == 1

    assert queue.advance(1) == 1
    assert len(session.moves) == 2


def test_ai_opens_when_human_plays_o(session, queue):
    session.start("pvc", "hard", "O")

    assert session.board == [None] * 9
    queue.run_pending()

    assert len(session.moves) == 1
    assert session.moves[0].mark == X
    assert session.moves[0].index in GameConfig.CORNERS
    assert session.current_player == O


def test_restart_discards_pending_ai_move(session, queue):
    session.start("pvc", "hard", "O")
    session.start("pvp")

    queue.run_pending()

    assert session.board == [None] * 9
    assert session.current_player == X


def test_stale_ai_callback_is_ignored_even_if_not_cancelled():
    scheduler = _ForgetfulScheduler()
    session = GameSession(scheduler=scheduler, seed=1)

    session.start("pvc", "hard", "O")
    session.start("pvc", "hard", "X")
    scheduler.run_all()

    assert session.board == [None] * 9
    assert session.generation == 2


def test_ai_move_skipped_if_cell_played_meanwhile(session, queue):
    session.start("pvc", "easy", "X")
    session.submit_move(0, X)

    # Someone plays O's move before the scheduled reply runs
    session.submit_move(8, O)
    queue.run_pending()

    assert len(session.moves) == 2
    assert session.current_player == X


def test_hard_ai_never_loses_full_game(queue):
    session = GameSession(scheduler=queue, seed=5)
    history = GameHistory().attach(session)

    for human_opening in range(9):
        session.start("pvc", "hard", "X")
        session.submit_move(human_opening, X)
        queue.run_pending()

        # Human keeps playing the first free cell
        while session.running:
            session.submit_move(session.board.index(None), X)
            queue.run_pending()

        assert session.last_outcome.winner != X

    assert len(history) == 9
    assert history.records[0].moves[0].index == 8


def test_observers_receive_outcome_and_moves(session):
    received = []
    observer = session.subscribe(lambda outcome, moves: received.append((outcome, moves)))

    session.start("pvp")
    for index in [0, 3, 1, 4, 2]:
        session.submit_move(index)

    assert len(received) == 1
    outcome, moves = received[0]
    assert outcome.winner == X
    assert [m.index for m in moves] == [0, 3, 1, 4, 2]

    session.unsubscribe(observer)
    session.start("pvp")
    for index in [0, 3, 1, 4, 2]:
        session.submit_move(index)
    assert len(received) == 1


def test_failing_observer_does_not_break_game(session, caplog):
    received = []
    session.subscribe(lambda outcome, moves: 1 / 0)
    session.subscribe(lambda outcome, moves: received.append(outcome))

    session.start("pvp")
    for index in [0, 3, 1, 4]:
        session.submit_move(index)
    with caplog.at_level(logging.ERROR, logger="tictactoe.session"):
        outcome = session.submit_move(2)

    assert outcome.winner == X
    assert received == [outcome]
    assert session.last_outcome == outcome
    assert not session.running
    assert "observer" in caplog.text


# ==================== HISTORY ====================

X_WINS = [0, 3, 1, 4, 2]
O_WINS = [0, 3, 1, 4, 8, 5]


def test_history_keeps_only_latest_games(session):
    history = GameHistory().attach(session)
    scoreboard = Scoreboard().attach(session)
    games = GameConfig.HISTORY_LIMIT + 3

    for game in range(games):
        session.start("pvp")
        for index in (X_WINS if game % 2 == 0 else O_WINS):
            session.submit_move(index)

    assert scoreboard.x + scoreboard.o == games
    assert len(history) == GameConfig.HISTORY_LIMIT
    # Last game (even) was an X win, the one before an O win
    assert history.records[0].outcome.winner == X
    assert [m.index for m in history.records[0].moves] == X_WINS
    assert history.records[1].outcome.winner == O
    assert "won" in history.records[0].summary


# ==================== ASYNCIO ====================

def test_asyncio_scheduler_delivers_ai_reply_after_delay():
    delay = GameConfig.AI_MOVE_DELAY_MS / 1000

    async def play():
        session = GameSession(scheduler=AsyncioScheduler(), seed=0)
        session.start("pvc", "hard", "X")
        session.submit_move(0, X)
        boards = [session.board]
        await asyncio.sleep(delay / 2)
        boards.append(session.board)
        await asyncio.sleep(delay / 2 + 0.2)
        boards.append(session.board)
        return boards, session.current_player

    (right_away, halfway, after), player = asyncio.run(play())

    assert right_away[4] is None
    assert halfway[4] is None
    assert after[4] == O
    assert player == X


def test_asyncio_restart_cancels_pending_timer():
    async def play():
        scheduler = _RecordingAsyncioScheduler()
        session = GameSession(scheduler=scheduler, seed=0)
        session.start("pvc", "hard", "O")
        session.start("pvp")
        await asyncio.sleep(GameConfig.AI_OPENING_DELAY_MS / 1000 + 0.2)
        return scheduler.handles, session.board

    handles, board = asyncio.run(play())

    assert len(handles) == 1
    assert handles[0].cancelled()
    assert board == [None] * 9
