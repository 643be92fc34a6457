"""
Console front-end for the TicTacToe engine.

This script ties together:
- The game session (rules, turns, outcomes)
- The AI opponent (easy / difficult / hard)
- Scoreboard and history observers

Run this script to play TicTacToe in a terminal!
"""

import argparse
import logging
import sys
from typing import Optional

from tictactoe import (
    DeferredQueue,
    GameHistory,
    GameSession,
    GameSettings,
    IllegalMove,
    InvalidConfiguration,
    Mark,
    Mode,
    Scoreboard,
)


def format_board(board) -> str:
    """Render a board with cell numbers 1-9 in the empty cells."""
    rows = []
    for row in range(3):
        cells = []
        for col in range(3):
            index = row * 3 + col
            mark = board[index]
            cells.append(mark.value if mark is not None else str(index + 1))
        rows.append(" " + " | ".join(cells))
    return "\n" + "\n---+---+---\n".join(rows) + "\n"


class TicTacToeConsole:
    """
    Plays games in the terminal.

    Game flow:
    1. The human (or, in PVP mode, both humans) types a cell number 1-9
    2. The session validates and applies it
    3. In PVC mode the AI's scheduled reply is run from the queue
    4. Repeat until someone wins or it's a draw
    """

    def __init__(self, settings: GameSettings, seed: Optional[int] = None):
        self.settings = settings
        self.queue = DeferredQueue()
        self.session = GameSession(scheduler=self.queue, seed=seed)
        self.scoreboard = Scoreboard().attach(self.session)
        self.history = GameHistory().attach(self.session)

        print("\n" + "=" * 40)
        print("   TicTacToe")
        if settings.mode == Mode.PVC:
            print(f"   You play: {settings.human_mark.value}")
            print(f"   AI plays: {settings.ai_mark.value} ({settings.difficulty.value})")
        else:
            print("   Two players, X moves first")
        print("=" * 40)

    def play(self):
        """Play games until the user declines another one."""
        while True:
            self.session.start_game(self.settings)
            self._game_loop()
            self._show_game_result()

            again = input("Play again? [y/N]: ").strip().lower()
            if again not in ("y", "yes"):
                break

    def _game_loop(self):
        while self.session.running:
            # AI turn: let the scheduled move run
            if self.queue.pending():
                print("AI is thinking...")
                self.queue.run_pending()
                continue

            print(format_board(self.session.board))
            self._read_human_move()

    def _read_human_move(self):
        mark = self.session.current_player
        while True:
            text = input(f"Play {mark.value} at [1-9]: ").strip()
            if text.lower() in ("q", "quit"):
                raise KeyboardInterrupt
            try:
                index = int(text) - 1
            except ValueError:
                index = None
            if index is None or not 0 <= index < 9:
                print("Please type a number 1..9.")
                continue

            try:
                self.session.submit_move(index, mark)
                return
            except IllegalMove as e:
                print(f"Illegal move: {e}")

    def _show_game_result(self):
        print(format_board(self.session.board))
        print("=" * 40)

        outcome = self.session.last_outcome
        if outcome.is_win:
            line = ", ".join(str(i + 1) for i in outcome.line)
            print(f"   {outcome.winner.value} WINS! (cells {line})")
        else:
            print("   It's a DRAW!")

        scores = self.scoreboard
        print(f"   Score  X: {scores.x}  O: {scores.o}  Draws: {scores.draws}")
        print("=" * 40)

        for record in self.history.records[:3]:
            print(f"   {record.summary}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="TicTacToe")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in Mode],
        default="pvc",
        help="pvc: play the computer, pvp: two players"
    )
    parser.add_argument(
        "--difficulty",
        default="hard",
        help="AI level: easy, difficult or hard"
    )
    parser.add_argument(
        "--symbol",
        choices=[m.value for m in Mark],
        default="X",
        help="Your mark in pvc mode (X moves first)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the AI's random choices"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show engine debug logging"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s"
    )

    try:
        settings = GameSettings.parse(args.mode, args.difficulty, args.symbol)
    except InvalidConfiguration as e:
        parser.error(str(e))

    try:
        TicTacToeConsole(settings, seed=args.seed).play()
    except (KeyboardInterrupt, EOFError):
        print("\n\nGame interrupted by user.")
    finally:
        print("Goodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
