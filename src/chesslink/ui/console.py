"""ConsoleView — a thin text presentation of the coordinator.

Reads commands from stdin without blocking the Qt event loop and prints
the board, both clocks and status after every coordinator transition.
Board orientation lives here only; the coordinator never sees it.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

import chess
from PyQt6.QtCore import QObject, QSocketNotifier

from chesslink.core.enums import Color
from chesslink.core.errors import ChesslinkError
from chesslink.core.outcome import GameOutcome
from chesslink.game.clock import ClockState
from chesslink.game.coordinator import TurnCoordinator
from chesslink.game.interfaces import CoordinatorPhase, TimeControl
from chesslink.game.state import CoordinatorSnapshot

HELP_TEXT = """\
Commands:
  new [white|black]        start a new game (default: current side)
  load <fen>               start from a FEN position
  move <uci>               play a move, e.g. "move e2e4" or "move e7e8q"
  <from> <to> [promo]      same as move, e.g. "e2 e4"
  resign                   resign the current game
  retry                    ask the engine again after a failure
  time <min> <inc>         time control for the next game (minutes, seconds)
  flip                     flip the board
  show                     print the board again
  help                     this text
  quit                     leave"""


@dataclass(frozen=True, slots=True)
class Command:
    """A parsed console command."""

    name: str
    args: tuple[str, ...] = ()


def parse_command(line: str) -> Command | None:
    """Split *line* into a :class:`Command`; bare squares become ``move``."""
    parts = line.strip().split()
    if not parts:
        return None
    name = parts[0].lower()
    args = tuple(parts[1:])
    if len(name) == 2 and args and _looks_like_square(name):
        return Command("move", (name, *args))
    if (
        len(name) in (4, 5)
        and not args
        and _looks_like_square(name)
        and _looks_like_square(name[2:4])
    ):
        return Command("move", (name,))
    return Command(name, args)


def split_uci(text: str) -> tuple[str, str, str | None]:
    """``e7e8q`` -> ``("e7", "e8", "q")``."""
    text = text.strip().lower()
    if len(text) not in (4, 5):
        raise ValueError(f"Not a move: {text!r}")
    promotion = text[4] if len(text) == 5 else None
    return text[:2], text[2:4], promotion


def format_clock(remaining_ms: int) -> str:
    """Format as ``mm:ss`` (tenths below ten seconds)."""
    remaining_ms = max(0, remaining_ms)
    if remaining_ms < 10_000:
        return f"00:0{remaining_ms // 1000}.{(remaining_ms % 1000) // 100}"
    seconds = remaining_ms // 1000
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def render_board(fen: str, orientation: Color) -> str:
    """ASCII board from *orientation*'s point of view."""
    lines = str(chess.Board(fen)).splitlines()
    ranks = "87654321"
    if orientation == Color.BLACK:
        lines = [line[::-1] for line in reversed(lines)]
        ranks = ranks[::-1]
    files = "a b c d e f g h" if orientation == Color.WHITE else "h g f e d c b a"
    rows = [f"{rank} {line}" for rank, line in zip(ranks, lines)]
    rows.append(f"  {files}")
    return "\n".join(rows)


def _looks_like_square(text: str) -> bool:
    return text[0] in "abcdefgh" and text[1] in "12345678"


class ConsoleView:
    """Presentation boundary: renders snapshots and issues commands."""

    __slots__ = (
        "__weakref__",
        "_coordinator",
        "_out",
        "_on_quit",
        "_orientation",
        "_notifier",
    )

    def __init__(
        self,
        coordinator: TurnCoordinator,
        *,
        out: TextIO | None = None,
        on_quit: Callable[[], None] | None = None,
    ) -> None:
        self._coordinator = coordinator
        self._out = out if out is not None else sys.stdout
        self._on_quit = on_quit
        self._orientation = coordinator.player_color
        self._notifier: QSocketNotifier | None = None

        events = coordinator.events
        events.on_snapshot.append(self.on_snapshot)
        events.on_game_over.append(self.on_game_over)
        events.on_start_failed.append(self.on_start_failed)
        events.on_engine_unavailable.append(self.on_engine_unavailable)

    @property
    def orientation(self) -> Color:
        return self._orientation

    def attach_stdin(self, parent: QObject | None = None) -> None:
        """Watch stdin on the event loop."""
        self._notifier = QSocketNotifier(
            sys.stdin.fileno(), QSocketNotifier.Type.Read, parent
        )
        self._notifier.activated.connect(self._on_stdin_ready)
        self._print(HELP_TEXT)

    # ── Coordinator events ───────────────────────────────────────────────

    def on_snapshot(self, snapshot: CoordinatorSnapshot) -> None:
        if snapshot.phase == CoordinatorPhase.STARTING:
            self._print("Starting a new game...")
            return
        self._print(self.render(snapshot))

    def on_game_over(self, outcome: GameOutcome) -> None:
        self._print(f"*** {outcome.describe()} ***")

    def on_start_failed(self, error: ChesslinkError) -> None:
        self._print(f"Cannot start the game: {error}")

    def on_engine_unavailable(self, error: ChesslinkError) -> None:
        self._print(
            f"Engine unavailable ({error}). Its clock keeps running; "
            "type 'retry' to ask again or 'resign'."
        )

    def render(self, snapshot: CoordinatorSnapshot) -> str:
        clock = snapshot.clock
        top, bottom = self._orientation.opposite, self._orientation
        lines = [
            self._clock_line(top, clock),
            render_board(snapshot.fen, self._orientation),
            self._clock_line(bottom, clock),
        ]
        if snapshot.last_move:
            lines.append(f"Last move: {snapshot.last_move}")
        lines.append(self._status_line(snapshot))
        return "\n".join(lines)

    # ── Commands ─────────────────────────────────────────────────────────

    def handle_line(self, line: str) -> bool:
        """Execute one command line. Returns False when the user quits."""
        command = parse_command(line)
        if command is None:
            return True
        try:
            return self._dispatch(command)
        except (ChesslinkError, ValueError) as exc:
            self._print(f"Error: {exc}")
            return True

    def _dispatch(self, command: Command) -> bool:
        ctrl = self._coordinator
        name, args = command.name, command.args

        if name in ("quit", "exit"):
            if self._on_quit is not None:
                self._on_quit()
            return False
        if name == "help":
            self._print(HELP_TEXT)
        elif name == "new":
            color = Color.parse(args[0]) if args else ctrl.player_color
            self._orientation = color
            ctrl.new_game(color)
        elif name == "load":
            if not args:
                raise ValueError("Please enter a FEN string")
            ctrl.load_position(" ".join(args))
        elif name == "move":
            if len(args) == 1:
                src, dst, promotion = split_uci(args[0])
            elif len(args) in (2, 3):
                src, dst = args[0], args[1]
                promotion = args[2] if len(args) == 3 else None
            else:
                raise ValueError("Usage: move <uci> | <from> <to> [promo]")
            ctrl.submit_local_move(src, dst, promotion)
        elif name == "resign":
            if not ctrl.resign():
                self._print("Nothing to resign.")
        elif name == "retry":
            if not ctrl.retry_remote_move():
                self._print("No engine request to retry.")
        elif name == "time":
            if len(args) != 2:
                raise ValueError("Usage: time <minutes> <increment seconds>")
            minutes, increment = float(args[0]), float(args[1])
            ctrl.set_time_control(TimeControl.from_minutes(minutes, increment))
            self._print("Time control will apply to the next game.")
        elif name == "flip":
            self._orientation = self._orientation.opposite
            self._reprint()
        elif name == "show":
            self._reprint()
        else:
            self._print(f"Unknown command {name!r}; type 'help'.")
        return True

    # ── Internal ─────────────────────────────────────────────────────────

    def _on_stdin_ready(self) -> None:
        line = sys.stdin.readline()
        if not line:  # EOF
            if self._notifier is not None:
                self._notifier.setEnabled(False)
            self.handle_line("quit")
            return
        self.handle_line(line)

    def _reprint(self) -> None:
        self._print(self.render(self._coordinator.snapshot()))

    def _clock_line(self, color: Color, clock: ClockState) -> str:
        marker = "*" if clock.is_running and clock.active_color == color else " "
        name = str(color).capitalize()
        return f"{marker} {name:<5} {format_clock(clock.remaining(color))}"

    def _status_line(self, snapshot: CoordinatorSnapshot) -> str:
        if snapshot.outcome.is_terminal:
            return snapshot.outcome.describe()
        if snapshot.phase == CoordinatorPhase.AWAITING_LOCAL_MOVE:
            return f"Your move ({snapshot.side_to_move})"
        if snapshot.phase == CoordinatorPhase.AWAITING_REMOTE_MOVE:
            return "Engine is thinking..."
        return "No game in progress"

    def _print(self, text: str) -> None:
        print(text, file=self._out, flush=True)
