"""TurnCoordinator — the single writer of position, clock and session.

Coordinates: Clock, Rules adapter, SessionClient.
Emits events via simple callbacks so the UI / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING

import chess
from PyQt6.QtCore import QObject, Qt, QTimer

from chesslink.core.enums import Color
from chesslink.core.errors import ChesslinkError, NotYourTurnError, ProtocolError
from chesslink.core.outcome import GameOutcome
from chesslink.core.rules import Rules
from chesslink.game.clock import DEFAULT_TICK_MS, Clock, ClockState
from chesslink.game.interfaces import CoordinatorPhase, TimeControl
from chesslink.game.state import (
    CoordinatorSnapshot,
    Session,
    StartSpec,
    TimeBudgets,
    TurnContext,
)

if TYPE_CHECKING:
    from chesslink.remote.session_client import SessionClient

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

SnapshotCallback = Callable[[CoordinatorSnapshot], None]
GameOverCallback = Callable[[GameOutcome], None]
ErrorCallback = Callable[[ChesslinkError], None]
ClockTickCallback = Callable[[ClockState], None]


@dataclass
class CoordinatorEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_snapshot: list[SnapshotCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_start_failed: list[ErrorCallback] = field(default_factory=list)
    on_engine_unavailable: list[ErrorCallback] = field(default_factory=list)
    on_clock_tick: list[ClockTickCallback] = field(default_factory=list)


# ── Coordinator ──────────────────────────────────────────────────────────────


class TurnCoordinator:
    """Sequences local moves, remote moves and the clock for one player
    against the remote engine.

    Everything runs on the Qt main thread. Network replies and clock ticks
    are the only re-entry points; each reply carries the
    :class:`TurnContext` or session generation it was issued under and is
    dropped if that is no longer current.

    Args:
        session_client: Remote service client.
        time_control: Applied from the first game on.
        tick_ms: Clock resolution.
        player_color: Side of the local player until the next game.
        parent: Optional Qt parent for the tick timer.
    """

    __slots__ = (
        "__weakref__",
        "_session_client",
        "_time_control",
        "_pending_time_control",
        "_clock",
        "_position",
        "_outcome",
        "_phase",
        "_player_color",
        "_session",
        "_outstanding",
        "_last_move",
        "_tick_timer",
        "_parent",
        "_is_started",
        "events",
    )

    def __init__(
        self,
        session_client: SessionClient,
        *,
        time_control: TimeControl | None = None,
        tick_ms: int = DEFAULT_TICK_MS,
        player_color: Color = Color.WHITE,
        parent: QObject | None = None,
    ) -> None:
        self._session_client = session_client
        self._time_control = time_control or TimeControl.rapid_10m5s()
        self._pending_time_control = self._time_control
        self._clock = Clock(
            self._time_control, tick_ms=tick_ms, on_timeout=self._on_timed_out
        )
        self._position = Rules.initial_position()
        self._outcome = GameOutcome.in_progress()
        self._phase = CoordinatorPhase.IDLE
        self._player_color = player_color
        self._session = Session()
        self._outstanding: TurnContext | None = None
        self._last_move: str | None = None
        self._tick_timer: QTimer | None = None
        self._parent = parent
        self._is_started = False
        self.events = CoordinatorEvents()
        session_client.set_session_provider(self.current_session_id)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def phase(self) -> CoordinatorPhase:
        return self._phase

    @property
    def position(self) -> chess.Board:
        """A copy of the current position."""
        return self._position.copy()

    @property
    def outcome(self) -> GameOutcome:
        return self._outcome

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def session(self) -> Session:
        return self._session

    @property
    def player_color(self) -> Color:
        return self._player_color

    @property
    def time_control(self) -> TimeControl:
        return self._time_control

    @property
    def outstanding_request(self) -> TurnContext | None:
        return self._outstanding

    def current_session_id(self) -> str | None:
        if not self._session.alive:
            return None
        return self._session.session_id

    def snapshot(self) -> CoordinatorSnapshot:
        return CoordinatorSnapshot(
            fen=Rules.to_fen(self._position),
            side_to_move=Rules.side_to_move(self._position),
            active_color=self._clock.active_color,
            clock=self._clock.state(),
            outcome=self._outcome,
            phase=self._phase,
            player_color=self._player_color,
            session_id=self.current_session_id(),
            last_move=self._last_move,
        )

    # ── Lifecycle ────────────────────────────────────────────────────────

    def setup(self) -> None:
        """Start the clock tick source and the session heartbeat."""
        if self._is_started:
            return
        if self._tick_timer is None:
            self._tick_timer = QTimer(self._parent)
            self._tick_timer.setTimerType(Qt.TimerType.PreciseTimer)
            self._tick_timer.timeout.connect(self._on_tick)
        self._tick_timer.start(self._clock.tick_ms)
        self._session_client.start_heartbeat()
        self._is_started = True

    def shutdown(self) -> None:
        """Stop timers and release the server-side session."""
        if self._tick_timer is not None:
            self._tick_timer.stop()
        self._session_client.stop_heartbeat()
        self._clock.stop()
        self._end_current_session()
        self._session = Session(generation=self._session.generation + 1)
        self._outstanding = None
        self._phase = CoordinatorPhase.IDLE
        self._is_started = False

    def set_time_control(self, time_control: TimeControl) -> None:
        """Takes effect at the next :meth:`new_game` / :meth:`load_position`."""
        self._pending_time_control = time_control

    # ── Commands ─────────────────────────────────────────────────────────

    def new_game(self, player_color: Color) -> None:
        """Start a game from the standard position with the player as *player_color*."""
        self._begin(player_color, Rules.initial_position(), StartSpec.standard())

    def load_position(self, fen: str, player_color: Color | None = None) -> None:
        """Start a game from *fen*; raises :class:`ParseError` without side effects."""
        position = Rules.load_fen(fen)
        if player_color is None:
            player_color = self._player_color
        self._begin(player_color, position, StartSpec.from_fen(Rules.to_fen(position)))

    def submit_local_move(
        self,
        from_square: str,
        to_square: str,
        promotion: str | None = None,
    ) -> chess.Move:
        """Play the local player's move.

        Raises:
            NotYourTurnError: not awaiting a local move.
            IllegalMoveError: the move is not legal; nothing changes.
        """
        if self._phase != CoordinatorPhase.AWAITING_LOCAL_MOVE:
            raise NotYourTurnError(
                f"Not your turn (coordinator is {self._phase.name.lower()})"
            )
        move = Rules.legal_move(self._position, from_square, to_square, promotion)

        self._clock.stop()
        self._clock.apply_increment(self._player_color)
        if self._complete_ply(self._player_color, move):
            return move

        self._phase = CoordinatorPhase.AWAITING_REMOTE_MOVE
        self._request_remote_move()
        self._emit_snapshot()
        return move

    def resign(self, color: Color | None = None) -> bool:
        """Resign for *color* (default: the local player)."""
        if not self._phase.is_waiting:
            return False
        loser = self._player_color if color is None else color
        self._finish(GameOutcome.resigned(loser))
        return True

    def retry_remote_move(self) -> bool:
        """Re-issue the best-move request after the engine was unavailable."""
        if self._phase != CoordinatorPhase.AWAITING_REMOTE_MOVE:
            return False
        if self._outstanding is not None:
            return False
        self._request_remote_move()
        return True

    # ── Internal: game start ─────────────────────────────────────────────

    def _begin(
        self, player_color: Color, position: chess.Board, start_spec: StartSpec
    ) -> None:
        self._end_current_session()
        self._session = Session(generation=self._session.generation + 1)
        self._outstanding = None

        self._time_control = self._pending_time_control
        self._clock.reset(self._time_control)
        self._position = position
        self._outcome = GameOutcome.in_progress()
        self._player_color = player_color
        self._last_move = None
        self._phase = CoordinatorPhase.STARTING
        _LOGGER.info(
            "Starting game as %s with %r (%s)",
            player_color,
            self._time_control,
            start_spec.to_body(),
        )
        self._emit_snapshot()

        generation = self._session.generation
        self._session_client.create_session(
            start_spec,
            on_created=partial(self._on_session_created, generation),
            on_failed=partial(self._on_session_failed, generation),
        )

    def _on_session_created(self, generation: int, session_id: str) -> None:
        if (
            generation != self._session.generation
            or self._phase != CoordinatorPhase.STARTING
        ):
            _LOGGER.debug(
                "Discarding superseded session %s (generation %d)",
                session_id,
                generation,
            )
            self._session_client.end_session(session_id)
            return

        self._session = Session(session_id, generation, alive=True)

        # A loaded position may already be decided.
        outcome = Rules.classify(self._position)
        if outcome.is_terminal:
            self._finish(outcome)
            return

        side = Rules.side_to_move(self._position)
        self._clock.start(side)
        if side == self._player_color:
            self._phase = CoordinatorPhase.AWAITING_LOCAL_MOVE
        else:
            self._phase = CoordinatorPhase.AWAITING_REMOTE_MOVE
            self._request_remote_move()
        self._emit_snapshot()

    def _on_session_failed(self, generation: int, error: ChesslinkError) -> None:
        if (
            generation != self._session.generation
            or self._phase != CoordinatorPhase.STARTING
        ):
            _LOGGER.debug("Ignoring failure of superseded start: %s", error)
            return
        _LOGGER.warning("Cannot start game: %s", error)
        self._phase = CoordinatorPhase.IDLE
        self._emit_snapshot()
        for cb in self.events.on_start_failed:
            cb(error)

    def _end_current_session(self) -> None:
        session_id = self.current_session_id()
        if session_id is not None:
            self._session_client.end_session(session_id)

    # ── Internal: remote moves ───────────────────────────────────────────

    def _request_remote_move(self) -> None:
        if self._outstanding is not None:
            _LOGGER.debug("Best-move request already outstanding")
            return
        session_id = self.current_session_id()
        if session_id is None:
            _LOGGER.warning("No live session, cannot request a move")
            return
        context = TurnContext(
            mover=Rules.side_to_move(self._position),
            move_number=self._position.fullmove_number,
            generation=self._session.generation,
            session_id=session_id,
            budgets=TimeBudgets.from_clock(self._clock.state()),
        )
        self._outstanding = context
        self._session_client.request_move(
            session_id,
            context.budgets,
            on_move=partial(self._on_remote_move, context),
            on_failed=partial(self._on_remote_failed, context),
        )

    def _is_current(self, context: TurnContext) -> bool:
        return (
            context is self._outstanding
            and context.generation == self._session.generation
            and context.session_id == self.current_session_id()
            and self._phase == CoordinatorPhase.AWAITING_REMOTE_MOVE
        )

    def _on_remote_move(self, context: TurnContext, notation: str) -> None:
        if not self._is_current(context):
            _LOGGER.debug(
                "Discarding stale engine move %r (generation %d, move %d)",
                notation,
                context.generation,
                context.move_number,
            )
            return
        self._outstanding = None

        self._clock.stop()
        self._clock.apply_increment(context.mover)
        try:
            move = Rules.parse_remote_move(self._position, notation)
        except ProtocolError as exc:
            _LOGGER.error("Aborting game: %s", exc)
            self._finish(GameOutcome.aborted(str(exc)))
            return

        if self._complete_ply(context.mover, move):
            return
        self._phase = CoordinatorPhase.AWAITING_LOCAL_MOVE
        self._emit_snapshot()

    def _on_remote_failed(self, context: TurnContext, error: ChesslinkError) -> None:
        if not self._is_current(context):
            _LOGGER.debug("Ignoring stale engine failure: %s", error)
            return
        self._outstanding = None
        if isinstance(error, ProtocolError):
            _LOGGER.error("Aborting game: %s", error)
            self._finish(GameOutcome.aborted(str(error)))
            return
        _LOGGER.warning(
            "Engine unavailable (%s); %s clock keeps running", error, context.mover
        )
        for cb in self.events.on_engine_unavailable:
            cb(error)

    # ── Internal: ply completion, clock, termination ─────────────────────

    def _complete_ply(self, mover: Color, move: chess.Move) -> bool:
        """Apply *move* (clock already stopped); returns True if the game ended."""
        self._position = Rules.apply_move(self._position, move)
        self._last_move = Rules.move_to_uci(move)
        session_id = self.current_session_id()
        if session_id is not None:
            self._session_client.report_move(session_id, self._last_move)

        outcome = Rules.classify(self._position)
        if outcome.is_terminal:
            self._finish(outcome)
            return True

        self._clock.start(mover.opposite)
        return False

    def _on_tick(self) -> None:
        if not self._clock.is_running:
            return
        self._clock.tick()
        state = self._clock.state()
        for cb in self.events.on_clock_tick:
            cb(state)

    def _on_timed_out(self, color: Color) -> None:
        if not self._phase.is_waiting:
            return
        self._finish(GameOutcome.timeout(color))

    def _finish(self, outcome: GameOutcome) -> None:
        self._clock.stop()
        self._outstanding = None
        self._outcome = outcome
        self._phase = CoordinatorPhase.FINISHED
        _LOGGER.info("Game over: %s", outcome.describe())
        self._emit_snapshot()
        for cb in self.events.on_game_over:
            cb(outcome)

    def _emit_snapshot(self) -> None:
        if not self.events.on_snapshot:
            return
        snapshot = self.snapshot()
        for cb in self.events.on_snapshot:
            cb(snapshot)
