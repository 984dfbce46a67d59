"""Value types shared between the coordinator, the session client and the UI."""

from __future__ import annotations

from dataclasses import dataclass

from chesslink.core.enums import Color
from chesslink.core.outcome import GameOutcome
from chesslink.game.clock import ClockState
from chesslink.game.interfaces import CoordinatorPhase

STARTPOS = "startpos"


@dataclass(frozen=True, slots=True)
class StartSpec:
    """What the remote service should set up for a new session."""

    fen: str | None = None

    @classmethod
    def standard(cls) -> StartSpec:
        return cls()

    @classmethod
    def from_fen(cls, fen: str) -> StartSpec:
        return cls(fen)

    def to_body(self) -> str:
        """Request body understood by ``/newgame``."""
        if self.fen is None:
            return STARTPOS
        return f"fen {self.fen}"


@dataclass(frozen=True, slots=True)
class Session:
    """Identity of the server-side game.

    ``generation`` increases with every start attempt, so a reply can be
    matched against the attempt that issued it even before the server has
    handed out a ``session_id``.
    """

    session_id: str | None = None
    generation: int = 0
    alive: bool = False


@dataclass(frozen=True, slots=True)
class TimeBudgets:
    """Clock budgets sent with a best-move request, in milliseconds."""

    white_ms: int
    black_ms: int
    white_increment_ms: int
    black_increment_ms: int

    @classmethod
    def from_clock(cls, clock: ClockState) -> TimeBudgets:
        return cls(
            white_ms=clock.white_remaining_ms,
            black_ms=clock.black_remaining_ms,
            white_increment_ms=clock.increment_ms,
            black_increment_ms=clock.increment_ms,
        )

    def to_query(self) -> dict[str, str]:
        return {
            "wtime": str(self.white_ms),
            "winc": str(self.white_increment_ms),
            "btime": str(self.black_ms),
            "binc": str(self.black_increment_ms),
        }


@dataclass(frozen=True, slots=True)
class TurnContext:
    """Captured when a remote move is requested; checked when it arrives."""

    mover: Color
    move_number: int
    generation: int
    session_id: str
    budgets: TimeBudgets


@dataclass(frozen=True, slots=True)
class CoordinatorSnapshot:
    """Everything a presentation layer needs after a transition."""

    fen: str
    side_to_move: Color
    active_color: Color | None
    clock: ClockState
    outcome: GameOutcome
    phase: CoordinatorPhase
    player_color: Color
    session_id: str | None
    last_move: str | None = None
