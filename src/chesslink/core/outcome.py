"""Game outcome value type."""

from __future__ import annotations

from dataclasses import dataclass

from chesslink.core.enums import Color, OutcomeKind


@dataclass(frozen=True, slots=True)
class GameOutcome:
    """Tagged outcome of a game.

    ``color`` is the winner for checkmate and the loser for resignation
    and timeout; it is ``None`` otherwise.  ``detail`` carries the draw
    reason or the abort reason.
    """

    kind: OutcomeKind
    color: Color | None = None
    detail: str = ""

    @classmethod
    def in_progress(cls) -> GameOutcome:
        return cls(OutcomeKind.IN_PROGRESS)

    @classmethod
    def checkmate(cls, winner: Color) -> GameOutcome:
        return cls(OutcomeKind.CHECKMATE, winner)

    @classmethod
    def draw(cls, reason: str = "") -> GameOutcome:
        return cls(OutcomeKind.DRAW, None, reason)

    @classmethod
    def resigned(cls, loser: Color) -> GameOutcome:
        return cls(OutcomeKind.RESIGNED, loser)

    @classmethod
    def timeout(cls, loser: Color) -> GameOutcome:
        return cls(OutcomeKind.TIMEOUT, loser)

    @classmethod
    def aborted(cls, reason: str) -> GameOutcome:
        return cls(OutcomeKind.ABORTED, None, reason)

    @property
    def is_terminal(self) -> bool:
        return self.kind != OutcomeKind.IN_PROGRESS

    @property
    def winner(self) -> Color | None:
        if self.kind == OutcomeKind.CHECKMATE:
            return self.color
        if self.kind in (OutcomeKind.RESIGNED, OutcomeKind.TIMEOUT):
            assert self.color is not None
            return self.color.opposite
        return None

    def describe(self) -> str:
        """Human-readable one-line summary."""
        if self.kind == OutcomeKind.IN_PROGRESS:
            return "Game in progress"
        if self.kind == OutcomeKind.DRAW:
            return f"Draw ({self.detail})" if self.detail else "Draw"
        if self.kind == OutcomeKind.ABORTED:
            return f"Game aborted: {self.detail}"

        winner = str(self.winner).capitalize()
        if self.kind == OutcomeKind.CHECKMATE:
            return f"Checkmate! {winner} wins"
        if self.kind == OutcomeKind.RESIGNED:
            return f"{str(self.color).capitalize()} resigned. {winner} wins"
        return f"{winner} wins on time"
