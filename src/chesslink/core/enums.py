"""Core enumerations shared by the clock, rules adapter and coordinator."""

from __future__ import annotations

from enum import IntEnum, auto

import chess


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    @property
    def chess_color(self) -> chess.Color:
        """The python-chess boolean for this side."""
        return self == Color.WHITE

    @classmethod
    def from_chess(cls, color: chess.Color) -> Color:
        return cls.WHITE if color == chess.WHITE else cls.BLACK

    @classmethod
    def parse(cls, text: str) -> Color:
        """Parse ``white``/``black`` (or ``w``/``b``), case-insensitive."""
        key = text.strip().lower()
        if key in ("white", "w"):
            return cls.WHITE
        if key in ("black", "b"):
            return cls.BLACK
        raise ValueError(f"Unknown side: {text!r}")

    def __str__(self) -> str:
        return self.name.lower()


class OutcomeKind(IntEnum):
    """How a game ended (or that it has not)."""

    IN_PROGRESS = 0
    CHECKMATE = auto()
    DRAW = auto()
    RESIGNED = auto()
    TIMEOUT = auto()
    ABORTED = auto()  # remote protocol failure
