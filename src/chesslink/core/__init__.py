"""Core domain layer: enums, error taxonomy and the python-chess rules adapter.

Quick start::

    from chesslink.core import Rules

    pos = Rules.initial_position()
    move = Rules.legal_move(pos, "e2", "e4")
    pos = Rules.apply_move(pos, move)
"""

from chesslink.core.enums import Color, OutcomeKind
from chesslink.core.errors import (
    ChesslinkError,
    IllegalMoveError,
    NetworkError,
    NotYourTurnError,
    ParseError,
    ProtocolError,
)
from chesslink.core.outcome import GameOutcome
from chesslink.core.rules import Rules

__all__ = [
    # Enums
    "Color",
    "OutcomeKind",
    "GameOutcome",
    # Errors
    "ChesslinkError",
    "IllegalMoveError",
    "NetworkError",
    "NotYourTurnError",
    "ParseError",
    "ProtocolError",
    # Rules
    "Rules",
]
