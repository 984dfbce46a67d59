"""chesslink — play a remote chess engine with Fischer clocks and a live session."""

__version__ = "0.1.0"
