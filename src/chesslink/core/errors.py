"""Error taxonomy for the coordinator and its collaborators."""

from __future__ import annotations


class ChesslinkError(Exception):
    """Base class for all errors raised by chesslink."""


class IllegalMoveError(ChesslinkError):
    """A locally submitted move is not legal in the current position."""


class NotYourTurnError(ChesslinkError):
    """A local move arrived while the coordinator was not awaiting one."""


class ParseError(ChesslinkError, ValueError):
    """Malformed FEN (or other textual game input)."""


class NetworkError(ChesslinkError):
    """Transport or HTTP status failure on a remote call.

    Args:
        status: HTTP status code, or ``None`` when the request never got
            a response.
        reason: Transport error text or a short description of the status.
    """

    def __init__(self, status: int | None = None, reason: str = "") -> None:
        self.status = status
        self.reason = reason
        super().__init__(self._describe())

    @property
    def is_transport(self) -> bool:
        return self.status is None

    def _describe(self) -> str:
        if self.status is None:
            return f"transport error: {self.reason or 'unknown'}"
        if self.reason:
            return f"HTTP {self.status}: {self.reason}"
        return f"HTTP {self.status}"


class ProtocolError(ChesslinkError):
    """The remote service answered, but the answer is unusable.

    Raised for an illegal or unparseable engine move and for a malformed
    new-session reply.
    """
