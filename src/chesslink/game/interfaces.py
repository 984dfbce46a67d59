"""Abstract interfaces and shared definitions for the game layer.

The :class:`~chesslink.game.coordinator.TurnCoordinator` depends on these
definitions, not on the concrete clock or network implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from chesslink.core.enums import Color

if TYPE_CHECKING:
    from chesslink.game.clock import ClockState


# ── Coordinator FSM states ───────────────────────────────────────────────────


class CoordinatorPhase(IntEnum):
    """Finite-state-machine states of the turn coordinator."""

    IDLE = auto()
    STARTING = auto()  # new-session request outstanding
    AWAITING_LOCAL_MOVE = auto()
    AWAITING_REMOTE_MOVE = auto()
    FINISHED = auto()

    @property
    def is_waiting(self) -> bool:
        return self in (
            CoordinatorPhase.AWAITING_LOCAL_MOVE,
            CoordinatorPhase.AWAITING_REMOTE_MOVE,
        )


# ── Time control presets ─────────────────────────────────────────────────────


class TimeControl:
    """Immutable time-control definition.

    Args:
        initial_seconds: Starting time per player.
        increment_seconds: Per-move increment (Fischer).
    """

    __slots__ = ("initial_seconds", "increment_seconds")

    def __init__(
        self, initial_seconds: float, increment_seconds: float = 0.0
    ) -> None:
        if initial_seconds < 0 or increment_seconds < 0:
            raise ValueError("Time control values must be non-negative")
        self.initial_seconds = initial_seconds
        self.increment_seconds = increment_seconds

    @classmethod
    def from_minutes(
        cls, base_minutes: float, increment_seconds: float = 0.0
    ) -> TimeControl:
        """Build from the user-facing units: fractional minutes + seconds."""
        return cls(base_minutes * 60, increment_seconds)

    @property
    def initial_ms(self) -> int:
        return round(self.initial_seconds * 1000)

    @property
    def increment_ms(self) -> int:
        return round(self.increment_seconds * 1000)

    @classmethod
    def rapid_10m5s(cls) -> TimeControl:
        return cls(600, 5)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeControl):
            return NotImplemented
        return (self.initial_seconds, self.increment_seconds) == (
            other.initial_seconds,
            other.increment_seconds,
        )

    def __hash__(self) -> int:
        return hash((self.initial_seconds, self.increment_seconds))

    def __repr__(self) -> str:
        mins = self.initial_seconds / 60
        if self.increment_seconds:
            return f"TimeControl({mins:g}m+{self.increment_seconds:g}s)"
        return f"TimeControl({mins:g}m)"


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IClock(ABC):
    """Interface for a two-sided chess clock."""

    @abstractmethod
    def start(self, color: Color) -> bool:
        """Start the clock for *color*. Returns False if refused."""

    @abstractmethod
    def stop(self) -> None:
        """Pause the running clock."""

    @abstractmethod
    def tick(self, elapsed_ms: int | None = None) -> None:
        """Advance the running side by one tick."""

    @abstractmethod
    def remaining(self, color: Color) -> int:
        """Milliseconds remaining for *color*."""

    @abstractmethod
    def apply_increment(self, color: Color, amount_ms: int | None = None) -> None:
        """Add Fischer increment after *color* moved."""

    @abstractmethod
    def state(self) -> ClockState:
        """Snapshot of the clock."""
