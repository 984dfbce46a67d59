"""Game management layer — clock, turn coordinator, shared state types.

Quick start::

    from chesslink.core import Color
    from chesslink.game import TimeControl, TurnCoordinator
    from chesslink.remote import QtHttpTransport, SessionClient

    client = SessionClient(QtHttpTransport("https://engine.example:49178"))
    coordinator = TurnCoordinator(client, time_control=TimeControl.from_minutes(10, 5))
    coordinator.setup()
    coordinator.new_game(Color.WHITE)
"""

from chesslink.game.clock import Clock, ClockState
from chesslink.game.coordinator import CoordinatorEvents, TurnCoordinator
from chesslink.game.interfaces import CoordinatorPhase, IClock, TimeControl
from chesslink.game.state import (
    CoordinatorSnapshot,
    Session,
    StartSpec,
    TimeBudgets,
    TurnContext,
)

__all__ = [
    # Interfaces
    "CoordinatorPhase",
    "IClock",
    "TimeControl",
    # Concrete
    "Clock",
    "ClockState",
    "CoordinatorEvents",
    "TurnCoordinator",
    # State
    "CoordinatorSnapshot",
    "Session",
    "StartSpec",
    "TimeBudgets",
    "TurnContext",
]
