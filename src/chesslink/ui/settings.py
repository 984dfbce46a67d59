"""Application settings."""

from __future__ import annotations

from dataclasses import dataclass

from chesslink.core.enums import Color
from chesslink.game.interfaces import TimeControl


@dataclass
class AppSettings:
    """All user-configurable settings."""

    # Remote service
    server_url: str = "https://127.0.0.1:49178"
    verify_tls: bool = True
    heartbeat_interval_ms: int = 30_000

    # Time control (re-applied only at the next game start)
    base_minutes: float = 10.0
    increment_seconds: float = 5.0
    tick_ms: int = 100

    # Game
    player_color: str = "white"

    # Diagnostics
    log_level: str = "INFO"

    @property
    def time_control(self) -> TimeControl:
        return TimeControl.from_minutes(self.base_minutes, self.increment_seconds)

    @property
    def player(self) -> Color:
        return Color.parse(self.player_color)
