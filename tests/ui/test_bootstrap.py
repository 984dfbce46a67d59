"""Tests for application wiring and settings."""

from __future__ import annotations

import pytest

from chesslink.core.enums import Color
from chesslink.game.interfaces import CoordinatorPhase, TimeControl
from chesslink.ui.bootstrap import build_coordinator, configure_logging
from chesslink.ui.settings import AppSettings


class TestAppSettings:
    def test_defaults(self) -> None:
        settings = AppSettings()
        assert settings.time_control == TimeControl(600, 5)
        assert settings.player == Color.WHITE
        assert settings.heartbeat_interval_ms == 30_000

    def test_bad_side(self) -> None:
        with pytest.raises(ValueError):
            AppSettings(player_color="green").player


class TestBootstrap:
    def test_configure_logging_rejects_unknown_level(self) -> None:
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("chatty")

    def test_build_coordinator(self, qapp: object) -> None:
        settings = AppSettings(
            server_url="http://localhost:9000",
            base_minutes=3,
            increment_seconds=2,
            tick_ms=250,
            player_color="black",
        )
        coordinator = build_coordinator(settings)
        assert coordinator.phase == CoordinatorPhase.IDLE
        assert coordinator.player_color == Color.BLACK
        assert coordinator.time_control == TimeControl(180, 2)
        assert coordinator.clock.tick_ms == 250
        assert coordinator.current_session_id() is None
