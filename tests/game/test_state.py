"""Tests for the value types shared by coordinator and session client."""

from __future__ import annotations

import dataclasses

import pytest

from chesslink.core.enums import Color
from chesslink.game.clock import ClockState
from chesslink.game.interfaces import CoordinatorPhase
from chesslink.game.state import Session, StartSpec, TimeBudgets


class TestStartSpec:
    def test_standard_body(self) -> None:
        assert StartSpec.standard().to_body() == "startpos"

    def test_fen_body(self) -> None:
        fen = "8/8/8/8/8/8/8/K6k w - - 0 1"
        assert StartSpec.from_fen(fen).to_body() == f"fen {fen}"


class TestSession:
    def test_default_not_alive(self) -> None:
        session = Session()
        assert session.session_id is None
        assert not session.alive

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            Session().alive = True  # type: ignore[misc]


class TestTimeBudgets:
    def test_from_clock(self) -> None:
        state = ClockState(
            white_remaining_ms=123_400,
            black_remaining_ms=98_700,
            increment_ms=2000,
            active_color=Color.BLACK,
            is_running=True,
        )
        budgets = TimeBudgets.from_clock(state)
        assert budgets.to_query() == {
            "wtime": "123400",
            "winc": "2000",
            "btime": "98700",
            "binc": "2000",
        }


class TestCoordinatorPhase:
    def test_waiting_phases(self) -> None:
        waiting = {p for p in CoordinatorPhase if p.is_waiting}
        assert waiting == {
            CoordinatorPhase.AWAITING_LOCAL_MOVE,
            CoordinatorPhase.AWAITING_REMOTE_MOVE,
        }
