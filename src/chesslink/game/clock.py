"""Tick-driven chess clock with Fischer increment support."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from chesslink.core.enums import Color
from chesslink.game.interfaces import IClock, TimeControl

_LOGGER = logging.getLogger(__name__)

DEFAULT_TICK_MS = 100

TimeoutCallback = Callable[[Color], None]


@dataclass(frozen=True, slots=True)
class ClockState:
    """Read-only view of both clocks."""

    white_remaining_ms: int
    black_remaining_ms: int
    increment_ms: int
    active_color: Color | None
    is_running: bool

    def remaining(self, color: Color) -> int:
        if color == Color.WHITE:
            return self.white_remaining_ms
        return self.black_remaining_ms


class Clock(IClock):
    """Dual chess clock tracking remaining milliseconds for both players.

    Time only moves when :meth:`tick` is called; the owner decides where
    ticks come from (a ``QTimer`` in production, direct calls in tests).
    At most one side is active, and nothing decrements while stopped.

    Args:
        time_control: Base time and increment for both sides.
        tick_ms: Milliseconds removed from the active side per tick.
        on_timeout: Called once with the flagged side when its time runs out.
    """

    __slots__ = (
        "_time_control",
        "_tick_ms",
        "_remaining",
        "_active_color",
        "_running",
        "_flagged",
        "_on_timeout",
    )

    def __init__(
        self,
        time_control: TimeControl,
        *,
        tick_ms: int = DEFAULT_TICK_MS,
        on_timeout: TimeoutCallback | None = None,
    ) -> None:
        if tick_ms <= 0:
            raise ValueError("tick_ms must be positive")
        self._tick_ms = tick_ms
        self._on_timeout = on_timeout
        self._time_control = time_control
        self._remaining: dict[Color, int] = {}
        self._active_color: Color | None = None
        self._running = False
        self._flagged: Color | None = None
        self.reset(time_control)

    # ── IClock implementation ────────────────────────────────────────────

    def start(self, color: Color) -> bool:
        if self._flagged is not None:
            _LOGGER.warning(
                "Refusing to start %s clock: %s already ran out of time",
                color,
                self._flagged,
            )
            return False
        self._active_color = color
        self._running = True
        return True

    def stop(self) -> None:
        self._running = False

    def tick(self, elapsed_ms: int | None = None) -> None:
        if not self._running or self._active_color is None:
            return
        color = self._active_color
        step = self._tick_ms if elapsed_ms is None else elapsed_ms
        self._remaining[color] = max(0, self._remaining[color] - step)
        if self._remaining[color] == 0:
            self._running = False
            self._flagged = color
            _LOGGER.info("Flag fell for %s", color)
            if self._on_timeout is not None:
                self._on_timeout(color)

    def remaining(self, color: Color) -> int:
        return self._remaining[color]

    def apply_increment(self, color: Color, amount_ms: int | None = None) -> None:
        amount = self.increment_ms if amount_ms is None else amount_ms
        self._remaining[color] += amount

    def state(self) -> ClockState:
        return ClockState(
            white_remaining_ms=self._remaining[Color.WHITE],
            black_remaining_ms=self._remaining[Color.BLACK],
            increment_ms=self.increment_ms,
            active_color=self._active_color,
            is_running=self._running,
        )

    # ── Extra helpers ────────────────────────────────────────────────────

    @property
    def time_control(self) -> TimeControl:
        return self._time_control

    @property
    def tick_ms(self) -> int:
        return self._tick_ms

    @property
    def increment_ms(self) -> int:
        return self._time_control.increment_ms

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def active_color(self) -> Color | None:
        return self._active_color

    def is_flag_fallen(self, color: Color) -> bool:
        return self._flagged == color

    def set_remaining(self, color: Color, remaining_ms: int) -> None:
        """Manually override remaining time (for testing)."""
        self._remaining[color] = max(0, remaining_ms)

    def reset(self, time_control: TimeControl | None = None) -> None:
        """Stop and re-seed both sides from *time_control* (or the current one)."""
        if time_control is not None:
            self._time_control = time_control
        initial = self._time_control.initial_ms
        self._remaining = {Color.WHITE: initial, Color.BLACK: initial}
        self._active_color = None
        self._running = False
        self._flagged = None
