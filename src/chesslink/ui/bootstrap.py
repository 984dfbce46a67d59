"""Application bootstrap helpers: logging, wiring, event loop."""

from __future__ import annotations

import logging
import sys

from PyQt6.QtCore import QCoreApplication, QObject, QTimer

from chesslink.game.coordinator import TurnCoordinator
from chesslink.remote.session_client import SessionClient
from chesslink.remote.transport import QtHttpTransport
from chesslink.ui.console import ConsoleView
from chesslink.ui.settings import AppSettings

_LOGGER = logging.getLogger(__name__)
_LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_SHUTDOWN_GRACE_MS = 500


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr so they do not interleave with the board."""
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level!r}")
    logging.basicConfig(level=numeric, format=_LOG_FORMAT, stream=sys.stderr)


def build_coordinator(
    settings: AppSettings, parent: QObject | None = None
) -> TurnCoordinator:
    """Wire transport, session client and coordinator from *settings*."""
    transport = QtHttpTransport(
        settings.server_url, verify_tls=settings.verify_tls, parent=parent
    )
    client = SessionClient(
        transport,
        heartbeat_interval_ms=settings.heartbeat_interval_ms,
        parent=parent,
    )
    return TurnCoordinator(
        client,
        time_control=settings.time_control,
        tick_ms=settings.tick_ms,
        player_color=settings.player,
        parent=parent,
    )


def run_application(settings: AppSettings, argv: list[str] | None = None) -> int:
    """Create the Qt core application and play until the user quits."""
    configure_logging(settings.log_level)

    app = QCoreApplication(sys.argv if argv is None else argv)
    app.setApplicationName("chesslink")

    coordinator = build_coordinator(settings, parent=app)

    def _quit() -> None:
        # Let the end-session notification leave before the loop stops.
        coordinator.shutdown()
        QTimer.singleShot(_SHUTDOWN_GRACE_MS, app.quit)

    view = ConsoleView(coordinator, on_quit=_quit)
    view.attach_stdin(parent=app)

    coordinator.setup()
    _LOGGER.info("Connecting to %s", settings.server_url)
    coordinator.new_game(settings.player)

    return app.exec()
