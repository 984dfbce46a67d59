"""Client for the remote move service: session lifecycle, moves, heartbeat."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable

from PyQt6.QtCore import QObject, QTimer

from chesslink.core.errors import ChesslinkError, NetworkError, ProtocolError
from chesslink.game.state import StartSpec, TimeBudgets
from chesslink.remote.transport import HttpReply, HttpTransport

_LOGGER = logging.getLogger(__name__)

SessionCreatedCallback = Callable[[str], None]
MoveReceivedCallback = Callable[[str], None]
FailureCallback = Callable[[ChesslinkError], None]
SessionProvider = Callable[[], str | None]


def _network_error(reply: HttpReply) -> NetworkError:
    if reply.status is None:
        return NetworkError(None, reply.error or "no response")
    return NetworkError(reply.status, reply.body.strip()[:200])


def _parse_session_id(body: str) -> str:
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise ProtocolError(f"New-session reply is not JSON: {body[:200]!r}") from exc
    if not isinstance(data, dict):
        raise ProtocolError(f"New-session reply is not an object: {body[:200]!r}")
    for key in ("playerID", "sessionID"):
        value = data.get(key)
        if value is not None and value != "":
            return str(value)
    raise ProtocolError(f"New-session reply has no session id: {body[:200]!r}")


class SessionClient:
    """Talks to the remote move service on behalf of the coordinator.

    Operations never raise for network trouble: the primary calls
    (:meth:`create_session`, :meth:`request_move`) report through their
    failure callback, the notifications (:meth:`end_session`,
    :meth:`report_move`, :meth:`heartbeat`) only log.

    Args:
        transport: Request/response transport.
        session_provider: Returns the live session id; read by the
            heartbeat at send time.
        heartbeat_interval_ms: Keep-alive period.
        parent: Optional Qt parent for the heartbeat timer.
    """

    NEW_GAME_PATH = "/newgame"
    END_GAME_PATH = "/endgame/"
    BEST_MOVE_PATH = "/bestmove"
    PLAYER_MOVE_PATH = "/playermove"
    KEEPALIVE_PATH = "/keepalive"
    SESSION_PARAM = "playerID"

    DEFAULT_HEARTBEAT_INTERVAL_MS = 30_000

    __slots__ = (
        "__weakref__",
        "_transport",
        "_session_provider",
        "_heartbeat_interval_ms",
        "_heartbeat_timer",
        "_parent",
    )

    def __init__(
        self,
        transport: HttpTransport,
        *,
        session_provider: SessionProvider | None = None,
        heartbeat_interval_ms: int = DEFAULT_HEARTBEAT_INTERVAL_MS,
        parent: QObject | None = None,
    ) -> None:
        self._transport = transport
        self._session_provider = session_provider
        self._heartbeat_interval_ms = heartbeat_interval_ms
        self._heartbeat_timer: QTimer | None = None
        self._parent = parent

    # ── Primary calls ────────────────────────────────────────────────────

    def create_session(
        self,
        start_spec: StartSpec,
        on_created: SessionCreatedCallback,
        on_failed: FailureCallback,
    ) -> None:
        """Ask the service for a new session set up from *start_spec*."""

        def _done(reply: HttpReply) -> None:
            if not reply.ok:
                error = _network_error(reply)
                _LOGGER.error("Failed to create session: %s", error)
                on_failed(error)
                return
            try:
                session_id = _parse_session_id(reply.body)
            except ProtocolError as exc:
                _LOGGER.error("%s", exc)
                on_failed(exc)
                return
            _LOGGER.info("Session %s created", session_id)
            on_created(session_id)

        self._transport.post(self.NEW_GAME_PATH, start_spec.to_body(), _done)

    def request_move(
        self,
        session_id: str,
        budgets: TimeBudgets,
        on_move: MoveReceivedCallback,
        on_failed: FailureCallback,
    ) -> None:
        """Ask the engine for its move under the given clock *budgets*."""

        def _done(reply: HttpReply) -> None:
            if not reply.ok:
                error = _network_error(reply)
                _LOGGER.warning("Best-move request failed: %s", error)
                on_failed(error)
                return
            notation = reply.body.strip()
            if not notation:
                on_failed(ProtocolError("Engine returned an empty move"))
                return
            _LOGGER.debug("Engine move for %s: %s", session_id, notation)
            on_move(notation)

        params = {self.SESSION_PARAM: session_id, **budgets.to_query()}
        self._transport.get(self.BEST_MOVE_PATH, params, _done)

    # ── Best-effort notifications ────────────────────────────────────────

    def end_session(self, session_id: str) -> None:
        self._notify(
            self.END_GAME_PATH, {self.SESSION_PARAM: session_id}, "end session"
        )

    def report_move(self, session_id: str, move: str) -> None:
        self._notify(
            self.PLAYER_MOVE_PATH,
            {self.SESSION_PARAM: session_id, "move": move},
            f"report move {move}",
        )

    def heartbeat(self, session_id: str) -> None:
        self._notify(
            self.KEEPALIVE_PATH,
            {self.SESSION_PARAM: session_id},
            "send keep-alive",
        )

    # ── Heartbeat scheduling ─────────────────────────────────────────────

    def set_session_provider(self, provider: SessionProvider | None) -> None:
        self._session_provider = provider

    @property
    def is_heartbeat_running(self) -> bool:
        return self._heartbeat_timer is not None and self._heartbeat_timer.isActive()

    def start_heartbeat(self) -> None:
        """Send a keep-alive every interval for as long as the process runs."""
        if self._heartbeat_timer is None:
            self._heartbeat_timer = QTimer(self._parent)
            self._heartbeat_timer.timeout.connect(self.send_heartbeat)
        self._heartbeat_timer.start(self._heartbeat_interval_ms)

    def stop_heartbeat(self) -> None:
        if self._heartbeat_timer is not None:
            self._heartbeat_timer.stop()

    def send_heartbeat(self) -> None:
        """Keep-alive for whichever session is current right now."""
        session_id = self._session_provider() if self._session_provider else None
        if session_id is None:
            _LOGGER.debug("No live session, skipping keep-alive")
            return
        self.heartbeat(session_id)

    # ── Internal ─────────────────────────────────────────────────────────

    def _notify(self, path: str, params: dict[str, str], what: str) -> None:
        def _done(reply: HttpReply) -> None:
            if reply.ok:
                _LOGGER.debug("%s ok: %s", what, reply.body.strip()[:200])
            else:
                _LOGGER.warning("Failed to %s: %s", what, _network_error(reply))

        self._transport.get(path, params, _done)
