"""HTTP transport running on the Qt event loop.

Requests never block: ``QNetworkAccessManager`` delivers each reply on the
thread that owns it (the main thread), so reply callbacks and clock ticks
interleave but never run concurrently.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import partial
from typing import Protocol

from PyQt6.QtCore import QObject, QUrl, QUrlQuery
from PyQt6.QtNetwork import (
    QNetworkAccessManager,
    QNetworkReply,
    QNetworkRequest,
    QSslError,
)

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HttpReply:
    """Outcome of one request.

    ``status`` is ``None`` when no HTTP response was received; ``error``
    then holds the transport error text.
    """

    status: int | None
    body: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return (
            self.error is None
            and self.status is not None
            and 200 <= self.status < 300
        )


ReplyCallback = Callable[[HttpReply], None]


class HttpTransport(Protocol):
    """Minimal request/response interface used by :class:`SessionClient`."""

    def get(
        self, path: str, params: Mapping[str, str], on_done: ReplyCallback
    ) -> None: ...

    def post(self, path: str, body: str, on_done: ReplyCallback) -> None: ...


def build_url(
    base_url: str, path: str, params: Mapping[str, str] | None = None
) -> QUrl:
    """Join *base_url* and *path* and attach *params* as a query string."""
    url = QUrl(base_url.rstrip("/") + "/" + path.lstrip("/"))
    if params:
        query = QUrlQuery()
        for key, value in params.items():
            query.addQueryItem(key, value)
        url.setQuery(query)
    return url


class QtHttpTransport:
    """:class:`HttpTransport` backed by ``QNetworkAccessManager``.

    No per-request timeout is applied; an unanswered request simply never
    calls back.

    Args:
        base_url: Scheme, host and port of the remote service.
        verify_tls: When False, certificate errors are logged and ignored
            (self-signed development servers).
        parent: Optional Qt parent for the network manager.
    """

    __slots__ = ("__weakref__", "_base_url", "_manager", "_pending", "_verify_tls")

    def __init__(
        self,
        base_url: str,
        *,
        verify_tls: bool = True,
        parent: QObject | None = None,
    ) -> None:
        self._base_url = base_url
        self._verify_tls = verify_tls
        self._manager = QNetworkAccessManager(parent)
        self._pending: set[QNetworkReply] = set()

    @property
    def base_url(self) -> str:
        return self._base_url

    def get(
        self, path: str, params: Mapping[str, str], on_done: ReplyCallback
    ) -> None:
        request = QNetworkRequest(build_url(self._base_url, path, params))
        self._track(self._manager.get(request), on_done)

    def post(self, path: str, body: str, on_done: ReplyCallback) -> None:
        request = QNetworkRequest(build_url(self._base_url, path))
        request.setHeader(
            QNetworkRequest.KnownHeaders.ContentTypeHeader, "application/json"
        )
        self._track(self._manager.post(request, body.encode("utf-8")), on_done)

    # ── Internal ─────────────────────────────────────────────────────────

    def _track(self, reply: QNetworkReply | None, on_done: ReplyCallback) -> None:
        if reply is None:
            on_done(HttpReply(status=None, error="request could not be created"))
            return
        self._pending.add(reply)
        if not self._verify_tls:
            reply.sslErrors.connect(partial(self._ignore_ssl_errors, reply))
        reply.finished.connect(partial(self._on_finished, reply, on_done))

    def _ignore_ssl_errors(self, reply: QNetworkReply, errors: list[QSslError]) -> None:
        for error in errors:
            _LOGGER.warning("Ignoring TLS error: %s", error.errorString())
        reply.ignoreSslErrors()

    def _on_finished(self, reply: QNetworkReply, on_done: ReplyCallback) -> None:
        self._pending.discard(reply)
        status = reply.attribute(QNetworkRequest.Attribute.HttpStatusCodeAttribute)
        body = reply.readAll().data().decode("utf-8", errors="replace")
        error: str | None = None
        if status is None and reply.error() != QNetworkReply.NetworkError.NoError:
            error = reply.errorString()
        reply.deleteLater()
        on_done(
            HttpReply(
                status=int(status) if status is not None else None,
                body=body,
                error=error,
            )
        )
