"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass

import pytest

from chesslink.remote.transport import HttpReply, ReplyCallback


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """Provide a singleton QCoreApplication for timer / network tests."""
    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@dataclass
class RecordedRequest:
    """One request captured by :class:`StubTransport`; completed on demand."""

    method: str
    path: str
    params: dict[str, str]
    body: str | None
    on_done: ReplyCallback

    def reply(self, status: int = 200, body: str = "") -> None:
        self.on_done(HttpReply(status=status, body=body))

    def reply_session(self, session_id: str) -> None:
        self.reply(200, json.dumps({"playerID": session_id}))

    def fail(self, error: str = "Connection refused") -> None:
        self.on_done(HttpReply(status=None, error=error))


class StubTransport:
    """Records requests; nothing completes until a test says so."""

    def __init__(self) -> None:
        self.requests: list[RecordedRequest] = []

    def get(
        self, path: str, params: Mapping[str, str], on_done: ReplyCallback
    ) -> None:
        self.requests.append(RecordedRequest("GET", path, dict(params), None, on_done))

    def post(self, path: str, body: str, on_done: ReplyCallback) -> None:
        self.requests.append(RecordedRequest("POST", path, {}, body, on_done))

    def paths(self) -> list[str]:
        return [r.path for r in self.requests]

    def all(self, path: str) -> list[RecordedRequest]:
        return [r for r in self.requests if r.path == path]

    def last(self, path: str) -> RecordedRequest:
        matching = self.all(path)
        assert matching, f"no request to {path}; saw {self.paths()}"
        return matching[-1]


@pytest.fixture
def transport() -> StubTransport:
    return StubTransport()
