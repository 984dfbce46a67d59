"""Remote move service: HTTP transport and session client."""

from chesslink.remote.transport import (
    HttpReply,
    HttpTransport,
    QtHttpTransport,
    build_url,
)
from chesslink.remote.session_client import SessionClient

__all__ = [
    "HttpReply",
    "HttpTransport",
    "QtHttpTransport",
    "SessionClient",
    "build_url",
]
