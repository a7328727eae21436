"""
Request and session correlation.

Every HTTP request gets a request ID (taken from X-Request-ID or generated)
that is echoed in the response. WebSocket connections get one as well, and
the live channel binds its session ID for the lifetime of the connection, so
the log lines of a JOIN_TABLE and of the broadcast it triggers can be tied
back to the same client.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from collections.abc import Iterator

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
session_id_var: ContextVar[str] = ContextVar("session_id", default="")


def get_request_id() -> str:
    return request_id_var.get()


def get_session_id() -> str:
    return session_id_var.get()


@contextmanager
def bind_session_id(session_id: str) -> Iterator[None]:
    """
    Tag log records emitted inside the block with a WebSocket session ID.

    Tasks created inside the block (per-client sender tasks) inherit it.
    """
    token = session_id_var.set(session_id)
    try:
        yield
    finally:
        session_id_var.reset(token)


class CorrelationIdMiddleware:
    """
    ASGI middleware assigning a request ID to HTTP and WebSocket scopes.

    Pure ASGI rather than BaseHTTPMiddleware so the ID is also set while a
    WebSocket connection is open.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
            await send(message)

        token = request_id_var.set(request_id)
        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            request_id_var.reset(token)


class CorrelationIdFilter:
    """Logging filter copying the current request and session IDs onto records."""

    def filter(self, record) -> bool:
        record.request_id = request_id_var.get() or "-"
        record.session_id = session_id_var.get() or "-"
        return True
