"""HTTP middleware for request correlation."""

from __future__ import annotations

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from driveplane.core.logging import clear_request_id, set_request_id

REQUEST_ID_HEADER = "X-Request-Id"


class RequestIdMiddleware:
    """Bind a correlation id to every HTTP request and echo it back.

    An incoming X-Request-Id header is reused; otherwise one is generated.
    Log lines emitted while handling the request carry the id.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        incoming = Headers(scope=scope).get(REQUEST_ID_HEADER)
        request_id = set_request_id(incoming)

        async def send_with_header(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                headers.append(REQUEST_ID_HEADER, request_id)
            await send(message)

        try:
            await self.app(scope, receive, send_with_header)
        finally:
            clear_request_id()
