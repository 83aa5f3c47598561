"""Request ID middleware for per-request tracking.

This middleware:
1. Takes the request ID from the X-Request-ID header, or generates a UUID
2. Stores the ID in request.state.request_id
3. Adds the ID and the request path to the logging context
4. Includes X-Request-ID in the response headers
5. Clears the logging context when the request completes
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from starlette.datastructures import MutableHeaders

from order_service.infra.logging.context import clear_log_context, set_log_context

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

MAX_REQUEST_ID_LENGTH = 128


def generate_uuid() -> str:
    return str(uuid.uuid4())


class RequestIDMiddleware:
    """Pure ASGI middleware adding a request id to state, logs and response.

    Usage:
        app = FastAPI()
        app.add_middleware(RequestIDMiddleware)

        @app.get("/")
        async def root(request: Request):
            return {"request_id": request.state.request_id}
    """

    header_name = "x-request-id"

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = self._extract(scope) or generate_uuid()
        scope.setdefault("state", {})["request_id"] = request_id
        set_log_context(request_id=request_id, path=scope.get("path", ""))

        async def send_with_header(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append(self.header_name, request_id)
            await send(message)

        try:
            await self.app(scope, receive, send_with_header)
        finally:
            clear_log_context()

    def _extract(self, scope: Scope) -> str | None:
        for name, value in scope.get("headers", []):
            if name == self.header_name.encode("latin-1"):
                candidate = value.decode("latin-1").strip()
                if candidate and len(candidate) <= MAX_REQUEST_ID_LENGTH:
                    return candidate
        return None
