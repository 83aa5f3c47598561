"""HTTP-facing errors rendered as problem details.

Data-layer failures (``NotFoundError``, ``MalformedCursorError``) keep their
own types and are mapped in ``app.exception_handlers``. The classes here are
for request-level problems detected in routers.
"""

from __future__ import annotations

from typing import Any

DEFAULT_TITLES = {
    400: "Bad Request",
    404: "Not Found",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


class AppException(Exception):
    """Error carrying everything needed for an ``application/problem+json`` body.

    ``extra`` is merged into the body next to the standard members.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or DEFAULT_TITLES.get(status_code, "Error")
        self.extra = extra or {}
        super().__init__(detail)


class BadRequestException(AppException):
    """Query parameters that are individually valid but cannot be combined.

    Example:
        raise BadRequestException(
            detail="Use either page or cursor, not both",
            type="conflicting-pagination",
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "bad-request",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(status_code=400, detail=detail, type=type, extra=extra)
