"""Global exception handlers for FastAPI application.

Every error leaves the service as an RFC 7807 problem body:

    AppException          -> its own status and type
    MalformedCursorError  -> 400 malformed-cursor
    NotFoundError         -> 404 not-found
    RequestValidationError-> 422 validation-error (per-field errors)
    RetryError, Exception -> 500 internal-error (no internals exposed)
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from order_service.core.database.exceptions import NotFoundError
from order_service.core.exceptions import DEFAULT_TITLES, AppException
from order_service.core.pagination import MalformedCursorError
from order_service.core.schemas.problem_details import (
    ProblemDetail,
    ValidationError,
    ValidationProblemDetail,
)
from order_service.infra.metrics import tracking
from order_service.utils.retry import RetryError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_DETAIL = "An unexpected error occurred while processing your request"


def _get_request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _create_problem_detail(
    status_code: int,
    detail: str,
    type_: str = "about:blank",
    title: str | None = None,
    instance: str | None = None,
    request_id: str | None = None,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Create an RFC 7807 Problem Details body.

    Args:
        status_code: HTTP status code.
        detail: Human-readable error description.
        type_: Error type identifier.
        title: Short human-readable summary (defaults from the status code).
        instance: URI identifying this occurrence.
        request_id: Correlation id of the failed request.
        extra: Additional members merged into the body.

    Returns:
        Dictionary representing the problem detail.
    """
    problem = ProblemDetail(
        type=type_,
        title=title or DEFAULT_TITLES.get(status_code, "Error"),
        status=status_code,
        detail=detail,
        instance=instance,
        request_id=request_id,
    )
    response_data = problem.model_dump(exclude_none=True)
    if extra:
        response_data.update(extra)
    return response_data


def _problem_response(
    request: Request,
    *,
    status_code: int,
    type_: str,
    detail: str,
    title: str | None = None,
    extra: dict[str, Any] | None = None,
) -> JSONResponse:
    """Track, log and render a problem response."""
    request_id = _get_request_id(request)

    tracking.track_error(
        error_type=type_,
        endpoint=request.url.path,
        status_code=status_code,
        extra={"detail": detail},
    )
    logger.warning(
        "Application exception occurred",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "exception_type": type_,
            "status_code": status_code,
            "detail": detail,
        },
    )
    return JSONResponse(
        status_code=status_code,
        content=_create_problem_detail(
            status_code=status_code,
            detail=detail,
            type_=type_,
            title=title,
            instance=request.url.path,
            request_id=request_id,
            extra=extra,
        ),
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Convert AppException instances into problem responses."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "Application error",
            extra={"path": request.url.path, "exception_type": exc.type, "detail": exc.detail},
        )
    return _problem_response(
        request,
        status_code=exc.status_code,
        type_=exc.type,
        detail=exc.detail,
        title=exc.title,
        extra=exc.extra,
    )


async def malformed_cursor_handler(request: Request, exc: MalformedCursorError) -> JSONResponse:
    """A cursor that does not decode is the client's error, never a first page."""
    return _problem_response(
        request,
        status_code=status.HTTP_400_BAD_REQUEST,
        type_="malformed-cursor",
        detail=str(exc),
    )


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return _problem_response(
        request,
        status_code=status.HTTP_404_NOT_FOUND,
        type_="not-found",
        detail=f"{exc.model_name} not found",
        extra={"resource": exc.model_name},
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Convert request validation errors into a 422 with field-level errors."""
    request_id = _get_request_id(request)

    validation_errors = []
    for error in exc.errors():
        field_path = ".".join(str(loc) for loc in error["loc"])
        value = error.get("input")
        validation_errors.append(
            ValidationError(
                field=field_path,
                message=error["msg"],
                type=error["type"],
                value=value if isinstance(value, (str, int, float, bool)) else None,
            )
        )
        tracking.track_validation_error(request.url.path, field_path)

    logger.warning(
        "Request validation failed",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "error_count": len(validation_errors),
            "errors": [e.model_dump() for e in validation_errors],
        },
    )

    problem = ValidationProblemDetail(
        type="validation-error",
        title="Validation Error",
        status=422,
        detail=f"Request validation failed for {len(validation_errors)} field(s)",
        instance=request.url.path,
        request_id=request_id,
        errors=validation_errors,
    )
    return JSONResponse(
        status_code=422,
        content=problem.model_dump(exclude_none=True),
    )


def _internal_error(request: Request, exc: Exception) -> JSONResponse:
    request_id = _get_request_id(request)

    tracking.track_unhandled_exception(
        exception_type=type(exc).__name__,
        endpoint=request.url.path,
    )
    logger.error(
        "Unexpected exception occurred",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
        },
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_create_problem_detail(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR_DETAIL,
            type_="internal-error",
            title="Internal Server Error",
            instance=request.url.path,
            request_id=request_id,
        ),
    )


async def retry_exhausted_handler(request: Request, exc: RetryError) -> JSONResponse:
    """Transient database errors that outlived the retry policy."""
    return _internal_error(request, exc)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for exceptions without a specific handler."""
    return _internal_error(request, exc)


def configure_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on ``app``."""
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(MalformedCursorError, malformed_cursor_handler)  # type: ignore[arg-type]
    app.add_exception_handler(NotFoundError, not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RetryError, retry_exhausted_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers configured")
