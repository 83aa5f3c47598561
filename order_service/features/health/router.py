"""Health check API endpoints.

- Liveness probes: /health/live - Is the process alive?
- Readiness probes: /health/ready - Can the service reach its database?
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from order_service.core.dependencies.database import get_db_session
from order_service.core.settings import get_app_settings
from order_service.features.health.schemas import LivenessResponse, ReadinessResponse

router = APIRouter(prefix="/health", tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/live", response_model=LivenessResponse, summary="Liveness probe")
async def liveness() -> LivenessResponse:
    return LivenessResponse(
        alive=True,
        timestamp=datetime.now(UTC),
        service=get_app_settings().service_name,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    responses={503: {"model": ReadinessResponse, "description": "Database unreachable"}},
)
async def readiness(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ReadinessResponse:
    """Run ``SELECT 1`` through a request session."""
    try:
        await session.execute(text("SELECT 1"))
        database_ok = True
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Readiness check failed", extra={"check": "database", "error": str(e)})
        database_ok = False

    if not database_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(
        ready=database_ok,
        checks={"database": database_ok},
        timestamp=datetime.now(UTC),
    )
