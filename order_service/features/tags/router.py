"""API router for the tags feature.

Endpoints:
    GET /tags - List all tags, optionally filtered by name
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from order_service.core.dependencies.database import get_db_session
from order_service.features.tags.repository import TagRepository, get_tag_repository
from order_service.features.tags.schemas import TagListResponse, TagResponse
from order_service.infra.database.retry import execute_with_retry

router = APIRouter(prefix="/tags", tags=["tags"])
logger = logging.getLogger(__name__)


@router.get(
    "",
    response_model=TagListResponse,
    summary="List all tags",
    description="Return all tags ordered by name.",
)
async def list_tags(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    repo: Annotated[TagRepository, Depends(get_tag_repository)],
    search: Annotated[str | None, Query(max_length=100)] = None,
) -> TagListResponse:
    """List all tags."""
    tags = await execute_with_retry(
        session, "tags.list", lambda: repo.list_with_search(session, search=search)
    )
    responses = [TagResponse.model_validate(tag) for tag in tags]
    return TagListResponse(tags=responses, total=len(responses))
