"""API router for the categories feature.

Endpoints:
    GET /categories      - List categories by display order
    GET /categories/tree - Categories nested by parent
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from order_service.core.dependencies.database import get_db_session
from order_service.features.categories.repository import (
    CategoryRepository,
    get_category_repository,
)
from order_service.features.categories.schemas import (
    CategoryListResponse,
    CategoryResponse,
    CategoryTreeResponse,
)
from order_service.features.categories.service import build_category_tree
from order_service.infra.database.retry import execute_with_retry

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get(
    "",
    response_model=CategoryListResponse,
    summary="List categories",
)
async def list_categories(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    repo: Annotated[CategoryRepository, Depends(get_category_repository)],
) -> CategoryListResponse:
    categories = await execute_with_retry(
        session, "categories.list", lambda: repo.list_ordered(session)
    )
    responses = [CategoryResponse.model_validate(category) for category in categories]
    return CategoryListResponse(categories=responses, total=len(responses))


@router.get(
    "/tree",
    response_model=CategoryTreeResponse,
    summary="Category tree",
    description="Roots and children are each ordered by display order, then name.",
)
async def category_tree(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    repo: Annotated[CategoryRepository, Depends(get_category_repository)],
) -> CategoryTreeResponse:
    categories = await execute_with_retry(
        session, "categories.tree", lambda: repo.list_ordered(session)
    )
    return CategoryTreeResponse(
        categories=build_category_tree(categories), total=len(categories)
    )
