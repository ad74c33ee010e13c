"""ft_category REST endpoints.

GET    /categories?type=expense|income   list (served from cache when warm)
POST   /categories                       create
POST   /categories/defaults              seed the default set
PUT    /categories/{category_id}         partial update
DELETE /categories/{category_id}         delete

Every write invalidates the caller's cached entries.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status

from src.ft_cache.api.dependencies import get_cache_registry
from src.ft_cache.application.registry import CacheRegistry
from src.ft_category.application.schemas import (
    CategoryCreateRequest,
    CategoryListResponse,
    CategoryOut,
    CategoryUpdateRequest,
    SeedDefaultsResponse,
)
from src.ft_category.application.service import CategoryService
from src.ft_category.domain.models import CategoryType
from src.ft_common.database import get_database
from src.ft_common.response import ApiResponse, respond
from src.ft_gateway.auth.dependencies import get_current_user_id
from src.ft_query.store import DocumentDatabase

router = APIRouter(prefix="/categories", tags=["categories"])

_service = CategoryService()

UserId = Annotated[str, Depends(get_current_user_id)]
Db = Annotated[DocumentDatabase, Depends(get_database)]
Caches = Annotated[CacheRegistry, Depends(get_cache_registry)]


@router.get("")
async def list_categories(
    request: Request,
    user_id: UserId,
    db: Db,
    caches: Caches,
    type: CategoryType | None = Query(None, description="expense or income; omit for all"),
) -> ApiResponse:
    categories, cached = await _service.list_categories(
        db, caches, user_id, type.value if type else None
    )
    result = CategoryListResponse(
        categories=[CategoryOut.from_domain(c) for c in categories],
        cached=cached,
    )
    return respond(request, result.model_dump())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_category(
    request: Request,
    body: CategoryCreateRequest,
    user_id: UserId,
    db: Db,
    caches: Caches,
) -> ApiResponse:
    category = await _service.create_category(db, caches, user_id, body)
    return respond(
        request, CategoryOut.from_domain(category).model_dump(), "Category created successfully"
    )


@router.post("/defaults", status_code=status.HTTP_201_CREATED)
async def seed_default_categories(
    request: Request,
    user_id: UserId,
    db: Db,
    caches: Caches,
) -> ApiResponse:
    inserted = await _service.seed_default_categories(db, caches, user_id)
    return respond(request, SeedDefaultsResponse(inserted=inserted).model_dump())


@router.put("/{category_id}")
async def update_category(
    category_id: str,
    request: Request,
    body: CategoryUpdateRequest,
    user_id: UserId,
    db: Db,
    caches: Caches,
) -> ApiResponse:
    category = await _service.update_category(db, caches, user_id, category_id, body)
    return respond(
        request, CategoryOut.from_domain(category).model_dump(), "Category updated successfully"
    )


@router.delete("/{category_id}")
async def delete_category(
    category_id: str,
    request: Request,
    user_id: UserId,
    db: Db,
    caches: Caches,
) -> ApiResponse:
    await _service.delete_category(db, caches, user_id, category_id)
    return respond(request, None, "Category deleted successfully")
