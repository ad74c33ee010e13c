"""ft_transaction REST endpoints, mounted once per kind.

GET    /expenses              page-number pagination + filters
GET    /expenses/feed         cursor pagination (infinite scroll)
GET    /expenses/{id}         single expense with category populated
POST   /expenses              create
PUT    /expenses/{id}         partial update
DELETE /expenses/{id}         delete

/incomes has the same shape. Filters: preset | start_date/end_date,
category_id. Writes invalidate the caller's cached entries.
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Request, status

from src.ft_cache.api.dependencies import get_cache_registry
from src.ft_cache.application.registry import CacheRegistry
from src.ft_common.database import get_database
from src.ft_common.response import ApiResponse, respond
from src.ft_gateway.auth.dependencies import get_current_user_id
from src.ft_query.date_range import resolve_date_range
from src.ft_query.pagination import CursorOptions, PaginationOptions
from src.ft_query.store import DocumentDatabase
from src.ft_transaction.application.schemas import (
    TransactionCreateRequest,
    TransactionFeedResponse,
    TransactionOut,
    TransactionPageResponse,
    TransactionUpdateRequest,
)
from src.ft_transaction.application.service import TransactionService
from src.ft_transaction.domain.models import TransactionKind

_service = TransactionService()

UserId = Annotated[str, Depends(get_current_user_id)]
Db = Annotated[DocumentDatabase, Depends(get_database)]
Caches = Annotated[CacheRegistry, Depends(get_cache_registry)]
SortBy = Literal["date", "amount", "createdAt", "title"]
SortOrder = Literal["asc", "desc"]


def build_router(kind: TransactionKind) -> APIRouter:
    router = APIRouter(prefix=f"/{kind.collection}", tags=[kind.collection])
    label = kind.value.capitalize()

    @router.get("")
    async def list_transactions(
        request: Request,
        user_id: UserId,
        db: Db,
        page: int = Query(1, ge=1),
        limit: int = Query(20, ge=1, le=100),
        sort_by: SortBy = Query("date"),
        sort_order: SortOrder = Query("desc"),
        preset: str | None = Query(None, description="today, thisMonth, last30Days, ..."),
        start_date: str | None = Query(None),
        end_date: str | None = Query(None),
        category_id: str | None = Query(None),
    ) -> ApiResponse:
        date_range = resolve_date_range(preset, start_date, end_date)
        result = await _service.list_page(
            db,
            kind,
            user_id,
            date_range,
            category_id,
            PaginationOptions(page=page, limit=limit, sort_by=sort_by, sort_order=sort_order),
        )
        body = TransactionPageResponse(
            items=[TransactionOut.from_domain(t) for t in result.data],
            pagination=result.pagination,
        )
        return respond(request, body.model_dump())

    @router.get("/feed")
    async def transaction_feed(
        request: Request,
        user_id: UserId,
        db: Db,
        cursor: str | None = Query(None),
        limit: int = Query(20, ge=1, le=100),
        sort_by: SortBy = Query("date"),
        sort_order: SortOrder = Query("desc"),
        preset: str | None = Query(None),
        start_date: str | None = Query(None),
        end_date: str | None = Query(None),
        category_id: str | None = Query(None),
    ) -> ApiResponse:
        date_range = resolve_date_range(preset, start_date, end_date)
        result = await _service.list_feed(
            db,
            kind,
            user_id,
            date_range,
            category_id,
            CursorOptions(cursor=cursor, limit=limit, sort_by=sort_by, sort_order=sort_order),
        )
        body = TransactionFeedResponse(
            items=[TransactionOut.from_domain(t) for t in result.data],
            next_cursor=result.next_cursor,
            has_more=result.has_more,
        )
        return respond(request, body.model_dump())

    @router.get("/{transaction_id}")
    async def get_transaction(
        transaction_id: str,
        request: Request,
        user_id: UserId,
        db: Db,
    ) -> ApiResponse:
        txn = await _service.get(db, kind, user_id, transaction_id)
        return respond(request, TransactionOut.from_domain(txn).model_dump())

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_transaction(
        request: Request,
        body: TransactionCreateRequest,
        user_id: UserId,
        db: Db,
        caches: Caches,
    ) -> ApiResponse:
        txn = await _service.create(db, caches, kind, user_id, body)
        return respond(
            request, TransactionOut.from_domain(txn).model_dump(), f"{label} created successfully"
        )

    @router.put("/{transaction_id}")
    async def update_transaction(
        transaction_id: str,
        request: Request,
        body: TransactionUpdateRequest,
        user_id: UserId,
        db: Db,
        caches: Caches,
    ) -> ApiResponse:
        txn = await _service.update(db, caches, kind, user_id, transaction_id, body)
        return respond(
            request, TransactionOut.from_domain(txn).model_dump(), f"{label} updated successfully"
        )

    @router.delete("/{transaction_id}")
    async def delete_transaction(
        transaction_id: str,
        request: Request,
        user_id: UserId,
        db: Db,
        caches: Caches,
    ) -> ApiResponse:
        await _service.delete(db, caches, kind, user_id, transaction_id)
        return respond(request, None, f"{label} deleted successfully")

    return router


expense_router = build_router(TransactionKind.EXPENSE)
income_router = build_router(TransactionKind.INCOME)
