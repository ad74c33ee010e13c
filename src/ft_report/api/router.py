"""ft_report REST endpoints.

GET /reports/summary        total / count / average / min / max
GET /reports/by-category    totals per category, largest first
GET /reports/timeseries     per day / week / month, oldest first

Common query: kind=expense|income, preset | start_date/end_date.
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Request

from src.ft_cache.api.dependencies import get_cache_registry
from src.ft_cache.application.registry import CacheRegistry
from src.ft_common.database import get_database
from src.ft_common.response import ApiResponse, respond
from src.ft_gateway.auth.dependencies import get_current_user_id
from src.ft_query.date_range import DateRange, resolve_date_range
from src.ft_query.store import DocumentDatabase
from src.ft_report.application.service import ReportService
from src.ft_transaction.domain.models import TransactionKind

router = APIRouter(prefix="/reports", tags=["reports"])

_service = ReportService()

UserId = Annotated[str, Depends(get_current_user_id)]
Db = Annotated[DocumentDatabase, Depends(get_database)]
Caches = Annotated[CacheRegistry, Depends(get_cache_registry)]


def _date_range(
    preset: str | None = Query(None, description="today, thisWeek, lastMonth, ..."),
    start_date: str | None = Query(None),
    end_date: str | None = Query(None),
) -> DateRange:
    return resolve_date_range(preset, start_date, end_date)


Range = Annotated[DateRange, Depends(_date_range)]


@router.get("/summary")
async def summary(
    request: Request,
    user_id: UserId,
    db: Db,
    caches: Caches,
    date_range: Range,
    kind: TransactionKind = Query(TransactionKind.EXPENSE),
) -> ApiResponse:
    result = await _service.summary(db, caches, kind, user_id, date_range)
    return respond(request, result.model_dump())


@router.get("/by-category")
async def by_category(
    request: Request,
    user_id: UserId,
    db: Db,
    caches: Caches,
    date_range: Range,
    kind: TransactionKind = Query(TransactionKind.EXPENSE),
) -> ApiResponse:
    result = await _service.by_category(db, caches, kind, user_id, date_range)
    return respond(request, result.model_dump())


@router.get("/timeseries")
async def time_series(
    request: Request,
    user_id: UserId,
    db: Db,
    caches: Caches,
    date_range: Range,
    kind: TransactionKind = Query(TransactionKind.EXPENSE),
    granularity: Literal["day", "week", "month"] = Query("day"),
) -> ApiResponse:
    result = await _service.time_series(db, caches, kind, user_id, granularity, date_range)
    return respond(request, result.model_dump())
