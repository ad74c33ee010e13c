"""ReportService: aggregated reports served through the aggregation cache.

Key: user:<id>:report:<kind>:<report>[-<granularity>]:<range suffix>
The aggregation cache has the shortest TTL; any transaction or category
write for the user wipes these keys via invalidate_user.
"""

from src.ft_cache.application.registry import CacheRegistry, generate_cache_key
from src.ft_common.errors import InvalidGranularityError
from src.ft_query.aggregation import (
    GRANULARITIES,
    run_category_summary,
    run_summary,
    run_time_series,
)
from src.ft_query.date_range import DateRange
from src.ft_query.store import DocumentDatabase
from src.ft_report.application.schemas import (
    CategoryBreakdownResponse,
    CategoryTotalOut,
    SummaryOut,
    TimeSeriesPointOut,
    TimeSeriesResponse,
)
from src.ft_transaction.domain.models import TransactionKind


def report_cache_key(
    user_id: str, kind: TransactionKind, report: str, date_range: DateRange
) -> str:
    return generate_cache_key(
        user_id, "report", f"{kind.value}:{report}:{date_range.cache_suffix()}"
    )


class ReportService:
    """Stateless service: instantiate once, reuse across requests."""

    async def summary(
        self,
        db: DocumentDatabase,
        caches: CacheRegistry,
        kind: TransactionKind,
        user_id: str,
        date_range: DateRange,
    ) -> SummaryOut:
        async def compute() -> SummaryOut:
            row = await run_summary(db[kind.collection], user_id, date_range)
            return SummaryOut(kind=kind.value, **row)

        key = report_cache_key(user_id, kind, "summary", date_range)
        return await caches.aggregation.get_or_set(key, compute)

    async def by_category(
        self,
        db: DocumentDatabase,
        caches: CacheRegistry,
        kind: TransactionKind,
        user_id: str,
        date_range: DateRange,
    ) -> CategoryBreakdownResponse:
        async def compute() -> CategoryBreakdownResponse:
            rows = await run_category_summary(db[kind.collection], user_id, date_range)
            return CategoryBreakdownResponse(
                kind=kind.value,
                categories=[CategoryTotalOut.from_row(r) for r in rows],
            )

        key = report_cache_key(user_id, kind, "by-category", date_range)
        return await caches.aggregation.get_or_set(key, compute)

    async def time_series(
        self,
        db: DocumentDatabase,
        caches: CacheRegistry,
        kind: TransactionKind,
        user_id: str,
        granularity: str,
        date_range: DateRange,
    ) -> TimeSeriesResponse:
        if granularity not in GRANULARITIES:
            raise InvalidGranularityError(granularity)

        async def compute() -> TimeSeriesResponse:
            rows = await run_time_series(db[kind.collection], user_id, granularity, date_range)
            return TimeSeriesResponse(
                kind=kind.value,
                granularity=granularity,
                points=[TimeSeriesPointOut.from_row(r) for r in rows],
            )

        key = report_cache_key(user_id, kind, f"timeseries-{granularity}", date_range)
        return await caches.aggregation.get_or_set(key, compute)
