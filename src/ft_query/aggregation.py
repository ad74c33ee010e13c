"""Aggregation pipeline builders for reports.

Builders are pure: they return pipeline stage lists. The `run_*` helpers
execute a pipeline on a collection and shape the result. Every pipeline
starts with a $match on the owner (userId) plus the date range, so all
reads stay inside one tenant.

Documents are expected to carry: userId, amount, date, categoryId (nullable).
"""

from typing import Any

from src.ft_common.perf import track_performance
from src.ft_query.date_range import DateRange, build_date_range_filter
from src.ft_query.store import Document, DocumentCollection

Pipeline = list[dict[str, Any]]

CATEGORIES_COLLECTION = "categories"
UNCATEGORIZED_NAME = "Uncategorized"
UNCATEGORIZED_COLOR = "#9ca3af"
UNCATEGORIZED_ICON = "📁"

GRANULARITIES = ("day", "week", "month")

_EMPTY_SUMMARY: dict[str, float | int] = {
    "total": 0,
    "count": 0,
    "average": 0,
    "min": 0,
    "max": 0,
}


def build_match_stage(
    user_id: str, date_range: DateRange | None = None, field: str = "date"
) -> dict[str, Any]:
    match: dict[str, Any] = {"userId": user_id}
    match.update(build_date_range_filter(date_range or DateRange(), field))
    return {"$match": match}


def build_summary_pipeline(user_id: str, date_range: DateRange | None = None) -> Pipeline:
    return [
        build_match_stage(user_id, date_range),
        {
            "$group": {
                "_id": None,
                "total": {"$sum": "$amount"},
                "count": {"$sum": 1},
                "average": {"$avg": "$amount"},
                "min": {"$min": "$amount"},
                "max": {"$max": "$amount"},
            }
        },
    ]


def build_category_summary_pipeline(user_id: str, date_range: DateRange | None = None) -> Pipeline:
    """Totals per category, joined with category metadata, largest first.

    Rows with no categoryId, or one pointing at a deleted category, fold
    into a single "Uncategorized" row whose categoryId is null.
    """
    return [
        build_match_stage(user_id, date_range),
        {
            "$group": {
                "_id": "$categoryId",
                "total": {"$sum": "$amount"},
                "count": {"$sum": 1},
            }
        },
        {
            "$lookup": {
                "from": CATEGORIES_COLLECTION,
                "localField": "_id",
                "foreignField": "_id",
                "as": "category",
            }
        },
        {"$unwind": {"path": "$category", "preserveNullAndEmptyArrays": True}},
        {
            "$project": {
                "_id": 0,
                # null for both a missing and a dangling categoryId
                "categoryId": {"$ifNull": ["$category._id", None]},
                "categoryName": {"$ifNull": ["$category.name", UNCATEGORIZED_NAME]},
                "categoryColor": {"$ifNull": ["$category.color", UNCATEGORIZED_COLOR]},
                "categoryIcon": {"$ifNull": ["$category.icon", UNCATEGORIZED_ICON]},
                "total": 1,
                "count": 1,
            }
        },
        {
            "$group": {
                "_id": "$categoryId",
                "categoryName": {"$first": "$categoryName"},
                "categoryColor": {"$first": "$categoryColor"},
                "categoryIcon": {"$first": "$categoryIcon"},
                "total": {"$sum": "$total"},
                "count": {"$sum": "$count"},
            }
        },
        {
            "$project": {
                "_id": 0,
                "categoryId": "$_id",
                "categoryName": 1,
                "categoryColor": 1,
                "categoryIcon": 1,
                "total": 1,
                "count": 1,
                "average": {"$divide": ["$total", "$count"]},
            }
        },
        {"$sort": {"total": -1}},
    ]


def _time_bucket(granularity: str) -> dict[str, Any]:
    if granularity == "day":
        return {
            "year": {"$year": "$date"},
            "month": {"$month": "$date"},
            "day": {"$dayOfMonth": "$date"},
        }
    if granularity == "week":
        return {"year": {"$year": "$date"}, "week": {"$week": "$date"}}
    if granularity == "month":
        return {"year": {"$year": "$date"}, "month": {"$month": "$date"}}
    raise ValueError(f"granularity must be one of {GRANULARITIES}, got {granularity!r}")


def _time_sort(granularity: str) -> dict[str, int]:
    if granularity == "week":
        return {"_id.year": 1, "_id.week": 1}
    if granularity == "month":
        return {"_id.year": 1, "_id.month": 1}
    return {"_id.year": 1, "_id.month": 1, "_id.day": 1}


def build_time_series_pipeline(
    user_id: str, granularity: str = "day", date_range: DateRange | None = None
) -> Pipeline:
    """Per-period totals in chronological order."""
    return [
        build_match_stage(user_id, date_range),
        {
            "$group": {
                "_id": _time_bucket(granularity),
                "total": {"$sum": "$amount"},
                "count": {"$sum": 1},
                "average": {"$avg": "$amount"},
            }
        },
        {"$sort": _time_sort(granularity)},
    ]


# ---------------------------------------------------------------------------
# Runners
# ---------------------------------------------------------------------------


async def _run(collection: DocumentCollection, pipeline: Pipeline, operation: str) -> list[Document]:
    with track_performance(operation, "database") as track:
        cursor = await collection.aggregate(pipeline)
        rows = await cursor.to_list(None)
        track.context["rows"] = len(rows)
    return rows


async def run_summary(
    collection: DocumentCollection, user_id: str, date_range: DateRange | None = None
) -> dict[str, Any]:
    rows = await _run(collection, build_summary_pipeline(user_id, date_range), "summary")
    if not rows:
        return dict(_EMPTY_SUMMARY)
    row = rows[0]
    return {key: row.get(key) or 0 for key in _EMPTY_SUMMARY}


async def run_category_summary(
    collection: DocumentCollection, user_id: str, date_range: DateRange | None = None
) -> list[Document]:
    return await _run(
        collection, build_category_summary_pipeline(user_id, date_range), "category_summary"
    )


async def run_time_series(
    collection: DocumentCollection,
    user_id: str,
    granularity: str = "day",
    date_range: DateRange | None = None,
) -> list[Document]:
    return await _run(
        collection, build_time_series_pipeline(user_id, granularity, date_range), "time_series"
    )
