"""Offset and cursor pagination over a document collection.

Offset (`paginate`): page numbers, exact total via count_documents. The
count and the page fetch are issued concurrently.

Cursor (`cursor_paginate`): infinite scroll. Fetches limit+1 rows to detect
has_more without a COUNT. The cursor is the base64 JSON of the last row's
sort value; the next page adds a strict $lt/$gt bound on that field.
Known limitation: rows sharing the exact sort value of a page boundary can
be skipped, because there is no secondary tie-break key.

Store errors propagate unchanged; nothing here catches them.
"""

import asyncio
import base64
import binascii
import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, TypeVar

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel

from src.ft_common.datetime_utils import to_datetime
from src.ft_common.errors import InvalidCursorError
from src.ft_common.perf import track_performance
from src.ft_query.store import Document, DocumentCollection, Filter

T = TypeVar("T")

MAX_LIMIT = 100
DEFAULT_LIMIT = 20

# ---------------------------------------------------------------------------
# Options / results
# ---------------------------------------------------------------------------


@dataclass
class PaginationOptions:
    page: int = 1
    limit: int = DEFAULT_LIMIT
    sort_by: str = "createdAt"
    sort_order: str = "desc"


@dataclass
class CursorOptions:
    cursor: str | None = None
    limit: int = DEFAULT_LIMIT
    sort_by: str = "createdAt"
    sort_order: str = "desc"


class PageInfo(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


@dataclass
class PageResult(Generic[T]):
    data: list[T]
    pagination: PageInfo


@dataclass
class CursorPageResult(Generic[T]):
    data: list[T] = field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False


def clamp_limit(limit: int) -> int:
    return min(max(1, limit), MAX_LIMIT)


def _direction(sort_order: str) -> int:
    return -1 if sort_order == "desc" else 1


# ---------------------------------------------------------------------------
# Cursor codec
# ---------------------------------------------------------------------------
# JSON has no datetime or ObjectId; both are tagged so they decode back to
# the same type:  {"$date": "<iso>"}  /  {"$oid": "<hex>"}


def _tag(value: Any) -> Any:
    if isinstance(value, datetime):
        return {"$date": value.isoformat()}
    if isinstance(value, ObjectId):
        return {"$oid": str(value)}
    return value


def _untag(obj: dict[str, Any]) -> Any:
    if set(obj) == {"$date"}:
        return to_datetime(obj["$date"])
    if set(obj) == {"$oid"}:
        return ObjectId(obj["$oid"])
    return obj


def encode_cursor(value: Any) -> str:
    payload = json.dumps(value, default=_tag, separators=(",", ":"), sort_keys=True)
    return base64.b64encode(payload.encode()).decode()


def decode_cursor(cursor: str) -> Any:
    """Inverse of encode_cursor. Raises InvalidCursorError on malformed input."""
    try:
        raw = base64.b64decode(cursor.encode(), validate=True).decode()
        return json.loads(raw, object_hook=_untag)
    except (binascii.Error, UnicodeDecodeError, ValueError, InvalidId):
        raise InvalidCursorError() from None


# ---------------------------------------------------------------------------
# Offset pagination
# ---------------------------------------------------------------------------


async def paginate(
    collection: DocumentCollection,
    filter: Filter,
    options: PaginationOptions | None = None,
    projection: dict[str, Any] | None = None,
) -> PageResult[Document]:
    options = options or PaginationOptions()
    page = max(1, options.page)
    limit = clamp_limit(options.limit)
    skip = (page - 1) * limit

    with track_performance("paginate", "database") as track:
        cursor = (
            collection.find(filter, projection)
            .sort(options.sort_by, _direction(options.sort_order))
            .skip(skip)
            .limit(limit)
        )
        data, total = await asyncio.gather(
            cursor.to_list(None),
            collection.count_documents(filter),
        )
        track.context.update(total=total, page=page, limit=limit)

    total_pages = -(-total // limit)  # ceil; 0 when total == 0
    return PageResult(
        data=data,
        pagination=PageInfo(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        ),
    )


# ---------------------------------------------------------------------------
# Cursor pagination
# ---------------------------------------------------------------------------


def _with_cursor_bound(filter: Filter, sort_by: str, operator: str, value: Any) -> dict[str, Any]:
    """Add `{sort_by: {operator: value}}` without clobbering an existing condition."""
    if sort_by not in filter:
        bounded = dict(filter)
        bounded[sort_by] = {operator: value}
        return bounded
    return {"$and": [dict(filter), {sort_by: {operator: value}}]}


async def cursor_paginate(
    collection: DocumentCollection,
    filter: Filter,
    options: CursorOptions | None = None,
    projection: dict[str, Any] | None = None,
) -> CursorPageResult[Document]:
    options = options or CursorOptions()
    limit = clamp_limit(options.limit)

    query: Filter = filter
    if options.cursor:
        last_value = decode_cursor(options.cursor)
        operator = "$lt" if options.sort_order == "desc" else "$gt"
        query = _with_cursor_bound(filter, options.sort_by, operator, last_value)

    with track_performance("cursor_paginate", "database") as track:
        rows = await (
            collection.find(query, projection)
            .sort(options.sort_by, _direction(options.sort_order))
            .limit(limit + 1)
            .to_list(None)
        )
        track.context.update(count=len(rows), limit=limit)

    has_more = len(rows) > limit
    page = rows[:limit]
    next_cursor = encode_cursor(page[-1].get(options.sort_by)) if has_more and page else None
    return CursorPageResult(data=page, next_cursor=next_cursor, has_more=has_more)
