"""TransactionRepository: concrete implementation over `expenses` / `incomes`.

Document:
    {_id, userId, title, amount, date, categoryId: ObjectId | null, notes,
     paymentMethod (expenses) | source (incomes), createdAt, updatedAt}

Category metadata is populated per page with a single `$in` lookup on the
categories collection, never one query per row.
"""

from typing import Any

from pymongo import ReturnDocument

from src.ft_category.infrastructure.persistence import CategoryRepository
from src.ft_common.database import parse_object_id
from src.ft_common.datetime_utils import utc_now
from src.ft_common.errors import InternalError
from src.ft_query.date_range import DateRange, build_date_range_filter
from src.ft_query.pagination import (
    CursorOptions,
    CursorPageResult,
    PageResult,
    PaginationOptions,
    cursor_paginate,
    paginate,
)
from src.ft_query.store import Document, DocumentCollection, DocumentDatabase
from src.ft_transaction.domain.models import CategoryRef, Transaction, TransactionKind

# Domain attribute → document field
_FIELD_MAP = {
    "title": "title",
    "amount": "amount",
    "date": "date",
    "category_id": "categoryId",
    "notes": "notes",
    "payment_method": "paymentMethod",
    "source": "source",
}


def _collection(db: DocumentDatabase, kind: TransactionKind) -> DocumentCollection:
    return db[kind.collection]


def _to_document_fields(fields: dict[str, Any]) -> dict[str, Any]:
    doc: dict[str, Any] = {}
    for attr, value in fields.items():
        if attr not in _FIELD_MAP:
            continue
        if attr == "category_id":
            value = parse_object_id(value) if value else None
        doc[_FIELD_MAP[attr]] = value
    return doc


def _doc_to_transaction(
    doc: Document, kind: TransactionKind, categories: dict[str, CategoryRef] | None = None
) -> Transaction:
    category_id = str(doc["categoryId"]) if doc.get("categoryId") else None
    return Transaction(
        id=str(doc["_id"]),
        user_id=doc["userId"],
        kind=kind,
        title=doc["title"],
        amount=doc["amount"],
        date=doc["date"],
        category_id=category_id,
        category=(categories or {}).get(category_id) if category_id else None,
        notes=doc.get("notes", ""),
        payment_method=doc.get("paymentMethod"),
        source=doc.get("source"),
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
    )


def build_transaction_filter(
    user_id: str, date_range: DateRange, category_id: str | None
) -> dict[str, Any]:
    query: dict[str, Any] = {"userId": user_id}
    query.update(build_date_range_filter(date_range))
    if category_id:
        query["categoryId"] = parse_object_id(category_id)
    return query


class TransactionRepository:
    def __init__(self, categories: CategoryRepository | None = None) -> None:
        self._categories = categories or CategoryRepository()

    async def _populate(
        self, db: DocumentDatabase, user_id: str, docs: list[Document]
    ) -> dict[str, CategoryRef]:
        ids = sorted({str(d["categoryId"]) for d in docs if d.get("categoryId")})
        if not ids:
            return {}
        found = await self._categories.get_many(db, user_id, ids)
        return {c.id: CategoryRef(id=c.id, name=c.name, color=c.color, icon=c.icon) for c in found}

    async def _one(
        self, db: DocumentDatabase, kind: TransactionKind, user_id: str, doc: Document | None
    ) -> Transaction | None:
        if doc is None:
            return None
        return _doc_to_transaction(doc, kind, await self._populate(db, user_id, [doc]))

    async def list_page(
        self,
        db: DocumentDatabase,
        kind: TransactionKind,
        user_id: str,
        date_range: DateRange,
        category_id: str | None,
        options: PaginationOptions,
    ) -> PageResult[Transaction]:
        query = build_transaction_filter(user_id, date_range, category_id)
        page = await paginate(_collection(db, kind), query, options)
        categories = await self._populate(db, user_id, page.data)
        return PageResult(
            data=[_doc_to_transaction(d, kind, categories) for d in page.data],
            pagination=page.pagination,
        )

    async def list_feed(
        self,
        db: DocumentDatabase,
        kind: TransactionKind,
        user_id: str,
        date_range: DateRange,
        category_id: str | None,
        options: CursorOptions,
    ) -> CursorPageResult[Transaction]:
        query = build_transaction_filter(user_id, date_range, category_id)
        page = await cursor_paginate(_collection(db, kind), query, options)
        categories = await self._populate(db, user_id, page.data)
        return CursorPageResult(
            data=[_doc_to_transaction(d, kind, categories) for d in page.data],
            next_cursor=page.next_cursor,
            has_more=page.has_more,
        )

    async def get(
        self, db: DocumentDatabase, kind: TransactionKind, user_id: str, transaction_id: str
    ) -> Transaction | None:
        oid = parse_object_id(transaction_id)
        if oid is None:
            return None
        doc = await _collection(db, kind).find_one({"_id": oid, "userId": user_id})
        return await self._one(db, kind, user_id, doc)

    async def insert(
        self, db: DocumentDatabase, kind: TransactionKind, user_id: str, fields: dict[str, Any]
    ) -> Transaction:
        now = utc_now()
        doc: Document = {"userId": user_id, "notes": "", **_to_document_fields(fields)}
        doc.setdefault("categoryId", None)
        doc.setdefault("date", now)
        doc["createdAt"] = now
        doc["updatedAt"] = now
        result = await _collection(db, kind).insert_one(doc)
        doc["_id"] = result.inserted_id
        txn = await self._one(db, kind, user_id, doc)
        if txn is None:
            raise InternalError(f"{kind.value} insert returned no document")
        return txn

    async def update(
        self,
        db: DocumentDatabase,
        kind: TransactionKind,
        user_id: str,
        transaction_id: str,
        changes: dict[str, Any],
    ) -> Transaction | None:
        oid = parse_object_id(transaction_id)
        if oid is None:
            return None
        update = _to_document_fields(changes)
        update["updatedAt"] = utc_now()
        doc = await _collection(db, kind).find_one_and_update(
            {"_id": oid, "userId": user_id},
            {"$set": update},
            return_document=ReturnDocument.AFTER,
        )
        return await self._one(db, kind, user_id, doc)

    async def delete(
        self, db: DocumentDatabase, kind: TransactionKind, user_id: str, transaction_id: str
    ) -> Transaction | None:
        oid = parse_object_id(transaction_id)
        if oid is None:
            return None
        doc = await _collection(db, kind).find_one_and_delete({"_id": oid, "userId": user_id})
        if doc is None:
            return None
        return _doc_to_transaction(doc, kind)
