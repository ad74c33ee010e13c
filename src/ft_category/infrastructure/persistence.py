"""CategoryRepository: concrete implementation of CategoryRepositoryProtocol.

Collection: categories
Document:   {_id: ObjectId, userId, name, type, color, icon, createdAt, updatedAt}
Every query is scoped by userId; ids from other tenants simply don't match.
Malformed ObjectId strings are treated as "no such category".
"""

from collections.abc import Sequence
from typing import Any

from pymongo import ReturnDocument

from src.ft_category.domain.models import DEFAULT_COLOR, DEFAULT_ICON, Category
from src.ft_common.database import parse_object_id
from src.ft_common.datetime_utils import utc_now
from src.ft_query.store import Document, DocumentCollection, DocumentDatabase

COLLECTION = "categories"

_LIST_PROJECTION = {"userId": 1, "name": 1, "type": 1, "color": 1, "icon": 1}

# Domain attribute → document field, for partial updates
_FIELD_MAP = {"name": "name", "type": "type", "color": "color", "icon": "icon"}


def _doc_to_category(doc: Document) -> Category:
    return Category(
        id=str(doc["_id"]),
        user_id=doc["userId"],
        name=doc["name"],
        type=doc["type"],
        color=doc.get("color") or DEFAULT_COLOR,
        icon=doc.get("icon") or DEFAULT_ICON,
        created_at=doc.get("createdAt"),
        updated_at=doc.get("updatedAt"),
    )


def _collection(db: DocumentDatabase) -> DocumentCollection:
    return db[COLLECTION]


class CategoryRepository:
    async def list_categories(
        self, db: DocumentDatabase, user_id: str, category_type: str | None
    ) -> list[Category]:
        query: dict[str, Any] = {"userId": user_id}
        if category_type:
            query["type"] = category_type
        docs = await _collection(db).find(query, _LIST_PROJECTION).sort("name", 1).to_list(None)
        return [_doc_to_category(d) for d in docs]

    async def get_many(
        self, db: DocumentDatabase, user_id: str, category_ids: Sequence[str]
    ) -> list[Category]:
        oids = [oid for oid in (parse_object_id(cid) for cid in category_ids) if oid]
        if not oids:
            return []
        docs = await _collection(db).find(
            {"userId": user_id, "_id": {"$in": oids}}, _LIST_PROJECTION
        ).to_list(None)
        return [_doc_to_category(d) for d in docs]

    async def find_by_name(
        self, db: DocumentDatabase, user_id: str, name: str, category_type: str
    ) -> Category | None:
        doc = await _collection(db).find_one(
            {"userId": user_id, "name": name, "type": category_type}
        )
        return _doc_to_category(doc) if doc else None

    async def insert(
        self,
        db: DocumentDatabase,
        user_id: str,
        name: str,
        category_type: str,
        color: str,
        icon: str,
    ) -> Category:
        now = utc_now()
        doc: Document = {
            "userId": user_id,
            "name": name,
            "type": category_type,
            "color": color,
            "icon": icon,
            "createdAt": now,
            "updatedAt": now,
        }
        result = await _collection(db).insert_one(doc)
        doc["_id"] = result.inserted_id
        return _doc_to_category(doc)

    async def insert_many(
        self,
        db: DocumentDatabase,
        user_id: str,
        rows: Sequence[tuple[str, str, str, str]],
    ) -> int:
        if not rows:
            return 0
        now = utc_now()
        docs = [
            {
                "userId": user_id,
                "name": name,
                "type": category_type,
                "color": color,
                "icon": icon,
                "createdAt": now,
                "updatedAt": now,
            }
            for name, category_type, color, icon in rows
        ]
        result = await _collection(db).insert_many(docs)
        return len(result.inserted_ids)

    async def update(
        self,
        db: DocumentDatabase,
        user_id: str,
        category_id: str,
        changes: dict[str, Any],
    ) -> Category | None:
        oid = parse_object_id(category_id)
        if oid is None:
            return None
        update = {_FIELD_MAP[k]: v for k, v in changes.items() if k in _FIELD_MAP}
        update["updatedAt"] = utc_now()
        doc = await _collection(db).find_one_and_update(
            {"_id": oid, "userId": user_id},
            {"$set": update},
            return_document=ReturnDocument.AFTER,
        )
        return _doc_to_category(doc) if doc else None

    async def delete(
        self, db: DocumentDatabase, user_id: str, category_id: str
    ) -> Category | None:
        oid = parse_object_id(category_id)
        if oid is None:
            return None
        doc = await _collection(db).find_one_and_delete({"_id": oid, "userId": user_id})
        return _doc_to_category(doc) if doc else None
