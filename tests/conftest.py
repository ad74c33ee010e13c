"""Shared test fixtures.

JWT_SECRET must be in the environment before config.settings is imported.
The document store is mongomock behind a thin async adapter with the same
shape as PyMongo's async API; every collection counts its `find` calls so
tests can assert when a read was served without touching the store.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-do-not-use-in-production")

from collections import Counter
from typing import Any

import mongomock
import pytest
from httpx import ASGITransport, AsyncClient

from src.ft_cache.api.dependencies import get_cache_registry
from src.ft_cache.application.registry import CacheRegistry
from src.ft_cache.domain.lru_cache import LRUCache
from src.ft_common.database import get_database
from src.ft_gateway.auth.dependencies import get_current_user_id
from src.main import app

TEST_USER_ID = "user-42"


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# mongomock async adapter
# ---------------------------------------------------------------------------


class AsyncFindCursor:
    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor

    def sort(self, key_or_list: Any, direction: int | None = None) -> "AsyncFindCursor":
        self._cursor = self._cursor.sort(key_or_list, direction)
        return self

    def skip(self, skip: int) -> "AsyncFindCursor":
        self._cursor = self._cursor.skip(skip)
        return self

    def limit(self, limit: int) -> "AsyncFindCursor":
        self._cursor = self._cursor.limit(limit)
        return self

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        rows = list(self._cursor)
        return rows if length is None else rows[:length]


class AsyncCommandCursor:
    def __init__(self, rows: list[dict[str, Any]]) -> None:
        self._rows = rows

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        return self._rows if length is None else self._rows[:length]


class AsyncCollection:
    def __init__(self, collection: Any) -> None:
        self._collection = collection
        self.calls: Counter[str] = Counter()

    def find(self, filter: Any = None, projection: Any = None) -> AsyncFindCursor:
        self.calls["find"] += 1
        return AsyncFindCursor(self._collection.find(filter, projection))

    async def find_one(self, filter: Any, projection: Any = None) -> dict[str, Any] | None:
        self.calls["find_one"] += 1
        return self._collection.find_one(filter, projection)

    async def count_documents(self, filter: Any) -> int:
        self.calls["count_documents"] += 1
        return self._collection.count_documents(filter)

    async def aggregate(self, pipeline: Any) -> AsyncCommandCursor:
        self.calls["aggregate"] += 1
        return AsyncCommandCursor(list(self._collection.aggregate(pipeline)))

    async def insert_one(self, document: dict[str, Any]) -> Any:
        self.calls["insert_one"] += 1
        return self._collection.insert_one(document)

    async def insert_many(self, documents: list[dict[str, Any]]) -> Any:
        self.calls["insert_many"] += 1
        return self._collection.insert_many(documents)

    async def find_one_and_update(self, filter: Any, update: Any, **kwargs: Any) -> Any:
        self.calls["find_one_and_update"] += 1
        return self._collection.find_one_and_update(filter, update, **kwargs)

    async def find_one_and_delete(self, filter: Any) -> Any:
        self.calls["find_one_and_delete"] += 1
        return self._collection.find_one_and_delete(filter)

    async def delete_many(self, filter: Any) -> Any:
        self.calls["delete_many"] += 1
        return self._collection.delete_many(filter)


class AsyncDatabase:
    def __init__(self, database: Any) -> None:
        self._database = database
        self._collections: dict[str, AsyncCollection] = {}

    def __getitem__(self, name: str) -> AsyncCollection:
        if name not in self._collections:
            self._collections[name] = AsyncCollection(self._database[name])
        return self._collections[name]

    async def command(self, name: str) -> dict[str, Any]:
        return {"ok": 1.0}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mongo_db() -> AsyncDatabase:
    """Fresh in-memory database per test."""
    return AsyncDatabase(mongomock.MongoClient()["finance_tracker_test"])


@pytest.fixture
def caches() -> CacheRegistry:
    """Small, isolated caches; never the application's own registry."""
    return CacheRegistry(
        categories=LRUCache(max_size=50, default_ttl=600, name="categories"),
        user=LRUCache(max_size=50, default_ttl=900, name="user"),
        aggregation=LRUCache(max_size=50, default_ttl=120, name="aggregation"),
        general=LRUCache(max_size=50, default_ttl=300, name="general"),
    )


@pytest.fixture
async def client(mongo_db: AsyncDatabase, caches: CacheRegistry) -> AsyncClient:
    """Async HTTP client with the store, caller and caches overridden."""
    app.dependency_overrides[get_database] = lambda: mongo_db
    app.dependency_overrides[get_current_user_id] = lambda: TEST_USER_ID
    app.dependency_overrides[get_cache_registry] = lambda: caches
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def anonymous_client(mongo_db: AsyncDatabase, caches: CacheRegistry) -> AsyncClient:
    """Client without the auth override, for 401 checks."""
    app.dependency_overrides[get_database] = lambda: mongo_db
    app.dependency_overrides[get_cache_registry] = lambda: caches
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
