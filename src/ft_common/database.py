"""MongoDB client factory (PyMongo asyncio API).

One client per process; its connection pool is shared by every request.
Collections used: categories, expenses, incomes.
"""

from bson import ObjectId
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from config.settings import settings

_client: AsyncMongoClient | None = None


def get_client() -> AsyncMongoClient:
    """Get or create the process-wide client."""
    global _client  # noqa: PLW0603
    if _client is None:
        _client = AsyncMongoClient(
            settings.MONGODB_URL,
            maxPoolSize=settings.MONGODB_MAX_POOL_SIZE,
            serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
            tz_aware=True,
        )
    return _client


async def close_client() -> None:
    """Close the client and its pool."""
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.close()
        _client = None


def get_database() -> AsyncDatabase:
    """FastAPI dependency: the application database handle."""
    return get_client()[settings.MONGODB_DB]


def parse_object_id(value: str | None) -> ObjectId | None:
    """ObjectId from its 24-char hex form, or None when malformed."""
    if value and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


async def ping(db: AsyncDatabase) -> bool:
    """True when the server answers a ping. Store errors propagate."""
    result = await db.command("ping")
    return bool(result.get("ok"))
