"""Named cache instances and user-scoped invalidation.

The registry is built once by the application (see src/main.py) and handed
to handlers through `get_cache_registry`. Tests build their own.

Write-side contract: every successful create/update/delete of a category,
expense or income calls `invalidate_user(user_id)` before returning, so
no reader sees a stale list for the remainder of the TTL.
"""

import logging
from dataclasses import dataclass
from typing import Any

from config.settings import Settings
from src.ft_cache.domain.lru_cache import CacheStats, LRUCache

logger = logging.getLogger("ft.cache")


def generate_cache_key(user_id: str, resource: str, suffix: str | None = None) -> str:
    """Build `user:<id>:<resource>[:<suffix>]`; the suffix is omitted when empty."""
    if suffix:
        return f"user:{user_id}:{resource}:{suffix}"
    return f"user:{user_id}:{resource}"


def user_key_pattern(user_id: str) -> str:
    return f"user:{user_id}:*"


@dataclass
class CacheRegistry:
    categories: LRUCache[Any]
    user: LRUCache[Any]
    aggregation: LRUCache[Any]
    general: LRUCache[Any]

    @classmethod
    def from_settings(cls, settings: Settings) -> "CacheRegistry":
        return cls(
            categories=LRUCache(
                max_size=settings.CATEGORIES_CACHE_MAX_SIZE,
                default_ttl=settings.CATEGORIES_CACHE_TTL_SECONDS,
                name="categories",
            ),
            user=LRUCache(
                max_size=settings.USER_CACHE_MAX_SIZE,
                default_ttl=settings.USER_CACHE_TTL_SECONDS,
                name="user",
            ),
            aggregation=LRUCache(
                max_size=settings.AGGREGATION_CACHE_MAX_SIZE,
                default_ttl=settings.AGGREGATION_CACHE_TTL_SECONDS,
                name="aggregation",
            ),
            general=LRUCache(
                max_size=settings.GENERAL_CACHE_MAX_SIZE,
                default_ttl=settings.GENERAL_CACHE_TTL_SECONDS,
                name="general",
            ),
        )

    def all(self) -> dict[str, LRUCache[Any]]:
        return {
            "categories": self.categories,
            "user": self.user,
            "aggregation": self.aggregation,
            "general": self.general,
        }

    def invalidate_user(self, user_id: str) -> int:
        """Drop every `user:<id>:*` key from all four caches."""
        pattern = user_key_pattern(user_id)
        deleted = sum(cache.delete_pattern(pattern) for cache in self.all().values())
        logger.info("Invalidated %d cache entries for user %s", deleted, user_id)
        return deleted

    def get_all_stats(self) -> dict[str, CacheStats]:
        return {name: cache.get_stats() for name, cache in self.all().items()}

    def clear_all(self) -> None:
        for cache in self.all().values():
            cache.clear()
        logger.warning("All caches cleared")

    def start_sweepers(self, interval: float) -> None:
        for cache in self.all().values():
            cache.start_sweeper(interval)

    async def stop_sweepers(self) -> None:
        for cache in self.all().values():
            await cache.stop_sweeper()
