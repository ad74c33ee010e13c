"""CategoryService: cached read path plus invalidating writes.

Read:  categories cache under user:<id>:categories:<type|all>
       hit → no store query; miss → store query, populate, return.
Write: every successful create/update/delete/seed calls
       caches.invalidate_user(user_id) before returning.

The caller (router) passes the db handle and the cache registry.
"""

import logging
from typing import Any

from src.ft_cache.application.registry import CacheRegistry, generate_cache_key
from src.ft_category.application.schemas import CategoryCreateRequest, CategoryUpdateRequest
from src.ft_category.domain.models import (
    DEFAULT_CATEGORIES,
    DEFAULT_COLOR,
    DEFAULT_ICON,
    Category,
)
from src.ft_category.domain.repository import CategoryRepositoryProtocol
from src.ft_category.infrastructure.persistence import CategoryRepository
from src.ft_common.errors import (
    CategoryNotFoundError,
    DuplicateCategoryError,
    InvalidCategoryError,
)
from src.ft_query.store import DocumentDatabase

logger = logging.getLogger("ft.category")


def categories_cache_key(user_id: str, category_type: str | None) -> str:
    return generate_cache_key(user_id, "categories", category_type or "all")


class CategoryService:
    def __init__(self, repo: CategoryRepositoryProtocol | None = None) -> None:
        self._repo: CategoryRepositoryProtocol = repo or CategoryRepository()

    async def list_categories(
        self,
        db: DocumentDatabase,
        caches: CacheRegistry,
        user_id: str,
        category_type: str | None,
    ) -> tuple[list[Category], bool]:
        """Return (categories, served_from_cache)."""
        key = categories_cache_key(user_id, category_type)
        cached = caches.categories.get(key)
        if cached is not None:
            logger.debug("Categories cache hit %s (%d)", key, len(cached))
            return cached, True

        categories = await self._repo.list_categories(db, user_id, category_type)
        caches.categories.set(key, categories)
        logger.info("Categories fetched from store %s (%d)", key, len(categories))
        return categories, False

    async def create_category(
        self,
        db: DocumentDatabase,
        caches: CacheRegistry,
        user_id: str,
        body: CategoryCreateRequest,
    ) -> Category:
        category_type = body.type.value
        if await self._repo.find_by_name(db, user_id, body.name, category_type):
            raise DuplicateCategoryError(body.name)

        category = await self._repo.insert(
            db,
            user_id,
            body.name,
            category_type,
            body.color or DEFAULT_COLOR,
            body.icon or DEFAULT_ICON,
        )
        caches.invalidate_user(user_id)
        logger.info("Category created %s user=%s", category.id, user_id)
        return category

    async def update_category(
        self,
        db: DocumentDatabase,
        caches: CacheRegistry,
        user_id: str,
        category_id: str,
        body: CategoryUpdateRequest,
    ) -> Category:
        changes: dict[str, Any] = body.model_dump(exclude_none=True)
        if "type" in changes:
            changes["type"] = body.type.value  # type: ignore[union-attr]
        if not changes:
            raise InvalidCategoryError("no fields to update")

        if "name" in changes or "type" in changes:
            await self._ensure_name_free(db, user_id, category_id, changes)

        category = await self._repo.update(db, user_id, category_id, changes)
        if category is None:
            raise CategoryNotFoundError(category_id)
        caches.invalidate_user(user_id)
        return category

    async def delete_category(
        self,
        db: DocumentDatabase,
        caches: CacheRegistry,
        user_id: str,
        category_id: str,
    ) -> Category:
        category = await self._repo.delete(db, user_id, category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        caches.invalidate_user(user_id)
        logger.info("Category deleted %s user=%s", category_id, user_id)
        return category

    async def seed_default_categories(
        self,
        db: DocumentDatabase,
        caches: CacheRegistry,
        user_id: str,
    ) -> int:
        """Bulk-insert the default set, skipping (name, type) pairs already present."""
        existing = await self._repo.list_categories(db, user_id, None)
        taken = {(c.name, c.type) for c in existing}
        rows = [
            (name, category_type.value, color, icon)
            for name, category_type, color, icon in DEFAULT_CATEGORIES
            if (name, category_type.value) not in taken
        ]
        inserted = await self._repo.insert_many(db, user_id, rows)
        if inserted:
            caches.invalidate_user(user_id)
        return inserted

    async def _ensure_name_free(
        self,
        db: DocumentDatabase,
        user_id: str,
        category_id: str,
        changes: dict[str, Any],
    ) -> None:
        name = changes.get("name")
        category_type = changes.get("type")
        if name is None or category_type is None:
            # Need the current row to know the pair being renamed into.
            current = {c.id: c for c in await self._repo.get_many(db, user_id, [category_id])}
            if category_id not in current:
                raise CategoryNotFoundError(category_id)
            name = name or current[category_id].name
            category_type = category_type or current[category_id].type
        clash = await self._repo.find_by_name(db, user_id, name, category_type)
        if clash is not None and clash.id != category_id:
            raise DuplicateCategoryError(name)
