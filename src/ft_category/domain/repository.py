"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from collections.abc import Sequence
from typing import Any, Protocol

from src.ft_category.domain.models import Category
from src.ft_query.store import DocumentDatabase


class CategoryRepositoryProtocol(Protocol):
    async def list_categories(
        self,
        db: DocumentDatabase,
        user_id: str,
        category_type: str | None,
    ) -> list[Category]: ...

    async def get_many(
        self,
        db: DocumentDatabase,
        user_id: str,
        category_ids: Sequence[str],
    ) -> list[Category]: ...

    async def find_by_name(
        self,
        db: DocumentDatabase,
        user_id: str,
        name: str,
        category_type: str,
    ) -> Category | None: ...

    async def insert(
        self,
        db: DocumentDatabase,
        user_id: str,
        name: str,
        category_type: str,
        color: str,
        icon: str,
    ) -> Category: ...

    async def insert_many(
        self,
        db: DocumentDatabase,
        user_id: str,
        rows: Sequence[tuple[str, str, str, str]],
    ) -> int: ...

    async def update(
        self,
        db: DocumentDatabase,
        user_id: str,
        category_id: str,
        changes: dict[str, Any],
    ) -> Category | None: ...

    async def delete(
        self,
        db: DocumentDatabase,
        user_id: str,
        category_id: str,
    ) -> Category | None: ...
