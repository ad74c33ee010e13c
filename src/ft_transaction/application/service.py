"""TransactionService: expenses and incomes.

Reads go straight to the store through the pagination helpers. Writes
validate the referenced category (must exist and belong to the caller),
then invalidate the caller's caches so category pickers and reports never
show pre-write data.
"""

import logging
from typing import Any

from src.ft_cache.application.registry import CacheRegistry
from src.ft_category.domain.repository import CategoryRepositoryProtocol
from src.ft_category.infrastructure.persistence import CategoryRepository
from src.ft_common.database import parse_object_id
from src.ft_common.errors import (
    CategoryNotFoundError,
    InvalidTransactionError,
    TransactionNotFoundError,
)
from src.ft_query.date_range import DateRange
from src.ft_query.pagination import CursorOptions, CursorPageResult, PageResult, PaginationOptions
from src.ft_query.store import DocumentDatabase
from src.ft_transaction.application.schemas import (
    TransactionCreateRequest,
    TransactionUpdateRequest,
)
from src.ft_transaction.domain.models import (
    IncomeSource,
    PaymentMethod,
    Transaction,
    TransactionKind,
)
from src.ft_transaction.domain.repository import TransactionRepositoryProtocol
from src.ft_transaction.infrastructure.persistence import TransactionRepository

logger = logging.getLogger("ft.transaction")


def _kind_fields(kind: TransactionKind, fields: dict[str, Any], creating: bool) -> dict[str, Any]:
    """Keep only the kind-specific attribute that applies, defaulting it on create."""
    fields = dict(fields)
    if kind is TransactionKind.EXPENSE:
        fields.pop("source", None)
        if creating and fields.get("payment_method") is None:
            fields["payment_method"] = PaymentMethod.CASH
    else:
        fields.pop("payment_method", None)
        if creating and fields.get("source") is None:
            fields["source"] = IncomeSource.OTHER
    for attr in ("payment_method", "source"):
        if fields.get(attr) is not None:
            fields[attr] = fields[attr].value
        elif attr in fields:
            del fields[attr]
    return fields


class TransactionService:
    def __init__(
        self,
        repo: TransactionRepositoryProtocol | None = None,
        categories: CategoryRepositoryProtocol | None = None,
    ) -> None:
        self._repo: TransactionRepositoryProtocol = repo or TransactionRepository()
        self._categories: CategoryRepositoryProtocol = categories or CategoryRepository()

    async def list_page(
        self,
        db: DocumentDatabase,
        kind: TransactionKind,
        user_id: str,
        date_range: DateRange,
        category_id: str | None,
        options: PaginationOptions,
    ) -> PageResult[Transaction]:
        self._check_category_id(category_id)
        return await self._repo.list_page(db, kind, user_id, date_range, category_id, options)

    async def list_feed(
        self,
        db: DocumentDatabase,
        kind: TransactionKind,
        user_id: str,
        date_range: DateRange,
        category_id: str | None,
        options: CursorOptions,
    ) -> CursorPageResult[Transaction]:
        self._check_category_id(category_id)
        return await self._repo.list_feed(db, kind, user_id, date_range, category_id, options)

    async def get(
        self, db: DocumentDatabase, kind: TransactionKind, user_id: str, transaction_id: str
    ) -> Transaction:
        txn = await self._repo.get(db, kind, user_id, transaction_id)
        if txn is None:
            raise TransactionNotFoundError(kind.value, transaction_id)
        return txn

    async def create(
        self,
        db: DocumentDatabase,
        caches: CacheRegistry,
        kind: TransactionKind,
        user_id: str,
        body: TransactionCreateRequest,
    ) -> Transaction:
        fields = _kind_fields(kind, body.model_dump(), creating=True)
        if fields.get("date") is None:
            fields.pop("date", None)
        await self._ensure_category(db, user_id, fields.get("category_id"))

        txn = await self._repo.insert(db, kind, user_id, fields)
        caches.invalidate_user(user_id)
        logger.info("%s created %s user=%s", kind.value, txn.id, user_id)
        return txn

    async def update(
        self,
        db: DocumentDatabase,
        caches: CacheRegistry,
        kind: TransactionKind,
        user_id: str,
        transaction_id: str,
        body: TransactionUpdateRequest,
    ) -> Transaction:
        # Explicit null on category_id unlinks the category; other nulls mean "unchanged".
        changes = body.model_dump(exclude_unset=True)
        changes = {k: v for k, v in changes.items() if v is not None or k == "category_id"}
        changes = _kind_fields(kind, changes, creating=False)
        if not changes:
            raise InvalidTransactionError("no fields to update")
        await self._ensure_category(db, user_id, changes.get("category_id"))

        txn = await self._repo.update(db, kind, user_id, transaction_id, changes)
        if txn is None:
            raise TransactionNotFoundError(kind.value, transaction_id)
        caches.invalidate_user(user_id)
        return txn

    async def delete(
        self,
        db: DocumentDatabase,
        caches: CacheRegistry,
        kind: TransactionKind,
        user_id: str,
        transaction_id: str,
    ) -> Transaction:
        txn = await self._repo.delete(db, kind, user_id, transaction_id)
        if txn is None:
            raise TransactionNotFoundError(kind.value, transaction_id)
        caches.invalidate_user(user_id)
        logger.info("%s deleted %s user=%s", kind.value, transaction_id, user_id)
        return txn

    def _check_category_id(self, category_id: str | None) -> None:
        if category_id and parse_object_id(category_id) is None:
            raise InvalidTransactionError(f"malformed category id {category_id}")

    async def _ensure_category(
        self, db: DocumentDatabase, user_id: str, category_id: str | None
    ) -> None:
        if not category_id:
            return
        self._check_category_id(category_id)
        if not await self._categories.get_many(db, user_id, [category_id]):
            raise CategoryNotFoundError(category_id)
