"""Repository Protocol: dependency inversion for testability."""

from typing import Any, Protocol

from src.ft_query.date_range import DateRange
from src.ft_query.pagination import CursorOptions, CursorPageResult, PageResult, PaginationOptions
from src.ft_query.store import DocumentDatabase
from src.ft_transaction.domain.models import Transaction, TransactionKind


class TransactionRepositoryProtocol(Protocol):
    async def list_page(
        self,
        db: DocumentDatabase,
        kind: TransactionKind,
        user_id: str,
        date_range: DateRange,
        category_id: str | None,
        options: PaginationOptions,
    ) -> PageResult[Transaction]: ...

    async def list_feed(
        self,
        db: DocumentDatabase,
        kind: TransactionKind,
        user_id: str,
        date_range: DateRange,
        category_id: str | None,
        options: CursorOptions,
    ) -> CursorPageResult[Transaction]: ...

    async def get(
        self,
        db: DocumentDatabase,
        kind: TransactionKind,
        user_id: str,
        transaction_id: str,
    ) -> Transaction | None: ...

    async def insert(
        self,
        db: DocumentDatabase,
        kind: TransactionKind,
        user_id: str,
        fields: dict[str, Any],
    ) -> Transaction: ...

    async def update(
        self,
        db: DocumentDatabase,
        kind: TransactionKind,
        user_id: str,
        transaction_id: str,
        changes: dict[str, Any],
    ) -> Transaction | None: ...

    async def delete(
        self,
        db: DocumentDatabase,
        kind: TransactionKind,
        user_id: str,
        transaction_id: str,
    ) -> Transaction | None: ...
