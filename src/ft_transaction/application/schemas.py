"""Pydantic schemas for ft_transaction API requests and responses."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from src.ft_query.pagination import PageInfo
from src.ft_transaction.domain.models import (
    MAX_AMOUNT,
    CategoryRef,
    IncomeSource,
    PaymentMethod,
    Transaction,
)


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Title is required")
    return v


class TransactionCreateRequest(BaseModel):
    title: str = Field(..., max_length=200)
    amount: float = Field(..., ge=0, le=MAX_AMOUNT)
    category_id: str | None = None
    date: datetime | None = None
    notes: str = Field("", max_length=1000)
    payment_method: PaymentMethod | None = None
    source: IncomeSource | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return _strip_required(v)


class TransactionUpdateRequest(BaseModel):
    title: str | None = Field(None, max_length=200)
    amount: float | None = Field(None, ge=0, le=MAX_AMOUNT)
    category_id: str | None = None
    date: datetime | None = None
    notes: str | None = Field(None, max_length=1000)
    payment_method: PaymentMethod | None = None
    source: IncomeSource | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return None if v is None else _strip_required(v)


class CategoryRefOut(BaseModel):
    id: str
    name: str
    color: str
    icon: str

    @classmethod
    def from_domain(cls, ref: CategoryRef) -> "CategoryRefOut":
        return cls(id=ref.id, name=ref.name, color=ref.color, icon=ref.icon)


class TransactionOut(BaseModel):
    id: str
    kind: str
    title: str
    amount: float
    date: str
    category_id: str | None
    category: CategoryRefOut | None
    notes: str
    payment_method: str | None
    source: str | None
    created_at: str | None

    @classmethod
    def from_domain(cls, t: Transaction) -> "TransactionOut":
        return cls(
            id=t.id,
            kind=t.kind.value,
            title=t.title,
            amount=t.amount,
            date=t.date.isoformat(),
            category_id=t.category_id,
            category=CategoryRefOut.from_domain(t.category) if t.category else None,
            notes=t.notes,
            payment_method=t.payment_method,
            source=t.source,
            created_at=t.created_at.isoformat() if t.created_at else None,
        )


class TransactionPageResponse(BaseModel):
    items: list[TransactionOut]
    pagination: PageInfo


class TransactionFeedResponse(BaseModel):
    items: list[TransactionOut]
    next_cursor: str | None
    has_more: bool
