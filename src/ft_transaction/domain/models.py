"""Domain models for ft_transaction: pure dataclasses, no business logic.

Expenses and incomes share one shape; `kind` selects the collection and
which of payment_method / source is meaningful.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TransactionKind(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"

    @property
    def collection(self) -> str:
        return "expenses" if self is TransactionKind.EXPENSE else "incomes"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    MOBILE_MONEY = "mobile_money"
    BANK_TRANSFER = "bank_transfer"
    OTHER = "other"


class IncomeSource(str, Enum):
    SALARY = "salary"
    FREELANCE = "freelance"
    INVESTMENT = "investment"
    GIFT = "gift"
    OTHER = "other"


MAX_AMOUNT = 1_000_000_000


@dataclass(frozen=True)
class CategoryRef:
    """Category metadata populated onto a transaction for display."""

    id: str
    name: str
    color: str
    icon: str


@dataclass
class Transaction:
    id: str
    user_id: str
    kind: TransactionKind
    title: str
    amount: float
    date: datetime
    category_id: str | None = None
    category: CategoryRef | None = None
    notes: str = ""
    payment_method: str | None = None
    source: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
