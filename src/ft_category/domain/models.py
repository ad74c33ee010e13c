"""Domain models for ft_category: pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

DEFAULT_COLOR = "#6366f1"
DEFAULT_ICON = "📁"


class CategoryType(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"


@dataclass(frozen=True)
class Category:
    id: str
    user_id: str
    name: str
    type: str
    color: str = DEFAULT_COLOR
    icon: str = DEFAULT_ICON
    created_at: datetime | None = None
    updated_at: datetime | None = None


# Seeded on request for a new user (POST /categories/defaults)
DEFAULT_CATEGORIES: tuple[tuple[str, CategoryType, str, str], ...] = (
    ("Food & Dining", CategoryType.EXPENSE, "#ef4444", "🍔"),
    ("Transportation", CategoryType.EXPENSE, "#f97316", "🚗"),
    ("Shopping", CategoryType.EXPENSE, "#eab308", "🛒"),
    ("Entertainment", CategoryType.EXPENSE, "#22c55e", "🎬"),
    ("Bills & Utilities", CategoryType.EXPENSE, "#06b6d4", "💡"),
    ("Healthcare", CategoryType.EXPENSE, "#3b82f6", "💊"),
    ("Education", CategoryType.EXPENSE, "#8b5cf6", "📚"),
    ("Travel", CategoryType.EXPENSE, "#ec4899", "✈️"),
    ("Salary", CategoryType.INCOME, "#22c55e", "💰"),
    ("Freelance", CategoryType.INCOME, "#06b6d4", "💻"),
    ("Investment", CategoryType.INCOME, "#8b5cf6", "📈"),
    ("Business", CategoryType.INCOME, "#f97316", "🏢"),
    ("Gift", CategoryType.INCOME, "#ec4899", "🎁"),
)
