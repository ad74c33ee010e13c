"""Pydantic schemas for ft_report responses."""

from typing import Any

from pydantic import BaseModel


class SummaryOut(BaseModel):
    kind: str
    total: float
    count: int
    average: float
    min: float
    max: float


class CategoryTotalOut(BaseModel):
    category_id: str | None
    category_name: str
    category_color: str
    category_icon: str
    total: float
    count: int
    average: float

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "CategoryTotalOut":
        category_id = row.get("categoryId")
        return cls(
            category_id=str(category_id) if category_id else None,
            category_name=row["categoryName"],
            category_color=row["categoryColor"],
            category_icon=row["categoryIcon"],
            total=row["total"],
            count=row["count"],
            average=row["average"],
        )


class TimeSeriesPointOut(BaseModel):
    year: int
    month: int | None = None
    week: int | None = None
    day: int | None = None
    total: float
    count: int
    average: float

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "TimeSeriesPointOut":
        bucket = row["_id"]
        return cls(
            year=bucket["year"],
            month=bucket.get("month"),
            week=bucket.get("week"),
            day=bucket.get("day"),
            total=row["total"],
            count=row["count"],
            average=row["average"],
        )


class CategoryBreakdownResponse(BaseModel):
    kind: str
    categories: list[CategoryTotalOut]


class TimeSeriesResponse(BaseModel):
    kind: str
    granularity: str
    points: list[TimeSeriesPointOut]
