"""Pydantic request/response schemas for ft_category.

All responses are wrapped in ApiResponse at the router layer.
"""

from pydantic import BaseModel, Field, field_validator

from src.ft_category.domain.models import Category, CategoryType

HEX_COLOR_PATTERN = r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$"


class CategoryCreateRequest(BaseModel):
    name: str = Field(..., max_length=50)
    type: CategoryType
    color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    icon: str | None = Field(None, max_length=8)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Category name is required")
        return v


class CategoryUpdateRequest(BaseModel):
    name: str | None = Field(None, max_length=50)
    type: CategoryType | None = None
    color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    icon: str | None = Field(None, max_length=8)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Category name cannot be blank")
        return v


class CategoryOut(BaseModel):
    id: str
    name: str
    type: str
    color: str
    icon: str

    @classmethod
    def from_domain(cls, c: Category) -> "CategoryOut":
        return cls(id=c.id, name=c.name, type=c.type, color=c.color, icon=c.icon)


class CategoryListResponse(BaseModel):
    categories: list[CategoryOut]
    cached: bool


class SeedDefaultsResponse(BaseModel):
    inserted: int
