"""Request/response schemas for categories and products."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    category_name: str | None = Field(default=None, description="Category name")


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class ProductOut(BaseModel):
    """Product row joined with its category name."""

    id: int
    title: str
    price: Decimal
    description: str
    category_id: int
    category_name: str
    image_url: str
