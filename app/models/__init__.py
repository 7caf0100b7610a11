"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.catalog import Category, Product
from app.models.user import Token, User

__all__ = ["Base", "Category", "Product", "Token", "User"]
