"""Category endpoints: list (any valid token) and create (admin only)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_admin
from app.core.database import get_db
from app.models import Category
from app.schemas.auth import AuthorizationResult, CurrentUser
from app.schemas.catalog import CategoryCreate, CategoryOut
from app.schemas.envelope import Envelope

logger = logging.getLogger(__name__)
router = APIRouter()

CATEGORY_NAME_MAX_LEN = 255


@router.get("", response_model=Envelope, response_model_exclude_none=True)
def list_categories(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> Envelope:
    """Return all categories ordered by id."""
    try:
        rows = db.scalars(select(Category).order_by(Category.id)).all()
    except SQLAlchemyError as e:
        logger.error("Listing categories failed", exc_info=e)
        raise HTTPException(status_code=500, detail="Failed to fetch categories") from e
    return Envelope(
        success=True,
        message="Categories fetched successfully",
        data=[CategoryOut.model_validate(r).model_dump() for r in rows],
    )


@router.post(
    "",
    response_model=Envelope,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    body: CategoryCreate,
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[AuthorizationResult, Depends(require_admin)],
) -> Envelope:
    """Create a category. Names are unique."""
    name = (body.category_name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="category_name is required")
    if len(name) > CATEGORY_NAME_MAX_LEN:
        raise HTTPException(
            status_code=400,
            detail=f"category_name must be at most {CATEGORY_NAME_MAX_LEN} characters",
        )

    row = Category(name=name)
    try:
        db.add(row)
        db.flush()
        created = CategoryOut.model_validate(row)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail="Category already exists") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Adding category failed", exc_info=e)
        raise HTTPException(status_code=500, detail="Failed to add category") from e

    logger.info("Category added", extra={"category_id": created.id, "user_id": admin.user_id})
    return Envelope(success=True, message="Category added successfully", data=created.model_dump())
