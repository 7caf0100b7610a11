"""Product endpoints: list with category names (any valid token) and multipart create with image (admin only)."""

import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_admin
from app.core.config import get_settings
from app.core.database import get_db
from app.models import Category, Product
from app.schemas.auth import AuthorizationResult, CurrentUser
from app.schemas.catalog import ProductOut
from app.schemas.envelope import Envelope
from app.services.product_images import ImageValidationError, store_image

logger = logging.getLogger(__name__)
router = APIRouter()

PRODUCT_TITLE_MAX_LEN = 255
MAX_PRICE = Decimal("99999999.99")


def _parse_price(raw: str) -> Decimal:
    try:
        price = Decimal(raw.strip())
    except InvalidOperation as e:
        raise HTTPException(status_code=400, detail="price must be a number") from e
    if not price.is_finite() or price < 0 or price > MAX_PRICE:
        raise HTTPException(status_code=400, detail="price must be between 0 and 99999999.99")
    return price.quantize(Decimal("0.01"))


def _parse_category_id(raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError as e:
        raise HTTPException(status_code=400, detail="category_id must be an integer") from e


@router.get("", response_model=Envelope, response_model_exclude_none=True)
def list_products(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
) -> Envelope:
    """Return all products joined with their category name."""
    stmt = (
        select(Product, Category.name)
        .join(Category, Product.category_id == Category.id)
        .order_by(Product.id)
    )
    try:
        rows = db.execute(stmt).all()
    except SQLAlchemyError as e:
        logger.error("Listing products failed", exc_info=e)
        raise HTTPException(status_code=500, detail="Failed to fetch products") from e
    products = [
        ProductOut(
            id=p.id,
            title=p.title,
            price=p.price,
            description=p.description,
            category_id=p.category_id,
            category_name=category_name,
            image_url=p.image_url,
        ).model_dump(mode="json")
        for p, category_name in rows
    ]
    return Envelope(success=True, message="Products fetched successfully", data=products)


@router.post(
    "",
    response_model=Envelope,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    db: Annotated[Session, Depends(get_db)],
    admin: Annotated[AuthorizationResult, Depends(require_admin)],
    product_name: Annotated[str | None, Form()] = None,
    price: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    category_id: Annotated[str | None, Form()] = None,
    image: Annotated[UploadFile | None, File()] = None,
) -> Envelope:
    """
    Create a product from multipart form fields plus an image file.

    Image extension must be jpg, jpeg, png, gif or webp and size at most MAX_IMAGE_BYTES.
    The file is stored under UPLOAD_DIR with a random name; image_url is its relative path.
    """
    required = (product_name, price, description, category_id, image)
    if any(value is None for value in required) or not product_name.strip():
        raise HTTPException(
            status_code=400,
            detail="product_name, price, description, category_id and image are required",
        )
    title = product_name.strip()
    if len(title) > PRODUCT_TITLE_MAX_LEN:
        raise HTTPException(
            status_code=400,
            detail=f"product_name must be at most {PRODUCT_TITLE_MAX_LEN} characters",
        )
    parsed_price = _parse_price(price)
    parsed_category_id = _parse_category_id(category_id)

    try:
        category = db.get(Category, parsed_category_id)
    except SQLAlchemyError as e:
        logger.error("Category lookup failed", exc_info=e)
        raise HTTPException(status_code=500, detail="Failed to add product") from e
    if category is None:
        raise HTTPException(status_code=400, detail="Unknown category_id")

    settings = get_settings()
    # Read one byte past the limit so oversize uploads are detected without reading them whole.
    content = image.file.read(settings.MAX_IMAGE_BYTES + 1)
    try:
        image_url = store_image(
            content,
            image.filename or "",
            settings.UPLOAD_DIR,
            settings.MAX_IMAGE_BYTES,
        )
    except ImageValidationError as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    except OSError as e:
        logger.error("Storing product image failed", exc_info=e)
        raise HTTPException(status_code=500, detail="Failed to upload image") from e

    row = Product(
        title=title,
        price=parsed_price,
        description=description.strip(),
        category_id=category.id,
        image_url=image_url,
    )
    try:
        db.add(row)
        db.flush()
        product_id = row.id
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        Path(image_url).unlink(missing_ok=True)
        logger.error("Adding product failed", exc_info=e)
        raise HTTPException(status_code=500, detail="Failed to add product") from e

    logger.info("Product added", extra={"product_id": product_id, "user_id": admin.user_id})
    return Envelope(
        success=True,
        message="Product added successfully",
        data={"id": product_id, "image_url": image_url},
    )
