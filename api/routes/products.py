"""Product list routes"""

from fastapi import APIRouter, Depends, status, Query
import logging
from typing import List, Optional
from uuid import UUID

from app.config import settings
from app.exceptions import NotFoundError
from domain.schemas.product_schemas import (
    ProductCreate,
    ProductResponse,
    ExpiringProductResponse,
    ProductDeletedResponse,
)
from api.dependencies import get_product_store
from services.product_store import ProductStore
from services.expiry import days_until_expiry, find_expiring, local_today

router = APIRouter(prefix="/products", tags=["Products"])
logger = logging.getLogger("foodsense.api.products")


@router.get("", response_model=List[ProductResponse])
def list_products(store: ProductStore = Depends(get_product_store)):
    """Get all tracked products, soonest expiry first"""
    return [ProductResponse.model_validate(p) for p in store.list()]


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate, store: ProductStore = Depends(get_product_store)
):
    """
    Add a product to the expiry list.

    The image preview the client may send along is not stored.

    Raises:
        400: If the name is empty or the expiry date cannot be parsed
    """
    if payload.image_data:
        logger.debug(f"Ignoring image data sent with product {payload.name!r}")
    product = store.create(payload.name, payload.expiry, image_url=payload.image_url)
    return ProductResponse.model_validate(product)


@router.get("/expiring-soon", response_model=List[ExpiringProductResponse])
def get_expiring_soon(
    days: Optional[int] = Query(
        default=None,
        ge=1,
        le=365,
        description="Notification window in days (defaults to the configured window)",
    ),
    store: ProductStore = Depends(get_product_store),
):
    """
    Preview which products the next notification run would include.

    Read-only: nothing is sent and no flag changes. Products already notified
    and products expiring today or earlier are left out.
    """
    window = days or settings.notification_window_days
    today = local_today(settings.scheduler_timezone)
    return [
        ExpiringProductResponse(
            **ProductResponse.model_validate(p).model_dump(),
            days_until_expiry=days_until_expiry(p.expiry, today),
        )
        for p in find_expiring(store.list(), today, window)
    ]


@router.delete("/{product_id}", response_model=ProductDeletedResponse)
def delete_product(product_id: str, store: ProductStore = Depends(get_product_store)):
    """Delete a tracked product (404 if it does not exist, including malformed ids)"""
    try:
        parsed_id = UUID(product_id)
    except ValueError:
        raise NotFoundError(f"Product {product_id} not found")
    store.delete(parsed_id)
    return ProductDeletedResponse(id=parsed_id)
