"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.product_schemas import (
    ProductCreate,
    ProductResponse,
    ExpiringProductResponse,
    ProductDeletedResponse,
)
from domain.schemas.notification_schemas import (
    ExpiryEmailProduct,
    ExpiryEmailRequest,
    ExpiryEmailResponse,
)

__all__ = [
    # Product schemas
    "ProductCreate",
    "ProductResponse",
    "ExpiringProductResponse",
    "ProductDeletedResponse",
    # Notification schemas
    "ExpiryEmailProduct",
    "ExpiryEmailRequest",
    "ExpiryEmailResponse",
]
