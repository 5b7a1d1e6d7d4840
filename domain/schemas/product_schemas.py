"""Schemas for the tracked product list"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Union
from datetime import date, datetime
from uuid import UUID


def to_expiry_date(value) -> date:
    """
    Read an expiry as a calendar date.

    Accepts a date, a datetime (reduced to its date) or an ISO-8601 string
    such as ``2026-10-22`` or ``2026-10-22T18:30:00.000Z``. The time part of
    a timestamp is dropped without zone conversion.

    Raises:
        ValueError: If the value cannot be read as a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    raise ValueError(f"Invalid expiry date: {value!r}")


class ProductCreate(BaseModel):
    """
    Schema for creating a product.

    ``name`` and ``expiry`` are validated by the store so that an empty name or
    an unparsable date is reported as a 400 rather than a schema error.
    ``imageData`` is accepted for client compatibility and never stored.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    expiry: Union[date, str]
    image_url: Optional[str] = Field(None, alias="imageUrl")
    image_data: Optional[str] = Field(
        None, alias="imageData", description="Preview image, ignored by the server"
    )


class ProductResponse(BaseModel):
    """Schema for product response"""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    product_id: UUID = Field(alias="id")
    name: str
    expiry: date
    image_url: Optional[str] = Field(None, alias="imageUrl")
    notification_sent: bool = Field(False, alias="notificationSent")
    created_at: Optional[datetime] = Field(None, alias="createdAt")


class ExpiringProductResponse(ProductResponse):
    """Product inside the notification window, with its remaining days"""

    days_until_expiry: int = Field(alias="daysUntilExpiry")


class ProductDeletedResponse(BaseModel):
    message: str = "Product deleted"
    id: UUID
