"""Schemas for on-demand expiry notifications"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import List, Optional
from datetime import date
from uuid import UUID

from domain.enums import RunStatus
from domain.schemas.product_schemas import to_expiry_date


class ExpiryEmailProduct(BaseModel):
    """A product supplied by the client for an immediate check"""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    product_id: Optional[UUID] = Field(None, alias="id")
    name: str = Field(..., min_length=1)
    expiry: date
    notification_sent: bool = Field(False, alias="notificationSent")

    @field_validator("expiry", mode="before")
    @classmethod
    def coerce_expiry(cls, v):
        """Accept the same date and timestamp forms as POST /products"""
        return to_expiry_date(v)


class ExpiryEmailRequest(BaseModel):
    """Body of POST /send-expiry-email"""

    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    products: List[ExpiryEmailProduct] = Field(default_factory=list)
    days_before_expiry: Optional[int] = Field(
        None,
        alias="daysBeforeExpiry",
        ge=1,
        description="Notification window; defaults to the configured window",
    )


class ExpiryEmailResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    status: RunStatus
    notified_ids: List[UUID] = Field(default_factory=list, alias="notifiedIds")
    marked: bool = False
