"""
Tracked product model.
"""

from sqlalchemy import (
    Column,
    Text,
    Boolean,
    Date,
    TIMESTAMP,
    Uuid,
    CheckConstraint,
    false,
)
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class Product(Base):
    """A product whose expiry date is tracked for notifications"""

    __tablename__ = "product"

    product_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    expiry = Column(Date, nullable=False, index=True)
    image_url = Column(Text)
    notification_sent = Column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("length(trim(name)) > 0", name="ck_product_name_nonempty"),
    )

    def __repr__(self) -> str:
        return f"<Product {self.product_id} {self.name!r} expiry={self.expiry}>"
