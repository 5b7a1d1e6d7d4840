"""
Product Repository - Data access layer for tracked products
"""

from typing import Iterable, List, Optional
from uuid import UUID
from datetime import date
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Product


class ProductRepository(BaseRepository[Product]):
    """Repository for product data access"""

    def __init__(self, db: Session):
        super().__init__(db, Product)

    def get_by_id(self, product_id: UUID) -> Optional[Product]:
        """Get product by ID"""
        return self.db.query(Product).filter(Product.product_id == product_id).first()

    def list_by_expiry(self) -> List[Product]:
        """All products, soonest expiry first"""
        return (
            self.db.query(Product)
            .order_by(Product.expiry.asc(), Product.created_at.asc())
            .all()
        )

    def create_product(
        self, name: str, expiry: date, image_url: Optional[str] = None
    ) -> Product:
        """Insert a new product with the notification flag cleared"""
        return self.create(
            Product(
                name=name,
                expiry=expiry,
                image_url=image_url,
                notification_sent=False,
            )
        )

    def mark_notified(self, product_ids: Iterable[UUID]) -> int:
        """Set notification_sent for the given ids. Unknown ids are ignored."""
        ids = list(product_ids)
        if not ids:
            return 0
        count = (
            self.db.query(Product)
            .filter(Product.product_id.in_(ids))
            .update({Product.notification_sent: True}, synchronize_session=False)
        )
        self.db.commit()
        return count
