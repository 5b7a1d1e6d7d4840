"""
Product Store - the persisted product list the notification pipeline works on.

``ProductStore`` is the capability set the pipeline and routes depend on;
``SqlProductStore`` implements it over SQLAlchemy, one session per operation.
"""

import logging
from contextlib import contextmanager
from datetime import date, datetime
from typing import Callable, Iterable, List, Optional, Protocol, Tuple, Union
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import NotFoundError, ServiceValidationError, StoreError
from domain.models import Product
from domain.schemas.product_schemas import to_expiry_date
from repositories import ProductRepository

logger = logging.getLogger("foodsense.product_store")


class ProductStore(Protocol):
    def list(self) -> List[Product]: ...

    def create(
        self, name: str, expiry: Union[date, str], image_url: Optional[str] = None
    ) -> Product: ...

    def delete(self, product_id: UUID) -> None: ...

    def mark_notified(self, product_ids: Iterable[UUID]) -> int: ...


def parse_expiry(value: Union[date, datetime, str, None]) -> date:
    """
    Coerce a client-supplied expiry into a date (see ``to_expiry_date``).

    Raises:
        ServiceValidationError: If the value cannot be read as a date
    """
    try:
        return to_expiry_date(value)
    except ValueError:
        raise ServiceValidationError(
            f"Invalid expiry date: {value!r}", details={"field": "expiry"}
        )


def validate_product_input(
    name: Optional[str], expiry: Union[date, datetime, str, None]
) -> Tuple[str, date]:
    """Return the trimmed name and parsed expiry, or raise ServiceValidationError"""
    clean_name = (name or "").strip()
    if not clean_name:
        raise ServiceValidationError(
            "Product name must not be empty", details={"field": "name"}
        )
    return clean_name, parse_expiry(expiry)


class SqlProductStore:
    """SQLAlchemy-backed product store"""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    @contextmanager
    def _session(self):
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Product store operation failed")
            raise StoreError(f"Product store unavailable: {exc}") from exc
        finally:
            db.close()

    def list(self) -> List[Product]:
        with self._session() as db:
            return ProductRepository(db).list_by_expiry()

    def create(
        self,
        name: str,
        expiry: Union[date, datetime, str],
        image_url: Optional[str] = None,
    ) -> Product:
        clean_name, expiry_date = validate_product_input(name, expiry)
        with self._session() as db:
            product = ProductRepository(db).create_product(
                clean_name, expiry_date, image_url=image_url
            )
        logger.info(f"Created product {product.product_id} expiring {expiry_date}")
        return product

    def delete(self, product_id: UUID) -> None:
        with self._session() as db:
            removed = ProductRepository(db).delete(product_id)
        if not removed:
            raise NotFoundError(f"Product {product_id} not found")
        logger.info(f"Deleted product {product_id}")

    def mark_notified(self, product_ids: Iterable[UUID]) -> int:
        ids = list(product_ids)
        with self._session() as db:
            count = ProductRepository(db).mark_notified(ids)
        logger.info(f"Marked {count} of {len(ids)} product(s) as notified")
        return count
