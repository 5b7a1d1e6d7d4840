"""
API dependencies for dependency injection
"""

from fastapi import Depends

from app.config import settings
from domain.models import SessionLocal
from services.product_store import ProductStore, SqlProductStore
from services.notifier import Notifier, SmtpTransport
from services.notification_pipeline import NotificationPipeline


def get_product_store() -> ProductStore:
    """
    Product store dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(store: ProductStore = Depends(get_product_store)):
            store.list()

    Tests swap it for an in-memory store via app.dependency_overrides.
    """
    return SqlProductStore(SessionLocal)


def get_notifier() -> Notifier:
    """Notifier bound to the configured SMTP transport"""
    return Notifier(SmtpTransport.from_settings(settings), sender=settings.sender_address)


def get_notification_pipeline(
    store: ProductStore = Depends(get_product_store),
    notifier: Notifier = Depends(get_notifier),
) -> NotificationPipeline:
    return NotificationPipeline(store, notifier, settings)
