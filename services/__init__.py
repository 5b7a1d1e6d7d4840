"""Services package - Business logic layer"""

from services.product_store import ProductStore, SqlProductStore
from services.notifier import Notifier, SmtpTransport
from services.notification_pipeline import NotificationPipeline, PipelineResult
from services.scheduler import ExpiryScheduler

# Note: expiry and digest contain plain functions, not classes

__all__ = [
    "ProductStore",
    "SqlProductStore",
    "Notifier",
    "SmtpTransport",
    "NotificationPipeline",
    "PipelineResult",
    "ExpiryScheduler",
]
