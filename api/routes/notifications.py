"""Expiry notification routes"""

from fastapi import APIRouter, Depends
import logging

from app.exceptions import TransportError
from domain.enums import RunStatus
from domain.schemas.notification_schemas import (
    ExpiryEmailRequest,
    ExpiryEmailResponse,
)
from api.dependencies import get_notification_pipeline
from services.notification_pipeline import NotificationPipeline

router = APIRouter(tags=["Notifications"])
logger = logging.getLogger("foodsense.api.notifications")


@router.post("/send-expiry-email", response_model=ExpiryEmailResponse)
async def send_expiry_email(
    payload: ExpiryEmailRequest,
    pipeline: NotificationPipeline = Depends(get_notification_pipeline),
):
    """
    Run an immediate expiry check for the products supplied by the client.

    Only products inside the window and not yet notified end up in the email.
    Products that exist in the store are marked as notified after a
    successful send.

    Raises:
        500: If the mail transport fails (no product is marked)
        503: If the product store is unavailable
    """
    result = await pipeline.run(
        recipient=payload.email,
        products=payload.products,
        window_days=payload.days_before_expiry,
    )

    if result.status == RunStatus.FAILED:
        raise TransportError(f"Failed to send expiry email to {payload.email}")

    if result.status == RunStatus.SKIPPED:
        message = "No products within the notification window"
    elif result.marked:
        message = "Email sent successfully"
    else:
        message = "Email sent, but products could not be marked as notified"
    logger.info(f"Expiry email request for {payload.email}: {message}")

    return ExpiryEmailResponse(
        message=message,
        status=result.status,
        notified_ids=result.notified_ids,
        marked=result.marked,
    )
