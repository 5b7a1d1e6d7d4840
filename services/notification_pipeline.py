"""
Expiry notification pipeline: evaluate -> batch -> send -> mark.

Both the daily scheduler and the on-demand endpoint run this same pipeline.
Store and mail calls are blocking, so they run in worker threads and are
awaited one after another.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, List, Optional, Union
from uuid import UUID

import anyio

from app.config import Settings
from app.exceptions import ServiceValidationError, StoreError
from domain.enums import RunStatus
from services.digest import Digest, build_digest
from services.expiry import find_expiring, local_today
from services.notifier import Notifier
from services.product_store import ProductStore

logger = logging.getLogger("foodsense.notifications")


@dataclass
class PipelineResult:
    status: RunStatus
    recipient: str
    notified_ids: List[UUID] = field(default_factory=list)
    marked: bool = False
    digest: Optional[Digest] = None

    @property
    def succeeded(self) -> bool:
        return self.status != RunStatus.FAILED


class NotificationPipeline:
    """
    One expiry check against the store (or a caller-supplied subset).

    The pipeline keeps no state between runs; the persisted notification flag
    is what stops a product from being notified twice.
    """

    def __init__(self, store: ProductStore, notifier: Notifier, settings: Settings):
        self.store = store
        self.notifier = notifier
        self.settings = settings

    async def run(
        self,
        recipient: Optional[str] = None,
        products: Optional[Iterable] = None,
        window_days: Optional[int] = None,
        now: Union[date, datetime, None] = None,
    ) -> PipelineResult:
        """
        Run a full check and send at most one email.

        Args:
            recipient: Destination address, defaults to the operator address
            products: Explicit subset to check instead of the whole store
            window_days: Notification window, defaults to the configured window
            now: Evaluation date, defaults to today in the scheduler timezone

        Returns:
            PipelineResult with status SENT, SKIPPED or FAILED

        Raises:
            ServiceValidationError: If no recipient is available or the window is invalid
            StoreError: If the store cannot be read (nothing is marked)
        """
        recipient = recipient or self.settings.notification_email
        if not recipient:
            raise ServiceValidationError("No notification recipient configured")
        window = (
            window_days
            if window_days is not None
            else self.settings.notification_window_days
        )
        today = now or local_today(self.settings.scheduler_timezone)

        if products is None:
            snapshot = await anyio.to_thread.run_sync(self.store.list)
        else:
            snapshot = list(products)

        candidates = find_expiring(snapshot, today, window)
        digest = build_digest(candidates, today, self.settings.digest_date_format)
        if digest is None:
            logger.info(
                f"No products within {window} day(s) of expiry "
                f"out of {len(snapshot)} checked"
            )
            return PipelineResult(status=RunStatus.SKIPPED, recipient=recipient)

        logger.info(
            f"{digest.product_count} product(s) expiring within {window} day(s), "
            f"notifying {recipient}"
        )
        sent = await anyio.to_thread.run_sync(self.notifier.send, recipient, digest)
        if not sent:
            return PipelineResult(
                status=RunStatus.FAILED, recipient=recipient, digest=digest
            )

        notified_ids = digest.product_ids
        marked = True
        if notified_ids:
            try:
                await anyio.to_thread.run_sync(self.store.mark_notified, notified_ids)
            except StoreError:
                # The email already went out; the next run may notify these again.
                marked = False
                logger.exception(
                    f"Digest sent but {len(notified_ids)} product(s) "
                    "could not be marked as notified"
                )

        return PipelineResult(
            status=RunStatus.SENT,
            recipient=recipient,
            notified_ids=notified_ids,
            marked=marked,
            digest=digest,
        )
