"""
Daily cadence for the expiry notification pipeline.
"""

import logging
from datetime import date, datetime
from typing import Optional, Union

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from app.config import Settings
from services.expiry import local_today
from services.notification_pipeline import NotificationPipeline, PipelineResult

logger = logging.getLogger("foodsense.scheduler")

DAILY_JOB_ID = "daily-expiry-check"


class ExpiryScheduler:
    """
    Owns the background timer that runs the pipeline once a day.

    start() must be called from inside a running event loop (the app lifespan);
    stop() may be called any number of times.
    """

    def __init__(self, pipeline: NotificationPipeline, settings: Settings):
        self.pipeline = pipeline
        self.settings = settings
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def build_trigger(self) -> CronTrigger:
        trigger_at = self.settings.notification_trigger
        return CronTrigger(
            hour=trigger_at.hour,
            minute=trigger_at.minute,
            timezone=self.settings.scheduler_timezone,
        )

    def start(self) -> None:
        if self.running:
            return
        self._scheduler = AsyncIOScheduler(timezone=self.settings.scheduler_timezone)
        self._scheduler.add_job(
            self.run_once,
            trigger=self.build_trigger(),
            id=DAILY_JOB_ID,
            name="Daily expiry notification check",
            replace_existing=True,
            coalesce=True,
            max_instances=1,
            misfire_grace_time=3600,
        )
        self._scheduler.start()
        logger.info(
            f"Expiry check scheduled daily at {self.settings.notification_time}"
        )

    def stop(self) -> None:
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Expiry scheduler stopped")
        self._scheduler = None

    def next_run_time(self) -> Optional[datetime]:
        if not self.running:
            return None
        job = self._scheduler.get_job(DAILY_JOB_ID)
        return job.next_run_time if job else None

    async def run_once(
        self, now: Union[date, datetime, None] = None
    ) -> Optional[PipelineResult]:
        """
        Scheduled job body: check the whole store for the operator address.

        Without ``now`` the check runs for today in the scheduler timezone.

        Errors end this cycle only; they are logged and the timer keeps going.
        """
        recipient = self.settings.notification_email
        if not recipient:
            logger.warning(
                "NOTIFICATION_EMAIL is not set, skipping scheduled expiry check"
            )
            return None

        today = now or local_today(self.settings.scheduler_timezone)
        logger.info(f"Running scheduled expiry check for {today}")
        try:
            result = await self.pipeline.run(recipient=recipient, now=today)
        except Exception:
            logger.exception("Scheduled expiry check failed")
            return None

        logger.info(
            f"Scheduled expiry check finished: {result.status.value} "
            f"({len(result.notified_ids)} product(s) notified)"
        )
        return result
