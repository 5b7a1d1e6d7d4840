"""
Tests for the daily expiry scheduler.
"""

from datetime import date, datetime, timezone
from functools import partial

import anyio

from test_fixtures import OPERATOR_EMAIL, TODAY, make_product, make_settings
from domain.enums import RunStatus
from services.notification_pipeline import NotificationPipeline
from services import expiry
from services.notifier import Notifier
from services.scheduler import DAILY_JOB_ID, ExpiryScheduler


class ExplodingPipeline:
    """Pipeline double whose run always raises"""

    def __init__(self, exc):
        self.exc = exc
        self.calls = 0

    async def run(self, **kwargs):
        self.calls += 1
        raise self.exc


def test_run_once_checks_whole_store_for_operator(store, transport, pipeline, settings):
    milk = make_product("Milk", days=2)
    store.products = {milk.product_id: milk}
    scheduler = ExpiryScheduler(pipeline, settings)

    result = anyio.run(partial(scheduler.run_once, now=TODAY))

    assert result.status == RunStatus.SENT
    assert result.recipient == OPERATOR_EMAIL
    assert store.list_calls == 1
    assert transport.messages[0]["To"] == OPERATOR_EMAIL


def test_run_once_uses_scheduler_timezone_date(store, transport, monkeypatch):
    """
    The daily job evaluates against today in SCHEDULER_TIMEZONE, not UTC.

    Verifies:
    - At 03:00 UTC on Oct 20 it is still Oct 19 in Los Angeles
    - Milk expiring Oct 20 is 1 day away there and gets notified
    """
    monkeypatch.setattr(
        expiry, "utc_now", lambda: datetime(2026, 10, 20, 3, 0, tzinfo=timezone.utc)
    )
    settings = make_settings(
        scheduler_timezone="America/Los_Angeles", notification_time="20:00"
    )
    milk = make_product("Milk", expiry=date(2026, 10, 20))
    store.products = {milk.product_id: milk}
    pipeline = NotificationPipeline(store, Notifier(transport), settings)

    result = anyio.run(ExpiryScheduler(pipeline, settings).run_once)

    assert result.status == RunStatus.SENT
    assert result.notified_ids == [milk.product_id]
    assert result.digest.sections[0].days == 1
    assert milk.notification_sent is True


def test_run_once_swallows_errors(settings, caplog):
    """A failing cycle is logged and never propagates to the timer."""
    pipeline = ExplodingPipeline(RuntimeError("database is locked"))
    scheduler = ExpiryScheduler(pipeline, settings)

    with caplog.at_level("ERROR", logger="foodsense.scheduler"):
        result = anyio.run(partial(scheduler.run_once, now=TODAY))

    assert result is None
    assert pipeline.calls == 1
    assert "Scheduled expiry check failed" in caplog.text


def test_run_once_without_operator_address_skips(store, transport):
    settings = make_settings(notification_email=None)
    pipeline = NotificationPipeline(store, Notifier(transport), settings)
    scheduler = ExpiryScheduler(pipeline, settings)

    assert anyio.run(partial(scheduler.run_once, now=TODAY)) is None
    assert store.list_calls == 0


def test_build_trigger_uses_configured_time(pipeline):
    scheduler = ExpiryScheduler(pipeline, make_settings(notification_time="07:45"))

    fields = {f.name: str(f) for f in scheduler.build_trigger().fields}

    assert fields["hour"] == "7"
    assert fields["minute"] == "45"


def test_start_registers_daily_job_and_stop_is_idempotent(pipeline, settings):
    scheduler = ExpiryScheduler(pipeline, settings)

    async def lifecycle():
        scheduler.start()
        try:
            assert scheduler.running is True
            job = scheduler._scheduler.get_job(DAILY_JOB_ID)
            assert job is not None
            next_run = scheduler.next_run_time()
            assert isinstance(next_run, datetime)
            assert (next_run.hour, next_run.minute) == (9, 30)
            # Starting twice keeps a single job
            scheduler.start()
            assert len(scheduler._scheduler.get_jobs()) == 1
        finally:
            scheduler.stop()

    anyio.run(lifecycle)

    assert scheduler.running is False
    assert scheduler.next_run_time() is None
    scheduler.stop()
