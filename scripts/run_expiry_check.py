#!/usr/bin/env python3
"""
Run the daily expiry notification check once, outside the scheduler.

Usage:
    python scripts/run_expiry_check.py                     # check today, notify NOTIFICATION_EMAIL
    python scripts/run_expiry_check.py --dry-run           # print the digest, send nothing
    python scripts/run_expiry_check.py --now 2026-10-19 --window 3
    python scripts/run_expiry_check.py --email me@example.com
"""

import argparse
import logging
import os
import sys
from datetime import date
from functools import partial

import anyio

project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from app.config import settings
from app.exceptions import AppError
from api.dependencies import get_notifier
from domain.enums import RunStatus
from domain.models import SessionLocal
from services.digest import build_digest
from services.expiry import find_expiring, local_today
from services.notification_pipeline import NotificationPipeline
from services.product_store import SqlProductStore

logger = logging.getLogger("foodsense.scripts.expiry_check")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the expiry notification check once")
    parser.add_argument(
        "--now",
        type=date.fromisoformat,
        default=None,
        help="Evaluation date (YYYY-MM-DD), defaults to today in SCHEDULER_TIMEZONE",
    )
    parser.add_argument(
        "--window",
        type=int,
        default=settings.notification_window_days,
        help="Notification window in days",
    )
    parser.add_argument(
        "--email",
        default=settings.notification_email,
        help="Recipient, defaults to NOTIFICATION_EMAIL",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the digest without sending or marking anything",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()), format=settings.log_format
    )
    store = SqlProductStore(SessionLocal)
    today = args.now or local_today(settings.scheduler_timezone)

    try:
        if args.dry_run:
            candidates = find_expiring(store.list(), today, args.window)
            digest = build_digest(candidates, today, settings.digest_date_format)
            print(digest.render_text() if digest else "No products within the window.")
            return 0

        pipeline = NotificationPipeline(store, get_notifier(), settings)
        result = anyio.run(
            partial(
                pipeline.run, recipient=args.email, window_days=args.window, now=today
            )
        )
    except AppError as exc:
        logger.error(f"Expiry check aborted: {exc}")
        return 1

    print(f"{result.status.value}: {len(result.notified_ids)} product(s) notified")
    return 1 if result.status == RunStatus.FAILED else 0


if __name__ == "__main__":
    sys.exit(main())
