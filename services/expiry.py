"""
Expiry window evaluation.

Pure functions over an in-memory snapshot of products. Anything exposing
``product_id``, ``expiry`` and ``notification_sent`` attributes works: ORM
rows, request schemas or test doubles.
"""

import math
from datetime import date, datetime, time, timezone
from typing import Iterable, List, Optional, Union
from zoneinfo import ZoneInfo

from app.exceptions import ServiceValidationError

DEFAULT_WINDOW_DAYS = 7
SECONDS_PER_DAY = 24 * 60 * 60


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def local_today(tz_name: Optional[str] = None) -> date:
    """
    Current calendar date in ``tz_name``, or in the host zone when unset.

    Pass the scheduler timezone so the date matches the zone the daily
    trigger fires in.
    """
    now = utc_now()
    if tz_name:
        return now.astimezone(ZoneInfo(tz_name)).date()
    return now.astimezone().date()


def days_until_expiry(expiry: date, now: Union[date, datetime]) -> int:
    """
    Whole days left before ``expiry``, rounded up.

    With a plain ``date`` for ``now`` this is the calendar-day difference.
    With a ``datetime`` the product is taken to expire at midnight starting
    its expiry day, so any partial day left counts as one.

    Examples:
        >>> days_until_expiry(date(2026, 10, 22), date(2026, 10, 19))
        3
        >>> days_until_expiry(date(2026, 10, 20), datetime(2026, 10, 19, 9, 0))
        1
    """
    if isinstance(expiry, datetime):
        expiry = expiry.date()
    # datetime is a subclass of date, check it first
    if isinstance(now, datetime):
        expires_at = datetime.combine(expiry, time.min, tzinfo=now.tzinfo)
        return math.ceil((expires_at - now).total_seconds() / SECONDS_PER_DAY)
    return (expiry - now).days


def is_within_window(
    expiry: date, now: Union[date, datetime], window_days: int = DEFAULT_WINDOW_DAYS
) -> bool:
    """True when 0 < days left <= window_days. Expired items never qualify."""
    return 0 < days_until_expiry(expiry, now) <= window_days


def find_expiring(
    products: Iterable,
    now: Union[date, datetime],
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> List:
    """
    Select the products that should be notified about.

    A product qualifies when it has not been notified yet and expires within
    ``window_days`` (inclusive) but not today or earlier. Input order is kept
    and a product id appearing twice is only returned once.

    Raises:
        ServiceValidationError: If window_days is below 1
    """
    if window_days is None or window_days < 1:
        raise ServiceValidationError(
            f"Notification window must be at least 1 day, got {window_days}"
        )

    selected = []
    seen_ids = set()
    for product in products:
        if product.notification_sent:
            continue
        if not is_within_window(product.expiry, now, window_days):
            continue
        product_id = getattr(product, "product_id", None)
        if product_id is not None:
            if product_id in seen_ids:
                continue
            seen_ids.add(product_id)
        selected.append(product)
    return selected
