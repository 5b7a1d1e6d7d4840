"""
Tests for the expiry window evaluator.

Covers:
- days_until_expiry with plain dates and with datetimes (ceiling semantics)
- local_today in the configured timezone
- Window boundaries (window included, window+1 excluded, today/past excluded)
- Exclusion of products already notified
- Each qualifying product returned exactly once
"""

import uuid
from datetime import date, datetime, timedelta, timezone

import pytest

from test_fixtures import TODAY, make_product
from services import expiry
from services.expiry import (
    days_until_expiry,
    find_expiring,
    is_within_window,
    local_today,
)
from app.exceptions import ServiceValidationError


# =============================================================================
# DAYS UNTIL EXPIRY
# =============================================================================


def test_days_until_expiry_with_dates():
    assert days_until_expiry(date(2026, 10, 22), TODAY) == 3
    assert days_until_expiry(TODAY, TODAY) == 0
    assert days_until_expiry(date(2026, 10, 17), TODAY) == -2


def test_days_until_expiry_rounds_partial_days_up():
    """
    With a time of day, any partial day left counts as a full day.

    Verifies:
    - Tomorrow seen at 09:00 today is 1 day away (15 hours, rounded up)
    - Today seen at 09:00 is 0 days away (already started)
    - Midnight exactly matches the date arithmetic
    """
    morning = datetime(2026, 10, 19, 9, 0)
    assert days_until_expiry(date(2026, 10, 20), morning) == 1
    assert days_until_expiry(date(2026, 10, 26), morning) == 7
    assert days_until_expiry(date(2026, 10, 27), morning) == 8
    assert days_until_expiry(TODAY, morning) == 0
    assert days_until_expiry(date(2026, 10, 22), datetime(2026, 10, 19)) == 3


@pytest.mark.parametrize(
    "tz_name, expected",
    [
        ("UTC", date(2026, 10, 20)),
        ("America/Los_Angeles", date(2026, 10, 19)),
        ("Pacific/Auckland", date(2026, 10, 20)),
    ],
)
def test_local_today_follows_configured_zone(monkeypatch, tz_name, expected):
    monkeypatch.setattr(
        expiry, "utc_now", lambda: datetime(2026, 10, 20, 3, 0, tzinfo=timezone.utc)
    )

    assert local_today(tz_name) == expected


def test_days_until_expiry_with_aware_datetime():
    now = datetime(2026, 10, 19, 23, 30, tzinfo=timezone.utc)
    assert days_until_expiry(date(2026, 10, 20), now) == 1


# =============================================================================
# WINDOW BOUNDARIES
# =============================================================================


@pytest.mark.parametrize(
    "days, expected",
    [(-3, False), (0, False), (1, True), (7, True), (8, False)],
)
def test_is_within_window_boundaries(days, expected):
    assert is_within_window(TODAY + timedelta(days=days), TODAY, 7) is expected


def test_find_expiring_boundaries():
    """
    Boundary products for a 7-day window.

    Verifies:
    - Expiring exactly 7 days out is included
    - Expiring 8 days out is excluded
    - Expiring today or already expired is excluded
    """
    at_window = make_product("Cheddar", days=7)
    past_window = make_product("Frozen peas", days=8)
    today = make_product("Sourdough bread", days=0)
    expired = make_product("Spinach", days=-2)

    result = find_expiring([at_window, past_window, today, expired], TODAY, 7)

    assert result == [at_window]


def test_find_expiring_skips_already_notified():
    unsent = make_product("Milk", days=2)
    sent = make_product("Eggs", days=2, notification_sent=True)

    assert find_expiring([unsent, sent], TODAY) == [unsent]


def test_find_expiring_scenario():
    """
    A expires in 3 days (unsent), B in 10 days (unsent), C in 2 days (sent).
    With a 7-day window only A qualifies.
    """
    a = make_product("Greek yogurt", days=3)
    b = make_product("Parmesan", days=10)
    c = make_product("Chicken breast", days=2, notification_sent=True)

    assert find_expiring([a, b, c], TODAY, 7) == [a]


def test_find_expiring_returns_each_product_once():
    pid = uuid.uuid4()
    milk = make_product("Milk", days=2, product_id=pid)
    duplicate = make_product("Milk", days=2, product_id=pid)
    no_id = make_product("Loose apples", days=4)
    no_id.product_id = None

    result = find_expiring([milk, duplicate, no_id], TODAY)

    assert result == [milk, no_id]


def test_find_expiring_keeps_input_order():
    later = make_product("Butter", days=6)
    sooner = make_product("Cream", days=1)

    assert find_expiring([later, sooner], TODAY) == [later, sooner]


def test_find_expiring_custom_window():
    three = make_product("Hummus", days=3)
    five = make_product("Tofu", days=5)

    assert find_expiring([three, five], TODAY, window_days=3) == [three]


@pytest.mark.parametrize("window", [0, -1])
def test_find_expiring_rejects_invalid_window(window):
    with pytest.raises(ServiceValidationError):
        find_expiring([make_product()], TODAY, window_days=window)


def test_find_expiring_empty_input():
    assert find_expiring([], TODAY) == []
