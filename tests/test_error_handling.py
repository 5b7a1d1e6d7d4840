"""
Error taxonomy and configuration validation tests.

- Each application error carries its HTTP status and serializes consistently
- Settings reject malformed trigger times and windows
"""

import pytest
from datetime import time
from pydantic import ValidationError

from test_fixtures import make_settings
from app.exceptions import (
    AppError,
    ServiceValidationError,
    NotFoundError,
    TransportError,
    StoreError,
)


@pytest.mark.parametrize(
    "error_cls, status",
    [
        (ServiceValidationError, 400),
        (NotFoundError, 404),
        (TransportError, 500),
        (StoreError, 503),
    ],
)
def test_error_http_status(error_cls, status):
    err = error_cls()

    assert isinstance(err, AppError)
    assert err.http_status == status
    assert str(err) == err.default_message


def test_error_to_dict_includes_code_and_details():
    err = ServiceValidationError(
        "Product name must not be empty", details={"field": "name"}, code="EMPTY_NAME"
    )

    assert err.to_dict() == {
        "message": "Product name must not be empty",
        "code": "EMPTY_NAME",
        "details": {"field": "name"},
    }
    assert NotFoundError("Product x not found").to_dict() == {
        "message": "Product x not found"
    }


# =============================================================================
# SETTINGS
# =============================================================================


def test_notification_trigger_parsed():
    settings = make_settings(notification_time=" 18:05 ")

    assert settings.notification_time == "18:05"
    assert settings.notification_trigger == time(18, 5)


@pytest.mark.parametrize("value", ["9am", "25:00", "12:61", ""])
def test_notification_time_rejects_garbage(value):
    with pytest.raises(ValidationError):
        make_settings(notification_time=value)


def test_notification_window_must_be_positive():
    with pytest.raises(ValidationError):
        make_settings(notification_window_days=0)


def test_sender_defaults_to_account_user():
    assert make_settings(email_from=None).sender_address == "foodsense.bot@example.com"
    assert (
        make_settings(email_from="alerts@example.com").sender_address
        == "alerts@example.com"
    )


def test_scheduler_timezone_must_be_known():
    rome = make_settings(scheduler_timezone=" Europe/Rome ")
    assert rome.scheduler_timezone == "Europe/Rome"
    assert make_settings(scheduler_timezone="").scheduler_timezone is None
    with pytest.raises(ValidationError):
        make_settings(scheduler_timezone="Mars/Olympus_Mons")
