from typing import Any, Mapping, Optional


class AppError(Exception):
    """Base class for errors the API layer knows how to render.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, validation info)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "Application error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
        code: Optional[str] = None,
    ):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(AppError):
    """Raised when product input is invalid (empty name, unparsable expiry, bad window)."""

    http_status = 400
    default_message = "Invalid input"


class NotFoundError(AppError):
    """Raised when a requested product was not found."""

    http_status = 404
    default_message = "Not found"


class TransportError(AppError):
    """Raised when the mail transport fails to deliver a message.

    Covers authentication failures, refused recipients, network errors and
    timeouts. Never fatal to the process: the scheduled run logs it and the
    next tick retries.
    """

    http_status = 500
    default_message = "Mail transport failure"


class StoreError(AppError):
    """Raised when the product store is unavailable or a write fails."""

    http_status = 503
    default_message = "Product store unavailable"
