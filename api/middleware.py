"""
Consolidated middleware for the FoodSense API
"""

import time
import logging
from datetime import datetime
from uuid import uuid4

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.exceptions import (
    AppError,
    ServiceValidationError,
    NotFoundError,
    TransportError,
    StoreError,
)

logger = logging.getLogger("foodsense.middleware")


# ============================================================================
# Helper Functions
# ============================================================================


def error_response(status_code: int, code: str, message, details=None) -> JSONResponse:
    error = {"code": code, "message": message}
    if details:
        error["details"] = details
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "timestamp": datetime.utcnow().isoformat(),
        },
    )


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all HTTP requests and responses"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid4())
        request.state.request_id = request_id

        logger.info(
            "Request started",
            extra={
                "request_id": request_id,
                "method": request.method,
                "url": str(request.url),
                "client": request.client.host if request.client else None,
            },
        )

        start_time = time.time()

        try:
            response: Response = await call_next(request)
            process_time = time.time() - start_time

            logger.info(
                "Request completed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "url": str(request.url),
                    "status_code": response.status_code,
                    "process_time": f"{process_time:.4f}s",
                },
            )

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"

            return response

        except Exception as exc:
            process_time = time.time() - start_time
            logger.error(
                "Request failed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "url": str(request.url),
                    "error": str(exc),
                    "process_time": f"{process_time:.4f}s",
                },
                exc_info=True,
            )
            raise


# ============================================================================
# Error Handlers
# ============================================================================


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors"""
    logger.warning(f"Validation error on {request.url}: {exc.errors()}")

    return error_response(
        status.HTTP_422_UNPROCESSABLE_CONTENT,
        "VALIDATION_ERROR",
        "Request validation failed",
        details=jsonable_encoder(exc.errors()),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    logger.warning(f"HTTP {exc.status_code} on {request.url}: {exc.detail}")

    return error_response(exc.status_code, f"HTTP_{exc.status_code}", exc.detail)


async def service_validation_exception_handler(
    request: Request, exc: ServiceValidationError
):
    """Handle service validation errors"""
    logger.warning(f"Service validation error on {request.url}: {str(exc)}")

    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "SERVICE_VALIDATION_ERROR",
        str(exc),
        details=exc.details,
    )


async def not_found_exception_handler(request: Request, exc: NotFoundError):
    """Handle not found errors"""
    logger.warning(f"Resource not found on {request.url}: {str(exc)}")

    return error_response(status.HTTP_404_NOT_FOUND, "NOT_FOUND", str(exc))


async def transport_exception_handler(request: Request, exc: TransportError):
    """Handle mail transport failures"""
    logger.error(f"Mail transport failure on {request.url}: {str(exc)}")

    return error_response(
        exc.http_status, "TRANSPORT_ERROR", "Failed to send email"
    )


async def store_exception_handler(request: Request, exc: StoreError):
    """Handle product store outages"""
    logger.error(f"Product store failure on {request.url}: {str(exc)}")

    return error_response(
        exc.http_status, "STORE_UNAVAILABLE", "Product store is unavailable"
    )


async def app_exception_handler(request: Request, exc: AppError):
    """Fallback for application errors without a dedicated handler"""
    logger.error(f"Application error on {request.url}: {str(exc)}")

    return error_response(exc.http_status, exc.code or "APPLICATION_ERROR", str(exc))


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.exception(f"Unexpected error on {request.url}: {str(exc)}")

    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        "An unexpected error occurred",
    )
