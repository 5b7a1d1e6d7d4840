"""
FoodSense FastAPI Application
Main entry point: product list API plus the daily expiry notification job
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
import anyio
from typing import Optional

from api.routes import products, notifications, health
from api.dependencies import get_notifier
from domain.models import init_database, SessionLocal
from app.config import settings
from api.middleware import (
    RequestLoggingMiddleware,
    validation_exception_handler,
    http_exception_handler,
    service_validation_exception_handler,
    not_found_exception_handler,
    transport_exception_handler,
    store_exception_handler,
    app_exception_handler,
    general_exception_handler,
)
from app.exceptions import (
    AppError,
    ServiceValidationError,
    NotFoundError,
    TransportError,
    StoreError,
)
from services.product_store import SqlProductStore
from services.notification_pipeline import NotificationPipeline
from services.scheduler import ExpiryScheduler

# Setup logging with configured level and format
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()), format=settings.log_format
)
_logger = logging.getLogger("foodsense.main")


def build_scheduler() -> ExpiryScheduler:
    """Wire the daily job to the SQL store and the configured SMTP transport"""
    pipeline = NotificationPipeline(SqlProductStore(SessionLocal), get_notifier(), settings)
    return ExpiryScheduler(pipeline, settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup and shutdown.
    Creates the schema (with retries) and owns the daily scheduler.
    """
    last_exc: Optional[Exception] = None

    _logger.info(f"Starting FoodSense in {settings.environment.value} mode")

    for attempt in range(1, settings.db_init_attempts + 1):
        try:
            # Run blocking init in a thread to avoid blocking the event loop
            await anyio.to_thread.run_sync(init_database)
            _logger.info("Database initialization succeeded")
            break
        except Exception as exc:
            last_exc = exc
            _logger.warning(
                f"Database init attempt {attempt}/{settings.db_init_attempts} "
                f"failed: {exc}"
            )
            if attempt < settings.db_init_attempts:
                await anyio.sleep(settings.db_init_delay_sec)
            else:
                _logger.error(
                    f"Database initialization failed after {attempt} attempts"
                )
                raise

    scheduler = build_scheduler()
    app.state.scheduler = scheduler
    if settings.scheduler_enabled:
        scheduler.start()
    else:
        _logger.info("Daily expiry check disabled (SCHEDULER_ENABLED=false)")

    try:
        yield
    finally:
        _logger.info("Shutting down FoodSense")
        scheduler.stop()


# Create FastAPI application with enhanced configuration
app = FastAPI(
    title=settings.api_title,
    version=settings.app_version,
    description=settings.api_description,
    lifespan=lifespan,
    debug=settings.debug,
    openapi_url=(
        f"{settings.api_prefix}/openapi.json" if not settings.is_production() else None
    ),
    docs_url=f"{settings.api_prefix}/docs" if not settings.is_production() else None,
    redoc_url=f"{settings.api_prefix}/redoc" if not settings.is_production() else None,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add request logging middleware
app.add_middleware(RequestLoggingMiddleware)

# Register exception handlers
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(ServiceValidationError, service_validation_exception_handler)
app.add_exception_handler(NotFoundError, not_found_exception_handler)
app.add_exception_handler(TransportError, transport_exception_handler)
app.add_exception_handler(StoreError, store_exception_handler)
app.add_exception_handler(AppError, app_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Include routers
app.include_router(products.router, prefix=settings.api_prefix)
app.include_router(notifications.router, prefix=settings.api_prefix)
app.include_router(health.router, prefix=settings.api_prefix)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
