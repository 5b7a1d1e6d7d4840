"""
Pytest configuration and shared fixtures.

Ensures the project root is in sys.path for imports and points the global
settings at a throwaway database before the application is imported.
"""

import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root to sys.path so we can import domain, services, etc.
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

from domain.models import init_database  # noqa: E402
from services.notifier import Notifier  # noqa: E402
from services.notification_pipeline import NotificationPipeline  # noqa: E402
from test_fixtures import (  # noqa: E402
    InMemoryProductStore,
    RecordingTransport,
    make_settings,
)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def store():
    return InMemoryProductStore()


@pytest.fixture
def pipeline(store, transport, settings):
    notifier = Notifier(transport, sender=settings.sender_address)
    return NotificationPipeline(store, notifier, settings)


@pytest.fixture
def session_factory():
    """
    Session factory bound to a fresh in-memory SQLite database.

    StaticPool keeps the single connection alive so worker threads see the
    same database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_database(bind=engine)
    try:
        yield sessionmaker(bind=engine, expire_on_commit=False)
    finally:
        engine.dispose()
