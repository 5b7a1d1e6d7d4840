"""
Database configuration and session management.
"""

import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings

logger = logging.getLogger("foodsense.database")

# Create SQLAlchemy Base
Base = declarative_base()


def _connect_args(url: str) -> dict:
    # SQLite connections are shared with worker threads (to_thread, threadpool routes)
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# Create engine
engine = create_engine(
    settings.database_url,
    echo=settings.db_echo,
    connect_args=_connect_args(settings.database_url),
    future=True,
)

# Create session factory. Loaded products outlive their session in the pipeline.
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False, future=True)


def init_database(bind=None):
    """Initialize database schema"""
    with (bind or engine).begin() as conn:
        Base.metadata.create_all(bind=conn)
        logger.info("Database tables created successfully")


def get_db_session():
    """Get database session (for FastAPI dependency injection)"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
