#!/usr/bin/env python3
"""
Standalone database initialization script
Creates the product table for the configured DATABASE_URL
"""

import sys
import os
import logging

# Ensure we're using the right Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from app.config import settings
from domain.models import init_database

logger = logging.getLogger("foodsense.scripts.init_db")


def main() -> int:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()), format=settings.log_format
    )
    try:
        init_database()
    except Exception:
        logger.exception(f"Database initialization failed for {settings.database_url}")
        return 1
    logger.info(f"Database ready at {settings.database_url}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
