"""
Domain enums for FoodSense application.
"""

import enum


class RunStatus(str, enum.Enum):
    """Outcome of one notification pipeline run"""

    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"
