"""Health check and utility routes"""

from fastapi import APIRouter, Request
import logging

from app.config import settings

router = APIRouter(tags=["Health"])
logger = logging.getLogger("foodsense.api.health")


@router.get("/health-check")
def health_check(request: Request):
    """Basic health check endpoint, including the daily scheduler state"""
    scheduler = getattr(request.app.state, "scheduler", None)
    next_run = scheduler.next_run_time() if scheduler is not None else None
    return {
        "status": "ok",
        "service": settings.app_name,
        "scheduler": "running" if scheduler is not None and scheduler.running else "stopped",
        "next_expiry_check": next_run.isoformat() if next_run else None,
    }
