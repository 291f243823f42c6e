"""Health check endpoint — public, no auth required."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from herizon.config import get_settings

router = APIRouter(tags=["system"])
logger = logging.getLogger("herizon.health")


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Liveness probe. Returns 200 if the API process is up.

    Lists the tracking-service endpoints in the order they are tried.  They
    are not probed here; a cold-starting mirror can take half a minute.
    """
    settings = get_settings()
    dashboard = getattr(request.app.state, "dashboard", None)
    endpoints = [
        {"name": e.name, "base_address": e.base_address, "timeout_ms": e.timeout_ms}
        for e in (dashboard.endpoints if dashboard else ())
    ]

    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "endpoints": endpoints,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
