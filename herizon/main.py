"""Herizon API — FastAPI application entry point.

Run locally:
    uvicorn herizon.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from herizon.config import Settings, get_settings
from herizon.middleware.clerk_auth import ClerkAuthMiddleware
from herizon.routers import alerts, dashboard, health, intake
from herizon.tracking.alerts import AlertBroadcaster
from herizon.tracking.client import SubmissionClient, TrackingRecordClient
from herizon.tracking.config_loader import get_tracker_config
from herizon.tracking.dashboard import DashboardService
from herizon.tracking.endpoints import build_endpoint_registry
from herizon.tracking.notifications import NotificationTicker
from herizon.tracking.sessions import WizardSessionStore

# ---------- Logging ----------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("herizon")


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks."""
    settings = get_settings()
    logger.info(
        "Starting Herizon API v%s [%s]",
        settings.app_version,
        settings.environment,
    )
    app.state.notifications.start()
    yield
    await app.state.notifications.stop()
    logger.info("Herizon API shut down")


# ---------- Services ----------

def _init_services(app: FastAPI, settings: Settings) -> None:
    config = get_tracker_config()
    endpoints = build_endpoint_registry(settings, config)

    app.state.dashboard = DashboardService(endpoints, TrackingRecordClient(), config)
    app.state.wizard_sessions = WizardSessionStore(SubmissionClient(endpoints[0]))
    app.state.alerts = AlertBroadcaster(
        settings.alert_relay_urls,
        timeout_ms=settings.alert_timeout_ms,
        app_name=settings.app_name,
    )
    app.state.notifications = NotificationTicker(config.notifications)


# ---------- App factory ----------

def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Herizon API",
        description=(
            "Menstrual cycle tracking — resilient record acquisition, "
            "cycle insights, and a guided intake wizard."
        ),
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    _init_services(app, settings)

    # ---------- Middleware (last added runs first) ----------

    # Clerk JWT authentication
    app.add_middleware(ClerkAuthMiddleware, settings=settings)

    # CORS wraps auth so preflight requests are answered directly
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- Health check (outside v1 prefix) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    v1_prefix = "/api/v1"

    app.include_router(dashboard.router, prefix=v1_prefix)
    app.include_router(intake.router, prefix=v1_prefix)
    app.include_router(alerts.router, prefix=v1_prefix)

    return app


app = create_app()
