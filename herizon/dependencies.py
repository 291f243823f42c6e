"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request

from herizon.config import Settings, get_settings
from herizon.tracking.alerts import AlertBroadcaster
from herizon.tracking.dashboard import DashboardService
from herizon.tracking.sessions import WizardSessionStore


@dataclass(frozen=True)
class AuthContext:
    """Signed-in user as seen by the identity provider (Clerk).

    ``credential`` is the verified bearer token; it is forwarded unchanged to
    the tracking service on the user's behalf.
    """

    user_id: str  # Clerk user ID (e.g. "user_2x...")
    credential: str
    full_name: str | None = None
    email: str | None = None
    session_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id and self.credential)

    async def get_credential(self) -> str:
        return self.credential


async def get_current_user(request: Request) -> AuthContext:
    """Extract the authenticated user from the request state.

    The Clerk auth middleware sets ``request.state.auth`` before routes run.
    """
    auth: AuthContext | None = getattr(request.state, "auth", None)
    if auth is None or not auth.is_authenticated:
        raise HTTPException(status_code=401, detail="You must be signed in to view this page.")
    return auth


def get_dashboard_service(request: Request) -> DashboardService:
    return request.app.state.dashboard


def get_wizard_sessions(request: Request) -> WizardSessionStore:
    return request.app.state.wizard_sessions


def get_alert_broadcaster(request: Request) -> AlertBroadcaster:
    return request.app.state.alerts


# Annotated shortcuts for route signatures
CurrentUser = Annotated[AuthContext, Depends(get_current_user)]
AppSettings = Annotated[Settings, Depends(get_settings)]
Dashboard = Annotated[DashboardService, Depends(get_dashboard_service)]
WizardSessions = Annotated[WizardSessionStore, Depends(get_wizard_sessions)]
Alerts = Annotated[AlertBroadcaster, Depends(get_alert_broadcaster)]
