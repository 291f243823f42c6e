"""Dashboard endpoints: current record, insights, water intake, myths."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request

from herizon.dependencies import CurrentUser, Dashboard
from herizon.models.api import (
    AcquisitionRead,
    DashboardRead,
    InsightsRead,
    MythRead,
    WaterIntakeRead,
)
from herizon.models.base import ErrorDetail
from herizon.tracking.content import MYTHS, daily_tips
from herizon.tracking.errors import InvalidRecord

router = APIRouter(prefix="/dashboard", tags=["dashboard"])
logger = logging.getLogger("herizon.dashboard")


@router.get("", response_model=DashboardRead, responses={422: {"model": ErrorDetail}})
async def get_dashboard(request: Request, user: CurrentUser, dashboard: Dashboard) -> Any:
    try:
        snapshot = await dashboard.refresh(user.user_id, await user.get_credential())
    except InvalidRecord as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    ticker = getattr(request.app.state, "notifications", None)
    return DashboardRead(
        acquisition=AcquisitionRead.from_result(snapshot.acquisition),
        insights=InsightsRead.model_validate(snapshot.insights),
        daily_tips=daily_tips(),
        notification_visible=bool(ticker and ticker.visible),
        fetched_at=snapshot.fetched_at,
    )


@router.post("/water", response_model=WaterIntakeRead)
async def log_water(user: CurrentUser, dashboard: Dashboard) -> Any:
    counter = await dashboard.log_water(user.user_id, await user.get_credential())
    return WaterIntakeRead(
        count=counter.count,
        ceiling=counter.ceiling,
        at_ceiling=counter.count >= counter.ceiling,
    )


@router.get("/myths", response_model=list[MythRead])
async def list_myths(user: CurrentUser) -> Any:
    return [MythRead(myth=m.myth, fact=m.fact) for m in MYTHS]
