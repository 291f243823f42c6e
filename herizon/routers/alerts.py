"""SOS alert endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException

from herizon.dependencies import Alerts, CurrentUser
from herizon.models.api import SosRequest, SosResult
from herizon.models.base import ErrorDetail
from herizon.tracking.errors import AlertBroadcastError

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.post("/sos", response_model=SosResult, responses={502: {"model": ErrorDetail}})
async def send_sos(user: CurrentUser, alerts: Alerts, body: SosRequest | None = None) -> Any:
    sender = (body.sender_name if body else None) or user.full_name
    try:
        notified = await alerts.broadcast(sender)
    except AlertBroadcastError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return SosResult(relays_notified=notified)
