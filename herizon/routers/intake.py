"""Intake wizard endpoints.

One wizard session per signed-in user, held in memory until it is submitted
or discarded.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from herizon.dependencies import CurrentUser, WizardSessions
from herizon.models.api import (
    CycleInfoUpdate,
    MoodUpdate,
    SleepUpdate,
    SubmitResult,
    SymptomsUpdate,
    TipsRead,
    WizardStateRead,
)
from herizon.models.base import ErrorDetail
from herizon.tracking.errors import SubmissionError
from herizon.tracking.wizard import IntakeWizard, InvalidTransition, WizardClosedError

router = APIRouter(prefix="/intake", tags=["intake"])
logger = logging.getLogger("herizon.intake")


def _open_wizard(sessions: WizardSessions, user_id: str) -> IntakeWizard:
    wizard = sessions.get(user_id)
    if wizard is None:
        raise HTTPException(status_code=404, detail="No intake in progress")
    if wizard.complete:
        raise HTTPException(status_code=409, detail="Intake already submitted")
    return wizard


@router.post("", response_model=WizardStateRead, status_code=201)
async def start_intake(user: CurrentUser, sessions: WizardSessions) -> Any:
    return WizardStateRead.from_wizard(sessions.start(user.user_id))


@router.get("", response_model=WizardStateRead)
async def get_intake(user: CurrentUser, sessions: WizardSessions) -> Any:
    return WizardStateRead.from_wizard(_open_wizard(sessions, user.user_id))


@router.patch("/cycle", response_model=WizardStateRead)
async def update_cycle(user: CurrentUser, sessions: WizardSessions, body: CycleInfoUpdate) -> Any:
    wizard = _open_wizard(sessions, user.user_id)
    wizard.set_cycle_info(
        cycle_duration_days=body.cycle_duration_days,
        last_period_start_date=body.last_period_start_date,
        last_period_duration_days=body.last_period_duration_days,
    )
    return WizardStateRead.from_wizard(wizard)


@router.patch("/mood", response_model=WizardStateRead)
async def update_mood(user: CurrentUser, sessions: WizardSessions, body: MoodUpdate) -> Any:
    wizard = _open_wizard(sessions, user.user_id)
    for mood in body.toggle:
        wizard.toggle_mood(mood)
    if body.severity is not None:
        wizard.set_mood_severity(body.severity)
    if body.observed_date is not None:
        wizard.set_mood_date(body.observed_date)
    return WizardStateRead.from_wizard(wizard)


@router.patch("/symptoms", response_model=WizardStateRead)
async def update_symptoms(
    user: CurrentUser, sessions: WizardSessions, body: SymptomsUpdate
) -> Any:
    wizard = _open_wizard(sessions, user.user_id)
    for symptom in body.toggle:
        wizard.toggle_symptom(symptom)
    for symptom, severity in body.severities.items():
        if symptom not in wizard.draft.symptoms:
            raise HTTPException(
                status_code=400, detail=f"Symptom not selected: {symptom}"
            )
        wizard.set_symptom_severity(symptom, severity)
    if body.observed_date is not None:
        wizard.set_symptom_date(body.observed_date)
    return WizardStateRead.from_wizard(wizard)


@router.patch("/sleep", response_model=WizardStateRead)
async def update_sleep(user: CurrentUser, sessions: WizardSessions, body: SleepUpdate) -> Any:
    wizard = _open_wizard(sessions, user.user_id)
    wizard.set_sleep(duration_hours=body.duration_hours, quality=body.quality)
    return WizardStateRead.from_wizard(wizard)


@router.post("/next", response_model=WizardStateRead)
async def next_step(user: CurrentUser, sessions: WizardSessions) -> Any:
    wizard = _open_wizard(sessions, user.user_id)
    wizard.advance()
    return WizardStateRead.from_wizard(wizard)


@router.post("/back", response_model=WizardStateRead)
async def previous_step(user: CurrentUser, sessions: WizardSessions) -> Any:
    wizard = _open_wizard(sessions, user.user_id)
    wizard.back()
    return WizardStateRead.from_wizard(wizard)


@router.get("/tips", response_model=TipsRead)
async def get_tips(user: CurrentUser, sessions: WizardSessions) -> Any:
    return TipsRead(tips=_open_wizard(sessions, user.user_id).tips())


@router.post(
    "/submit",
    response_model=SubmitResult,
    responses={409: {"model": ErrorDetail}, 502: {"model": ErrorDetail}},
)
async def submit_intake(user: CurrentUser, sessions: WizardSessions) -> Any:
    wizard = _open_wizard(sessions, user.user_id)
    try:
        ack = await wizard.submit(user.user_id, await user.get_credential())
    except InvalidTransition as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except WizardClosedError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except SubmissionError as exc:
        logger.warning("Intake submission failed for user %s (%s)", user.user_id, exc.kind.value)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    sessions.finish(user.user_id)
    return SubmitResult(complete=wizard.complete, acknowledgement=ack)


@router.delete("", status_code=204)
async def discard_intake(user: CurrentUser, sessions: WizardSessions) -> None:
    if not sessions.discard(user.user_id):
        raise HTTPException(status_code=404, detail="No intake in progress")
