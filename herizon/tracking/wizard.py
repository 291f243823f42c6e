"""Five-step intake wizard.

    CYCLE_INFO → MOOD → SYMPTOMS → SLEEP → REVIEW

Navigation is linear.  ``NEXT`` always moves one step forward (no field is
required to advance), ``BACK`` moves one step back, and both are no-ops at
the ends.  Submission is accepted from SLEEP or REVIEW, posts the whole draft
in one request, and on success lands on REVIEW with the wizard complete.
A failed submission leaves the step and the draft untouched so the user can
retry.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Any

from herizon.models.tracking import MoodSeverity, SleepQuality, SymptomSeverity, WizardDraft
from herizon.tracking.client import SubmissionClient
from herizon.tracking.guidance import TipRule, generate_tips

logger = logging.getLogger("herizon.tracking.wizard")


class WizardStep(IntEnum):
    CYCLE_INFO = 0
    MOOD = 1
    SYMPTOMS = 2
    SLEEP = 3
    REVIEW = 4


class WizardEvent(str, Enum):
    next = "next"
    back = "back"


def _build_transitions() -> dict[tuple[WizardStep, WizardEvent], WizardStep]:
    table: dict[tuple[WizardStep, WizardEvent], WizardStep] = {}
    steps = list(WizardStep)
    for i, step in enumerate(steps):
        table[(step, WizardEvent.next)] = steps[min(i + 1, len(steps) - 1)]
        table[(step, WizardEvent.back)] = steps[max(i - 1, 0)]
    return table


TRANSITIONS = _build_transitions()
SUBMITTABLE_STEPS = frozenset({WizardStep.SLEEP, WizardStep.REVIEW})


class WizardClosedError(RuntimeError):
    """The wizard was completed or discarded; its draft is gone."""


class InvalidTransition(ValueError):
    """The requested action is not allowed from the current step."""


class IntakeWizard:
    """State machine holding a WizardDraft across the intake steps.

    Usage::

        wizard = IntakeWizard(SubmissionClient(primary_endpoint))
        wizard.set_cycle_info(cycle_duration_days=28, last_period_start_date=date(2026, 2, 1))
        wizard.advance()
        ...
        tips = wizard.tips()
        await wizard.submit(user.user_id, token)
    """

    def __init__(
        self,
        submission_client: SubmissionClient | None = None,
        draft: WizardDraft | None = None,
    ) -> None:
        self._submission_client = submission_client
        self._draft: WizardDraft | None = draft or WizardDraft()
        self._step = WizardStep.CYCLE_INFO
        self._complete = False
        self._submitting = False

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def step(self) -> WizardStep:
        return self._step

    @property
    def complete(self) -> bool:
        return self._complete

    @property
    def draft(self) -> WizardDraft:
        if self._draft is None:
            raise WizardClosedError("Intake wizard has no draft (completed or discarded)")
        return self._draft

    @property
    def can_go_back(self) -> bool:
        return self._step > WizardStep.CYCLE_INFO

    @property
    def can_go_next(self) -> bool:
        return self._step < WizardStep.REVIEW

    @property
    def can_submit(self) -> bool:
        return (
            self._draft is not None
            and not self._submitting
            and self._step in SUBMITTABLE_STEPS
        )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _fire(self, event: WizardEvent) -> WizardStep:
        self.draft  # raises WizardClosedError once completed or discarded
        target = TRANSITIONS[(self._step, event)]
        if target != self._step:
            logger.debug("Wizard %s: %s → %s", event.value, self._step.name, target.name)
        self._step = target
        return target

    def advance(self) -> WizardStep:
        return self._fire(WizardEvent.next)

    def back(self) -> WizardStep:
        return self._fire(WizardEvent.back)

    # ------------------------------------------------------------------
    # Step handlers
    # ------------------------------------------------------------------

    def set_cycle_info(
        self,
        cycle_duration_days: int | None = None,
        last_period_start_date: date | None = None,
        last_period_duration_days: int | None = None,
    ) -> WizardDraft:
        """Update the cycle fields that were provided; others are kept."""
        draft = self.draft
        if cycle_duration_days is not None:
            draft.cycle_duration_days = cycle_duration_days
        if last_period_start_date is not None:
            draft.last_period_start_date = last_period_start_date
        if last_period_duration_days is not None:
            draft.last_period_duration_days = last_period_duration_days
        return draft

    def toggle_mood(self, mood: str) -> list[str]:
        draft = self.draft
        if mood in draft.mood_types:
            draft.mood_types = [m for m in draft.mood_types if m != mood]
        else:
            draft.mood_types = [*draft.mood_types, mood]
        return draft.mood_types

    def set_mood_severity(self, severity: MoodSeverity | str) -> None:
        self.draft.mood_severity = severity

    def set_mood_date(self, observed: date) -> None:
        self.draft.mood_observed_date = observed

    def toggle_symptom(self, symptom: str) -> list[str]:
        """Select or deselect a symptom; deselecting also clears its severity."""
        draft = self.draft
        if symptom in draft.symptoms:
            draft.symptoms = [s for s in draft.symptoms if s != symptom]
            draft.symptom_severities = {
                k: v for k, v in draft.symptom_severities.items() if k != symptom
            }
        else:
            draft.symptoms = [*draft.symptoms, symptom]
        return draft.symptoms

    def set_symptom_severity(self, symptom: str, severity: SymptomSeverity | str) -> None:
        draft = self.draft
        draft.symptom_severities = {**draft.symptom_severities, symptom: severity}

    def set_symptom_date(self, observed: date) -> None:
        self.draft.symptom_observed_date = observed

    def set_sleep(
        self,
        duration_hours: Decimal | float | None = None,
        quality: SleepQuality | str | None = None,
    ) -> None:
        draft = self.draft
        if duration_hours is not None:
            draft.sleep_duration_hours = duration_hours
        if quality is not None:
            draft.sleep_quality = quality

    # ------------------------------------------------------------------
    # Review / submission
    # ------------------------------------------------------------------

    def tips(self, rules: tuple[TipRule, ...] | None = None) -> list[str]:
        """Advisory tips for the current draft, shown on the review step."""
        return generate_tips(self.draft, rules)

    async def submit(self, user_id: str, credential: str) -> dict[str, Any]:
        """Submit the draft in one request.

        Returns:
            The service acknowledgement.

        Raises:
            InvalidTransition: If called outside SLEEP / REVIEW, or while an
                               earlier submit is still in flight.
            SubmissionError:   If the service rejected or never received the
                               draft.  Step and draft are unchanged.
        """
        draft = self.draft
        if self._step not in SUBMITTABLE_STEPS:
            raise InvalidTransition(f"Cannot submit from step {self._step.name}")
        if self._submitting:
            raise InvalidTransition("Submission already in progress")
        if self._submission_client is None:
            raise RuntimeError("IntakeWizard has no SubmissionClient configured")

        self._submitting = True
        try:
            ack = await self._submission_client.submit(draft, user_id, credential)
        finally:
            self._submitting = False

        self._step = WizardStep.REVIEW
        self._complete = True
        self._draft = None
        logger.info("Intake wizard completed for user %s", user_id)
        return ack

    def discard(self) -> None:
        """Drop the draft without submitting anything."""
        self._draft = None
        logger.debug("Intake wizard draft discarded")
