"""Request and response schemas for the Herizon HTTP API."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import Field

from herizon.models.base import HerizonBase
from herizon.models.tracking import (
    CyclePhase,
    MoodSeverity,
    SleepQuality,
    SymptomSeverity,
    TrackingRecord,
    WizardDraft,
)
from herizon.tracking.cascade import AcquisitionResult
from herizon.tracking.endpoints import RecordSource
from herizon.tracking.errors import ErrorKind
from herizon.tracking.wizard import IntakeWizard


# ---------- Dashboard ----------

class InsightsRead(HerizonBase):
    cycle_day: int
    cycle_duration_days: int
    days_until_next_period: int
    fertile_window: bool
    pms_likely: bool
    well_rested: bool
    cycle_progress_pct: float
    phase: CyclePhase | None = None


class AttemptRead(HerizonBase):
    endpoint: str
    source: RecordSource
    error: ErrorKind | None = None


class AcquisitionRead(HerizonBase):
    record: TrackingRecord
    source: RecordSource
    advisory: str | None = None
    water_intake_count: int = 0
    needs_intake: bool = False
    is_synthetic: bool = False
    attempts: list[AttemptRead] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: AcquisitionResult) -> AcquisitionRead:
        return cls(
            record=result.record,
            source=result.source,
            advisory=result.advisory,
            water_intake_count=result.water_intake_count,
            needs_intake=result.needs_intake,
            is_synthetic=result.is_synthetic,
            attempts=[
                AttemptRead(endpoint=a.endpoint.base_address, source=a.source, error=a.error)
                for a in result.attempts
            ],
        )


class DashboardRead(HerizonBase):
    acquisition: AcquisitionRead
    insights: InsightsRead
    daily_tips: list[str]
    notification_visible: bool = False
    fetched_at: datetime


class WaterIntakeRead(HerizonBase):
    count: int
    ceiling: int
    at_ceiling: bool


class MythRead(HerizonBase):
    myth: str
    fact: str


# ---------- Alerts ----------

class SosRequest(HerizonBase):
    sender_name: str | None = None


class SosResult(HerizonBase):
    relays_notified: int


# ---------- Intake wizard ----------

class WizardStateRead(HerizonBase):
    step: int
    step_name: str
    complete: bool
    can_go_back: bool
    can_go_next: bool
    can_submit: bool
    draft: WizardDraft | None = None

    @classmethod
    def from_wizard(cls, wizard: IntakeWizard) -> WizardStateRead:
        return cls(
            step=int(wizard.step),
            step_name=wizard.step.name,
            complete=wizard.complete,
            can_go_back=wizard.can_go_back,
            can_go_next=wizard.can_go_next,
            can_submit=wizard.can_submit,
            draft=None if wizard.complete else wizard.draft,
        )


class CycleInfoUpdate(HerizonBase):
    cycle_duration_days: int | None = Field(default=None, gt=0)
    last_period_start_date: date | None = None
    last_period_duration_days: int | None = Field(default=None, gt=0)


class MoodUpdate(HerizonBase):
    """``toggle`` flips each listed mood on or off."""

    toggle: list[str] = Field(default_factory=list)
    severity: MoodSeverity | None = None
    observed_date: date | None = None


class SymptomsUpdate(HerizonBase):
    toggle: list[str] = Field(default_factory=list)
    severities: dict[str, SymptomSeverity] = Field(default_factory=dict)
    observed_date: date | None = None


class SleepUpdate(HerizonBase):
    duration_hours: Decimal | None = Field(default=None, ge=0, le=24)
    quality: SleepQuality | None = None


class TipsRead(HerizonBase):
    tips: list[str]


class SubmitResult(HerizonBase):
    complete: bool
    acknowledgement: dict[str, Any] = Field(default_factory=dict)
