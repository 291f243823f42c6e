"""Pydantic models for cycle tracking: the service's tracking record and the
intake wizard's draft.

Field names are Pythonic; the tracking service's camelCase JSON names are
kept as aliases so payloads round-trip unchanged.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import ConfigDict, Field, computed_field, field_serializer, field_validator

from herizon.models.base import HerizonBase, coerce_date


# ---------- Enums ----------

class _LenientEnum(str, Enum):
    """String enum that matches values case-insensitively."""

    @classmethod
    def _missing_(cls, value: object) -> Any:
        if isinstance(value, str):
            needle = value.strip().lower()
            for member in cls:
                if member.value.lower() == needle:
                    return member
        return None


class MoodSeverity(_LenientEnum):
    low = "low"
    medium = "medium"
    high = "high"

    @classmethod
    def _missing_(cls, value: object) -> Any:
        # Older records were written with "Moderate"
        if isinstance(value, str) and value.strip().lower() == "moderate":
            return cls.medium
        return super()._missing_(value)


class SymptomSeverity(_LenientEnum):
    none = "None"
    mild = "Mild"
    moderate = "Moderate"
    severe = "Severe"


class SleepQuality(_LenientEnum):
    poor = "Poor"
    fair = "Fair"
    good = "Good"
    excellent = "Excellent"


class CyclePhase(_LenientEnum):
    follicular = "Follicular"
    ovulation = "Ovulation"
    luteal = "Luteal"
    menstrual = "Menstrual"


# Choices offered by the intake wizard.  Records may carry other values.
MOOD_OPTIONS: tuple[str, ...] = ("Happy", "Sad", "Calm", "Angry", "Tired", "Energized")
SYMPTOM_OPTIONS: tuple[str, ...] = (
    "Lower Abdomen Cramps",
    "Back Pain",
    "Bloating",
    "Fatigue",
    "Headaches",
    "Nausea",
    "Sleep Disruption",
    "Digestive Issues",
)


def predict_next_period(last_period_start: date, cycle_duration_days: int) -> date:
    """Next period start = last period start + cycle length."""
    return last_period_start + timedelta(days=cycle_duration_days)


_DATE_FIELDS = (
    "last_period_start_date",
    "mood_observed_date",
    "symptom_observed_date",
)
_BLANKABLE_FIELDS = ("mood_severity", "sleep_quality", "sleep_duration_hours")


def _decimal_as_number(value: Decimal | None) -> float | None:
    return None if value is None else float(value)


# ---------- Tracking record ----------

class TrackingRecord(HerizonBase):
    """Immutable snapshot of one user's tracking data, as served by the
    tracking service.

    ``next_period_predicted_date`` is always derived from the last period
    start and the cycle length; any value sent by the service is ignored.
    ``cycle_duration_days`` is deliberately not range-checked here, the
    analytics layer rejects non-positive lengths with ``InvalidRecord``.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        frozen=True,
    )

    cycle_duration_days: int = Field(alias="cycleDuration")
    last_period_start_date: date = Field(alias="lastPeriodStart")
    last_period_duration_days: int = Field(alias="lastPeriodDuration")
    mood_types: frozenset[str] = Field(default_factory=frozenset, alias="moodTypes")
    mood_severity: MoodSeverity | None = Field(default=None, alias="moodSeverity")
    mood_observed_date: date | None = Field(default=None, alias="moodDate")
    symptoms: frozenset[str] = Field(default_factory=frozenset)
    symptom_severities: dict[str, SymptomSeverity] = Field(
        default_factory=dict, alias="symptomSeverities"
    )
    symptom_observed_date: date | None = Field(default=None, alias="symptomDate")
    sleep_duration_hours: Decimal | None = Field(
        default=None, ge=0, le=24, alias="sleepDuration"
    )
    sleep_quality: SleepQuality | None = Field(default=None, alias="sleepQuality")
    current_phase: CyclePhase | None = Field(default=None, alias="currentPhase")
    water_intake_count: int = Field(default=0, ge=0, alias="waterIntakeCount")

    @field_validator(*_DATE_FIELDS, mode="before")
    @classmethod
    def _truncate_datetimes(cls, value: Any) -> Any:
        return coerce_date(value)

    @field_validator(*_BLANKABLE_FIELDS, "current_phase", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_validator("water_intake_count", mode="before")
    @classmethod
    def _missing_count_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_serializer("sleep_duration_hours")
    def _hours_as_number(self, value: Decimal | None) -> float | None:
        return _decimal_as_number(value)

    @computed_field(alias="nextPeriodPrediction")  # type: ignore[prop-decorator]
    @property
    def next_period_predicted_date(self) -> date:
        return predict_next_period(self.last_period_start_date, self.cycle_duration_days)


# ---------- Wizard draft ----------

class WizardDraft(HerizonBase):
    """Mutable accumulator for the five intake steps.

    Every field is optional because forward navigation never blocks on
    missing input.  The predicted next period is recomputed on every read so
    it follows edits to the last period start or the cycle length.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    cycle_duration_days: int | None = Field(default=None, alias="cycleDuration")
    last_period_start_date: date | None = Field(default=None, alias="lastPeriodStart")
    last_period_duration_days: int | None = Field(default=None, alias="lastPeriodDuration")
    mood_types: list[str] = Field(default_factory=list, alias="moodTypes")
    mood_severity: MoodSeverity | None = Field(default=None, alias="moodSeverity")
    mood_observed_date: date | None = Field(default_factory=date.today, alias="moodDate")
    symptoms: list[str] = Field(default_factory=list)
    symptom_severities: dict[str, SymptomSeverity] = Field(
        default_factory=dict, alias="symptomSeverities"
    )
    symptom_observed_date: date | None = Field(default_factory=date.today, alias="symptomDate")
    sleep_duration_hours: Decimal | None = Field(
        default=None, ge=0, le=24, alias="sleepDuration"
    )
    sleep_quality: SleepQuality | None = Field(default=None, alias="sleepQuality")

    @field_validator(*_DATE_FIELDS, mode="before")
    @classmethod
    def _truncate_datetimes(cls, value: Any) -> Any:
        return coerce_date(value)

    @field_validator(*_BLANKABLE_FIELDS, "cycle_duration_days", "last_period_duration_days", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return None if value == "" else value

    @field_serializer("sleep_duration_hours")
    def _hours_as_number(self, value: Decimal | None) -> float | None:
        return _decimal_as_number(value)

    @computed_field(alias="nextPeriodPrediction")  # type: ignore[prop-decorator]
    @property
    def next_period_predicted_date(self) -> date | None:
        if self.last_period_start_date is None or self.cycle_duration_days is None:
            return None
        return predict_next_period(self.last_period_start_date, self.cycle_duration_days)

    def to_payload(self, user_id: str) -> dict[str, Any]:
        """Serialize to the JSON body accepted by ``POST /api/period/trackerdata``."""
        payload = self.model_dump(mode="json", by_alias=True)
        payload["userId"] = user_id
        return payload
