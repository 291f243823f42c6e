"""Ordered fallback acquisition of a user's tracking record.

Endpoints are tried strictly one after another, never raced, so total
worst-case latency is the sum of the tier timeouts.  The first success wins.
If every endpoint fails the caller still gets a usable record: a synthetic
sample, tagged as such and accompanied by an advisory explaining why.

Advisory priority when everything failed:

    1. any Unauthorized  → the user must sign in again
    2. any Timeout       → connectivity is degraded (timed-out endpoints named)
    3. otherwise         → sample data is being shown
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Sequence

from herizon.models.tracking import TrackingRecord
from herizon.tracking.client import TrackingRecordClient
from herizon.tracking.config_loader import SyntheticRecordConfig, get_tracker_config
from herizon.tracking.endpoints import EndpointSpec, RecordSource, tier_for_index
from herizon.tracking.errors import ErrorKind, TrackingServiceError

logger = logging.getLogger("herizon.tracking.cascade")

AUTH_FAILED_ADVISORY = "Authentication failed. Please sign in again."
_SAMPLE_DATA_SUFFIX = (
    "Using sample data for demonstration purposes. "
    "Please check your internet connection and try again later."
)


@dataclass(frozen=True)
class AttemptOutcome:
    """One endpoint attempt within a cascade run."""

    endpoint: EndpointSpec
    source: RecordSource
    error: ErrorKind | None = None
    detail: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class AcquisitionResult:
    """Outcome of one cascade run.

    Attributes:
        record:             The record to display (fetched or synthetic).
        source:             Tier that produced the record.
        advisory:           Degradation notice, None on success.
        water_intake_count: Starting value for the water tracker.
        needs_intake:       True when the service reported no record for the
                            user; the presentation should open the intake
                            wizard.
        attempts:           Every endpoint tried, in order.
    """

    record: TrackingRecord
    source: RecordSource
    advisory: str | None = None
    water_intake_count: int = 0
    needs_intake: bool = False
    attempts: tuple[AttemptOutcome, ...] = field(default_factory=tuple)

    @property
    def is_synthetic(self) -> bool:
        return self.source is RecordSource.synthetic


def synthetic_record(now: datetime, defaults: SyntheticRecordConfig | None = None) -> TrackingRecord:
    """Build the plausible sample record shown when no endpoint answers."""
    d = defaults or get_tracker_config().acquisition.synthetic
    today = now.date()
    return TrackingRecord(
        cycle_duration_days=d.cycle_duration_days,
        last_period_start_date=today - timedelta(days=d.days_since_period_start),
        last_period_duration_days=d.period_duration_days,
        mood_types=frozenset({"Happy", "Anxious", "Irritable"}),
        mood_severity="medium",
        mood_observed_date=today,
        symptoms=frozenset({"Cramps", "Bloating", "Headache"}),
        symptom_severities={"Cramps": "Severe", "Bloating": "Moderate", "Headache": "Mild"},
        symptom_observed_date=today,
        sleep_duration_hours=Decimal(str(d.sleep_duration_hours)),
        sleep_quality=d.sleep_quality,
        current_phase=d.phase,
        water_intake_count=0,
    )


def build_advisory(attempts: Sequence[AttemptOutcome]) -> str:
    """Pick the degradation notice for a run in which every endpoint failed."""
    kinds = {a.error for a in attempts}
    if ErrorKind.unauthorized in kinds:
        return AUTH_FAILED_ADVISORY
    if ErrorKind.timeout in kinds:
        timed_out = ", ".join(
            a.endpoint.base_address for a in attempts if a.error is ErrorKind.timeout
        )
        return f"Unable to connect to the server ({timed_out}). Connection timed out. {_SAMPLE_DATA_SUFFIX}"
    addresses = ", ".join(a.endpoint.base_address for a in attempts)
    if addresses:
        return f"Unable to connect to the server ({addresses}). {_SAMPLE_DATA_SUFFIX}"
    return _SAMPLE_DATA_SUFFIX


class FallbackCascade:
    """Drive TrackingRecordClient across an ordered endpoint list.

    Usage::

        cascade = FallbackCascade(TrackingRecordClient())
        result = await cascade.acquire(build_endpoint_registry(), user.user_id, token)
        if result.needs_intake:
            ...  # send the user to the intake wizard
    """

    def __init__(
        self,
        client: TrackingRecordClient | None = None,
        synthetic_defaults: SyntheticRecordConfig | None = None,
    ) -> None:
        self._client = client or TrackingRecordClient()
        self._synthetic_defaults = synthetic_defaults

    async def acquire(
        self,
        endpoints: Sequence[EndpointSpec],
        user_id: str,
        credential: str,
        now: datetime | None = None,
    ) -> AcquisitionResult:
        """Fetch the record from the first endpoint that answers.

        Never raises for service failures; always returns a usable record.

        Args:
            endpoints:  Candidate endpoints, most trusted first.
            user_id:    Identity-provider user ID.
            credential: Bearer token for the user.
            now:        Reference instant for the synthetic record.
        """
        attempts: list[AttemptOutcome] = []
        count = len(endpoints)

        for index, endpoint in enumerate(endpoints):
            source = tier_for_index(index, count)
            logger.info("Attempting to fetch data from %s URL: %s", source.value, endpoint.base_address)
            try:
                record = await self._client.fetch(endpoint, user_id, credential)
            except TrackingServiceError as exc:
                attempts.append(
                    AttemptOutcome(endpoint, source, error=exc.kind, detail=exc.detail or str(exc))
                )
                logger.warning(
                    "Fetch from %s failed (%s), trying next endpoint",
                    endpoint.base_address,
                    exc.kind.value,
                )
                continue

            attempts.append(AttemptOutcome(endpoint, source))
            return AcquisitionResult(
                record=record,
                source=source,
                water_intake_count=record.water_intake_count,
                attempts=tuple(attempts),
            )

        advisory = build_advisory(attempts)
        needs_intake = any(a.error is ErrorKind.not_found for a in attempts)
        logger.warning(
            "All %d endpoints failed for user %s, using sample data", count, user_id
        )
        return AcquisitionResult(
            record=synthetic_record(now or datetime.now(timezone.utc), self._synthetic_defaults),
            source=RecordSource.synthetic,
            advisory=advisory,
            water_intake_count=0,
            needs_intake=needs_intake,
            attempts=tuple(attempts),
        )
