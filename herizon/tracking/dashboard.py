"""Per-user dashboard state: the current record snapshot and its insights.

Each refresh runs the fallback cascade and replaces the user's snapshot as a
whole; nothing ever patches fields of a stored snapshot.  Water counters are
re-seeded from each new snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Sequence

from herizon.models.base import utc_now
from herizon.tracking.analytics import Insights, derive_insights
from herizon.tracking.cascade import AcquisitionResult, FallbackCascade
from herizon.tracking.client import TrackingRecordClient
from herizon.tracking.config_loader import TrackerConfig, get_tracker_config
from herizon.tracking.endpoints import EndpointSpec
from herizon.tracking.water import WaterIntakeCounter

logger = logging.getLogger("herizon.tracking.dashboard")


@dataclass(frozen=True)
class DashboardSnapshot:
    acquisition: AcquisitionResult
    insights: Insights
    fetched_at: datetime = field(default_factory=utc_now)


class DashboardService:
    """Owns the latest snapshot per user.

    Usage::

        service = DashboardService(build_endpoint_registry())
        snapshot = await service.refresh(user.user_id, token)
        await service.log_water(user.user_id, token)
    """

    def __init__(
        self,
        endpoints: Sequence[EndpointSpec],
        client: TrackingRecordClient | None = None,
        config: TrackerConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if not endpoints:
            raise ValueError("DashboardService needs at least one endpoint")
        self._endpoints = tuple(endpoints)
        self._client = client or TrackingRecordClient()
        self._config = config or get_tracker_config()
        self._cascade = FallbackCascade(self._client, self._config.acquisition.synthetic)
        self._clock = clock
        self._water_endpoint = EndpointSpec(
            self._endpoints[0].base_address,
            self._config.water.update_timeout_ms,
            name="water",
        )
        self._snapshots: dict[str, DashboardSnapshot] = {}
        self._water: dict[str, WaterIntakeCounter] = {}

    @property
    def endpoints(self) -> tuple[EndpointSpec, ...]:
        return self._endpoints

    def snapshot(self, user_id: str) -> DashboardSnapshot | None:
        return self._snapshots.get(user_id)

    async def refresh(self, user_id: str, credential: str) -> DashboardSnapshot:
        """Acquire a fresh record and derive its insights.

        Raises:
            InvalidRecord: If the acquired record cannot be analysed.  The
                previous snapshot, if any, is left in place.
        """
        now = self._clock()
        acquisition = await self._cascade.acquire(self._endpoints, user_id, credential, now=now)
        insights = derive_insights(acquisition.record, now, self._config.analytics)

        snapshot = DashboardSnapshot(acquisition=acquisition, insights=insights, fetched_at=now)
        self._snapshots[user_id] = snapshot
        self._water[user_id] = WaterIntakeCounter(
            self._water_endpoint,
            client=self._client,
            count=acquisition.water_intake_count,
            ceiling=self._config.water.daily_ceiling,
        )
        logger.info(
            "Dashboard refreshed for user %s from %s (cycle day %d)",
            user_id,
            acquisition.source.value,
            insights.cycle_day,
        )
        return snapshot

    def water_counter(self, user_id: str) -> WaterIntakeCounter:
        counter = self._water.get(user_id)
        if counter is None:
            counter = WaterIntakeCounter(
                self._water_endpoint, client=self._client, ceiling=self._config.water.daily_ceiling
            )
            self._water[user_id] = counter
        return counter

    async def log_water(self, user_id: str, credential: str) -> WaterIntakeCounter:
        counter = self.water_counter(user_id)
        await counter.increment(user_id, credential)
        return counter
