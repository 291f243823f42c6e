"""Daily water intake counter.

The count is bumped locally first, capped at the daily ceiling, and the
service is notified afterwards.  A failed notification is logged and the
local count kept; once the ceiling is reached the service is not called.
"""

from __future__ import annotations

import logging

from herizon.tracking.client import TrackingRecordClient
from herizon.tracking.config_loader import get_tracker_config
from herizon.tracking.endpoints import EndpointSpec
from herizon.tracking.errors import TrackingServiceError

logger = logging.getLogger("herizon.tracking.water")


class WaterIntakeCounter:
    def __init__(
        self,
        endpoint: EndpointSpec,
        client: TrackingRecordClient | None = None,
        count: int = 0,
        ceiling: int | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._client = client or TrackingRecordClient()
        self._ceiling = ceiling if ceiling is not None else get_tracker_config().water.daily_ceiling
        self._count = max(0, min(count, self._ceiling))

    @property
    def count(self) -> int:
        return self._count

    @property
    def ceiling(self) -> int:
        return self._ceiling

    async def increment(self, user_id: str, credential: str) -> int:
        """Log one glass.  Returns the new count."""
        if self._count >= self._ceiling:
            logger.debug("Water intake already at ceiling (%d) for user %s", self._ceiling, user_id)
            return self._count

        self._count = min(self._count + 1, self._ceiling)
        try:
            await self._client.increment_water_intake(self._endpoint, user_id, credential)
        except TrackingServiceError as exc:
            logger.warning("Error updating water intake for user %s: %s", user_id, exc)
        return self._count
