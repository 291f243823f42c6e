"""Periodic reminder visibility ticker.

Every ``interval_seconds`` the reminder flag turns on, then off again after
``visible_seconds``.  It runs as its own asyncio task and shares no state
with acquisition, so no locking is needed.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from herizon.tracking.config_loader import NotificationConfig, get_tracker_config

logger = logging.getLogger("herizon.tracking.notifications")


class NotificationTicker:
    def __init__(
        self,
        config: NotificationConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        cfg = config or get_tracker_config().notifications
        self._interval = cfg.interval_seconds
        self._visible_for = cfg.visible_seconds
        self._sleep = sleep
        self._visible = False
        self._task: asyncio.Task | None = None

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run(self, cycles: int | None = None) -> None:
        """Toggle the flag ``cycles`` times, or forever when None."""
        done = 0
        try:
            while cycles is None or done < cycles:
                await self._sleep(self._interval)
                self._visible = True
                await self._sleep(self._visible_for)
                self._visible = False
                done += 1
        finally:
            self._visible = False

    def start(self) -> asyncio.Task:
        if not self.running:
            self._task = asyncio.create_task(self.run())
            logger.debug("Notification ticker started (every %ss)", self._interval)
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.debug("Notification ticker stopped")
