"""Tests for the reminder visibility ticker."""

from __future__ import annotations

import asyncio

import pytest

from herizon.tracking.config_loader import NotificationConfig
from herizon.tracking.notifications import NotificationTicker


class TestNotificationTicker:
    @pytest.mark.asyncio
    async def test_toggles_visibility_each_cycle(self) -> None:
        observed: list[tuple[float, bool]] = []
        ticker: NotificationTicker

        async def fake_sleep(seconds: float) -> None:
            observed.append((seconds, ticker.visible))

        ticker = NotificationTicker(NotificationConfig(30, 5), sleep=fake_sleep)
        await ticker.run(cycles=2)

        assert observed == [(30, False), (5, True), (30, False), (5, True)]
        assert not ticker.visible

    @pytest.mark.asyncio
    async def test_start_and_stop(self) -> None:
        ticker = NotificationTicker(NotificationConfig(0.01, 0.005))
        ticker.start()
        assert ticker.running
        await asyncio.sleep(0.02)
        await ticker.stop()
        assert not ticker.running
        assert not ticker.visible

    def test_defaults_from_config(self) -> None:
        ticker = NotificationTicker()
        assert ticker._interval == 30
        assert ticker._visible_for == 5
