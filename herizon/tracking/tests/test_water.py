"""Tests for the water intake counter."""

from __future__ import annotations

import pytest

from herizon.tracking.errors import NetworkUnreachable
from herizon.tracking.water import WaterIntakeCounter
from herizon.tracking.tests.conftest import (
    PRIMARY,
    TEST_TOKEN,
    TEST_USER_ID,
    FakeRecordClient,
)


@pytest.fixture
def client() -> FakeRecordClient:
    return FakeRecordClient({})


class TestWaterIntake:
    @pytest.mark.asyncio
    async def test_increment_updates_locally_and_notifies(self, client: FakeRecordClient) -> None:
        counter = WaterIntakeCounter(PRIMARY, client, count=2, ceiling=8)
        assert await counter.increment(TEST_USER_ID, TEST_TOKEN) == 3
        assert client.water_calls == [PRIMARY.base_address]

    @pytest.mark.asyncio
    async def test_never_exceeds_ceiling(self, client: FakeRecordClient) -> None:
        counter = WaterIntakeCounter(PRIMARY, client, count=0, ceiling=8)
        for _ in range(12):
            await counter.increment(TEST_USER_ID, TEST_TOKEN)
        assert counter.count == 8
        assert len(client.water_calls) == 8

    @pytest.mark.asyncio
    @pytest.mark.parametrize("start", range(0, 9))
    async def test_ceiling_holds_from_any_start(self, client: FakeRecordClient, start: int) -> None:
        counter = WaterIntakeCounter(PRIMARY, client, count=start, ceiling=8)
        for _ in range(10):
            assert await counter.increment(TEST_USER_ID, TEST_TOKEN) <= 8
        assert counter.count == 8

    @pytest.mark.asyncio
    async def test_no_call_at_ceiling(self, client: FakeRecordClient) -> None:
        counter = WaterIntakeCounter(PRIMARY, client, count=8, ceiling=8)
        assert await counter.increment(TEST_USER_ID, TEST_TOKEN) == 8
        assert client.water_calls == []

    @pytest.mark.asyncio
    async def test_failed_notification_keeps_local_count(self, client: FakeRecordClient) -> None:
        client.water_error = NetworkUnreachable("offline", endpoint=PRIMARY.base_address)
        counter = WaterIntakeCounter(PRIMARY, client, count=4, ceiling=8)
        assert await counter.increment(TEST_USER_ID, TEST_TOKEN) == 5
        assert counter.count == 5

    def test_seed_is_clamped(self, client: FakeRecordClient) -> None:
        assert WaterIntakeCounter(PRIMARY, client, count=20, ceiling=8).count == 8
        assert WaterIntakeCounter(PRIMARY, client, count=-3, ceiling=8).count == 0

    def test_default_ceiling_from_config(self, client: FakeRecordClient) -> None:
        assert WaterIntakeCounter(PRIMARY, client).ceiling == 8
