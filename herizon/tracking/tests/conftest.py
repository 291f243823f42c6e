"""Shared fixtures and fake tracking-service clients for tracking tests."""

from __future__ import annotations

import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Callable

import httpx
import pytest

from herizon.models.tracking import TrackingRecord
from herizon.tracking.client import TrackingRecordClient
from herizon.tracking.config_loader import TrackerConfig, load_tracker_config
from herizon.tracking.endpoints import EndpointSpec
from herizon.tracking.errors import TrackingServiceError

# Fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"

TEST_USER_ID = "user_2abcTESTuser"
TEST_TOKEN = "test-bearer-token"
TEST_NOW = datetime(2026, 2, 23, 12, 0, tzinfo=timezone.utc)

PRIMARY = EndpointSpec("https://api.herizon.test/", 8000, name="primary")
SECONDARY = EndpointSpec("https://Herizon.onrender.com/", 30000, name="secondary")
LOCAL = EndpointSpec("http://localhost:3000/", 5000, name="local")


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tracker_config() -> TrackerConfig:
    """Load the real tracker config for tests."""
    return load_tracker_config()


# ---------------------------------------------------------------------------
# Record fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def period_tracking_body() -> dict:
    return json.loads((FIXTURES_DIR / "period_tracking.json").read_text())


@pytest.fixture
def tracking_record(period_tracking_body: dict) -> TrackingRecord:
    return TrackingRecord.model_validate(period_tracking_body["periodTrackingData"])


def make_record(**overrides) -> TrackingRecord:
    """A valid record with sensible defaults; keyword overrides use field names."""
    values = {
        "cycle_duration_days": 28,
        "last_period_start_date": date(2026, 2, 10),
        "last_period_duration_days": 5,
        "water_intake_count": 0,
    }
    values.update(overrides)
    return TrackingRecord(**values)


@pytest.fixture
def endpoints() -> tuple[EndpointSpec, ...]:
    return (PRIMARY, SECONDARY, LOCAL)


# ---------------------------------------------------------------------------
# Fake HTTP layers
# ---------------------------------------------------------------------------


def mock_http_client(handler: Callable[[httpx.Request], object]) -> httpx.AsyncClient:
    """httpx client whose every request is answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class FakeRecordClient(TrackingRecordClient):
    """Answers fetches from a per-address script instead of the network.

    Each script value is either a TrackingRecord to return or a
    TrackingServiceError to raise.
    """

    def __init__(self, script: dict[str, TrackingRecord | TrackingServiceError]) -> None:
        super().__init__()
        self.script = script
        self.fetched: list[str] = []
        self.water_calls: list[str] = []
        self.water_error: TrackingServiceError | None = None

    async def fetch(self, endpoint: EndpointSpec, user_id: str, credential: str) -> TrackingRecord:
        self.fetched.append(endpoint.base_address)
        outcome = self.script[endpoint.base_address]
        if isinstance(outcome, TrackingServiceError):
            raise outcome
        return outcome

    async def increment_water_intake(
        self, endpoint: EndpointSpec, user_id: str, credential: str
    ) -> None:
        self.water_calls.append(endpoint.base_address)
        if self.water_error is not None:
            raise self.water_error
