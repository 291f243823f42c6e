"""Tests for the tracking-service HTTP clients and error classification."""

from __future__ import annotations

import asyncio
import json
from datetime import date

import httpx
import pytest

from herizon.models.tracking import MoodSeverity, WizardDraft
from herizon.tracking.client import SubmissionClient, TrackingRecordClient, classify_status
from herizon.tracking.endpoints import EndpointSpec
from herizon.tracking.errors import (
    ErrorKind,
    FetchTimeout,
    NetworkUnreachable,
    RecordNotFound,
    SubmissionError,
    Unauthorized,
    UnknownServiceError,
)
from herizon.tracking.tests.conftest import (
    PRIMARY,
    TEST_TOKEN,
    TEST_USER_ID,
    mock_http_client,
)


class TestClassifyStatus:
    def test_401_is_unauthorized(self) -> None:
        assert isinstance(classify_status(401, "x", ""), Unauthorized)

    @pytest.mark.parametrize("status", [400, 403, 404, 422])
    def test_other_4xx_is_not_found(self, status: int) -> None:
        err = classify_status(status, "x", "")
        assert isinstance(err, RecordNotFound)
        assert err.kind is ErrorKind.not_found

    @pytest.mark.parametrize("status", [500, 502, 503])
    def test_5xx_is_unknown(self, status: int) -> None:
        err = classify_status(status, "https://api.herizon.test/", "boom")
        assert isinstance(err, UnknownServiceError)
        assert err.detail == "boom"
        assert err.endpoint == "https://api.herizon.test/"


class TestFetch:
    @pytest.mark.asyncio
    async def test_parses_record_and_sends_bearer(self, period_tracking_body: dict) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=period_tracking_body)

        client = TrackingRecordClient(http_client=mock_http_client(handler))
        record = await client.fetch(PRIMARY, TEST_USER_ID, TEST_TOKEN)

        assert record.cycle_duration_days == 28
        assert record.last_period_start_date == date(2026, 2, 10)
        assert record.mood_severity is MoodSeverity.medium
        assert record.water_intake_count == 3
        assert seen[0].headers["Authorization"] == f"Bearer {TEST_TOKEN}"
        assert seen[0].url.path == f"/api/period/periodtracking/{TEST_USER_ID}"

    @pytest.mark.asyncio
    async def test_prediction_is_recomputed(self, period_tracking_body: dict) -> None:
        client = TrackingRecordClient(
            http_client=mock_http_client(lambda r: httpx.Response(200, json=period_tracking_body))
        )
        record = await client.fetch(PRIMARY, TEST_USER_ID, TEST_TOKEN)
        # Service sent 2026-01-01; derived value wins
        assert record.next_period_predicted_date == date(2026, 3, 10)

    @pytest.mark.asyncio
    async def test_401_raises_unauthorized(self) -> None:
        client = TrackingRecordClient(
            http_client=mock_http_client(lambda r: httpx.Response(401, text="expired"))
        )
        with pytest.raises(Unauthorized) as exc_info:
            await client.fetch(PRIMARY, TEST_USER_ID, TEST_TOKEN)
        assert exc_info.value.endpoint == PRIMARY.base_address

    @pytest.mark.asyncio
    async def test_400_raises_not_found(self) -> None:
        client = TrackingRecordClient(
            http_client=mock_http_client(lambda r: httpx.Response(400, json={"error": "no data"}))
        )
        with pytest.raises(RecordNotFound):
            await client.fetch(PRIMARY, TEST_USER_ID, TEST_TOKEN)

    @pytest.mark.asyncio
    async def test_500_raises_unknown(self) -> None:
        client = TrackingRecordClient(
            http_client=mock_http_client(lambda r: httpx.Response(500, text="Internal"))
        )
        with pytest.raises(UnknownServiceError) as exc_info:
            await client.fetch(PRIMARY, TEST_USER_ID, TEST_TOKEN)
        assert exc_info.value.detail == "Internal"

    @pytest.mark.asyncio
    async def test_connect_error_raises_network_unreachable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = TrackingRecordClient(http_client=mock_http_client(handler))
        with pytest.raises(NetworkUnreachable):
            await client.fetch(PRIMARY, TEST_USER_ID, TEST_TOKEN)

    @pytest.mark.asyncio
    async def test_slow_response_is_dropped_as_timeout(self, period_tracking_body: dict) -> None:
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1)
            return httpx.Response(200, json=period_tracking_body)

        fast = EndpointSpec("https://slow.herizon.test/", 20, name="primary")
        client = TrackingRecordClient(http_client=mock_http_client(handler))
        with pytest.raises(FetchTimeout) as exc_info:
            await client.fetch(fast, TEST_USER_ID, TEST_TOKEN)
        assert exc_info.value.kind is ErrorKind.timeout
        assert "20ms" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_read_timeout_raises_fetch_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("read timed out", request=request)

        client = TrackingRecordClient(http_client=mock_http_client(handler))
        with pytest.raises(FetchTimeout):
            await client.fetch(PRIMARY, TEST_USER_ID, TEST_TOKEN)

    @pytest.mark.asyncio
    async def test_missing_envelope_is_unknown(self) -> None:
        client = TrackingRecordClient(
            http_client=mock_http_client(lambda r: httpx.Response(200, json={"data": {}}))
        )
        with pytest.raises(UnknownServiceError, match="Malformed"):
            await client.fetch(PRIMARY, TEST_USER_ID, TEST_TOKEN)

    @pytest.mark.asyncio
    async def test_invalid_record_fields_are_unknown(self) -> None:
        body = {"periodTrackingData": {"cycleDuration": "many", "lastPeriodStart": "soon"}}
        client = TrackingRecordClient(
            http_client=mock_http_client(lambda r: httpx.Response(200, json=body))
        )
        with pytest.raises(UnknownServiceError) as exc_info:
            await client.fetch(PRIMARY, TEST_USER_ID, TEST_TOKEN)
        assert "validation error" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_non_json_body_is_unknown(self) -> None:
        client = TrackingRecordClient(
            http_client=mock_http_client(lambda r: httpx.Response(200, text="<html>"))
        )
        with pytest.raises(UnknownServiceError):
            await client.fetch(PRIMARY, TEST_USER_ID, TEST_TOKEN)


class TestWaterUpdate:
    @pytest.mark.asyncio
    async def test_hits_water_path(self) -> None:
        paths: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200, json={"waterIntakeCount": 4})

        client = TrackingRecordClient(http_client=mock_http_client(handler))
        await client.increment_water_intake(PRIMARY, TEST_USER_ID, TEST_TOKEN)
        assert paths == [f"/api/period/waterupdate/{TEST_USER_ID}"]


class TestSubmission:
    def _draft(self) -> WizardDraft:
        return WizardDraft(
            cycle_duration_days=28,
            last_period_start_date=date(2026, 2, 1),
            last_period_duration_days=5,
            mood_types=["Happy"],
            mood_severity="low",
        )

    @pytest.mark.asyncio
    async def test_posts_camelcase_payload_with_user_id(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "POST"
            assert request.url.path == "/api/period/trackerdata"
            bodies.append(json.loads(request.content))
            return httpx.Response(201, json={"message": "saved"})

        client = SubmissionClient(PRIMARY, http_client=mock_http_client(handler))
        ack = await client.submit(self._draft(), TEST_USER_ID, TEST_TOKEN)

        assert ack == {"message": "saved"}
        body = bodies[0]
        assert body["userId"] == TEST_USER_ID
        assert body["cycleDuration"] == 28
        assert body["lastPeriodStart"] == "2026-02-01"
        assert body["nextPeriodPrediction"] == "2026-03-01"
        assert body["moodTypes"] == ["Happy"]

    @pytest.mark.asyncio
    async def test_empty_ack_is_empty_dict(self) -> None:
        client = SubmissionClient(
            PRIMARY, http_client=mock_http_client(lambda r: httpx.Response(204))
        )
        assert await client.submit(self._draft(), TEST_USER_ID, TEST_TOKEN) == {}

    @pytest.mark.asyncio
    async def test_failure_wraps_classified_error(self) -> None:
        client = SubmissionClient(
            PRIMARY, http_client=mock_http_client(lambda r: httpx.Response(503, text="down"))
        )
        with pytest.raises(SubmissionError) as exc_info:
            await client.submit(self._draft(), TEST_USER_ID, TEST_TOKEN)
        assert exc_info.value.kind is ErrorKind.unknown
        assert str(exc_info.value) == "Error submitting data. Please try again."
