"""HTTP clients for the Herizon tracking service.

Endpoints used:
    GET  /api/period/periodtracking/{userId} — The user's tracking record
    GET  /api/period/waterupdate/{userId}    — Increment the water counter
    POST /api/period/trackerdata             — Submit a completed intake draft

Every request carries ``Authorization: Bearer <token>`` and is bounded by the
endpoint's own timeout.  A response that arrives after the bound is dropped:
the in-flight request is cancelled and the call fails with ``FetchTimeout``.

Failures are classified before they leave this module:

    timeout / cancel                 → FetchTimeout
    HTTP 401                         → Unauthorized
    any other 4xx (bad request)      → RecordNotFound
    DNS, refused, offline            → NetworkUnreachable
    anything else                    → UnknownServiceError (detail kept)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from herizon.models.tracking import TrackingRecord, WizardDraft
from herizon.tracking.endpoints import EndpointSpec
from herizon.tracking.errors import (
    FetchTimeout,
    NetworkUnreachable,
    RecordNotFound,
    SubmissionError,
    TrackingServiceError,
    Unauthorized,
    UnknownServiceError,
)

logger = logging.getLogger("herizon.tracking.client")

_RECORD_PATH = "api/period/periodtracking/{user_id}"
_WATER_PATH = "api/period/waterupdate/{user_id}"
_SUBMIT_PATH = "api/period/trackerdata"


def classify_status(status_code: int, endpoint: str, detail: str) -> TrackingServiceError:
    """Map a non-success HTTP status onto the error taxonomy."""
    if status_code == 401:
        return Unauthorized(
            "Authentication failed. Please sign in again.", endpoint=endpoint, detail=detail
        )
    if 400 <= status_code < 500:
        return RecordNotFound("Period data not found", endpoint=endpoint, detail=detail)
    return UnknownServiceError(
        f"Tracking service at {endpoint} answered {status_code}",
        endpoint=endpoint,
        detail=detail,
    )


class _ServiceClient:
    """Shared request/classification logic for the tracking service."""

    def __init__(self, http_client: httpx.AsyncClient | None = None) -> None:
        """
        Args:
            http_client: Optional pre-configured httpx client (for testing).
        """
        self._http_client = http_client

    @staticmethod
    def _build_headers(credential: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {credential}",
        }

    async def _dispatch(
        self, method: str, url: str, headers: dict[str, str], json: Any, timeout: float
    ) -> httpx.Response:
        if self._http_client:
            return await self._http_client.request(
                method, url, headers=headers, json=json, timeout=timeout
            )
        async with httpx.AsyncClient() as client:
            return await client.request(method, url, headers=headers, json=json, timeout=timeout)

    async def _request(
        self,
        method: str,
        endpoint: EndpointSpec,
        path: str,
        credential: str,
        json: Any = None,
    ) -> httpx.Response:
        """Send one bounded request and classify any failure.

        Raises:
            TrackingServiceError: Classified failure (see module docstring).
        """
        url = endpoint.url(path)
        address = endpoint.base_address
        timeout = endpoint.timeout_seconds
        logger.debug("%s %s (timeout %dms)", method, url, endpoint.timeout_ms)

        try:
            response = await asyncio.wait_for(
                self._dispatch(method, url, self._build_headers(credential), json, timeout),
                timeout=timeout,
            )
            response.raise_for_status()
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("Request to %s timed out after %dms", address, endpoint.timeout_ms)
            raise FetchTimeout(
                f"Request to {address} timed out after {endpoint.timeout_ms}ms",
                endpoint=address,
                detail=str(exc) or type(exc).__name__,
            ) from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning("Request to %s failed with HTTP %d", address, status)
            raise classify_status(status, address, exc.response.text) from exc
        except httpx.TransportError as exc:
            logger.warning("Network error connecting to %s: %s", address, exc)
            raise NetworkUnreachable(
                f"Network error connecting to {address}. "
                "Please check your internet connection.",
                endpoint=address,
                detail=str(exc),
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Request error for %s: %s", address, exc)
            raise UnknownServiceError(
                f"Request to {address} failed", endpoint=address, detail=str(exc)
            ) from exc

        return response


class TrackingRecordClient(_ServiceClient):
    """Read side of the tracking service: one record fetch per call.

    Holds no state besides the optional injected httpx client.
    """

    async def fetch(self, endpoint: EndpointSpec, user_id: str, credential: str) -> TrackingRecord:
        """Fetch the user's tracking record from a single endpoint.

        Args:
            endpoint:   Endpoint to query; its timeout bounds the call.
            user_id:    Identity-provider user ID.
            credential: Bearer token for the user.

        Returns:
            The parsed TrackingRecord.

        Raises:
            TrackingServiceError: Classified failure.
        """
        response = await self._request(
            "GET", endpoint, _RECORD_PATH.format(user_id=quote(user_id, safe="")), credential
        )
        try:
            body = response.json()
            record = TrackingRecord.model_validate(body["periodTrackingData"])
        except (ValueError, KeyError, TypeError) as exc:
            # ValidationError is a ValueError subclass
            detail = str(exc)
            if isinstance(exc, ValidationError):
                detail = f"{exc.error_count()} validation error(s): {exc}"
            logger.error("Malformed tracking record from %s: %s", endpoint.base_address, detail)
            raise UnknownServiceError(
                f"Malformed tracking record from {endpoint.base_address}",
                endpoint=endpoint.base_address,
                detail=detail,
            ) from exc

        logger.info("Tracking record received from %s", endpoint.base_address)
        return record

    async def increment_water_intake(
        self, endpoint: EndpointSpec, user_id: str, credential: str
    ) -> None:
        """Ask the service to add one glass to today's water counter.

        Raises:
            TrackingServiceError: Classified failure.
        """
        await self._request(
            "GET", endpoint, _WATER_PATH.format(user_id=quote(user_id, safe="")), credential
        )
        logger.info("Water intake logged for user %s", user_id)


class SubmissionClient(_ServiceClient):
    """Write side of the tracking service: posts completed wizard drafts to
    the primary endpoint in one atomic request.  No automatic retry.
    """

    def __init__(self, endpoint: EndpointSpec, http_client: httpx.AsyncClient | None = None) -> None:
        super().__init__(http_client)
        self._endpoint = endpoint

    @property
    def endpoint(self) -> EndpointSpec:
        return self._endpoint

    async def submit(self, draft: WizardDraft, user_id: str, credential: str) -> dict[str, Any]:
        """Post the draft as a new tracking record.

        Returns:
            The service's acknowledgement body (empty dict if it sent none).

        Raises:
            SubmissionError: Wraps the classified transport failure.
        """
        payload = draft.to_payload(user_id)
        try:
            response = await self._request(
                "POST", self._endpoint, _SUBMIT_PATH, credential, json=payload
            )
        except TrackingServiceError as exc:
            raise SubmissionError("Error submitting data. Please try again.", exc) from exc

        logger.info("Tracker data submitted for user %s", user_id)
        if not response.content:
            return {}
        try:
            ack = response.json()
        except ValueError:
            return {}
        return ack if isinstance(ack, dict) else {"result": ack}
