"""SOS alert broadcast to third-party form relays.

The same fixed-shape payload is posted to every relay concurrently.  Success
is all-or-nothing: if any relay fails, the whole broadcast is reported as
failed so the user knows to try again.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

import httpx

from herizon.tracking.errors import AlertBroadcastError

logger = logging.getLogger("herizon.tracking.alerts")

ALERT_SUBJECT = "SOS Alert"


def build_alert(sender_name: str | None, app_name: str = "Herizon") -> dict[str, str]:
    return {
        "subject": ALERT_SUBJECT,
        "message": (
            f"This is an SOS alert generated by {sender_name or 'a user'} "
            f"from the {app_name} app."
        ),
    }


class AlertBroadcaster:
    def __init__(
        self,
        relay_urls: Sequence[str],
        timeout_ms: int = 10_000,
        app_name: str = "Herizon",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._relay_urls = tuple(relay_urls)
        self._timeout = timeout_ms / 1000.0
        self._app_name = app_name
        self._http_client = http_client

    async def _post(self, client: httpx.AsyncClient, url: str, body: dict[str, str]) -> None:
        response = await client.post(
            url,
            json=body,
            headers={"Content-Type": "application/json"},
            timeout=self._timeout,
        )
        response.raise_for_status()

    async def broadcast(self, sender_name: str | None = None) -> int:
        """Send the alert to every relay.

        Returns:
            Number of relays that accepted the alert.

        Raises:
            AlertBroadcastError: If any relay failed.
        """
        body = build_alert(sender_name, self._app_name)

        if self._http_client:
            results = await self._send_all(self._http_client, body)
        else:
            async with httpx.AsyncClient() as client:
                results = await self._send_all(client, body)

        failed: list[str] = []
        for url, r in zip(self._relay_urls, results):
            if isinstance(r, Exception):
                logger.error("SOS relay %s failed: %s", url, r)
                failed.append(url)

        if failed:
            raise AlertBroadcastError(
                "Failed to send SOS alerts. Please try again.", failed=failed
            )
        logger.info("SOS alert sent to %d relays", len(self._relay_urls))
        return len(self._relay_urls)

    async def _send_all(self, client: httpx.AsyncClient, body: dict[str, str]) -> list:
        tasks = [self._post(client, url, body) for url in self._relay_urls]
        return await asyncio.gather(*tasks, return_exceptions=True)
