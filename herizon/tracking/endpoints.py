"""Ordered registry of tracking-service endpoints.

The service has no single reliable address: a configurable production host,
a hosted mirror that may be cold-starting, and a local development host.
Order encodes trust; each tier carries its own timeout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from herizon.config import Settings, get_settings
from herizon.tracking.config_loader import TrackerConfig, get_tracker_config

logger = logging.getLogger("herizon.tracking.endpoints")


class RecordSource(str, Enum):
    """Where an acquired record came from."""

    primary = "primary"
    secondary = "secondary"
    local = "local"
    synthetic = "synthetic"


@dataclass(frozen=True)
class EndpointSpec:
    """One candidate base address of the tracking service.

    Attributes:
        base_address: Service root, e.g. ``https://Herizon.onrender.com/``.
        timeout_ms:   Hard bound for a single request to this endpoint.
        name:         Label used in logs.
    """

    base_address: str
    timeout_ms: int
    name: str = ""

    def __post_init__(self) -> None:
        if self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be > 0, got {self.timeout_ms}")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    def url(self, path: str) -> str:
        """Join ``path`` onto the base address."""
        return f"{self.base_address.rstrip('/')}/{path.lstrip('/')}"


def tier_for_index(index: int, count: int) -> RecordSource:
    """Tag an endpoint by its rank: first is primary, last is local."""
    if index == 0:
        return RecordSource.primary
    if index == count - 1:
        return RecordSource.local
    return RecordSource.secondary


def build_endpoint_registry(
    settings: Settings | None = None,
    config: TrackerConfig | None = None,
) -> tuple[EndpointSpec, ...]:
    """Compose the ordered endpoint list from settings and tier timeouts.

    The hosted mirror is only tried separately when the primary address is
    something else; otherwise it would be queried twice.
    """
    s = settings or get_settings()
    cfg = config or get_tracker_config()
    timeouts = cfg.acquisition

    endpoints = [
        EndpointSpec(s.primary_url, timeouts.timeout_ms("primary"), name="primary"),
    ]
    if s.render_url and s.render_url != s.primary_url:
        endpoints.append(
            EndpointSpec(s.render_url, timeouts.timeout_ms("secondary"), name="secondary")
        )
    if s.local_url and s.local_url not in (e.base_address for e in endpoints):
        endpoints.append(EndpointSpec(s.local_url, timeouts.timeout_ms("local"), name="local"))

    logger.debug(
        "Endpoint registry: %s",
        ", ".join(f"{e.name}={e.base_address} ({e.timeout_ms}ms)" for e in endpoints),
    )
    return tuple(endpoints)
