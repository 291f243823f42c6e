"""Shared fixtures for API route tests."""

from __future__ import annotations

import pytest

from herizon.tracking.config_loader import TrackerConfig, load_tracker_config


@pytest.fixture
def tracker_config() -> TrackerConfig:
    return load_tracker_config()
