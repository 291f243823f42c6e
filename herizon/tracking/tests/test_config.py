"""Tests for tracker_config.yaml loading and validation."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from herizon.tracking.config_loader import (
    ConfigValidationError,
    TrackerConfig,
    _validate_and_build,
    get_tracker_config,
    load_tracker_config,
    reload_tracker_config,
)

_MINIMAL = {
    "version": "2.0",
    "acquisition": {"timeouts_ms": {"primary": 1000, "secondary": 2000, "local": 500}},
}


class TestConfigLoading:
    """Tests for loading the bundled tracker_config.yaml."""

    def test_load_default_config(self, tracker_config: TrackerConfig) -> None:
        assert tracker_config.version == "1.0"

    def test_tier_timeouts(self, tracker_config: TrackerConfig) -> None:
        acq = tracker_config.acquisition
        assert acq.timeout_ms("primary") == 8000
        assert acq.timeout_ms("secondary") == 30000
        assert acq.timeout_ms("local") == 5000

    def test_analytics_thresholds(self, tracker_config: TrackerConfig) -> None:
        an = tracker_config.analytics
        assert (an.fertile_window_start, an.fertile_window_end) == (11, 17)
        assert an.pms_after_cycle_day == 21
        assert an.well_rested_min_hours == 7

    def test_guidance_ranges(self, tracker_config: TrackerConfig) -> None:
        g = tracker_config.guidance
        assert (g.min_cycle_days, g.max_cycle_days) == (21, 35)
        assert (g.min_period_days, g.max_period_days) == (3, 7)

    def test_synthetic_defaults(self, tracker_config: TrackerConfig) -> None:
        syn = tracker_config.acquisition.synthetic
        assert syn.cycle_duration_days == 28
        assert syn.days_since_period_start == 15
        assert syn.phase == "Luteal"

    def test_water_and_notifications(self, tracker_config: TrackerConfig) -> None:
        assert tracker_config.water.daily_ceiling == 8
        assert tracker_config.notifications.interval_seconds == 30
        assert tracker_config.notifications.visible_seconds == 5


class TestConfigValidation:
    def test_valid_minimal_config(self) -> None:
        config = _validate_and_build(_MINIMAL)
        assert config.version == "2.0"
        assert config.water.daily_ceiling == 8

    def test_missing_tier_raises(self) -> None:
        raw = {"acquisition": {"timeouts_ms": {"primary": 1000, "local": 500}}}
        with pytest.raises(ConfigValidationError, match="secondary"):
            _validate_and_build(raw)

    def test_non_positive_timeout_raises(self) -> None:
        raw = {"acquisition": {"timeouts_ms": {"primary": 0, "secondary": 2000, "local": 500}}}
        with pytest.raises(ConfigValidationError, match="must be > 0"):
            _validate_and_build(raw)

    def test_non_numeric_timeout_raises(self) -> None:
        raw = {"acquisition": {"timeouts_ms": {"primary": "fast", "secondary": 2000, "local": 500}}}
        with pytest.raises(ConfigValidationError, match="integer"):
            _validate_and_build(raw)

    def test_inverted_fertile_window_raises(self) -> None:
        raw = {**_MINIMAL, "analytics": {"fertile_window": {"start_day": 18, "end_day": 11}}}
        with pytest.raises(ConfigValidationError, match="fertile_window"):
            _validate_and_build(raw)

    def test_errors_are_collected(self) -> None:
        raw = {
            "acquisition": {"timeouts_ms": {}},
            "water": {"daily_ceiling": 0},
        }
        with pytest.raises(ConfigValidationError, match="4 validation error"):
            _validate_and_build(raw)


class TestConfigFiles:
    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_tracker_config(tmp_path / "nope.yaml")

    def test_malformed_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("acquisition: [unclosed")
        with pytest.raises(ConfigValidationError, match="YAML parse error"):
            load_tracker_config(path)

    def test_reload_replaces_singleton(self, tmp_path: Path) -> None:
        path = tmp_path / "tracker_config.yaml"
        path.write_text(textwrap.dedent("""
            version: "9.9"
            acquisition:
              timeouts_ms:
                primary: 100
                secondary: 200
                local: 50
        """))
        original = get_tracker_config()
        try:
            reloaded = reload_tracker_config(path)
            assert reloaded.version == "9.9"
            assert get_tracker_config() is reloaded
        finally:
            reload_tracker_config()
        assert get_tracker_config().version == original.version

    def test_invalid_reload_keeps_old_config(self, tmp_path: Path) -> None:
        path = tmp_path / "tracker_config.yaml"
        path.write_text("version: '3.0'\nacquisition: {}\n")
        before = get_tracker_config()
        with pytest.raises(ConfigValidationError):
            reload_tracker_config(path)
        assert get_tracker_config() is before
