"""Load, validate, and hot-reload the Herizon tracking configuration.

The config lives in ``tracker_config.yaml`` alongside this module.  At startup
it is loaded once and cached.  Call ``reload_tracker_config()`` to re-read from
disk after an edit; no restart required.

Usage::

    from herizon.tracking.config_loader import get_tracker_config

    config = get_tracker_config()
    config.acquisition.timeout_ms("primary")   # 8000
    config.analytics.fertile_window_start      # 11
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("herizon.tracking.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "tracker_config.yaml"

_TIERS = ("primary", "secondary", "local")


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class SyntheticRecordConfig:
    """Values of the sample record shown when no endpoint answers."""

    cycle_duration_days: int = 28
    days_since_period_start: int = 15
    period_duration_days: int = 5
    phase: str = "Luteal"
    sleep_duration_hours: float = 7.5
    sleep_quality: str = "Good"


@dataclass
class AcquisitionConfig:
    """Per-tier timeouts and degraded-mode defaults."""

    timeouts_ms: dict[str, int]
    synthetic: SyntheticRecordConfig

    def timeout_ms(self, tier: str) -> int:
        return self.timeouts_ms[tier]


@dataclass
class AnalyticsConfig:
    """Heuristic thresholds used by derive_insights()."""

    fertile_window_start: int = 11
    fertile_window_end: int = 17
    pms_after_cycle_day: int = 21
    well_rested_min_hours: float = 7.0


@dataclass
class GuidanceConfig:
    """Normal ranges the intake tips compare against."""

    min_cycle_days: int = 21
    max_cycle_days: int = 35
    min_period_days: int = 3
    max_period_days: int = 7


@dataclass
class WaterConfig:
    daily_ceiling: int = 8
    update_timeout_ms: int = 5000


@dataclass
class NotificationConfig:
    interval_seconds: float = 30.0
    visible_seconds: float = 5.0


@dataclass
class TrackerConfig:
    """Complete, validated tracking configuration.

    Attributes:
        version:       Config schema version string.
        acquisition:   Endpoint timeouts and synthetic record defaults.
        analytics:     Insight thresholds.
        guidance:      Tip rule ranges.
        water:         Water intake ceiling.
        notifications: Reminder ticker timing.
    """

    version: str
    acquisition: AcquisitionConfig
    analytics: AnalyticsConfig
    guidance: GuidanceConfig
    water: WaterConfig
    notifications: NotificationConfig
    _raw: dict = field(default_factory=dict, repr=False)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when tracker_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Tracker config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> TrackerConfig:
    """Validate the raw YAML dict and construct a TrackerConfig.

    Missing optional sections fall back to defaults; every problem found is
    collected and reported together.

    Raises:
        ConfigValidationError: If any value is missing or invalid.
    """
    errors: list[str] = []

    def _positive_int(section: str, key: str, value: Any) -> int:
        try:
            n = int(value)
        except (TypeError, ValueError):
            errors.append(f"{section}.{key} must be an integer, got {value!r}")
            return 0
        if n <= 0:
            errors.append(f"{section}.{key} must be > 0, got {n}")
        return n

    version = str(raw.get("version", "1.0"))

    # ── Acquisition ──
    acq_raw = raw.get("acquisition") or {}
    timeouts_raw = acq_raw.get("timeouts_ms") or {}
    timeouts: dict[str, int] = {}
    for tier in _TIERS:
        if tier not in timeouts_raw:
            errors.append(f"Missing required key '{tier}' in section 'acquisition.timeouts_ms'")
            continue
        timeouts[tier] = _positive_int("acquisition.timeouts_ms", tier, timeouts_raw[tier])

    syn_raw = acq_raw.get("synthetic_record") or {}
    synthetic = SyntheticRecordConfig(
        cycle_duration_days=_positive_int(
            "acquisition.synthetic_record", "cycle_duration_days",
            syn_raw.get("cycle_duration_days", 28),
        ),
        days_since_period_start=int(syn_raw.get("days_since_period_start", 15)),
        period_duration_days=_positive_int(
            "acquisition.synthetic_record", "period_duration_days",
            syn_raw.get("period_duration_days", 5),
        ),
        phase=str(syn_raw.get("phase", "Luteal")),
        sleep_duration_hours=float(syn_raw.get("sleep_duration_hours", 7.5)),
        sleep_quality=str(syn_raw.get("sleep_quality", "Good")),
    )
    acquisition = AcquisitionConfig(timeouts_ms=timeouts, synthetic=synthetic)

    # ── Analytics ──
    an_raw = raw.get("analytics") or {}
    fw_raw = an_raw.get("fertile_window") or {}
    analytics = AnalyticsConfig(
        fertile_window_start=int(fw_raw.get("start_day", 11)),
        fertile_window_end=int(fw_raw.get("end_day", 17)),
        pms_after_cycle_day=int(an_raw.get("pms_after_cycle_day", 21)),
        well_rested_min_hours=float(an_raw.get("well_rested_min_hours", 7)),
    )
    if analytics.fertile_window_start > analytics.fertile_window_end:
        errors.append(
            "analytics.fertile_window start_day "
            f"({analytics.fertile_window_start}) is after end_day "
            f"({analytics.fertile_window_end})"
        )

    # ── Guidance ──
    g_raw = raw.get("guidance") or {}
    cl_raw = g_raw.get("cycle_length") or {}
    pd_raw = g_raw.get("period_duration") or {}
    guidance = GuidanceConfig(
        min_cycle_days=int(cl_raw.get("min_days", 21)),
        max_cycle_days=int(cl_raw.get("max_days", 35)),
        min_period_days=int(pd_raw.get("min_days", 3)),
        max_period_days=int(pd_raw.get("max_days", 7)),
    )
    if guidance.min_cycle_days > guidance.max_cycle_days:
        errors.append("guidance.cycle_length min_days is greater than max_days")
    if guidance.min_period_days > guidance.max_period_days:
        errors.append("guidance.period_duration min_days is greater than max_days")

    # ── Water ──
    w_raw = raw.get("water") or {}
    water = WaterConfig(
        daily_ceiling=_positive_int("water", "daily_ceiling", w_raw.get("daily_ceiling", 8)),
        update_timeout_ms=_positive_int(
            "water", "update_timeout_ms", w_raw.get("update_timeout_ms", 5000)
        ),
    )

    # ── Notifications ──
    n_raw = raw.get("notifications") or {}
    notifications = NotificationConfig(
        interval_seconds=float(n_raw.get("interval_seconds", 30)),
        visible_seconds=float(n_raw.get("visible_seconds", 5)),
    )
    if notifications.visible_seconds >= notifications.interval_seconds:
        errors.append("notifications.visible_seconds must be shorter than interval_seconds")

    if errors:
        raise ConfigValidationError(
            f"tracker_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return TrackerConfig(
        version=version,
        acquisition=acquisition,
        analytics=analytics,
        guidance=guidance,
        water=water,
        notifications=notifications,
        _raw=raw,
    )


def load_tracker_config(path: Path | None = None) -> TrackerConfig:
    """Load and validate the tracker config from disk.

    Args:
        path: Override path to YAML. Uses the bundled tracker_config.yaml by default.

    Returns:
        Validated TrackerConfig instance.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded tracker config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: TrackerConfig | None = None
_config_lock = threading.Lock()


def get_tracker_config() -> TrackerConfig:
    """Return the global TrackerConfig singleton, loading it on first call."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_tracker_config()
    return _config


def reload_tracker_config(path: Path | None = None) -> TrackerConfig:
    """Reload the config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_tracker_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded tracker config: %s → %s", old_version, new_config.version)
    return new_config
