"""Herizon tracking data layer.

Acquires a user's cycle tracking record from an ordered list of unreliable
endpoints, derives dashboard insights from it, and drives the intake wizard
that creates a new record.

Core modules:
    endpoints     — Ordered endpoint registry and tier tagging
    client        — HTTP clients for record fetch, water updates and submission
    cascade       — Sequential fallback acquisition with synthetic degradation
    analytics     — Pure insight derivation (cycle day, fertile window, PMS)
    wizard        — Five-step intake state machine
    guidance      — Rule-based review tips
    config_loader — Load/validate/hot-reload tracker_config.yaml
"""

from herizon.tracking.analytics import Insights, derive_insights
from herizon.tracking.cascade import AcquisitionResult, FallbackCascade
from herizon.tracking.client import SubmissionClient, TrackingRecordClient
from herizon.tracking.config_loader import TrackerConfig, get_tracker_config
from herizon.tracking.endpoints import EndpointSpec, RecordSource, build_endpoint_registry
from herizon.tracking.wizard import IntakeWizard, WizardStep

__all__ = [
    "EndpointSpec",
    "RecordSource",
    "build_endpoint_registry",
    "TrackingRecordClient",
    "SubmissionClient",
    "FallbackCascade",
    "AcquisitionResult",
    "Insights",
    "derive_insights",
    "IntakeWizard",
    "WizardStep",
    "TrackerConfig",
    "get_tracker_config",
]
