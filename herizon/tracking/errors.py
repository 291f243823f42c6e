"""Error taxonomy for the tracking data layer.

Transport failures are classified once, in the HTTP clients, into one of the
``ErrorKind`` values.  The fallback cascade absorbs them; submission and
analytics errors propagate to the caller.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    timeout = "timeout"
    unauthorized = "unauthorized"
    not_found = "not_found"
    network_unreachable = "network_unreachable"
    invalid_record = "invalid_record"
    unknown = "unknown"


class TrackingServiceError(Exception):
    """A classified failure talking to the tracking service.

    Attributes:
        kind:     Classified error kind.
        endpoint: Base address of the endpoint that failed, if any.
        detail:   Original error text for diagnostics.
    """

    kind: ErrorKind = ErrorKind.unknown

    def __init__(self, message: str, *, endpoint: str | None = None, detail: str | None = None) -> None:
        super().__init__(message)
        self.endpoint = endpoint
        self.detail = detail


class FetchTimeout(TrackingServiceError):
    kind = ErrorKind.timeout


class Unauthorized(TrackingServiceError):
    kind = ErrorKind.unauthorized


class RecordNotFound(TrackingServiceError):
    """The service has no record for this user yet; send them to intake."""

    kind = ErrorKind.not_found


class NetworkUnreachable(TrackingServiceError):
    kind = ErrorKind.network_unreachable


class UnknownServiceError(TrackingServiceError):
    kind = ErrorKind.unknown


class InvalidRecord(ValueError):
    """A tracking record violates a precondition of the analytics layer."""

    kind = ErrorKind.invalid_record


class SubmissionError(Exception):
    """Posting a wizard draft failed.  The draft is kept for a manual retry."""

    def __init__(self, message: str, cause: TrackingServiceError) -> None:
        super().__init__(message)
        self.cause = cause

    @property
    def kind(self) -> ErrorKind:
        return self.cause.kind


class AlertBroadcastError(Exception):
    """At least one alert relay did not accept the alert."""

    def __init__(self, message: str, failed: list[str]) -> None:
        super().__init__(message)
        self.failed = failed
