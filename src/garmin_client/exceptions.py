"""Custom exception hierarchy for Garmin workout transmission.

Transports raise these; the workout engine passes them through untouched.
Each class carries the ``SyncFailureKind`` callers branch on.
"""

from __future__ import annotations

from enum import Enum


class SyncFailureKind(str, Enum):
    """Why a hand-off to Garmin failed."""

    EXPIRED_AUTH = "expired_auth"
    PERMISSION_DENIED = "permission_denied"
    RATE_LIMITED = "rate_limited"
    FAILURE = "failure"


class GarminClientError(Exception):
    """Base exception for all garmin_client errors."""

    kind: SyncFailureKind = SyncFailureKind.FAILURE


class GarminAuthError(GarminClientError):
    """The bearer token was rejected or has expired (HTTP 401)."""

    kind = SyncFailureKind.EXPIRED_AUTH


class GarminPermissionError(GarminClientError):
    """The account has not granted workout import permission (HTTP 412)."""

    kind = SyncFailureKind.PERMISSION_DENIED


class GarminAPIError(GarminClientError):
    """A Garmin API call returned an error response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GarminRateLimitError(GarminAPIError):
    """HTTP 429, too many requests."""

    kind = SyncFailureKind.RATE_LIMITED

    def __init__(self, message: str = "Rate limited by Garmin") -> None:
        super().__init__(message, status_code=429)


def error_for_status(status_code: int, message: str = "") -> GarminClientError:
    """Classify a failed HTTP status into the matching exception."""
    if status_code == 401:
        return GarminAuthError(message or "Session expired, reconnect to Garmin")
    if status_code == 412:
        return GarminPermissionError(
            message or "Workout import permission not granted in Garmin Connect"
        )
    if status_code == 429:
        return GarminRateLimitError(message or "Rate limited by Garmin")
    return GarminAPIError(message or f"Garmin request failed ({status_code})", status_code)
