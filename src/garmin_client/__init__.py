"""Garmin transmission seam: failure types and the transport protocol."""

from garmin_client.exceptions import (
    GarminAPIError,
    GarminAuthError,
    GarminClientError,
    GarminPermissionError,
    GarminRateLimitError,
    SyncFailureKind,
    error_for_status,
)
from garmin_client.transport import Document, SyncTarget, WorkoutTransport

__all__ = [
    "Document",
    "GarminAPIError",
    "GarminAuthError",
    "GarminClientError",
    "GarminPermissionError",
    "GarminRateLimitError",
    "SyncFailureKind",
    "SyncTarget",
    "WorkoutTransport",
    "error_for_status",
]
