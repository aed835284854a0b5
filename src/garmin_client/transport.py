"""Transport seam between the workout engine and Garmin.

The engine never talks to the network. A caller supplies an object
satisfying :class:`WorkoutTransport`; it receives the encoded document and
the caller's bearer token exactly once and either returns the remote
response or raises a :mod:`garmin_client.exceptions` error.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol, Union

Document = Union[dict, bytes]


class SyncTarget(str, Enum):
    """Which Garmin surface a workout is sent to."""

    TRAINING_API = "training_api"   # Training API v2 JSON
    CONNECT = "connect"             # legacy Connect JSON
    FIT = "fit"                     # FIT file upload


class WorkoutTransport(Protocol):
    def send(self, document: Document, token: str, target: SyncTarget) -> Any:
        """Transmit one encoded workout; raise GarminClientError on failure."""
        ...
