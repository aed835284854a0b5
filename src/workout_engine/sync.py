"""Hand an encoded workout to a Garmin transport.

The workout is encoded once for the chosen target and passed, with the
caller's bearer token, to the transport exactly once. Whatever the
transport returns is returned; whatever it raises propagates unchanged.
"""

from __future__ import annotations

import logging
from typing import Any

from garmin_client.exceptions import GarminClientError
from garmin_client.transport import Document, SyncTarget, WorkoutTransport

from workout_engine.models.workout import Workout
from workout_engine.serialization.connect import to_connect_json
from workout_engine.serialization.fit import encode_fit
from workout_engine.serialization.training_api import to_training_api_json

logger = logging.getLogger(__name__)


def encode_for_target(workout: Workout, target: SyncTarget, group: bool = True) -> Document:
    """Encode ``workout`` in the format ``target`` expects."""
    target = SyncTarget(target)
    if target == SyncTarget.TRAINING_API:
        return to_training_api_json(workout, group=group)
    if target == SyncTarget.CONNECT:
        return to_connect_json(workout)
    return encode_fit(workout)


def sync_workout(
    workout: Workout,
    token: str,
    transport: WorkoutTransport,
    target: SyncTarget = SyncTarget.TRAINING_API,
) -> Any:
    """Encode and send a workout once; no retry on failure."""
    target = SyncTarget(target)
    document = encode_for_target(workout, target)
    logger.info("Sending workout %r to %s", workout.name, target.value)
    try:
        return transport.send(document, token, target)
    except GarminClientError as exc:
        logger.warning(
            "Sync of %r to %s failed (%s): %s",
            workout.name, target.value, exc.kind.value, exc,
        )
        raise
