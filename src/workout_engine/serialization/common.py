"""Checks shared by every encoder."""

from __future__ import annotations

from workout_engine.exceptions import WorkoutValidationError
from workout_engine.models.structured_workout import validate_nesting
from workout_engine.models.workout import Workout


def validate_for_export(workout: Workout) -> None:
    """Reject workouts no target format can represent."""
    if not workout.name or not workout.name.strip():
        raise WorkoutValidationError("Workout name is required")
    if not workout.steps:
        raise WorkoutValidationError("Workout must have at least one step")
    validate_nesting(workout.steps)
