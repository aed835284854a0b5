"""Data models for the workout engine."""

from workout_engine.models.enums import (
    DurationType,
    Sport,
    StepType,
    SwimDrill,
    SwimEquipment,
    SwimIntensity,
    SwimStroke,
)
from workout_engine.models.structured_workout import (
    Duration,
    Range,
    RepeatGroup,
    Step,
    StepDetails,
    WorkoutStep,
    flatten_steps,
    iter_leaves,
    validate_nesting,
)
from workout_engine.models.workout import Workout

__all__ = [
    "Duration",
    "DurationType",
    "Range",
    "RepeatGroup",
    "Sport",
    "Step",
    "StepDetails",
    "StepType",
    "SwimDrill",
    "SwimEquipment",
    "SwimIntensity",
    "SwimStroke",
    "Workout",
    "WorkoutStep",
    "flatten_steps",
    "iter_leaves",
    "validate_nesting",
]
