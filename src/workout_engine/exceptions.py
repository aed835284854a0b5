"""Custom exception hierarchy for the workout engine."""

from __future__ import annotations


class WorkoutEngineError(Exception):
    """Base exception for all workout_engine errors."""


class WorkoutValidationError(WorkoutEngineError):
    """A workout is missing a top-level requirement for encoding.

    Raised for a blank name, an empty step list, or repeat groups nested
    deeper than the encoders accept.
    """
