"""Shared test fixtures: interval sessions, workouts per sport, reference values."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from workout_engine.models.enums import Sport, StepType
from workout_engine.models.structured_workout import (
    Duration,
    Range,
    RepeatGroup,
    StepDetails,
    WorkoutStep,
)
from workout_engine.models.workout import Workout

NEW_YEAR_2024 = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def warmup_step() -> WorkoutStep:
    return WorkoutStep(StepType.WARMUP, "Warm-up", Duration.time(600), zone=2)


@pytest.fixture
def cooldown_step() -> WorkoutStep:
    return WorkoutStep(StepType.COOLDOWN, "Cool-down", Duration.time(600), zone=2)


@pytest.fixture
def interval_step() -> WorkoutStep:
    """400 m at 4:00-5:00/km."""
    return WorkoutStep(
        StepType.ACTIVE,
        "Interval",
        Duration.distance(400),
        zone=4,
        details=StepDetails(pace_min_km=Range(4.0, 5.0)),
    )


@pytest.fixture
def recovery_step() -> WorkoutStep:
    return WorkoutStep(StepType.RECOVERY, "Recovery", Duration.time(90), zone=1)


@pytest.fixture
def track_steps(warmup_step, interval_step, recovery_step, cooldown_step) -> list[WorkoutStep]:
    """Warm-up, 4 x (400 m + 90 s recovery), cool-down: ten flat leaves."""
    return [warmup_step] + [interval_step, recovery_step] * 4 + [cooldown_step]


@pytest.fixture
def track_workout(track_steps) -> Workout:
    return Workout(
        name="Track 4x400",
        sport=Sport.RUNNING,
        steps=tuple(track_steps),
        date=NEW_YEAR_2024,
        description="Track session",
        workout_id="track001",
    )


@pytest.fixture
def grouped_track_workout(warmup_step, interval_step, recovery_step, cooldown_step) -> Workout:
    """The track session with the repeat already expressed as a RepeatGroup."""
    return Workout(
        name="Track 4x400",
        sport=Sport.RUNNING,
        steps=(
            warmup_step,
            RepeatGroup((interval_step, recovery_step), iterations=4),
            cooldown_step,
        ),
        date=NEW_YEAR_2024,
        description="Track session",
        workout_id="track001",
    )


@pytest.fixture
def cycling_workout() -> Workout:
    return Workout(
        name="Sweet spot",
        sport=Sport.CYCLING,
        steps=(
            WorkoutStep(StepType.WARMUP, "Warm-up", Duration.time(900), zone=2),
            WorkoutStep(
                StepType.ACTIVE,
                "Sweet spot",
                Duration.time(1200),
                zone=3,
                details=StepDetails(watts=Range(220, 240)),
            ),
            WorkoutStep(
                StepType.ACTIVE,
                "Tempo",
                Duration.time(600),
                details=StepDetails(power_percent=Range(76, 90)),
            ),
        ),
        date=NEW_YEAR_2024,
    )


@pytest.fixture
def reference_pace() -> float:
    """5:00/km."""
    return 5.0
