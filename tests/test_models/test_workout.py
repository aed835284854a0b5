"""Tests for the Workout model and sport parsing."""

from __future__ import annotations

from datetime import datetime, timezone

from workout_engine.models.enums import Sport, StepType
from workout_engine.models.structured_workout import Duration, WorkoutStep
from workout_engine.models.workout import Workout


def _make_workout(**overrides) -> Workout:
    defaults = {
        "name": "Easy run",
        "sport": Sport.RUNNING,
        "steps": [WorkoutStep(StepType.ACTIVE, "Run", Duration.time(1800))],
    }
    defaults.update(overrides)
    return Workout(**defaults)


class TestSportParse:
    def test_known_labels(self) -> None:
        assert Sport.parse("cycling") == Sport.CYCLING
        assert Sport.parse(" Swimming ") == Sport.SWIMMING
        assert Sport.parse(Sport.RUNNING) is Sport.RUNNING

    def test_unknown_falls_back_to_running(self) -> None:
        assert Sport.parse("rowing") == Sport.RUNNING
        assert Sport.parse(None) == Sport.RUNNING


class TestWorkout:
    def test_sport_label_coerced(self) -> None:
        assert _make_workout(sport="cycling").sport == Sport.CYCLING

    def test_unknown_sport_defaults_to_running(self) -> None:
        assert _make_workout(sport="triathlon").sport == Sport.RUNNING

    def test_steps_coerced_to_tuple(self) -> None:
        assert isinstance(_make_workout().steps, tuple)

    def test_naive_date_taken_as_utc(self) -> None:
        workout = _make_workout(date=datetime(2024, 1, 1))
        assert workout.date == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_ids_are_distinct(self) -> None:
        assert _make_workout().workout_id != _make_workout().workout_id
