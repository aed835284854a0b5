"""Tests for Garmin Connect JSON serialization."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from workout_engine.exceptions import WorkoutValidationError
from workout_engine.models.enums import Sport, StepType
from workout_engine.models.structured_workout import (
    Duration,
    Range,
    StepDetails,
    WorkoutStep,
)
from workout_engine.models.workout import Workout
from workout_engine.serialization.connect import (
    segregate_steps,
    to_connect_json,
    to_connect_json_string,
)

GOLDEN = Path(__file__).resolve().parent.parent / "golden" / "connect_track.json"


def _make_step(step_type: StepType = StepType.ACTIVE, seconds: float = 60, **kwargs) -> WorkoutStep:
    return WorkoutStep(step_type, kwargs.pop("name", step_type.value), Duration.time(seconds), **kwargs)


def _make_workout(steps, **overrides) -> Workout:
    defaults = {
        "name": "Session",
        "sport": Sport.RUNNING,
        "steps": tuple(steps),
        "date": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    defaults.update(overrides)
    return Workout(**defaults)


def _steps(document: dict) -> list[dict]:
    return document["workoutSegments"][0]["workoutSteps"]


class TestGoldenDocument:
    def test_flat_session(self, track_workout) -> None:
        assert to_connect_json(track_workout) == json.loads(GOLDEN.read_text())

    def test_repeat_group_model_flattened_first(self, grouped_track_workout) -> None:
        assert to_connect_json(grouped_track_workout) == json.loads(GOLDEN.read_text())

    def test_string_form(self, track_workout) -> None:
        text = to_connect_json_string(track_workout)
        assert json.loads(text) == to_connect_json(track_workout)


class TestSegregation:
    def test_buckets(self) -> None:
        w = _make_step(StepType.WARMUP)
        a = _make_step()
        c = _make_step(StepType.COOLDOWN)
        assert segregate_steps([w, a, c]) == ([w], [a], [c])

    def test_only_leading_warmups(self) -> None:
        w = _make_step(StepType.WARMUP)
        a = _make_step()
        assert segregate_steps([w, w, a, w]) == ([w, w], [a, w], [])

    def test_everything_after_first_cooldown(self) -> None:
        a = _make_step()
        c = _make_step(StepType.COOLDOWN)
        assert segregate_steps([a, c, a]) == ([], [a], [c, a])


class TestRepeatGrouping:
    def test_repeat_must_open_main(self) -> None:
        lead = _make_step(seconds=1200)
        work = _make_step(seconds=60)
        rest = _make_step(StepType.RECOVERY, seconds=60)
        steps = _steps(to_connect_json(_make_workout([lead] + [work, rest] * 3)))
        assert len(steps) == 7
        assert all(s["type"] == "ExecutableStepDTO" for s in steps)

    def test_tail_after_repeat_stays_flat(self) -> None:
        work = _make_step(seconds=60)
        rest = _make_step(StepType.RECOVERY, seconds=60)
        tempo = _make_step(seconds=1200)
        steps = _steps(to_connect_json(_make_workout([work, rest] * 3 + [tempo])))
        assert [s["type"] for s in steps] == ["RepeatGroupDTO", "ExecutableStepDTO"]
        assert steps[0]["numberOfIterations"] == 3
        assert [c["stepOrder"] for c in steps[0]["workoutSteps"]] == [1, 2]
        assert steps[1]["stepOrder"] == 2
        assert steps[1]["endConditionValue"] == 1200

    def test_targets_ignored_when_grouping(self) -> None:
        fast = _make_step(seconds=60, details=StepDetails(pace_min_km=Range(3.5, 3.8)))
        faster = _make_step(seconds=60, details=StepDetails(pace_min_km=Range(3.2, 3.4)))
        rest = _make_step(StepType.RECOVERY, seconds=60)
        steps = _steps(to_connect_json(_make_workout([fast, rest, faster, rest])))
        assert len(steps) == 1
        assert steps[0]["numberOfIterations"] == 2
        # the first occurrence of the pattern supplies the targets
        one = steps[0]["workoutSteps"][0]["targetValueOne"]
        assert one == pytest.approx(1000 / (3.8 * 60))

    def test_single_step_pattern_not_grouped(self) -> None:
        work = _make_step(seconds=60)
        steps = _steps(to_connect_json(_make_workout([work] * 3)))
        assert [s["type"] for s in steps] == ["ExecutableStepDTO"] * 3

    def test_first_repeating_length_used(self) -> None:
        work = _make_step(seconds=60)
        steps = _steps(to_connect_json(_make_workout([work] * 9)))
        assert [s["type"] for s in steps] == ["RepeatGroupDTO", "ExecutableStepDTO"]
        assert steps[0]["numberOfIterations"] == 4
        assert len(steps[0]["workoutSteps"]) == 2
        assert steps[1]["stepOrder"] == 2


class TestSteps:
    @pytest.mark.parametrize(
        "step_type, type_id, key",
        [
            (StepType.WARMUP, 1, "warmup"),
            (StepType.COOLDOWN, 2, "cooldown"),
            (StepType.ACTIVE, 3, "interval"),
            (StepType.RECOVERY, 4, "recovery"),
            (StepType.REST, 5, "rest"),
        ],
    )
    def test_step_types(self, step_type, type_id, key) -> None:
        [step] = _steps(to_connect_json(_make_workout([_make_step(step_type)])))
        assert step["stepType"] == {"stepTypeId": type_id, "stepTypeKey": key}

    def test_time_end_condition(self) -> None:
        [step] = _steps(to_connect_json(_make_workout([_make_step(seconds=300)])))
        assert step["endCondition"] == {"conditionTypeId": 2, "conditionTypeKey": "time"}
        assert step["endConditionValue"] == 300
        assert step["preferredEndConditionUnit"] == {"unitId": 2, "unitKey": "second"}
        assert step["estimatedDurationInSecs"] == 300

    def test_open_duration(self) -> None:
        [step] = _steps(to_connect_json(_make_workout([WorkoutStep(StepType.REST, "Rest")])))
        assert step["endCondition"] == {"conditionTypeId": 1, "conditionTypeKey": "lap.button"}
        assert step["endConditionValue"] is None
        assert step["targetType"] == {"workoutTargetTypeId": 1, "workoutTargetTypeKey": "no.target"}

    def test_name_is_description(self) -> None:
        [step] = _steps(to_connect_json(_make_workout([_make_step(name="Strides")])))
        assert step["description"] == "Strides"


class TestWorkoutFields:
    def test_cycling_power_target(self, cycling_workout) -> None:
        document = to_connect_json(cycling_workout)
        assert document["sportType"] == {"sportTypeId": 2, "sportTypeKey": "cycling"}
        sweet_spot = _steps(document)[1]
        assert sweet_spot["targetType"] == {"workoutTargetTypeId": 4, "workoutTargetTypeKey": "power.zone"}
        assert (sweet_spot["targetValueOne"], sweet_spot["targetValueTwo"]) == (220, 240)

    def test_swimming_sport(self) -> None:
        document = to_connect_json(_make_workout([_make_step()], sport=Sport.SWIMMING))
        assert document["sportType"]["sportTypeKey"] == "lap_swimming"
        assert document["workoutSegments"][0]["sportType"]["sportTypeId"] == 5

    def test_empty_description(self) -> None:
        document = to_connect_json(_make_workout([_make_step()]))
        assert document["description"] == ""

    def test_validation(self) -> None:
        with pytest.raises(WorkoutValidationError):
            to_connect_json(_make_workout([_make_step()], name=""))
