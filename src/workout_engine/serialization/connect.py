"""Garmin Connect JSON serialization for Workout objects.

Converts a Workout into the legacy Connect ``ExecutableStepDTO`` /
``RepeatGroupDTO`` document, the shape the Connect workout service imports
and syncs to a watch.

Steps are segregated into three buckets before conversion: leading warmups,
main, and everything from the first cooldown on. Only the main bucket is
searched for repeats (patterns of 2-3 steps compared on type and duration,
the shortest repeating length taken), and only a repeat opening the main
bucket becomes a RepeatGroupDTO.

All functions are pure (no I/O, no network calls).
"""

from __future__ import annotations

import json
import logging
from typing import Sequence

from workout_engine.grouping.repeat_detector import (
    RepeatBlock,
    detect_repeat_blocks,
    same_type_and_duration,
)
from workout_engine.math.conversions import pace_min_km_to_m_per_s
from workout_engine.models.enums import (
    CONNECT_MAX_PATTERN,
    CONNECT_MIN_PATTERN,
    MIN_REPEATS,
    DurationType,
    Sport,
    StepType,
)
from workout_engine.models.structured_workout import WorkoutStep, flatten_steps
from workout_engine.models.workout import Workout
from workout_engine.serialization.common import validate_for_export

logger = logging.getLogger(__name__)

_SPORT_TYPES = {
    Sport.RUNNING: {"sportTypeId": 1, "sportTypeKey": "running"},
    Sport.CYCLING: {"sportTypeId": 2, "sportTypeKey": "cycling"},
    Sport.SWIMMING: {"sportTypeId": 5, "sportTypeKey": "lap_swimming"},
}

# StepType → Connect stepType mapping.
_STEP_TYPES = {
    StepType.WARMUP: {"stepTypeId": 1, "stepTypeKey": "warmup"},
    StepType.COOLDOWN: {"stepTypeId": 2, "stepTypeKey": "cooldown"},
    StepType.ACTIVE: {"stepTypeId": 3, "stepTypeKey": "interval"},
    StepType.RECOVERY: {"stepTypeId": 4, "stepTypeKey": "recovery"},
    StepType.REST: {"stepTypeId": 5, "stepTypeKey": "rest"},
}
_REPEAT_STEP_TYPE = {"stepTypeId": 6, "stepTypeKey": "repeat"}

_END_CONDITIONS = {
    DurationType.TIME: {"conditionTypeId": 2, "conditionTypeKey": "time"},
    DurationType.DISTANCE: {"conditionTypeId": 3, "conditionTypeKey": "distance"},
    DurationType.OPEN: {"conditionTypeId": 1, "conditionTypeKey": "lap.button"},
}

_NO_TARGET = {"workoutTargetTypeId": 1, "workoutTargetTypeKey": "no.target"}
_POWER_TARGET = {"workoutTargetTypeId": 4, "workoutTargetTypeKey": "power.zone"}
_PACE_TARGET = {"workoutTargetTypeId": 6, "workoutTargetTypeKey": "pace.zone"}


def to_connect_json(workout: Workout) -> dict:
    """Convert a Workout to a Garmin Connect-compatible dict."""
    validate_for_export(workout)
    sport_type = _SPORT_TYPES[workout.sport]
    warmup, main, cooldown = segregate_steps(flatten_steps(workout.steps))

    steps: list[dict] = []
    order = 1
    for step in warmup:
        steps.append(_convert_step(step, order, workout.sport))
        order += 1

    blocks = detect_repeat_blocks(
        main,
        similar=same_type_and_duration,
        min_pattern=CONNECT_MIN_PATTERN,
        max_pattern=CONNECT_MAX_PATTERN,
        min_repeats=MIN_REPEATS,
        allow_partial=False,
        shortest_first=True,
    )
    remaining: Sequence[WorkoutStep] = main
    if blocks and isinstance(blocks[0], RepeatBlock):
        repeat = blocks[0]
        steps.append(_convert_repeat(repeat, order, workout.sport))
        order += 1
        remaining = main[len(repeat.steps):]
        logger.debug(
            "Grouped %d-step pattern x %d", len(repeat.pattern), repeat.repeat_count
        )

    for step in list(remaining) + list(cooldown):
        steps.append(_convert_step(step, order, workout.sport))
        order += 1

    logger.info(
        "Built Connect document for %r (%s, %d steps)",
        workout.name, sport_type["sportTypeKey"], len(steps),
    )
    return {
        "workoutId": None,
        "ownerId": None,
        "workoutName": workout.name,
        "description": workout.description or "",
        "sportType": dict(sport_type),
        "subSportType": None,
        "workoutSegments": [
            {
                "segmentOrder": 1,
                "sportType": dict(sport_type),
                "workoutSteps": steps,
            }
        ],
        "poolLength": None,
        "poolLengthUnit": None,
        "estimatedDurationInSecs": None,
        "estimatedDistanceInMeters": None,
        "estimatedDistanceUnit": None,
        "workoutProvider": None,
        "workoutSourceId": None,
        "consumer": None,
        "atpPlanId": None,
        "trainingPlanId": None,
        "author": None,
        "sharedWithUsers": None,
        "createdDate": None,
        "updatedDate": None,
        "avgTrainingSpeed": None,
        "estimateType": None,
        "estimatedDistanceStdDev": None,
        "estimatedDurationStdDev": None,
        "locale": None,
        "uploadTimestamp": None,
    }


def to_connect_json_string(workout: Workout, indent: int = 2) -> str:
    """Convert a Workout to a Garmin Connect-compatible JSON string."""
    return json.dumps(to_connect_json(workout), indent=indent)


def segregate_steps(
    steps: Sequence[WorkoutStep],
) -> tuple[list[WorkoutStep], list[WorkoutStep], list[WorkoutStep]]:
    """Split into (leading warmups, main, first cooldown onward)."""
    warmup: list[WorkoutStep] = []
    main: list[WorkoutStep] = []
    cooldown: list[WorkoutStep] = []
    for step in steps:
        if cooldown or step.step_type == StepType.COOLDOWN:
            cooldown.append(step)
        elif not main and step.step_type == StepType.WARMUP:
            warmup.append(step)
        else:
            main.append(step)
    return warmup, main, cooldown


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _convert_step(step: WorkoutStep, step_order: int, sport: Sport) -> dict:
    """Build an ExecutableStepDTO for a leaf step."""
    result = {
        "type": "ExecutableStepDTO",
        "stepId": None,
        "stepOrder": step_order,
        "stepType": dict(_STEP_TYPES[step.step_type]),
        "childStepId": None,
        "endCondition": dict(_END_CONDITIONS[step.duration.type]),
        "preferredEndConditionUnit": None,
        "endConditionValue": None,
        "endConditionCompare": None,
        "endConditionZone": None,
        "targetType": dict(_NO_TARGET),
        "targetValueOne": None,
        "targetValueTwo": None,
        "zoneNumber": None,
        "secondaryTargetType": None,
        "secondaryTargetValueOne": None,
        "secondaryTargetValueTwo": None,
        "secondaryZoneNumber": None,
        "endConditionCalories": None,
        "strokeType": None,
        "equipmentType": None,
        "exerciseName": None,
        "workoutProvider": None,
        "providerExerciseSourceId": None,
        "description": step.name,
        "estimatedDistanceUnit": None,
        "estimatedDurationInSecs": None,
        "estimatedDistanceInMeters": None,
        "weight": None,
        "weightUnit": None,
        "reps": None,
        "sets": None,
    }

    # Duration / end condition
    duration = step.duration
    if duration.type == DurationType.TIME and duration.value:
        result["endConditionValue"] = duration.value
        result["preferredEndConditionUnit"] = {"unitId": 2, "unitKey": "second"}
        result["estimatedDurationInSecs"] = duration.value
    elif duration.type == DurationType.DISTANCE and duration.value:
        result["endConditionValue"] = round(duration.value)
        result["preferredEndConditionUnit"] = {"unitKey": "kilometer"}
        result["estimatedDistanceInMeters"] = duration.value

    # Target
    result.update(_build_target(step, sport))
    return result


def _convert_repeat(block: RepeatBlock, step_order: int, sport: Sport) -> dict:
    """Build a RepeatGroupDTO; children are numbered from 1 within the group."""
    return {
        "type": "RepeatGroupDTO",
        "stepId": None,
        "stepOrder": step_order,
        "stepType": dict(_REPEAT_STEP_TYPE),
        "childStepId": 1,
        "numberOfIterations": block.repeat_count,
        "smartRepeat": False,
        "endCondition": None,
        "endConditionValue": None,
        "preferredEndConditionUnit": None,
        "endConditionCompare": None,
        "endConditionZone": None,
        "workoutSteps": [
            _convert_step(child, child_order, sport)
            for child_order, child in enumerate(block.pattern, start=1)
        ],
    }


def _build_target(step: WorkoutStep, sport: Sport) -> dict:
    """Build the target fields for a step.

    Running pace: targetValueOne is the speed at the slower pace bound,
    targetValueTwo the speed at the faster one. Cycling uses absolute watts.
    Anything else keeps no target.
    """
    details = step.details
    if details is None:
        return {}

    if sport == Sport.RUNNING and details.pace_min_km is not None:
        return {
            "targetType": dict(_PACE_TARGET),
            "targetValueOne": pace_min_km_to_m_per_s(details.pace_min_km.high),
            "targetValueTwo": pace_min_km_to_m_per_s(details.pace_min_km.low),
        }

    if sport == Sport.CYCLING and details.watts is not None:
        return {
            "targetType": dict(_POWER_TARGET),
            "targetValueOne": details.watts.low,
            "targetValueTwo": details.watts.high,
        }

    return {}
