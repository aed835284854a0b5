"""Training API (v2) JSON serialization.

Converts a Workout into the ``WorkoutStep`` / ``WorkoutRepeatStep``
document accepted by the workout import endpoint. Repeat groups keep their
structure; step orders follow a single pre-order counter over the tree, so
a group takes the next order and its children the orders after it.

All functions are pure (no I/O, no network calls).
"""

from __future__ import annotations

import json
import logging
from itertools import count
from typing import Iterator

from workout_engine import config
from workout_engine.grouping.repeat_detector import group_repeats
from workout_engine.math.conversions import pace_min_km_to_m_per_s, swim_pace_to_m_per_s
from workout_engine.models.enums import (
    DurationType,
    Sport,
    StepType,
    SwimDrill,
    SwimEquipment,
    SwimIntensity,
    SwimStroke,
)
from workout_engine.models.structured_workout import RepeatGroup, Step, WorkoutStep
from workout_engine.models.workout import Workout
from workout_engine.serialization.common import validate_for_export

logger = logging.getLogger(__name__)

_SPORT_KEYS = {
    Sport.RUNNING: "RUNNING",
    Sport.CYCLING: "CYCLING",
    Sport.SWIMMING: "LAP_SWIMMING",
}

_INTENSITY_KEYS = {
    StepType.WARMUP: "WARMUP",
    StepType.COOLDOWN: "COOLDOWN",
    StepType.ACTIVE: "ACTIVE",
    StepType.RECOVERY: "RECOVERY",
    StepType.REST: "REST",
}

_STROKE_KEYS = {
    SwimStroke.FREE: "FREESTYLE",
    SwimStroke.BACKSTROKE: "BACKSTROKE",
    SwimStroke.BREASTSTROKE: "BREASTSTROKE",
    SwimStroke.FLY: "BUTTERFLY",
    SwimStroke.IM: "IM",
    SwimStroke.RIMO: "RIMO",
    SwimStroke.CHOICE: "CHOICE",
    SwimStroke.MIXED: "MIXED",
}

_DRILL_KEYS = {
    SwimDrill.KICK: "KICK",
    SwimDrill.PULL: "PULL",
    SwimDrill.DRILL: "BUTTERFLY",
}

_EQUIPMENT_KEYS = {
    SwimEquipment.FINS: "SWIM_FINS",
    SwimEquipment.KICKBOARD: "SWIM_KICKBOARD",
    SwimEquipment.PADDLES: "SWIM_PADDLES",
    SwimEquipment.PULL_BUOY: "SWIM_PULL_BUOY",
    SwimEquipment.SNORKEL: "SWIM_SNORKEL",
}

# Swim instruction levels for the secondary target
_SWIM_INTENSITY_CODES = {
    SwimIntensity.RECOVERY: 1,
    SwimIntensity.EASY: 3,
    SwimIntensity.MODERATE: 4,
    SwimIntensity.HARD: 5,
    SwimIntensity.VERY_HARD: 6,
    SwimIntensity.MAXIMUM: 7,
}
_DEFAULT_SWIM_INTENSITY_CODE = 4

_POOL_LENGTH_UNIT = "METER"


def to_training_api_json(workout: Workout, group: bool = False) -> dict:
    """Convert a Workout to a Training API workout document.

    With ``group=True`` the top-level leaves are first run through repeat
    detection so runs of identical steps are sent as repeat steps.
    """
    validate_for_export(workout)
    sport = _SPORT_KEYS[workout.sport]
    steps = _group_top_level(workout.steps) if group else list(workout.steps)

    orders = count(1)
    converted = [_convert(step, orders, workout.sport) for step in steps]

    is_swim = workout.sport == Sport.SWIMMING
    pool_length = (workout.pool_length_m or config.DEFAULT_POOL_LENGTH_M) if is_swim else None
    pool_unit = _POOL_LENGTH_UNIT if is_swim else None

    document = {
        "workoutName": workout.name,
        "description": workout.description or config.DEFAULT_WORKOUT_DESCRIPTION,
        "sport": sport,
        "workoutProvider": config.WORKOUT_PROVIDER,
        "workoutSourceId": config.WORKOUT_PROVIDER,
        "isSessionTransitionEnabled": False,
        "segments": [
            {
                "segmentOrder": 1,
                "sport": sport,
                "poolLength": pool_length,
                "poolLengthUnit": pool_unit,
                "steps": converted,
            }
        ],
    }
    if is_swim:
        document["poolLength"] = pool_length
        document["poolLengthUnit"] = pool_unit

    logger.info(
        "Built Training API document for %r (%s, %d top-level steps)",
        workout.name, sport, len(converted),
    )
    return document


def to_training_api_json_string(workout: Workout, group: bool = False, indent: int = 2) -> str:
    """Convert a Workout to a Training API JSON string."""
    return json.dumps(to_training_api_json(workout, group=group), indent=indent)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _group_top_level(steps: tuple[Step, ...]) -> list[Step]:
    """Run repeat detection over each run of consecutive top-level leaves."""
    result: list[Step] = []
    run: list[WorkoutStep] = []
    for step in steps:
        if isinstance(step, WorkoutStep):
            run.append(step)
            continue
        result.extend(group_repeats(run))
        run = []
        result.append(step)
    result.extend(group_repeats(run))
    return result


def _convert(step: Step, orders: Iterator[int], sport: Sport) -> dict:
    if isinstance(step, RepeatGroup):
        return _convert_repeat(step, orders, sport)
    if isinstance(step, WorkoutStep):
        return _convert_step(step, next(orders), sport)
    raise TypeError(f"Unsupported step node: {type(step).__name__}")


def _convert_repeat(group: RepeatGroup, orders: Iterator[int], sport: Sport) -> dict:
    step_order = next(orders)
    return {
        "type": "WorkoutRepeatStep",
        "stepOrder": step_order,
        "repeatType": "REPEAT_UNTIL_STEPS_CMPLT",
        "repeatValue": group.iterations,
        "steps": [_convert(child, orders, sport) for child in group.children],
    }


def _convert_step(step: WorkoutStep, step_order: int, sport: Sport) -> dict:
    """Build a WorkoutStep entry for a leaf."""
    details = step.details
    result = {
        "type": "WorkoutStep",
        "stepOrder": step_order,
        "intensity": _INTENSITY_KEYS[step.step_type],
        "description": step.notes or (details.swim_notes if details else None) or None,
    }
    result.update(_build_duration(step))
    result.update({
        "targetType": "OPEN",
        "targetValue": None,
        "targetValueLow": None,
        "targetValueHigh": None,
        "targetValueType": None,
        "secondaryTargetType": None,
        "secondaryTargetValue": None,
        "secondaryTargetValueLow": None,
        "secondaryTargetValueHigh": None,
        "secondaryTargetValueType": None,
        "strokeType": None,
        "drillType": None,
        "equipmentType": None,
        "exerciseCategory": None,
        "exerciseName": None,
        "weightValue": None,
        "weightDisplayUnit": None,
    })

    if sport == Sport.RUNNING:
        result.update(_running_target(step))
    elif sport == Sport.CYCLING:
        result.update(_cycling_target(step))
    elif sport == Sport.SWIMMING:
        result.update(_swimming_fields(step, result["durationType"]))
    return result


def _build_duration(step: WorkoutStep) -> dict:
    duration = step.duration
    if duration.type == DurationType.TIME and duration.value is not None:
        return {
            "durationType": "TIME",
            "durationValue": duration.value,
            "durationValueType": None,
        }
    if duration.type == DurationType.DISTANCE and duration.value is not None:
        return {
            "durationType": "DISTANCE",
            "durationValue": duration.value,
            "durationValueType": "METER",
        }
    return {"durationType": "OPEN", "durationValue": None, "durationValueType": None}


def _running_target(step: WorkoutStep) -> dict:
    """Pace target in m/s; the faster pace is the higher speed bound."""
    pace = step.details.pace_min_km if step.details else None
    if pace is None:
        return {}
    return {
        "targetType": "PACE",
        "targetValueLow": pace_min_km_to_m_per_s(pace.high),
        "targetValueHigh": pace_min_km_to_m_per_s(pace.low),
    }


def _cycling_target(step: WorkoutStep) -> dict:
    """Absolute power when known, else power as percent of reference."""
    details = step.details
    if details is None:
        return {}
    if details.watts is not None:
        return {
            "targetType": "POWER",
            "targetValueLow": details.watts.low,
            "targetValueHigh": details.watts.high,
        }
    percent = details.power_percent or details.cap_percent
    if percent is not None:
        return {
            "targetType": "POWER",
            "targetValueType": "PERCENT",
            "targetValueLow": percent.low,
            "targetValueHigh": percent.high,
        }
    return {}


def _swimming_fields(step: WorkoutStep, duration_type: str) -> dict:
    """Swim steps carry no primary target; pace or effort goes secondary."""
    fields: dict = {"targetType": None}
    details = step.details

    if details is not None:
        if details.swim_stroke is not None:
            fields["strokeType"] = _STROKE_KEYS[details.swim_stroke]
        if details.swim_drill is not None:
            fields["drillType"] = _DRILL_KEYS[details.swim_drill]
        if details.swim_equipment:
            # The document holds a single equipment slot
            fields["equipmentType"] = _EQUIPMENT_KEYS.get(details.swim_equipment[0], "NONE")
        if details.swim_intensity is not None:
            fields["secondaryTargetType"] = "SWIM_INSTRUCTION"
            fields["secondaryTargetValueLow"] = _SWIM_INTENSITY_CODES.get(
                details.swim_intensity, _DEFAULT_SWIM_INTENSITY_CODE
            )
        if details.swim_pace_min_100m is not None:
            pace = details.swim_pace_min_100m
            fields["secondaryTargetType"] = "PACE_ZONE"
            fields["secondaryTargetValueLow"] = swim_pace_to_m_per_s(pace.high)
            fields["secondaryTargetValueHigh"] = swim_pace_to_m_per_s(pace.low)

    if step.step_type == StepType.REST and duration_type == "TIME":
        fields["durationType"] = "FIXED_REST"
    return fields
