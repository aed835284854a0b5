"""FIT workout file encoding.

The workout is first reduced to plain records carrying the FIT native
units (milliseconds, centimeters, seconds since the FIT epoch), then
written with fit_tool. Composite steps are flattened with their
iterations expanded, so the file holds one workout_step per leaf.

All functions are pure (no I/O); the file is built in memory.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone

from fit_tool.fit_file_builder import FitFileBuilder
from fit_tool.profile.messages.file_id_message import FileIdMessage
from fit_tool.profile.messages.workout_message import WorkoutMessage
from fit_tool.profile.messages.workout_step_message import WorkoutStepMessage
from fit_tool.profile.profile_type import (
    FileType,
    Intensity,
    SubSport,
    WorkoutStepDuration,
    WorkoutStepTarget,
)
from fit_tool.profile.profile_type import Sport as FitSport

from workout_engine import config
from workout_engine.models.enums import DurationType, Sport, StepType
from workout_engine.models.structured_workout import WorkoutStep, flatten_steps
from workout_engine.models.workout import Workout
from workout_engine.serialization.common import validate_for_export

logger = logging.getLogger(__name__)

# FIT epoch is 1989-12-31T00:00:00Z
FIT_EPOCH = datetime(1989, 12, 31, tzinfo=timezone.utc)
FIT_EPOCH_UNIX_OFFSET_S = 631065600

_FIT_NAME_MAX = 20

_FILE_TYPE_WORKOUT = 5
_MANUFACTURER_GARMIN = 1

_SPORT_CODES = {
    Sport.RUNNING: (1, 0),     # running / generic
    Sport.CYCLING: (2, 0),     # cycling / generic
    Sport.SWIMMING: (5, 17),   # swimming / lap_swimming
}

_INTENSITY_CODES = {
    StepType.ACTIVE: 0,
    StepType.REST: 1,
    StepType.WARMUP: 2,
    StepType.COOLDOWN: 3,
    StepType.RECOVERY: 4,
}

_DURATION_TIME = 0
_DURATION_DISTANCE = 1
_DURATION_OPEN = 5
_TARGET_OPEN = 2


@dataclass(frozen=True)
class FileIdRecord:
    type: int
    manufacturer: int
    product: int
    serial_number: int
    time_created: int  # seconds since FIT_EPOCH


@dataclass(frozen=True)
class WorkoutRecord:
    sport: int
    sub_sport: int
    num_valid_steps: int
    workout_name: str


@dataclass(frozen=True)
class WorkoutStepRecord:
    message_index: int
    workout_step_name: str
    intensity: int
    duration_type: int
    duration_value: int    # ms for time, cm for distance, 0 for open
    target_type: int = _TARGET_OPEN


@dataclass(frozen=True)
class FitRecords:
    file_id: FileIdRecord
    workout: WorkoutRecord
    steps: tuple[WorkoutStepRecord, ...]


def fit_timestamp(moment: datetime) -> int:
    """Whole seconds between the FIT epoch and ``moment`` (naive means UTC)."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int((moment - FIT_EPOCH).total_seconds())


def fit_filename(workout: Workout) -> str:
    """Download filename: non-alphanumerics become underscores."""
    return re.sub(r"[^a-zA-Z0-9]", "_", workout.name) + ".fit"


# ---------------------------------------------------------------------------
# Record building
# ---------------------------------------------------------------------------


def _step_record(index: int, step: WorkoutStep) -> WorkoutStepRecord:
    duration = step.duration
    if duration.type == DurationType.TIME and duration.value:
        duration_type, value = _DURATION_TIME, round(duration.value * 1000)
    elif duration.type == DurationType.DISTANCE and duration.value:
        duration_type, value = _DURATION_DISTANCE, round(duration.value * 100)
    else:
        duration_type, value = _DURATION_OPEN, 0

    return WorkoutStepRecord(
        message_index=index,
        workout_step_name=(step.name or step.step_type.value)[:_FIT_NAME_MAX],
        intensity=_INTENSITY_CODES[step.step_type],
        duration_type=duration_type,
        duration_value=value,
    )


def build_fit_records(workout: Workout) -> FitRecords:
    """Reduce a workout to the three FIT message kinds, in file order."""
    validate_for_export(workout)
    leaves = flatten_steps(workout.steps)
    sport, sub_sport = _SPORT_CODES[workout.sport]

    return FitRecords(
        file_id=FileIdRecord(
            type=_FILE_TYPE_WORKOUT,
            manufacturer=_MANUFACTURER_GARMIN,
            product=config.FIT_PRODUCT_ID,
            serial_number=config.FIT_SERIAL_NUMBER,
            time_created=fit_timestamp(workout.date),
        ),
        workout=WorkoutRecord(
            sport=sport,
            sub_sport=sub_sport,
            num_valid_steps=len(leaves),
            workout_name=workout.name[:_FIT_NAME_MAX],
        ),
        steps=tuple(_step_record(i, leaf) for i, leaf in enumerate(leaves)),
    )


# ---------------------------------------------------------------------------
# Binary writing
# ---------------------------------------------------------------------------


def _file_id_message(record: FileIdRecord) -> FileIdMessage:
    message = FileIdMessage()
    message.type = FileType(record.type)
    message.manufacturer = record.manufacturer
    message.product = record.product
    message.serial_number = record.serial_number
    # fit_tool takes Unix milliseconds and stores FIT-epoch seconds
    message.time_created = (record.time_created + FIT_EPOCH_UNIX_OFFSET_S) * 1000
    return message


def _workout_message(record: WorkoutRecord) -> WorkoutMessage:
    message = WorkoutMessage()
    message.sport = FitSport(record.sport)
    message.sub_sport = SubSport(record.sub_sport)
    message.num_valid_steps = record.num_valid_steps
    message.workout_name = record.workout_name
    return message


def _step_message(record: WorkoutStepRecord) -> WorkoutStepMessage:
    message = WorkoutStepMessage()
    message.message_index = record.message_index
    message.workout_step_name = record.workout_step_name
    message.intensity = Intensity(record.intensity)
    # duration_type first: it selects which sub-field the value lands in
    message.duration_type = WorkoutStepDuration(record.duration_type)
    if record.duration_type == _DURATION_TIME:
        message.duration_time = record.duration_value / 1000.0
    elif record.duration_type == _DURATION_DISTANCE:
        message.duration_distance = record.duration_value / 100.0
    else:
        message.duration_value = 0
    message.target_type = WorkoutStepTarget(record.target_type)
    return message


def encode_fit(workout: Workout) -> bytes:
    """Encode a workout as FIT file bytes."""
    records = build_fit_records(workout)

    builder = FitFileBuilder(auto_define=True, min_string_size=50)
    builder.add(_file_id_message(records.file_id))
    builder.add(_workout_message(records.workout))
    for step in records.steps:
        builder.add(_step_message(step))

    data = builder.build().to_bytes()
    logger.info(
        "Encoded FIT workout %r: %d steps, %d bytes",
        workout.name, len(records.steps), len(data),
    )
    return data
