"""Serialization module: export workouts to device-compatible formats."""

from workout_engine.serialization.connect import to_connect_json, to_connect_json_string
from workout_engine.serialization.fit import build_fit_records, encode_fit, fit_filename
from workout_engine.serialization.training_api import (
    to_training_api_json,
    to_training_api_json_string,
)

__all__ = [
    "build_fit_records",
    "encode_fit",
    "fit_filename",
    "to_connect_json",
    "to_connect_json_string",
    "to_training_api_json",
    "to_training_api_json_string",
]
