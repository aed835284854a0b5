"""Text parsing: structured and inline workout descriptions."""

from workout_engine.parsing.text_parser import (
    classify_step_type,
    is_structured_format,
    parse_duration_token,
    parse_simple,
    parse_structured,
    parse_workout_text,
    step_name,
    workout_from_text,
)

__all__ = [
    "classify_step_type",
    "is_structured_format",
    "parse_duration_token",
    "parse_simple",
    "parse_structured",
    "parse_workout_text",
    "step_name",
    "workout_from_text",
]
