"""Repeat detection and grouping."""

from workout_engine.grouping.repeat_detector import (
    Block,
    RepeatBlock,
    SingleBlock,
    blocks_to_steps,
    detect_repeat_blocks,
    flatten_blocks,
    group_repeats,
    same_type_and_duration,
    steps_are_similar,
)

__all__ = [
    "Block",
    "RepeatBlock",
    "SingleBlock",
    "blocks_to_steps",
    "detect_repeat_blocks",
    "flatten_blocks",
    "group_repeats",
    "same_type_and_duration",
    "steps_are_similar",
]
