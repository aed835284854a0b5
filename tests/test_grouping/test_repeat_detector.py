"""Tests for repeat-block detection and grouping."""

from __future__ import annotations

import pytest

from workout_engine.grouping.repeat_detector import (
    RepeatBlock,
    SingleBlock,
    blocks_to_steps,
    detect_repeat_blocks,
    flatten_blocks,
    group_repeats,
    same_type_and_duration,
    steps_are_similar,
)
from workout_engine.models.enums import StepType, SwimEquipment
from workout_engine.models.structured_workout import (
    Duration,
    Range,
    RepeatGroup,
    StepDetails,
    WorkoutStep,
)

A = WorkoutStep(StepType.ACTIVE, "Interval", Duration.time(60), zone=4)
B = WorkoutStep(StepType.RECOVERY, "Recovery", Duration.time(30), zone=1)
C = WorkoutStep(StepType.COOLDOWN, "Cool-down", Duration.time(300), zone=2)
W = WorkoutStep(StepType.WARMUP, "Warm-up", Duration.time(600), zone=2)


def _with_details(step: WorkoutStep, **details) -> WorkoutStep:
    return WorkoutStep(step.step_type, step.name, step.duration, step.zone, StepDetails(**details))


# ---------------------------------------------------------------------------
# Similarity
# ---------------------------------------------------------------------------

class TestSimilarity:
    def test_identical_steps(self) -> None:
        assert steps_are_similar(A, A)

    def test_name_and_zone_ignored(self) -> None:
        other = WorkoutStep(StepType.ACTIVE, "Rep 2", Duration.time(60), zone=5)
        assert steps_are_similar(A, other)

    def test_duration_value_matters(self) -> None:
        other = WorkoutStep(StepType.ACTIVE, "Interval", Duration.time(61))
        assert not steps_are_similar(A, other)

    def test_one_sided_detail_breaks_similarity(self) -> None:
        assert not steps_are_similar(A, _with_details(A, cap_percent=Range(90, 95)))

    def test_equipment_order_ignored(self) -> None:
        a = _with_details(A, swim_equipment=(SwimEquipment.FINS, SwimEquipment.SNORKEL))
        b = _with_details(A, swim_equipment=(SwimEquipment.SNORKEL, SwimEquipment.FINS))
        assert steps_are_similar(a, b)

    def test_narrow_predicate_ignores_details(self) -> None:
        assert same_type_and_duration(A, _with_details(A, cap_percent=Range(90, 95)))
        assert not steps_are_similar(A, _with_details(A, cap_percent=Range(90, 95)))


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------

class TestDetectRepeatBlocks:
    def test_pattern_of_two_repeated_three_times(self) -> None:
        blocks = detect_repeat_blocks([A, B, A, B, A, B, C])
        assert len(blocks) == 2
        repeat, single = blocks
        assert isinstance(repeat, RepeatBlock)
        assert repeat.pattern == (A, B)
        assert repeat.repeat_count == 3
        assert repeat.partial == 0
        assert single == SingleBlock(C)

    def test_empty_input(self) -> None:
        assert detect_repeat_blocks([]) == []

    def test_no_repeats(self) -> None:
        blocks = detect_repeat_blocks([W, A, C])
        assert blocks == [SingleBlock(W), SingleBlock(A), SingleBlock(C)]

    def test_single_step_runs(self) -> None:
        [block] = detect_repeat_blocks([A, A, A], allow_partial=False)
        assert block.pattern == (A,)
        assert block.repeat_count == 3

    def test_partial_trailing_repetition(self) -> None:
        """Last interval without its recovery counts as one more repetition."""
        [repeat] = detect_repeat_blocks([A, B, A, B, A, B, A])
        assert repeat.pattern == (A, B)
        assert repeat.repeat_count == 4
        assert repeat.partial == 1
        assert repeat.full_repetitions == 3

    def test_partial_must_be_the_whole_tail(self) -> None:
        blocks = detect_repeat_blocks([A, B, A, B, A, C])
        repeat = blocks[0]
        assert repeat.pattern == (A, B)
        assert repeat.repeat_count == 2
        assert repeat.partial == 0
        assert blocks[1:] == [SingleBlock(A), SingleBlock(C)]

    def test_highest_count_times_length_wins(self) -> None:
        # (A, B) x 4 + A scores 10; (A, B, A, B) x 2 + A scores 12
        [repeat] = detect_repeat_blocks([A, B, A, B, A, B, A, B, A])
        assert repeat.pattern == (A, B, A, B)
        assert repeat.repeat_count == 3
        assert repeat.partial == 1
        assert len(repeat.steps) == 9

    def test_equal_scores_prefer_shorter_pattern(self) -> None:
        [repeat] = detect_repeat_blocks([A, B] * 4)
        assert repeat.pattern == (A, B)
        assert repeat.repeat_count == 4

    def test_shortest_first(self) -> None:
        blocks = detect_repeat_blocks(
            [A] * 9, min_pattern=2, max_pattern=3, allow_partial=False, shortest_first=True
        )
        assert blocks[0].pattern == (A, A)
        assert blocks[0].repeat_count == 4
        assert blocks[1] == SingleBlock(A)

    def test_partial_disabled(self) -> None:
        blocks = detect_repeat_blocks([A, B, A, B, A], allow_partial=False)
        assert blocks[0].repeat_count == 2
        assert blocks[1] == SingleBlock(A)

    def test_pattern_window(self) -> None:
        blocks = detect_repeat_blocks([A, A, A, A], min_pattern=2, max_pattern=3, allow_partial=False)
        assert blocks[0].pattern == (A, A)
        assert blocks[0].repeat_count == 2

    def test_min_repeats(self) -> None:
        blocks = detect_repeat_blocks([A, B, A, B], min_repeats=3)
        assert all(isinstance(b, SingleBlock) for b in blocks)

    def test_rejects_composites(self) -> None:
        with pytest.raises(TypeError):
            detect_repeat_blocks([RepeatGroup((A,), 2)])  # type: ignore[list-item]

    @pytest.mark.parametrize(
        "steps",
        [
            [A, B, A, B, A, B, C],
            [W, A, B, A, B, A, C],
            [A, A, B, A, A, B, A, A],
            [W, A, B, C, A, B, C, A, B, C, W],
            [B],
        ],
    )
    def test_round_trip(self, steps) -> None:
        blocks = detect_repeat_blocks(steps)
        assert flatten_blocks(blocks) == steps
        assert sum(len(b.steps) for b in blocks) == len(steps)


# ---------------------------------------------------------------------------
# Grouping into model steps
# ---------------------------------------------------------------------------

class TestBlocksToSteps:
    def test_repeat_becomes_group(self) -> None:
        steps = group_repeats([W, A, B, A, B, A, B, C])
        assert steps == [W, RepeatGroup((A, B), iterations=3), C]

    def test_partial_leaves_follow_group(self) -> None:
        steps = group_repeats([A, B, A, B, A, B, A, C])
        assert steps == [RepeatGroup((A, B), iterations=3), A, C]

    def test_single_full_repetition_stays_flat(self) -> None:
        assert group_repeats([A, B, A]) == [A, B, A]

    def test_blocks_to_steps_singles(self) -> None:
        assert blocks_to_steps([SingleBlock(A)]) == [A]
