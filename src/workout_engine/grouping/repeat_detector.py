"""Repeat-block detection over flat step sequences.

One scanner serves every caller. The preview uses the default window
(patterns of 1-4 steps, partial trailing matches allowed, full detail
comparison); the legacy Connect encoder narrows it to patterns of 2-3
steps compared on type and duration only, with no partial match.

Scanning left to right from position ``i``, each candidate pattern length
takes the next ``len`` steps and consumes following chunks while they are
similar. With ``allow_partial``, when the steps left over after the full
repetitions are fewer than the pattern and match its beginning, they count
as one more repetition. The length with the highest ``repeat_count * len``
wins, ties going to the shorter pattern. With ``shortest_first`` the first
qualifying length wins instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence, Union

from workout_engine.models.enums import (
    MIN_REPEATS,
    PREVIEW_MAX_PATTERN,
    PREVIEW_MIN_PATTERN,
)
from workout_engine.models.structured_workout import RepeatGroup, Step, WorkoutStep

logger = logging.getLogger(__name__)

SimilarityPredicate = Callable[[WorkoutStep, WorkoutStep], bool]


@dataclass(frozen=True)
class SingleBlock:
    step: WorkoutStep

    @property
    def steps(self) -> tuple[WorkoutStep, ...]:
        return (self.step,)


@dataclass(frozen=True)
class RepeatBlock:
    """A run of repetitions of ``pattern``.

    ``steps`` holds every consumed step in input order; ``partial`` is the
    length of the trailing incomplete repetition (0 when there is none) and
    is included in ``repeat_count``.
    """

    pattern: tuple[WorkoutStep, ...]
    repeat_count: int
    steps: tuple[WorkoutStep, ...]
    partial: int = 0

    @property
    def full_repetitions(self) -> int:
        return self.repeat_count - 1 if self.partial else self.repeat_count


Block = Union[SingleBlock, RepeatBlock]


# ---------------------------------------------------------------------------
# Similarity predicates
# ---------------------------------------------------------------------------


def steps_are_similar(a: WorkoutStep, b: WorkoutStep) -> bool:
    """Same type, same duration and the same populated detail fields."""
    return same_type_and_duration(a, b) and a.detail_fields() == b.detail_fields()


def same_type_and_duration(a: WorkoutStep, b: WorkoutStep) -> bool:
    return (
        a.step_type == b.step_type
        and a.duration.type == b.duration.type
        and a.duration.value == b.duration.value
    )


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Candidate:
    length: int
    full: int
    partial: int

    @property
    def repeat_count(self) -> int:
        return self.full + (1 if self.partial else 0)

    @property
    def score(self) -> int:
        return self.repeat_count * self.length

    @property
    def consumed(self) -> int:
        return self.full * self.length + self.partial


def _chunk_matches(
    pattern: Sequence[WorkoutStep],
    chunk: Sequence[WorkoutStep],
    similar: SimilarityPredicate,
) -> bool:
    return len(chunk) == len(pattern) and all(
        similar(p, c) for p, c in zip(pattern, chunk)
    )


def _measure(
    steps: Sequence[WorkoutStep],
    start: int,
    length: int,
    similar: SimilarityPredicate,
    allow_partial: bool,
) -> _Candidate:
    pattern = steps[start:start + length]
    full = 1
    j = start + length
    while j + length <= len(steps) and _chunk_matches(pattern, steps[j:j + length], similar):
        full += 1
        j += length

    partial = 0
    remaining = len(steps) - j
    if allow_partial and 0 < remaining < length:
        if _chunk_matches(pattern[:remaining], steps[j:], similar):
            partial = remaining
    return _Candidate(length=length, full=full, partial=partial)


def detect_repeat_blocks(
    steps: Sequence[WorkoutStep],
    *,
    similar: SimilarityPredicate = steps_are_similar,
    min_pattern: int = PREVIEW_MIN_PATTERN,
    max_pattern: int = PREVIEW_MAX_PATTERN,
    min_repeats: int = MIN_REPEATS,
    allow_partial: bool = True,
    shortest_first: bool = False,
) -> list[Block]:
    """Compact a flat step sequence into single and repeat blocks.

    Every input step lands in exactly one block, in order.
    """
    steps = list(steps)
    for step in steps:
        if not isinstance(step, WorkoutStep):
            raise TypeError(f"Repeat detection needs leaf steps, got {type(step).__name__}")

    blocks: list[Block] = []
    i = 0
    while i < len(steps):
        best: _Candidate | None = None
        for length in range(min_pattern, min(max_pattern, len(steps) - i) + 1):
            candidate = _measure(steps, i, length, similar, allow_partial)
            if candidate.repeat_count < min_repeats:
                continue
            if best is None or candidate.score > best.score:
                best = candidate
            if shortest_first:
                break

        if best is None:
            blocks.append(SingleBlock(steps[i]))
            i += 1
            continue

        consumed = tuple(steps[i:i + best.consumed])
        logger.debug(
            "Repeat at %d: pattern of %d x %d (partial %d)",
            i, best.length, best.repeat_count, best.partial,
        )
        blocks.append(RepeatBlock(
            pattern=consumed[:best.length],
            repeat_count=best.repeat_count,
            steps=consumed,
            partial=best.partial,
        ))
        i += best.consumed
    return blocks


def flatten_blocks(blocks: Sequence[Block]) -> list[WorkoutStep]:
    """Inverse of :func:`detect_repeat_blocks`."""
    flat: list[WorkoutStep] = []
    for block in blocks:
        flat.extend(block.steps)
    return flat


def blocks_to_steps(blocks: Sequence[Block]) -> list[Step]:
    """Turn detected blocks into model steps.

    A repeat block becomes ``RepeatGroup(pattern, full_repetitions)``
    followed by the leaves of any partial trailing repetition. Fewer than
    two full repetitions do not make a group.
    """
    result: list[Step] = []
    for block in blocks:
        if isinstance(block, SingleBlock):
            result.append(block.step)
        elif isinstance(block, RepeatBlock):
            full = block.full_repetitions
            if full < MIN_REPEATS:
                result.extend(block.steps)
                continue
            result.append(RepeatGroup(children=block.pattern, iterations=full))
            result.extend(block.steps[full * len(block.pattern):])
        else:
            raise TypeError(f"Unsupported block: {type(block).__name__}")
    return result


def group_repeats(steps: Sequence[WorkoutStep], **options) -> list[Step]:
    """Detect repeats in a flat sequence and return grouped model steps."""
    return blocks_to_steps(detect_repeat_blocks(steps, **options))
