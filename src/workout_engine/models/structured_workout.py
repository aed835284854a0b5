"""Structured workout models: leaf steps, repeat groups and their details.

A workout body is an ordered sequence of ``Step`` values, where ``Step`` is
the tagged union ``WorkoutStep | RepeatGroup``. Parsers only ever produce
flat ``WorkoutStep`` sequences; ``RepeatGroup`` nodes come from the repeat
grouping pass or from manual construction.

Durations are canonical: seconds for TIME, meters for DISTANCE.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Iterator, Sequence, Union

from workout_engine.exceptions import WorkoutValidationError
from workout_engine.models.enums import (
    MAX_REPEAT_DEPTH,
    MAX_ZONE,
    MIN_ZONE,
    DurationType,
    StepType,
    SwimDrill,
    SwimEquipment,
    SwimIntensity,
    SwimStroke,
)


@dataclass(frozen=True)
class Range:
    """Closed numeric range in a single unit. ``low`` never exceeds ``high``."""

    low: float
    high: float

    def __post_init__(self) -> None:
        if self.low > self.high:
            raise ValueError(f"Range low {self.low} exceeds high {self.high}")

    @classmethod
    def of(cls, low: float, high: float | None = None) -> Range:
        """Build a range, accepting a single value or bounds in either order."""
        if high is None:
            high = low
        return cls(min(low, high), max(low, high))


@dataclass(frozen=True)
class Duration:
    """End condition of a step: seconds, meters, or open (lap button)."""

    type: DurationType = DurationType.OPEN
    value: float | None = None

    def __post_init__(self) -> None:
        if self.value is not None and self.value < 0:
            raise ValueError(f"Duration value must be non-negative, got {self.value}")

    @classmethod
    def time(cls, seconds: float) -> Duration:
        return cls(DurationType.TIME, seconds)

    @classmethod
    def distance(cls, meters: float) -> Duration:
        return cls(DurationType.DISTANCE, meters)

    @classmethod
    def open(cls) -> Duration:
        return cls(DurationType.OPEN, None)

    @property
    def is_measured(self) -> bool:
        """True for a TIME or DISTANCE duration carrying a positive value."""
        return self.type != DurationType.OPEN and bool(self.value)


@dataclass(frozen=True)
class StepDetails:
    """Sport-specific detail block of a leaf step.

    Percent fields (``cap_percent``, ``power_percent``) are relative to an
    athlete reference value; every other range is absolute. Pace ranges are
    in min/km (running) or min/100 m (swimming) with ``low`` the faster pace.
    """

    cap_percent: Range | None = None
    power_percent: Range | None = None
    speed_kmh: Range | None = None
    pace_min_km: Range | None = None
    watts: Range | None = None
    swim_pace_min_100m: Range | None = None
    distance_meters: Range | None = None
    swim_stroke: SwimStroke | None = None
    swim_equipment: tuple[SwimEquipment, ...] = ()
    swim_drill: SwimDrill | None = None
    swim_intensity: SwimIntensity | None = None
    swim_css_offset: float | None = None
    swim_notes: str | None = None
    cadence_rpm: int | None = None

    def populated(self) -> dict[str, object]:
        """Populated fields as comparable values.

        Equipment is reduced to a sorted, comma-joined string so two steps
        listing the same kit in a different order compare equal.
        """
        result: dict[str, object] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "swim_equipment":
                if value:
                    result[f.name] = ",".join(sorted(e.value for e in value))
            elif value is not None:
                result[f.name] = value
        return result

    @property
    def is_empty(self) -> bool:
        return not self.populated()


@dataclass(frozen=True)
class WorkoutStep:
    """A single, non-composite training segment."""

    step_type: StepType
    name: str = ""
    duration: Duration = field(default_factory=Duration)
    zone: int | None = None                # 1-5
    details: StepDetails | None = None
    notes: str = ""

    def __post_init__(self) -> None:
        if self.zone is not None and not MIN_ZONE <= self.zone <= MAX_ZONE:
            raise ValueError(f"Zone must be within {MIN_ZONE}-{MAX_ZONE}, got {self.zone}")

    def detail_fields(self) -> dict[str, object]:
        return self.details.populated() if self.details is not None else {}


@dataclass(frozen=True)
class RepeatGroup:
    """N repetitions of an ordered child sequence."""

    children: tuple[Step, ...]
    iterations: int = 1

    def __post_init__(self) -> None:
        if self.iterations < 1:
            raise ValueError(f"Repeat iterations must be >= 1, got {self.iterations}")
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))


Step = Union[WorkoutStep, RepeatGroup]


def flatten_steps(steps: Sequence[Step]) -> list[WorkoutStep]:
    """Expand composites into leaves, repeating children per iteration."""
    flat: list[WorkoutStep] = []
    for step in steps:
        if isinstance(step, WorkoutStep):
            flat.append(step)
        elif isinstance(step, RepeatGroup):
            for _ in range(step.iterations):
                flat.extend(flatten_steps(step.children))
        else:
            raise TypeError(f"Unsupported step node: {type(step).__name__}")
    return flat


def iter_leaves(steps: Sequence[Step]) -> Iterator[WorkoutStep]:
    """Yield leaves in order without expanding iterations."""
    for step in steps:
        if isinstance(step, WorkoutStep):
            yield step
        elif isinstance(step, RepeatGroup):
            yield from iter_leaves(step.children)
        else:
            raise TypeError(f"Unsupported step node: {type(step).__name__}")


def repeat_depth(steps: Sequence[Step]) -> int:
    """Deepest level of RepeatGroup nesting (0 for a flat sequence)."""
    depth = 0
    for step in steps:
        if isinstance(step, RepeatGroup):
            depth = max(depth, 1 + repeat_depth(step.children))
    return depth


def validate_nesting(steps: Sequence[Step], max_depth: int = MAX_REPEAT_DEPTH) -> None:
    """Reject repeat groups nested deeper than the encoders accept."""
    depth = repeat_depth(steps)
    if depth > max_depth:
        raise WorkoutValidationError(
            f"Repeat groups nested {depth} levels deep; at most {max_depth} supported"
        )
