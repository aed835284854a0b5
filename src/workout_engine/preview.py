"""Plain-text preview of a workout, with repeated runs collapsed.

The preview runs the repeat detector with its default window over the
flattened steps, so what the athlete reads matches the blocks the
detector finds.
"""

from __future__ import annotations

from typing import Sequence

from workout_engine.grouping.repeat_detector import RepeatBlock, detect_repeat_blocks
from workout_engine.math.conversions import format_pace
from workout_engine.models.enums import DurationType
from workout_engine.models.structured_workout import (
    Duration,
    Step,
    WorkoutStep,
    flatten_steps,
)


def format_distance(meters: float) -> str:
    if meters >= 1000:
        return f"{meters / 1000:.2f} km"
    return f"{meters:g} m"


def format_duration(duration: Duration) -> str:
    """Short human form: ``Lap``, ``400 m``, ``1.5 km``, ``1h05``, ``4min30s``, ``10 min``, ``45s``."""
    if duration.type == DurationType.OPEN or duration.value is None:
        return "Lap"
    if duration.type == DurationType.DISTANCE:
        if duration.value >= 1000:
            km = duration.value / 1000
            return f"{km:g} km" if km == int(km) else f"{km:.1f} km"
        return f"{duration.value:g} m"

    total = int(duration.value)
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours}h{minutes:02d}" if minutes else f"{hours}h"
    if minutes:
        return f"{minutes}min{seconds:02d}s" if seconds else f"{minutes} min"
    return f"{seconds}s"


def total_duration_s(steps: Sequence[Step]) -> float:
    """Total seconds of timed steps, repeat iterations included."""
    return sum(
        s.duration.value for s in flatten_steps(steps)
        if s.duration.type == DurationType.TIME and s.duration.value
    )


def total_distance_m(steps: Sequence[Step]) -> float:
    """Total meters of distance steps, repeat iterations included."""
    return sum(
        s.duration.value for s in flatten_steps(steps)
        if s.duration.type == DurationType.DISTANCE and s.duration.value
    )


def _step_line(step: WorkoutStep) -> str:
    parts = [step.name or step.step_type.value, format_duration(step.duration)]
    if step.zone is not None:
        parts.append(f"Zone {step.zone}")

    details = step.details
    if details is not None:
        if details.cap_percent is not None:
            parts.append(f"{details.cap_percent.low:g}%-{details.cap_percent.high:g}%")
        if details.pace_min_km is not None:
            parts.append(
                f"{format_pace(details.pace_min_km.low)}-{format_pace(details.pace_min_km.high)}/km"
            )
        if details.speed_kmh is not None:
            parts.append(f"{details.speed_kmh.low:.1f}-{details.speed_kmh.high:.1f} km/h")
        if details.watts is not None:
            parts.append(f"{details.watts.low:g}-{details.watts.high:g} W")
        if details.swim_pace_min_100m is not None:
            pace = details.swim_pace_min_100m
            parts.append(f"{format_pace(pace.low)}-{format_pace(pace.high)}/100m")
        if details.distance_meters is not None:
            parts.append(
                f"{format_distance(details.distance_meters.low)}"
                f"-{format_distance(details.distance_meters.high)}"
            )
    return " | ".join(parts)


def render_preview(steps: Sequence[Step]) -> str:
    """Render steps as text lines: a header with totals, then the blocks."""
    leaves = flatten_steps(steps)
    if not leaves:
        return ""

    header = [f"{len(leaves)} step{'s' if len(leaves) > 1 else ''}"]
    seconds = total_duration_s(leaves)
    meters = total_distance_m(leaves)
    if seconds:
        header.append(format_duration(Duration.time(seconds)))
    if meters:
        header.append(format_distance(meters))

    lines = [" • ".join(header)]
    index = 1
    for block in detect_repeat_blocks(leaves):
        if isinstance(block, RepeatBlock):
            lines.append(f"{block.repeat_count}x")
            for step in block.pattern:
                lines.append(f"    {_step_line(step)}")
            index += len(block.steps)
        else:
            lines.append(f"{index}. {_step_line(block.step)}")
            index += 1
    return "\n".join(lines)
