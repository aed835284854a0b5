"""Enrichment: derive absolute targets from percent-of-reference ranges.

Each sport derives a different field from ``details.cap_percent`` and the
athlete's reference value:

    running   reference pace (min/km)   -> pace_min_km, speed_kmh, distance_meters
    cycling   reference power (W)       -> watts
    swimming  reference pace (min/100m) -> swim_pace_min_100m

Explicit beats derived: a step that already carries the absolute field is
returned unchanged, which also makes enrichment idempotent.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from workout_engine.math.conversions import (
    estimated_distance,
    pace_range_from_percent,
    speed_range_from_percent,
    swim_pace_range_from_percent,
    watts_range_from_percent,
)
from workout_engine.models.enums import DurationType, Sport
from workout_engine.models.structured_workout import RepeatGroup, Step, WorkoutStep
from workout_engine.models.workout import Workout

logger = logging.getLogger(__name__)


def enrich_step(step: WorkoutStep, sport: Sport, reference: float) -> WorkoutStep:
    """Return ``step`` with absolute targets derived for ``sport``."""
    details = step.details
    if details is None or details.cap_percent is None or reference <= 0:
        return step

    if sport == Sport.RUNNING:
        if details.pace_min_km is not None or details.speed_kmh is not None:
            return step
        pace = pace_range_from_percent(details.cap_percent, reference)
        updates = {
            "pace_min_km": pace,
            "speed_kmh": speed_range_from_percent(details.cap_percent, reference),
        }
        if (
            step.duration.type == DurationType.TIME
            and step.duration.value
            and details.distance_meters is None
        ):
            updates["distance_meters"] = estimated_distance(step.duration.value, pace)
        return replace(step, details=replace(details, **updates))

    if sport == Sport.CYCLING:
        if details.watts is not None:
            return step
        watts = watts_range_from_percent(details.cap_percent, reference)
        return replace(step, details=replace(details, watts=watts))

    if sport == Sport.SWIMMING:
        if details.swim_pace_min_100m is not None:
            return step
        swim_pace = swim_pace_range_from_percent(details.cap_percent, reference)
        return replace(step, details=replace(details, swim_pace_min_100m=swim_pace))

    return step


def enrich_steps(steps: Sequence[Step], sport: Sport, reference: float | None) -> list[Step]:
    """Enrich every leaf, recursing into repeat groups.

    A missing or non-positive reference leaves the sequence untouched.
    """
    if not reference or reference <= 0:
        return list(steps)
    enriched: list[Step] = []
    for step in steps:
        if isinstance(step, RepeatGroup):
            children = tuple(enrich_steps(step.children, sport, reference))
            enriched.append(replace(step, children=children))
        else:
            enriched.append(enrich_step(step, sport, reference))
    return enriched


def enrich_workout(workout: Workout, reference: float | None) -> Workout:
    """Enrich a workout's steps against a reference value for its sport."""
    steps = enrich_steps(workout.steps, workout.sport, reference)
    logger.debug(
        "Enriched %d steps for %s with reference %s",
        len(steps), workout.sport.value, reference,
    )
    return replace(workout, steps=tuple(steps))
