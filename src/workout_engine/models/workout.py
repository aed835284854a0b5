"""Workout: the top-level model consumed by every encoder."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from workout_engine.models.enums import Sport
from workout_engine.models.structured_workout import Step


def new_workout_id() -> str:
    """Short random identifier for a freshly authored workout."""
    return uuid.uuid4().hex[:8]


@dataclass(frozen=True)
class Workout:
    """A complete workout: metadata plus an ordered step sequence.

    ``sport`` accepts a label and falls back to running when unrecognized.
    A naive ``date`` is taken to be UTC. ``pool_length_m`` only matters for
    swimming; ``None`` means the configured default.
    """

    name: str
    sport: Sport
    steps: tuple[Step, ...]
    date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    description: str = ""
    workout_id: str = field(default_factory=new_workout_id)
    pool_length_m: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "sport", Sport.parse(self.sport))
        if not isinstance(self.steps, tuple):
            object.__setattr__(self, "steps", tuple(self.steps))
        if self.date.tzinfo is None:
            object.__setattr__(self, "date", self.date.replace(tzinfo=timezone.utc))
