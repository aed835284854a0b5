"""Enumerations and fixed constants for the workout engine.

Values are the canonical lower-case labels used across the model; the
target-format codes live next to each encoder.
"""

from __future__ import annotations

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class Sport(str, Enum):
    """Sports a workout can be authored for."""

    RUNNING = "running"
    CYCLING = "cycling"
    SWIMMING = "swimming"

    @classmethod
    def parse(cls, value: "Sport | str | None") -> "Sport":
        """Resolve a sport label, falling back to RUNNING when unrecognized."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning("Unknown sport %r, falling back to running", value)
            return cls.RUNNING


class StepType(str, Enum):
    """Workout step types."""

    WARMUP = "warmup"
    ACTIVE = "active"
    RECOVERY = "recovery"
    COOLDOWN = "cooldown"
    REST = "rest"


class DurationType(str, Enum):
    """How a workout step ends."""

    TIME = "time"          # seconds
    DISTANCE = "distance"  # meters
    OPEN = "open"          # lap button


class SwimStroke(str, Enum):
    FREE = "free"
    BACKSTROKE = "backstroke"
    BREASTSTROKE = "breaststroke"
    FLY = "fly"
    IM = "im"
    RIMO = "rimo"          # reverse individual medley
    CHOICE = "choice"
    MIXED = "mixed"


class SwimEquipment(str, Enum):
    FINS = "fins"
    KICKBOARD = "kickboard"
    PADDLES = "paddles"
    PULL_BUOY = "pull_buoy"
    SNORKEL = "snorkel"


class SwimDrill(str, Enum):
    KICK = "kick"
    PULL = "pull"
    DRILL = "drill"


class SwimIntensity(str, Enum):
    RECOVERY = "recovery"
    EASY = "easy"
    MODERATE = "moderate"
    HARD = "hard"
    VERY_HARD = "very_hard"
    MAXIMUM = "maximum"
    ASCENDING = "ascending"
    DESCENDING = "descending"


# ---------------------------------------------------------------------------
# Zones from percent-of-reference
# ---------------------------------------------------------------------------
# Upper bound (inclusive) of the averaged percent for each zone; above the
# last bound is zone 5.
ZONE_PERCENT_BREAKPOINTS: tuple[tuple[float, int], ...] = (
    (60.0, 1),
    (75.0, 2),
    (90.0, 3),
    (105.0, 4),
)
MAX_ZONE = 5
MIN_ZONE = 1

# Zones assigned by the inline grammar when nothing more specific is given
INTERVAL_ZONE = 4
RECOVERY_ZONE = 1
EASY_ZONE = 2

# ---------------------------------------------------------------------------
# Repeat detection windows
# ---------------------------------------------------------------------------
PREVIEW_MIN_PATTERN = 1
PREVIEW_MAX_PATTERN = 4
CONNECT_MIN_PATTERN = 2
CONNECT_MAX_PATTERN = 3
MIN_REPEATS = 2

# A repeat group may hold at most one further level of repeat groups
MAX_REPEAT_DEPTH = 2
