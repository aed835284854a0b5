"""Deterministic workout text parser.

Two grammars, chosen by :func:`is_structured_format`:

* Structured (one step per line, the layout coaching platforms export)::

      15' Warmup 55%-75%
      20' Main set 85%-95%
      lap Recovery
      10' Rest

* Simple / inline (segments joined by ``+``, ``then``, commas)::

      10min warmup + 5x 400m recover 90s + 10min cooldown

Both grammars return a flat list of leaf steps; repetitions are fully
expanded. Anything the grammars do not recognise is dropped without error.
English and French keywords are understood.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime

from workout_engine import config
from workout_engine.math.conversions import zone_from_percent
from workout_engine.math.enrichment import enrich_steps
from workout_engine.models.enums import (
    EASY_ZONE,
    INTERVAL_ZONE,
    RECOVERY_ZONE,
    Sport,
    StepType,
)
from workout_engine.models.structured_workout import (
    Duration,
    Range,
    StepDetails,
    WorkoutStep,
)
from workout_engine.models.workout import Workout

logger = logging.getLogger(__name__)

# Keyword sets, checked in this order: warm-up, recovery, cooldown.
_WARMUP_KEYWORDS = ("échauffement", "echauffement", "warmup", "warm up", "warm-up")
_RECOVERY_KEYWORDS = ("récup", "recup", "repos", "recovery", "recover", "rest")
_COOLDOWN_KEYWORDS = ("retour", "cooldown", "cool down", "cool-down", "cool")

_MAIN_SET_KEYWORDS = ("corps de séance", "corps de seance", "main set")
_TEST_KEYWORDS = ("vitesse max", "max speed", "test")

_TYPE_NAMES = {
    StepType.WARMUP: "Warm-up",
    StepType.COOLDOWN: "Cool-down",
    StepType.RECOVERY: "Recovery",
    StepType.REST: "Rest",
    StepType.ACTIVE: "Active",
}

# Zone keywords for inline segments, first match wins
_ZONE_KEYWORDS: tuple[tuple[tuple[str, ...], int], ...] = (
    (("récup", "recup", "repos", "recovery", "rest", "facile", "easy"), 1),
    (("endurance", "fondamentale", "aerobic"), 2),
    (("tempo", "modéré", "modere", "moderate"), 3),
    (("seuil", "threshold", "vite", "fast"), 4),
    (("vo2", "max", "sprint"), 5),
)

# ---------------------------------------------------------------------------
# Structured grammar patterns
# ---------------------------------------------------------------------------
_PERCENT_TAIL = r"(?:\s+(\d+)\s*%(?:\s*-\s*(\d+)\s*%)?)?"
_DURATION_UNIT = r"(?:\s*(?:['′]|min\b)|(?=\s))"
_STRUCTURED_DETECT = re.compile(r"^\d+" + _DURATION_UNIT + r"\s*\w", re.IGNORECASE)
_LINE_WITH_DURATION = re.compile(
    r"^(\d+)" + _DURATION_UNIT + r"\s*(.+?)" + _PERCENT_TAIL + r"$", re.IGNORECASE
)
_LINE_LAP = re.compile(r"^lap\s+(.+?)" + _PERCENT_TAIL + r"$", re.IGNORECASE)
_LINE_LABEL_ONLY = re.compile(
    r"^([A-Za-zÀ-ÿ][A-Za-zÀ-ÿ\s\-]*?)" + _PERCENT_TAIL + r"$", re.IGNORECASE
)

# ---------------------------------------------------------------------------
# Inline grammar patterns
# ---------------------------------------------------------------------------
_SEGMENT_SPLIT = re.compile(
    r"\s*(?:\+|\bet puis\b|\band then\b|\bthen\b|\bpuis\b|\bensuite\b|,)\s*"
)
_REPEAT_X = re.compile(r"^(\d+)\s*[x×]\s*(.+)$")
_REPEAT_WORD = re.compile(r"^(\d+)\s*(?:times|fois)\s+(.+)$")
_RECOVERY_SPLIT = re.compile(
    r"^(.+?)\s+(?:(?:with|avec)\s+)?"
    r"(?:recovery|recover|récup|recup|repos|rest|rec|r)\b\.?\s*(.*)$"
)
_PERCENT_RANGE = re.compile(r"(\d+)\s*%?\s*-\s*(\d+)\s*%")
_PERCENT_SINGLE = re.compile(r"(\d+)\s*%")
_ZONE_EXPLICIT = re.compile(r"\bz(?:one)?\s*([1-5])\b")

_DURATION_PATTERNS = (
    ("hours", re.compile(r"^(\d+)h(\d+)?$")),
    ("minutes", re.compile(r"^(\d+)min(\d+)?s?$")),
    ("seconds", re.compile(r"^(\d+)s(?:ec)?$")),
    ("kilometers", re.compile(r"^(\d+(?:[.,]\d+)?)km$")),
    ("meters", re.compile(r"^(\d+)m$")),
    ("bare", re.compile(r"^(\d+)$")),
)
# A bare number above this is read as meters, otherwise as minutes
_BARE_NUMBER_METERS_THRESHOLD = 100


@dataclass(frozen=True)
class _Percent:
    low: int
    high: int


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def classify_step_type(label: str) -> StepType:
    """Classify a label by keyword: warm-up, then recovery, then cooldown."""
    text = label.lower()
    if any(k in text for k in _WARMUP_KEYWORDS):
        return StepType.WARMUP
    if any(k in text for k in _RECOVERY_KEYWORDS):
        return StepType.RECOVERY
    if any(k in text for k in _COOLDOWN_KEYWORDS):
        return StepType.COOLDOWN
    return StepType.ACTIVE


def step_name(label: str, step_type: StepType) -> str:
    text = label.lower()
    if any(k in text for k in _MAIN_SET_KEYWORDS):
        return "Main set"
    if any(k in text for k in _TEST_KEYWORDS):
        return "Max speed test"
    return _TYPE_NAMES[step_type]


def parse_duration_token(token: str) -> Duration | None:
    """Parse one token such as ``10min``, ``1h30``, ``90s``, ``1.5km``, ``400m``.

    A bare number above 100 is meters, otherwise minutes.
    """
    token = token.strip().lower()
    for kind, pattern in _DURATION_PATTERNS:
        match = pattern.match(token)
        if not match:
            continue
        if kind == "hours":
            minutes = int(match.group(2)) if match.group(2) else 0
            return Duration.time(int(match.group(1)) * 3600 + minutes * 60)
        if kind == "minutes":
            seconds = int(match.group(2)) if match.group(2) else 0
            return Duration.time(int(match.group(1)) * 60 + seconds)
        if kind == "seconds":
            return Duration.time(int(match.group(1)))
        if kind == "kilometers":
            return Duration.distance(float(match.group(1).replace(",", ".")) * 1000)
        if kind == "meters":
            return Duration.distance(int(match.group(1)))
        number = int(match.group(1))
        if number > _BARE_NUMBER_METERS_THRESHOLD:
            return Duration.distance(number)
        return Duration.time(number * 60)
    return None


def _first_duration(text: str) -> Duration | None:
    for word in text.split():
        duration = parse_duration_token(word)
        if duration is not None:
            return duration
    return None


def _percent_from_groups(low: str | None, high: str | None) -> _Percent | None:
    """Percent bounds in ascending order; a zero bound means no percent."""
    if not low:
        return None
    low_value = int(low)
    high_value = int(high) if high else low_value
    if min(low_value, high_value) <= 0:
        return None
    return _Percent(min(low_value, high_value), max(low_value, high_value))


def _keyword_zone(text: str) -> int | None:
    match = _ZONE_EXPLICIT.search(text)
    if match:
        return int(match.group(1))
    for keywords, zone in _ZONE_KEYWORDS:
        if any(k in text for k in keywords):
            return zone
    return None


# ---------------------------------------------------------------------------
# Format detection
# ---------------------------------------------------------------------------


def is_structured_format(text: str) -> bool:
    """True when at least two lines start with a duration token and a label."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    structured = [line for line in lines if _STRUCTURED_DETECT.match(line)]
    return len(structured) >= 2


# ---------------------------------------------------------------------------
# Structured grammar
# ---------------------------------------------------------------------------


def parse_structured(text: str) -> list[WorkoutStep]:
    """Parse the one-step-per-line grammar. Unrecognised lines are skipped."""
    steps: list[WorkoutStep] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        minutes: int | None = None
        is_lap = False

        match = _LINE_WITH_DURATION.match(line)
        if match:
            minutes = int(match.group(1))
            label = match.group(2).strip()
            percent = _percent_from_groups(match.group(3), match.group(4))
        else:
            match = _LINE_LAP.match(line)
            if not match:
                match = _LINE_LABEL_ONLY.match(line)
                # A bare label only counts when it names a non-active step
                if match and classify_step_type(match.group(1)) == StepType.ACTIVE:
                    match = None
            if not match:
                logger.debug("Skipping unrecognised line %r", line)
                continue
            is_lap = True
            label = match.group(1).strip()
            percent = _percent_from_groups(match.group(2), match.group(3))

        step_type = classify_step_type(label)
        name = step_name(label, step_type)

        if percent is not None:
            zone = zone_from_percent(percent.low, percent.high)
            details = StepDetails(cap_percent=Range.of(percent.low, percent.high))
        else:
            zone = _keyword_zone(label.lower())
            if zone is None and step_type == StepType.RECOVERY:
                zone = RECOVERY_ZONE
            details = None

        steps.append(WorkoutStep(
            step_type=step_type,
            name=f"{name} (lap)" if is_lap else name,
            duration=Duration.open() if is_lap or not minutes else Duration.time(minutes * 60),
            zone=zone,
            details=details,
        ))
    return steps


# ---------------------------------------------------------------------------
# Inline grammar
# ---------------------------------------------------------------------------


def _normalize_inline(text: str) -> str:
    text = re.sub(r"\s+", " ", text.lower())
    text = re.sub(r"['′]", "min", text)
    text = re.sub(r"[\"″]", "s", text)
    return text.strip()


def _expand_repetition(count: int, rest: str) -> list[WorkoutStep]:
    """Expand ``<N>x <rest>``; recovery follows every repetition but the last."""
    steps: list[WorkoutStep] = []
    recovery_match = _RECOVERY_SPLIT.match(rest)

    if recovery_match:
        main_duration = _first_duration(recovery_match.group(1))
        recovery_duration = _first_duration(recovery_match.group(2) or "")
        if main_duration is None:
            logger.debug("Dropping repetition without a duration: %r", rest)
            return steps
        for i in range(count):
            steps.append(WorkoutStep(
                step_type=StepType.ACTIVE,
                name=f"Interval {i + 1}/{count}",
                duration=main_duration,
                zone=INTERVAL_ZONE,
            ))
            if recovery_duration is not None and i < count - 1:
                steps.append(WorkoutStep(
                    step_type=StepType.RECOVERY,
                    name=_TYPE_NAMES[StepType.RECOVERY],
                    duration=recovery_duration,
                    zone=RECOVERY_ZONE,
                ))
        return steps

    duration = _first_duration(rest)
    if duration is None:
        logger.debug("Dropping repetition without a duration: %r", rest)
        return steps
    for i in range(count):
        steps.append(WorkoutStep(
            step_type=StepType.ACTIVE,
            name=f"Repetition {i + 1}/{count}",
            duration=duration,
            zone=INTERVAL_ZONE,
        ))
    return steps


def _parse_plain_segment(segment: str) -> WorkoutStep | None:
    duration = _first_duration(segment)
    if duration is None:
        logger.debug("Dropping segment without a duration: %r", segment)
        return None

    step_type = classify_step_type(segment)
    details = None
    percent = None
    percent_match = _PERCENT_RANGE.search(segment) or _PERCENT_SINGLE.search(segment)
    if percent_match:
        groups = percent_match.groups()
        percent = _percent_from_groups(groups[0], groups[1] if len(groups) > 1 else None)
    if percent is not None:
        zone: int | None = zone_from_percent(percent.low, percent.high)
        details = StepDetails(cap_percent=Range.of(percent.low, percent.high))
    else:
        zone = _keyword_zone(segment)

    if zone is None:
        if step_type in (StepType.WARMUP, StepType.COOLDOWN):
            zone = EASY_ZONE
        elif step_type == StepType.RECOVERY:
            zone = RECOVERY_ZONE

    return WorkoutStep(
        step_type=step_type,
        name=step_name(segment, step_type),
        duration=duration,
        zone=zone,
        details=details,
    )


def parse_simple(text: str) -> list[WorkoutStep]:
    """Parse the inline grammar. Segments without a duration are dropped."""
    steps: list[WorkoutStep] = []
    for segment in _SEGMENT_SPLIT.split(_normalize_inline(text)):
        segment = segment.strip()
        if not segment:
            continue
        repeat = _REPEAT_X.match(segment) or _REPEAT_WORD.match(segment)
        if repeat:
            steps.extend(_expand_repetition(int(repeat.group(1)), repeat.group(2)))
            continue
        step = _parse_plain_segment(segment)
        if step is not None:
            steps.append(step)
    return steps


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def parse_workout_text(
    text: str,
    sport: Sport = Sport.RUNNING,
    reference: float | None = None,
) -> list[WorkoutStep]:
    """Parse a workout description into a flat step list.

    When ``reference`` is given (pace min/km, watts or swim pace min/100 m
    depending on ``sport``) percent ranges are enriched into absolute
    targets.
    """
    if not text or not text.strip():
        return []
    if is_structured_format(text):
        steps = parse_structured(text)
    else:
        steps = parse_simple(text)
    if reference:
        steps = enrich_steps(steps, sport, reference)  # type: ignore[assignment]
    logger.debug("Parsed %d steps", len(steps))
    return steps


def workout_from_text(
    name: str,
    text: str,
    sport: Sport | str = Sport.RUNNING,
    date: datetime | None = None,
    reference: float | None = None,
    description: str = "",
) -> Workout:
    """Build a Workout from a text description in one call."""
    resolved = Sport.parse(sport)
    steps = parse_workout_text(text, resolved, reference)
    kwargs = {"date": date} if date is not None else {}
    return Workout(
        name=name.strip() or config.DEFAULT_WORKOUT_NAME,
        sport=resolved,
        steps=tuple(steps),
        description=description or text.strip(),
        **kwargs,
    )
