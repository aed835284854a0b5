"""Pace, speed, power and swim-pace conversions.

Running pace is expressed in decimal minutes per km (4.5 = 4:30/km), swim
pace in decimal minutes per 100 m. Percent-of-reference ranges scale
*speed*, so an ascending percent gives a descending pace: ``percent.low``
maps to the slower (higher) pace and ``percent.high`` to the faster (lower)
one. Power scales directly with percent.
"""

from __future__ import annotations

import math
import re

from workout_engine.models.enums import MAX_ZONE, ZONE_PERCENT_BREAKPOINTS
from workout_engine.models.structured_workout import Range

_PACE_PATTERN = re.compile(r"^\s*(\d+)\s*[:'′]\s*(\d{1,2})\s*$")


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def pace_to_speed_kmh(pace_min_km: float) -> float:
    """Pace in min/km to speed in km/h. 5:00/km -> 12 km/h."""
    return 60.0 / pace_min_km


def speed_kmh_to_pace(speed_kmh: float) -> float:
    """Speed in km/h to pace in min/km. 12 km/h -> 5.0 min/km."""
    return 60.0 / speed_kmh


def pace_min_km_to_m_per_s(pace_min_km: float) -> float:
    """Pace in min/km to speed in m/s. 5:00/km -> 3.333 m/s."""
    return 1000.0 / (pace_min_km * 60.0)


def swim_pace_to_m_per_s(pace_min_100m: float) -> float:
    """Swim pace in min/100 m to speed in m/s. 2:00/100m -> 0.833 m/s."""
    return 100.0 / (pace_min_100m * 60.0)


def parse_pace(text: str) -> float | None:
    """Parse ``"4:30"``, ``"4'30"`` or ``"4.5"`` into decimal minutes.

    Returns None for blank or unparseable input and for non-positive values.
    """
    if not text or not text.strip():
        return None
    match = _PACE_PATTERN.match(text)
    if match:
        return int(match.group(1)) + int(match.group(2)) / 60.0
    try:
        value = float(text.strip().replace(",", "."))
    except ValueError:
        return None
    return value if value > 0 else None


def format_pace(pace_min: float) -> str:
    """Format decimal minutes as ``M'SS``. 4.5 -> ``4'30``."""
    minutes = int(pace_min)
    seconds = round_half_up((pace_min - minutes) * 60)
    if seconds == 60:
        minutes += 1
        seconds = 0
    return f"{minutes}'{seconds:02d}"


def speed_range_from_percent(percent: Range, reference_pace_min_km: float) -> Range:
    """Absolute speed range (km/h) for a percent-of-reference-speed range."""
    reference_speed = pace_to_speed_kmh(reference_pace_min_km)
    return Range(
        reference_speed * percent.low / 100.0,
        reference_speed * percent.high / 100.0,
    )


def pace_range_from_percent(percent: Range, reference_pace_min_km: float) -> Range:
    """Absolute pace range (min/km) for a percent-of-reference-speed range.

    ``percent.high`` gives ``pace.low`` (faster) and ``percent.low`` gives
    ``pace.high`` (slower). 80-100 % of 5:00/km -> 5:00-6:15/km.
    """
    speed = speed_range_from_percent(percent, reference_pace_min_km)
    return Range(speed_kmh_to_pace(speed.high), speed_kmh_to_pace(speed.low))


def watts_range_from_percent(percent: Range, reference_watts: float) -> Range:
    """Absolute power range; watts scale directly with percent."""
    return Range(
        round_half_up(reference_watts * percent.low / 100.0),
        round_half_up(reference_watts * percent.high / 100.0),
    )


def swim_pace_range_from_percent(percent: Range, reference_pace_min_100m: float) -> Range:
    """Absolute swim pace range (min/100 m), same inversion as running pace."""
    reference_speed = 100.0 / reference_pace_min_100m  # m/min
    speed_low = reference_speed * percent.low / 100.0
    speed_high = reference_speed * percent.high / 100.0
    return Range(100.0 / speed_high, 100.0 / speed_low)


def estimated_distance(duration_s: float, pace_min_km: Range) -> Range:
    """Distance covered in ``duration_s`` across a pace range, in meters.

    The slower pace bound gives the shorter distance.
    """
    duration_min = duration_s / 60.0
    return Range(
        round_half_up(duration_min / pace_min_km.high * 1000),
        round_half_up(duration_min / pace_min_km.low * 1000),
    )


def zone_from_percent(low: float, high: float | None = None) -> int:
    """Zone 1-5 from a percent-of-reference value or range average.

    Breakpoints on the average: <=60 -> 1, <=75 -> 2, <=90 -> 3,
    <=105 -> 4, else 5.
    """
    average = (low + high) / 2 if high is not None else low
    for upper, zone in ZONE_PERCENT_BREAKPOINTS:
        if average <= upper:
            return zone
    return MAX_ZONE
