"""Core runtime primitives for SeerEngine: angles, time, zodiac and bodies."""

from __future__ import annotations

from .angles import (
    AspectMotion,
    angular_distance,
    classify_relative_motion,
    delta_angle,
    normalize_degrees,
    signed_delta,
)
from .bodies import PLANETS, TRACKED_BODIES, body_class, canonical_name, display_name
from .time import Instant, julian_centuries, julian_day, julian_day_from_datetime
from .zodiac import SIGNS, SignPosition, element_of, modality_of, sign_and_degree

__all__ = [
    "AspectMotion",
    "Instant",
    "PLANETS",
    "SIGNS",
    "SignPosition",
    "TRACKED_BODIES",
    "angular_distance",
    "body_class",
    "canonical_name",
    "classify_relative_motion",
    "delta_angle",
    "display_name",
    "element_of",
    "julian_centuries",
    "julian_day",
    "julian_day_from_datetime",
    "modality_of",
    "normalize_degrees",
    "sign_and_degree",
    "signed_delta",
]
