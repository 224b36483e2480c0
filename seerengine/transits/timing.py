"""Forward scan estimating when a transit perfects and separates."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final

from ..core.angles import angular_distance
from ..core.bodies import canonical_name
from ..ephemeris.provider import LongitudeProvider, default_provider
from ..geometry.aspects import ASPECT_ANGLES, TRANSIT_ORBS, AspectType, OrbTable

LOG = logging.getLogger(__name__)

__all__ = ["TransitTiming", "scan_transit_timing"]

NEAR_EXACT_ORB: Final[float] = 0.5


@dataclass(frozen=True)
class TransitTiming:
    current_orb: float
    applying: bool
    days_until_exact: float | None = None
    days_until_separation: float | None = None


def _orb(provider: LongitudeProvider, body: str, jd: float, natal: float, target: float) -> float:
    return abs(angular_distance(provider(body, jd), natal) - target)


def scan_transit_timing(
    natal_longitude: float,
    body: str,
    aspect: AspectType | str,
    start_jd: float,
    *,
    orbs: OrbTable = TRANSIT_ORBS,
    max_days: float = 60.0,
    provider: LongitudeProvider | None = None,
) -> TransitTiming:
    """Step ``body`` forward from ``start_jd`` against a fixed natal point.

    The Moon is sampled every two hours, every other body once a day.
    The first sample that is shrinking and within 0.5° marks the exact
    day; the first sample leaving the aspect's maximum orb ends the scan.
    """

    provider = provider or default_provider()
    key = canonical_name(body)
    aspect = AspectType(aspect)
    target = ASPECT_ANGLES[aspect]
    max_orb = orbs.max_orb(aspect)
    step = 2.0 / 24.0 if key == "moon" else 1.0

    current = _orb(provider, key, start_jd, natal_longitude, target)
    applying = _orb(provider, key, start_jd + step, natal_longitude, target) < current

    exact_day: float | None = None
    separation_day: float | None = None
    previous = current
    day = step
    while day <= max_days:
        orb = _orb(provider, key, start_jd + day, natal_longitude, target)
        if exact_day is None and previous > orb and orb < NEAR_EXACT_ORB:
            exact_day = day
        if orb > max_orb >= previous:
            separation_day = day
            break
        previous = orb
        day += step

    LOG.debug(
        "Timing scan %s %s natal %.2f: exact=%s separation=%s",
        key,
        aspect.value,
        natal_longitude,
        exact_day,
        separation_day,
    )
    return TransitTiming(
        current_orb=current,
        applying=applying,
        days_until_exact=exact_day,
        days_until_separation=separation_day,
    )
