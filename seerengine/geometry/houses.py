"""Ascendant, midheaven and equal-house assignment.

The rising degree follows from local sidereal time, geographic latitude
and the obliquity of the ecliptic through the standard spherical
trigonometry relation::

    asc = atan2(cos θ, -(sin θ · cos ε + tan φ · sin ε))

where θ is the local sidereal time.  Near the poles ``tan φ`` diverges
and the result jumps discontinuously; the formula is evaluated as-is.
Houses are equal 30° segments counted from the ascendant.
"""

from __future__ import annotations

import math

from ..core.angles import normalize_degrees
from ..core.time import J2000, julian_centuries

__all__ = [
    "ascendant",
    "ascendant_from_sidereal_time",
    "greenwich_sidereal_time",
    "house",
    "local_sidereal_time",
    "midheaven",
    "obliquity",
]


def greenwich_sidereal_time(jd: float) -> float:
    """Greenwich mean sidereal time in degrees."""

    t = julian_centuries(jd)
    theta0 = (
        280.46061837
        + 360.98564736629 * (jd - J2000)
        + 0.000387933 * t * t
        - t * t * t / 38710000.0
    )
    return normalize_degrees(theta0)


def local_sidereal_time(jd: float, longitude: float) -> float:
    """Local sidereal time for an east-positive geographic ``longitude``."""

    return normalize_degrees(greenwich_sidereal_time(jd) + longitude)


def obliquity(jd: float) -> float:
    """Mean obliquity of the ecliptic (linear approximation)."""

    return 23.4393 - 0.013 * julian_centuries(jd)


def ascendant_from_sidereal_time(lst: float, latitude: float, epsilon: float) -> float:
    theta = math.radians(lst)
    eps = math.radians(epsilon)
    phi = math.radians(latitude)
    y = math.cos(theta)
    x = -(math.sin(theta) * math.cos(eps) + math.tan(phi) * math.sin(eps))
    return normalize_degrees(math.degrees(math.atan2(y, x)))


def ascendant(jd: float, latitude: float, longitude: float) -> float:
    """Ecliptic longitude rising on the eastern horizon."""

    return ascendant_from_sidereal_time(
        local_sidereal_time(jd, longitude), latitude, obliquity(jd)
    )


def midheaven(asc: float) -> float:
    """Equal-house midheaven, 90° behind the ascendant."""

    return normalize_degrees(asc + 270.0)


def house(longitude: float, asc: float) -> int:
    """Equal house (1-12) containing ``longitude``; house 1 starts at ``asc``."""

    offset = normalize_degrees(longitude - asc)
    return min(int(offset // 30.0), 11) + 1
