"""Closed-form longitude approximations for the tracked bodies.

The series below are deliberately truncated.  The Sun and Moon use a
handful of periodic terms in mean anomaly and elongation; Mercury
through Saturn add a first (and for the eccentric orbits second) order
equation of centre to a linear mean longitude; Uranus, Neptune and Pluto
move along their mean motion only.  Results are good to roughly a
degree which is enough for sign, house and aspect work but not for
precision ephemerides.

All angles are in degrees and every public function returns a longitude
normalised to ``[0, 360)``.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from types import MappingProxyType
from typing import Final, Mapping

from ..core.angles import delta_angle, normalize_degrees
from ..core.bodies import canonical_name
from ..core.time import julian_centuries
from ..exceptions import UnsupportedBodyError

__all__ = [
    "CLOSED_FORM_BODIES",
    "NEVER_RETROGRADE",
    "RETROGRADE_SAMPLE_DAYS",
    "body_longitude",
    "body_speed",
    "is_retrograde",
    "mean_lunar_nodes",
    "moon_longitude",
    "sun_longitude",
]


RETROGRADE_SAMPLE_DAYS: Final[float] = 0.5
NEVER_RETROGRADE: frozenset[str] = frozenset({"sun", "moon"})


def _sin(deg: float) -> float:
    return math.sin(math.radians(deg))


def sun_longitude(jd: float) -> float:
    """Geometric solar longitude from the mean longitude and equation of centre."""

    t = julian_centuries(jd)
    l0 = 280.4664567 + 360007.6982779 * t + 0.03032028 * t * t
    m = 357.5291092 + 35999.0502909 * t - 0.0001536 * t * t
    c = (
        (1.9146 - 0.004817 * t - 0.000014 * t * t) * _sin(m)
        + (0.019993 - 0.000101 * t) * _sin(2 * m)
        + 0.00029 * _sin(3 * m)
    )
    return normalize_degrees(l0 + c)


def moon_longitude(jd: float) -> float:
    """Lunar longitude from the six largest periodic terms."""

    t = julian_centuries(jd)
    lp = 218.3164477 + 481267.88123421 * t - 0.0015786 * t * t
    d = 297.8501921 + 445267.1114034 * t - 0.0018819 * t * t
    m = 357.5291092 + 35999.0502909 * t - 0.0001536 * t * t
    mp = 134.9633964 + 477198.8675055 * t + 0.0087414 * t * t
    f = 93.2720950 + 483202.0175233 * t - 0.0036539 * t * t
    lon = (
        lp
        + 6.289 * _sin(mp)
        + 1.274 * _sin(2 * d - mp)
        + 0.658 * _sin(2 * d)
        + 0.214 * _sin(2 * mp)
        - 0.186 * _sin(m)
        - 0.114 * _sin(2 * f)
    )
    return normalize_degrees(lon)


# (L0, L rate, M0, M rate, eccentricity, second order term)
_KEPLERIAN: Mapping[str, tuple[float, float, float, float, float, bool]] = MappingProxyType(
    {
        "mercury": (252.2509, 149472.6746, 174.7948, 149472.5153, 0.2056, True),
        "venus": (181.9798, 58517.8157, 50.4161, 58517.8039, 0.0068, False),
        "mars": (355.4330, 19140.2993, 19.3730, 19139.8585, 0.0934, True),
        "jupiter": (34.3515, 3034.9057, 20.0202, 3034.6874, 0.0484, False),
        "saturn": (50.0774, 1222.1138, 317.0207, 1222.1138, 0.0542, False),
    }
)

# Mean motion only: (L0, L rate)
_MEAN_MOTION: Mapping[str, tuple[float, float]] = MappingProxyType(
    {
        "uranus": (314.0550, 428.4669),
        "neptune": (304.3487, 218.4602),
        "pluto": (238.9288, 145.1781),
    }
)


def _keplerian_longitude(body: str, jd: float) -> float:
    l0, l_rate, m0, m_rate, ecc, second_order = _KEPLERIAN[body]
    t = julian_centuries(jd)
    mean_lon = l0 + l_rate * t
    m = math.radians(m0 + m_rate * t)
    v = m + 2 * ecc * math.sin(m)
    if second_order:
        v += 1.25 * ecc * ecc * math.sin(2 * m)
    return normalize_degrees(mean_lon + math.degrees(v - m))


def _mean_motion_longitude(body: str, jd: float) -> float:
    l0, l_rate = _MEAN_MOTION[body]
    return normalize_degrees(l0 + l_rate * julian_centuries(jd))


def mean_lunar_nodes(jd: float) -> tuple[float, float]:
    """Return ``(north, south)`` mean lunar node longitudes.

    The mean ascending node regresses through the zodiac; the South Node
    is always exactly opposite.
    """

    t = julian_centuries(jd)
    north = normalize_degrees(
        125.0445479
        - 1934.1362891 * t
        + 0.0020754 * t * t
        + t * t * t / 467441.0
        - t * t * t * t / 60616000.0
    )
    return north, normalize_degrees(north + 180.0)


def _north_node(jd: float) -> float:
    return mean_lunar_nodes(jd)[0]


def _south_node(jd: float) -> float:
    return mean_lunar_nodes(jd)[1]


_FORMULAS: dict[str, Callable[[float], float]] = {
    "sun": sun_longitude,
    "moon": moon_longitude,
    "north_node": _north_node,
    "south_node": _south_node,
}
for _name in _KEPLERIAN:
    _FORMULAS[_name] = lambda jd, _b=_name: _keplerian_longitude(_b, jd)
for _name in _MEAN_MOTION:
    _FORMULAS[_name] = lambda jd, _b=_name: _mean_motion_longitude(_b, jd)

CLOSED_FORM_BODIES: frozenset[str] = frozenset(_FORMULAS)


def body_longitude(body: str, jd: float) -> float:
    """Ecliptic longitude of ``body`` at Julian day ``jd``.

    Raises
    ------
    UnsupportedBodyError
        When ``body`` has no closed-form series (e.g. ``chiron``).
    """

    key = canonical_name(body)
    try:
        formula = _FORMULAS[key]
    except KeyError as exc:
        raise UnsupportedBodyError(key, provider_id="closed_form") from exc
    return formula(jd)


LongitudeFn = Callable[[str, float], float]


def body_speed(
    body: str,
    jd: float,
    longitude_fn: LongitudeFn = body_longitude,
) -> float:
    """Daily motion in degrees from a central difference over one day."""

    before = longitude_fn(body, jd - RETROGRADE_SAMPLE_DAYS)
    after = longitude_fn(body, jd + RETROGRADE_SAMPLE_DAYS)
    return delta_angle(before, after) / (2 * RETROGRADE_SAMPLE_DAYS)


def is_retrograde(
    body: str,
    jd: float,
    longitude_fn: LongitudeFn = body_longitude,
) -> bool:
    """Return ``True`` when ``body`` moves backwards through the zodiac at ``jd``.

    The Sun and Moon are never retrograde.
    """

    if canonical_name(body) in NEVER_RETROGRADE:
        return False
    return body_speed(body, jd, longitude_fn) < 0.0
