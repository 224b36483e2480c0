"""Aspect types, orb tables and the closest-target aspect matcher.

Orb tolerances are configuration: the natal, transit and synastry
contexts each hand their own :class:`OrbTable` to :func:`match_aspect`.
The matcher itself never changes between contexts.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Final

from ..core.angles import angular_distance

__all__ = [
    "ASPECT_ANGLES",
    "EXACT_ORB",
    "NATAL_ORBS",
    "SYNASTRY_ORBS",
    "TRANSIT_ORBS",
    "AspectMatch",
    "AspectType",
    "OrbTable",
    "match_aspect",
    "match_longitudes",
]


EXACT_ORB: Final[float] = 1.0


class AspectType(StrEnum):
    """Ptolemaic aspects plus the quincunx and semi-sextile."""

    CONJUNCTION = "conjunction"
    SEMI_SEXTILE = "semi-sextile"
    SEXTILE = "sextile"
    SQUARE = "square"
    TRINE = "trine"
    QUINCUNX = "quincunx"
    OPPOSITION = "opposition"

    @property
    def angle(self) -> float:
        return ASPECT_ANGLES[self]


ASPECT_ANGLES: Mapping[AspectType, float] = MappingProxyType(
    {
        AspectType.CONJUNCTION: 0.0,
        AspectType.SEMI_SEXTILE: 30.0,
        AspectType.SEXTILE: 60.0,
        AspectType.SQUARE: 90.0,
        AspectType.TRINE: 120.0,
        AspectType.QUINCUNX: 150.0,
        AspectType.OPPOSITION: 180.0,
    }
)


@dataclass(frozen=True)
class OrbTable:
    """Maximum orb per aspect type; aspects absent from the table never match."""

    name: str
    orbs: Mapping[AspectType, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        cleaned = {AspectType(key): float(value) for key, value in self.orbs.items()}
        for aspect, orb in cleaned.items():
            if orb < 0:
                raise ValueError(f"orb for {aspect} must be non-negative")
        object.__setattr__(self, "orbs", MappingProxyType(cleaned))

    def max_orb(self, aspect: AspectType | str) -> float:
        return self.orbs.get(AspectType(aspect), 0.0)

    def __contains__(self, aspect: object) -> bool:
        return aspect in self.orbs

    def as_dict(self) -> dict[str, float]:
        return {aspect.value: orb for aspect, orb in self.orbs.items()}

    @classmethod
    def from_mapping(cls, name: str, data: Mapping[str, float]) -> "OrbTable":
        return cls(name=name, orbs={AspectType(k): v for k, v in data.items()})


NATAL_ORBS = OrbTable(
    "natal",
    {
        AspectType.CONJUNCTION: 8.0,
        AspectType.OPPOSITION: 8.0,
        AspectType.TRINE: 7.0,
        AspectType.SQUARE: 7.0,
        AspectType.SEXTILE: 4.0,
        AspectType.QUINCUNX: 3.0,
        AspectType.SEMI_SEXTILE: 2.0,
    },
)

TRANSIT_ORBS = OrbTable(
    "transit",
    {
        AspectType.CONJUNCTION: 8.0,
        AspectType.OPPOSITION: 8.0,
        AspectType.TRINE: 6.0,
        AspectType.SQUARE: 6.0,
        AspectType.SEXTILE: 4.0,
        AspectType.QUINCUNX: 3.0,
    },
)

SYNASTRY_ORBS = OrbTable(
    "synastry",
    {
        AspectType.CONJUNCTION: 8.0,
        AspectType.OPPOSITION: 7.0,
        AspectType.TRINE: 6.0,
        AspectType.SQUARE: 6.0,
        AspectType.SEXTILE: 4.0,
        AspectType.QUINCUNX: 3.0,
    },
)


@dataclass(frozen=True)
class AspectMatch:
    aspect: AspectType
    orb: float

    @property
    def is_exact(self) -> bool:
        return self.orb < EXACT_ORB


def match_aspect(distance: float, orbs: OrbTable = NATAL_ORBS) -> AspectMatch | None:
    """Return the aspect whose target angle is closest to ``distance``.

    ``distance`` is an unsigned separation in ``[0, 180]``.  Only aspects
    whose deviation lies within their own orb qualify; among those the
    smallest deviation wins.  ``None`` means the pair is unaspected.
    """

    best: AspectMatch | None = None
    for aspect, max_orb in orbs.orbs.items():
        deviation = abs(distance - ASPECT_ANGLES[aspect])
        if deviation > max_orb:
            continue
        if best is None or deviation < best.orb:
            best = AspectMatch(aspect=aspect, orb=deviation)
    return best


def match_longitudes(a: float, b: float, orbs: OrbTable = NATAL_ORBS) -> AspectMatch | None:
    """Shortcut for ``match_aspect(angular_distance(a, b), orbs)``."""

    return match_aspect(angular_distance(a, b), orbs)
