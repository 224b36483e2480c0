"""Angular geometry: houses, ascendant/midheaven and aspect matching."""

from __future__ import annotations

from .aspects import (
    EXACT_ORB,
    NATAL_ORBS,
    SYNASTRY_ORBS,
    TRANSIT_ORBS,
    AspectMatch,
    AspectType,
    OrbTable,
    match_aspect,
    match_longitudes,
)
from .houses import ascendant, house, local_sidereal_time, midheaven, obliquity

__all__ = [
    "EXACT_ORB",
    "NATAL_ORBS",
    "SYNASTRY_ORBS",
    "TRANSIT_ORBS",
    "AspectMatch",
    "AspectType",
    "OrbTable",
    "ascendant",
    "house",
    "local_sidereal_time",
    "match_aspect",
    "match_longitudes",
    "midheaven",
    "obliquity",
]
