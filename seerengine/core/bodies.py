"""Body catalogue: canonical identifiers, display names and groupings."""

from __future__ import annotations

from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

__all__ = [
    "ANGLES",
    "CORE_BODIES",
    "NODES",
    "OUTER_BODIES",
    "PLANETS",
    "TRACKED_BODIES",
    "body_class",
    "canonical_name",
    "display_name",
]


PLANETS: tuple[str, ...] = (
    "sun",
    "moon",
    "mercury",
    "venus",
    "mars",
    "jupiter",
    "saturn",
    "uranus",
    "neptune",
    "pluto",
)
NODES: tuple[str, str] = ("north_node", "south_node")
ANGLES: tuple[str, str] = ("ascendant", "midheaven")

# Bodies carried by every natal chart; chiron is appended when the
# longitude provider supports it.
TRACKED_BODIES: tuple[str, ...] = PLANETS + NODES + ("fortune",)

CORE_BODIES: tuple[str, ...] = ("sun", "moon", "mercury", "venus", "mars")
OUTER_BODIES: tuple[str, ...] = ("jupiter", "saturn", "uranus", "neptune", "pluto")


_BODY_CLASS: Mapping[str, str] = MappingProxyType(
    {
        "sun": "luminary",
        "moon": "luminary",
        "mercury": "personal",
        "venus": "personal",
        "mars": "personal",
        "jupiter": "social",
        "saturn": "social",
        "uranus": "outer",
        "neptune": "outer",
        "pluto": "outer",
        "chiron": "centaur",
        "north_node": "point",
        "south_node": "point",
        "fortune": "point",
        "ascendant": "angle",
        "midheaven": "angle",
    }
)

_BODY_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "northnode": "north_node",
        "mean_node": "north_node",
        "node": "north_node",
        "true_node": "north_node",
        "southnode": "south_node",
        "part_of_fortune": "fortune",
        "lot_of_fortune": "fortune",
        "asc": "ascendant",
        "mc": "midheaven",
    }
)

_DISPLAY_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "north_node": "North Node",
        "south_node": "South Node",
        "fortune": "Part of Fortune",
    }
)


@lru_cache(maxsize=256)
def canonical_name(name: str) -> str:
    """Return the canonical lowercase identifier for ``name``.

    Accepts display names ("North Node"), camel case ("northNode") and a
    handful of common aliases. Unknown names are returned normalised but
    otherwise untouched so lookups can fall back to neutral defaults.
    """

    key = name.strip().lower().replace(" ", "_").replace("-", "_")
    compact = key.replace("_", "")
    if key in _BODY_CLASS:
        return key
    return _BODY_ALIASES.get(key) or _BODY_ALIASES.get(compact) or key


def body_class(name: str) -> str | None:
    """Return the classification bucket for ``name`` if known."""

    return _BODY_CLASS.get(canonical_name(name))


def display_name(name: str) -> str:
    key = canonical_name(name)
    return _DISPLAY_NAMES.get(key, key.replace("_", " ").title())
