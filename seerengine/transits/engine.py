"""Cross-set aspect detection shared by daily transits and synastry.

:func:`transits` compares a *comparison* set of positions (the current
sky, or a second natal chart) against a *reference* set (a natal chart)
and returns one :class:`Aspect` per matching body pair, tightest first.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from itertools import combinations
from typing import Any

from ..core.angles import angular_distance, classify_relative_motion
from ..core.bodies import PLANETS, canonical_name, display_name
from ..ephemeris.positions import BodyPosition
from ..geometry.aspects import (
    ASPECT_ANGLES,
    NATAL_ORBS,
    TRANSIT_ORBS,
    AspectType,
    OrbTable,
    match_aspect,
)

LOG = logging.getLogger(__name__)

__all__ = ["Aspect", "natal_aspects", "transits"]


@dataclass(frozen=True)
class Aspect:
    """A matched angular relationship between two bodies.

    ``body_a`` belongs to the comparison set (the transiting body, or the
    first synastry partner) and ``body_b`` to the reference set.
    """

    body_a: str
    body_b: str
    aspect: AspectType
    orb: float
    applying: bool
    longitude_a: float
    longitude_b: float
    max_orb: float

    @property
    def is_exact(self) -> bool:
        return self.orb < 1.0

    @property
    def angle(self) -> float:
        return ASPECT_ANGLES[self.aspect]

    def label(self) -> str:
        return f"{display_name(self.body_a)} {self.aspect.value} {display_name(self.body_b)}"

    def as_dict(self) -> dict[str, Any]:
        return {
            "body_a": self.body_a,
            "body_b": self.body_b,
            "aspect": self.aspect.value,
            "orb": self.orb,
            "applying": self.applying,
            "exact": self.is_exact,
            "longitude_a": self.longitude_a,
            "longitude_b": self.longitude_b,
        }


PositionSet = Any


def _positions(source: PositionSet) -> Mapping[str, BodyPosition]:
    # NatalChart and plain mappings are both accepted.
    positions = getattr(source, "positions", source)
    if not isinstance(positions, Mapping):
        raise TypeError(f"unsupported position set: {type(source).__name__}")
    return positions


def _build(
    moving: BodyPosition,
    fixed: BodyPosition,
    orbs: OrbTable,
    *,
    fixed_reference: bool = True,
) -> Aspect | None:
    match = match_aspect(angular_distance(moving.longitude, fixed.longitude), orbs)
    if match is None:
        return None
    motion = classify_relative_motion(
        moving.longitude,
        moving.speed if fixed_reference else moving.speed - fixed.speed,
        fixed.longitude,
        ASPECT_ANGLES[match.aspect],
    )
    return Aspect(
        body_a=moving.body,
        body_b=fixed.body,
        aspect=match.aspect,
        orb=match.orb,
        applying=motion.is_applying,
        longitude_a=moving.longitude,
        longitude_b=fixed.longitude,
        max_orb=orbs.max_orb(match.aspect),
    )


def transits(
    reference: PositionSet,
    comparison: PositionSet,
    orbs: OrbTable = TRANSIT_ORBS,
    bodies: Iterable[str] | None = PLANETS,
    *,
    reference_bodies: Iterable[str] | None = None,
) -> list[Aspect]:
    """Return every aspect between ``comparison`` and ``reference`` bodies.

    Parameters
    ----------
    reference:
        Natal chart (or mapping of body to :class:`BodyPosition`) held fixed.
    comparison:
        Moving positions, e.g. the current sky or a partner's chart.
    orbs:
        Orb table handed to the matcher.
    bodies:
        Bodies considered on both sides; ``None`` uses every body present.
    reference_bodies:
        Optional separate body list for the reference side.

    Returns
    -------
    list[Aspect]
        Sorted by ascending orb; empty when nothing qualifies.
    """

    ref = _positions(reference)
    cmp_ = _positions(comparison)
    moving_names = [canonical_name(b) for b in bodies] if bodies is not None else list(cmp_)
    if reference_bodies is not None:
        fixed_names = [canonical_name(b) for b in reference_bodies]
    elif bodies is not None:
        fixed_names = moving_names
    else:
        fixed_names = list(ref)

    found: list[Aspect] = []
    for moving_name in moving_names:
        moving = cmp_.get(moving_name)
        if moving is None:
            continue
        for fixed_name in fixed_names:
            fixed = ref.get(fixed_name)
            if fixed is None:
                continue
            aspect = _build(moving, fixed, orbs)
            if aspect is not None:
                found.append(aspect)
    found.sort(key=lambda item: item.orb)
    LOG.debug("Matched %d aspects using %s orbs", len(found), orbs.name)
    return found


_SKIP_PAIRS = frozenset({frozenset({"north_node", "south_node"})})


def natal_aspects(
    positions: Mapping[str, BodyPosition],
    orbs: OrbTable = NATAL_ORBS,
) -> list[Aspect]:
    """Aspects among the bodies of a single chart (each unordered pair once)."""

    found: list[Aspect] = []
    for (_, first), (_, second) in combinations(positions.items(), 2):
        if frozenset({first.body, second.body}) in _SKIP_PAIRS:
            continue
        aspect = _build(first, second, orbs, fixed_reference=False)
        if aspect is not None:
            found.append(aspect)
    found.sort(key=lambda item: item.orb)
    return found
