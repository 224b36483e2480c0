"""Chart pattern detection by exhaustive enumeration.

Charts carry at most fourteen points, so every triple and quadruple is
simply enumerated with :func:`itertools.combinations`.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass
from enum import StrEnum
from itertools import combinations
from typing import Final

from ..core.angles import angular_distance
from ..core.zodiac import SIGNS, sign_index

__all__ = [
    "OPPOSITION_ORB",
    "SQUARE_ORB",
    "TRINE_ORB",
    "Pattern",
    "PatternKind",
    "detect_patterns",
]


TRINE_ORB: Final[float] = 8.0
OPPOSITION_ORB: Final[float] = 8.0
SQUARE_ORB: Final[float] = 7.0
STELLIUM_MIN_BODIES: Final[int] = 3


class PatternKind(StrEnum):
    STELLIUM = "stellium"
    GRAND_TRINE = "grand_trine"
    T_SQUARE = "t_square"
    GRAND_CROSS = "grand_cross"


@dataclass(frozen=True)
class Pattern:
    kind: PatternKind
    bodies: tuple[str, ...]
    influence: str
    description: str
    sign: str | None = None

    def as_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind.value,
            "bodies": list(self.bodies),
            "influence": self.influence,
            "description": self.description,
            "sign": self.sign,
        }


def _in_orb(a: float, b: float, target: float, orb: float) -> bool:
    return abs(angular_distance(a, b) - target) <= orb


def _stelliums(longitudes: Mapping[str, float]) -> list[Pattern]:
    by_sign: dict[int, list[str]] = {}
    for body, lon in longitudes.items():
        by_sign.setdefault(sign_index(lon), []).append(body)
    patterns = []
    for idx in sorted(by_sign):
        bodies = by_sign[idx]
        if len(bodies) < STELLIUM_MIN_BODIES:
            continue
        sign = SIGNS[idx]
        patterns.append(
            Pattern(
                kind=PatternKind.STELLIUM,
                bodies=tuple(bodies),
                influence="mixed",
                description=f"{len(bodies)} bodies concentrated in {sign}, intense focus on {sign} themes",
                sign=sign,
            )
        )
    return patterns


def _grand_trines(items: list[tuple[str, float]]) -> list[Pattern]:
    found = []
    for (b1, l1), (b2, l2), (b3, l3) in combinations(items, 3):
        if (
            _in_orb(l1, l2, 120.0, TRINE_ORB)
            and _in_orb(l2, l3, 120.0, TRINE_ORB)
            and _in_orb(l3, l1, 120.0, TRINE_ORB)
        ):
            found.append(
                Pattern(
                    kind=PatternKind.GRAND_TRINE,
                    bodies=(b1, b2, b3),
                    influence="positive",
                    description="Harmonious triangle of energy: natural talents and ease",
                )
            )
    return found


def _t_squares(items: list[tuple[str, float]]) -> list[Pattern]:
    found = []
    for (b1, l1), (b2, l2) in combinations(items, 2):
        if not _in_orb(l1, l2, 180.0, OPPOSITION_ORB):
            continue
        for apex, la in items:
            if apex in (b1, b2):
                continue
            if _in_orb(l1, la, 90.0, SQUARE_ORB) and _in_orb(l2, la, 90.0, SQUARE_ORB):
                found.append(
                    Pattern(
                        kind=PatternKind.T_SQUARE,
                        bodies=(b1, b2, apex),
                        influence="challenging",
                        description="Dynamic tension creating drive and ambition",
                    )
                )
    return found


def _is_cross(quad: tuple[tuple[str, float], ...]) -> tuple[str, ...] | None:
    # Try each way of splitting the four points into two opposing pairs.
    (b0, l0), (b1, l1), (b2, l2), (b3, l3) = quad
    for (pa, pb), (pc, pd) in (
        (((b0, l0), (b1, l1)), ((b2, l2), (b3, l3))),
        (((b0, l0), (b2, l2)), ((b1, l1), (b3, l3))),
        (((b0, l0), (b3, l3)), ((b1, l1), (b2, l2))),
    ):
        if not (
            _in_orb(pa[1], pb[1], 180.0, OPPOSITION_ORB)
            and _in_orb(pc[1], pd[1], 180.0, OPPOSITION_ORB)
        ):
            continue
        if all(
            _in_orb(x[1], y[1], 90.0, SQUARE_ORB)
            for x in (pa, pb)
            for y in (pc, pd)
        ):
            return (pa[0], pc[0], pb[0], pd[0])
    return None


def _grand_crosses(items: list[tuple[str, float]]) -> list[Pattern]:
    found = []
    for quad in combinations(items, 4):
        bodies = _is_cross(quad)
        if bodies is not None:
            found.append(
                Pattern(
                    kind=PatternKind.GRAND_CROSS,
                    bodies=bodies,
                    influence="challenging",
                    description="Intense configuration requiring balance and integration",
                )
            )
    return found


def detect_patterns(
    longitudes: Mapping[str, float],
    *,
    stellium_only: Collection[str] = (),
) -> tuple[Pattern, ...]:
    """Return every stellium, grand trine, T-square and grand cross.

    Parameters
    ----------
    longitudes:
        Mapping of body name to ecliptic longitude in degrees. Iteration
        order determines the body order inside each reported pattern.
    stellium_only:
        Derived points (nodes, lots) that count towards stelliums but are
        left out of the aspect figures.
    """

    items = [(body, lon) for body, lon in longitudes.items() if body not in stellium_only]
    return tuple(
        _stelliums(longitudes)
        + _grand_trines(items)
        + _t_squares(items)
        + _grand_crosses(items)
    )
