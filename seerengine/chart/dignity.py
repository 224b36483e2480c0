"""Essential dignity tables and lookups.

Rulership is checked first, then exaltation, detriment and fall; a body
with no entry for the sign (or a body with no tables at all, such as the
nodes or the fortune point) is neutral.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Mapping

from ..core.bodies import canonical_name

__all__ = [
    "DETRIMENTS",
    "EXALTATIONS",
    "FALLS",
    "RULERSHIPS",
    "Dignity",
    "DignityKind",
    "dignity_for",
]


class DignityKind(StrEnum):
    RULERSHIP = "rulership"
    EXALTATION = "exaltation"
    DETRIMENT = "detriment"
    FALL = "fall"
    NEUTRAL = "neutral"

    @property
    def strength(self) -> int:
        return _STRENGTH[self]


_STRENGTH: Mapping[DignityKind, int] = MappingProxyType(
    {
        DignityKind.RULERSHIP: 2,
        DignityKind.EXALTATION: 1,
        DignityKind.DETRIMENT: -1,
        DignityKind.FALL: -2,
        DignityKind.NEUTRAL: 0,
    }
)

RULERSHIPS: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "sun": frozenset({"Leo"}),
        "moon": frozenset({"Cancer"}),
        "mercury": frozenset({"Gemini", "Virgo"}),
        "venus": frozenset({"Taurus", "Libra"}),
        "mars": frozenset({"Aries", "Scorpio"}),
        "jupiter": frozenset({"Sagittarius", "Pisces"}),
        "saturn": frozenset({"Capricorn", "Aquarius"}),
        "uranus": frozenset({"Aquarius"}),
        "neptune": frozenset({"Pisces"}),
        "pluto": frozenset({"Scorpio"}),
    }
)

EXALTATIONS: Mapping[str, str] = MappingProxyType(
    {
        "sun": "Aries",
        "moon": "Taurus",
        "mercury": "Virgo",
        "venus": "Pisces",
        "mars": "Capricorn",
        "jupiter": "Cancer",
        "saturn": "Libra",
        "uranus": "Scorpio",
        "neptune": "Leo",
        "pluto": "Aries",
    }
)

DETRIMENTS: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "sun": frozenset({"Aquarius"}),
        "moon": frozenset({"Capricorn"}),
        "mercury": frozenset({"Sagittarius", "Pisces"}),
        "venus": frozenset({"Scorpio", "Aries"}),
        "mars": frozenset({"Libra", "Taurus"}),
        "jupiter": frozenset({"Gemini", "Virgo"}),
        "saturn": frozenset({"Cancer", "Leo"}),
        "uranus": frozenset({"Leo"}),
        "neptune": frozenset({"Virgo"}),
        "pluto": frozenset({"Taurus"}),
    }
)

FALLS: Mapping[str, str] = MappingProxyType(
    {
        "sun": "Libra",
        "moon": "Scorpio",
        "mercury": "Pisces",
        "venus": "Virgo",
        "mars": "Cancer",
        "jupiter": "Capricorn",
        "saturn": "Aries",
        "uranus": "Taurus",
        "neptune": "Aquarius",
        "pluto": "Libra",
    }
)


@dataclass(frozen=True)
class Dignity:
    body: str
    sign: str
    kind: DignityKind

    @property
    def strength(self) -> int:
        return self.kind.strength

    def as_dict(self) -> dict[str, object]:
        return {"body": self.body, "sign": self.sign, "kind": self.kind.value, "strength": self.strength}


def dignity_for(body: str, sign: str) -> Dignity:
    """Return the essential dignity of ``body`` placed in ``sign``."""

    key = canonical_name(body)
    if sign in RULERSHIPS.get(key, frozenset()):
        kind = DignityKind.RULERSHIP
    elif EXALTATIONS.get(key) == sign:
        kind = DignityKind.EXALTATION
    elif sign in DETRIMENTS.get(key, frozenset()):
        kind = DignityKind.DETRIMENT
    elif FALLS.get(key) == sign:
        kind = DignityKind.FALL
    else:
        kind = DignityKind.NEUTRAL
    return Dignity(body=key, sign=sign, kind=kind)
