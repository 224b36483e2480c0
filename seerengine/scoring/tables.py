"""Fixed lookup tables feeding the daily category scores.

Every table is a read-only mapping so it can be audited (and tested)
independently of the scoring arithmetic.  Lookups for bodies or signs
missing from a table fall back to "no contribution".
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType

from ..core.bodies import PLANETS, canonical_name
from ..core.zodiac import SIGNS, element_of
from ..geometry.aspects import AspectType

__all__ = [
    "ASPECT_IMPACTS",
    "ASPECT_VERBS",
    "BENEFICS",
    "DOMAINS",
    "MALEFICS",
    "NATAL_MODIFIERS",
    "PLANET_DOMAIN_INFLUENCE",
    "RETROGRADE_ADVICE",
    "Domain",
    "NatalModifier",
    "aspect_impact",
    "conjunction_impact",
    "domains_for",
    "natal_modifiers",
]


class Domain(StrEnum):
    LOVE = "love"
    CAREER = "career"
    MONEY = "money"
    HEALTH = "health"
    SOCIAL = "social"
    DECISIONS = "decisions"
    CREATIVITY = "creativity"
    SPIRITUAL = "spiritual"


DOMAINS: tuple[Domain, ...] = tuple(Domain)

PLANET_DOMAIN_INFLUENCE: Mapping[str, tuple[Domain, ...]] = MappingProxyType(
    {
        "sun": (Domain.CAREER, Domain.DECISIONS, Domain.HEALTH),
        "moon": (Domain.LOVE, Domain.HEALTH, Domain.SPIRITUAL),
        "mercury": (Domain.CAREER, Domain.DECISIONS, Domain.SOCIAL),
        "venus": (Domain.LOVE, Domain.MONEY, Domain.CREATIVITY, Domain.SOCIAL),
        "mars": (Domain.CAREER, Domain.HEALTH, Domain.DECISIONS),
        "jupiter": (Domain.MONEY, Domain.CAREER, Domain.SPIRITUAL),
        "saturn": (Domain.CAREER, Domain.MONEY, Domain.HEALTH),
        "uranus": (Domain.DECISIONS, Domain.CREATIVITY, Domain.SOCIAL),
        "neptune": (Domain.SPIRITUAL, Domain.CREATIVITY, Domain.LOVE),
        "pluto": (Domain.DECISIONS, Domain.SPIRITUAL, Domain.CAREER),
        "ascendant": (Domain.SOCIAL, Domain.HEALTH),
        "midheaven": (Domain.CAREER,),
        "north_node": (Domain.SPIRITUAL, Domain.CAREER),
        "chiron": (Domain.HEALTH, Domain.SPIRITUAL),
    }
)

# Conjunctions are resolved by conjunction_impact().
ASPECT_IMPACTS: Mapping[AspectType, tuple[float, str]] = MappingProxyType(
    {
        AspectType.CONJUNCTION: (0.0, "neutral"),
        AspectType.TRINE: (2.0, "positive"),
        AspectType.SEXTILE: (1.0, "positive"),
        AspectType.SQUARE: (-2.0, "negative"),
        AspectType.OPPOSITION: (-1.5, "negative"),
        AspectType.QUINCUNX: (-1.0, "negative"),
    }
)

ASPECT_VERBS: Mapping[AspectType, str] = MappingProxyType(
    {
        AspectType.CONJUNCTION: "merges with",
        AspectType.OPPOSITION: "opposes",
        AspectType.TRINE: "harmonizes with",
        AspectType.SQUARE: "challenges",
        AspectType.SEXTILE: "supports",
        AspectType.QUINCUNX: "creates tension with",
        AspectType.SEMI_SEXTILE: "nudges",
    }
)

BENEFICS: frozenset[str] = frozenset({"venus", "jupiter", "sun"})
MALEFICS: frozenset[str] = frozenset({"mars", "saturn", "pluto"})

RETROGRADE_ADVICE: Mapping[str, str] = MappingProxyType(
    {
        "mercury": "Review communications, avoid signing contracts",
        "venus": "Reflect on relationships and values",
        "mars": "Channel energy inward, avoid conflicts",
        "jupiter": "Internal growth over external expansion",
        "saturn": "Reassess structures and responsibilities",
        "uranus": "Inner revolution before outer change",
        "neptune": "Deep spiritual reflection",
        "pluto": "Internal transformation in progress",
    }
)


def domains_for(body: str) -> tuple[Domain, ...]:
    """Domains influenced by ``body``; unknown bodies influence nothing."""

    return PLANET_DOMAIN_INFLUENCE.get(canonical_name(body), ())


def conjunction_impact(first: str, second: str) -> float:
    """Benefic/malefic resolution of a conjunction between two bodies."""

    a, b = canonical_name(first), canonical_name(second)
    if a in BENEFICS and b in BENEFICS:
        return 2.0
    if a in MALEFICS and b in MALEFICS:
        return -2.0
    if (a in BENEFICS and b in MALEFICS) or (a in MALEFICS and b in BENEFICS):
        return -1.0
    return 0.0


def aspect_impact(aspect: AspectType, first: str, second: str) -> float:
    if aspect is AspectType.CONJUNCTION:
        return conjunction_impact(first, second)
    return ASPECT_IMPACTS.get(aspect, (0.0, "neutral"))[0]


@dataclass(frozen=True)
class NatalModifier:
    """Permanent per-domain adjustment for one natal placement."""

    body: str
    sign: str
    deltas: Mapping[Domain, float] = field(default_factory=dict)
    warnings: Mapping[Domain, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "deltas", MappingProxyType(dict(self.deltas)))
        object.__setattr__(self, "warnings", MappingProxyType(dict(self.warnings)))


_D = Domain


def _rules() -> Iterable[tuple[str, Iterable[str], dict[Domain, float], dict[Domain, str]]]:
    yield "sun", ("Leo",), {_D.CREATIVITY: 1, _D.SOCIAL: 1}, {}
    yield "sun", ("Capricorn",), {_D.CAREER: 1, _D.CREATIVITY: -1}, {
        _D.CREATIVITY: "Your Capricorn Sun favors structure over spontaneity"
    }

    yield "moon", ("Cancer",), {_D.LOVE: 1, _D.HEALTH: 1}, {}
    yield "moon", ("Aquarius",), {_D.LOVE: -1, _D.SOCIAL: 1, _D.SPIRITUAL: 1}, {
        _D.LOVE: "Your Aquarius Moon may overthink emotional matters"
    }
    yield "moon", ("Capricorn",), {_D.LOVE: -1, _D.CAREER: 1}, {
        _D.LOVE: "Your Capricorn Moon can hold back emotional expression"
    }
    yield "moon", ("Scorpio",), {_D.SPIRITUAL: 1, _D.SOCIAL: -1}, {
        _D.SOCIAL: "Your Scorpio Moon prefers depth over breadth in connections"
    }

    yield "mercury", ("Gemini", "Virgo"), {_D.DECISIONS: 1}, {}
    yield "mercury", ("Pisces",), {_D.DECISIONS: -1}, {
        _D.DECISIONS: "Your Pisces Mercury thinks in dreams, not data"
    }
    yield "mercury", ("Sagittarius",), {_D.SOCIAL: -1}, {
        _D.SOCIAL: "Your Sagittarius Mercury can be blunt in communication"
    }

    yield "venus", ("Pisces",), {_D.MONEY: -2, _D.LOVE: 1}, {
        _D.MONEY: "Your Venus in Pisces makes you idealistic about money - be extra cautious with financial risks"
    }
    yield "venus", ("Taurus", "Capricorn"), {_D.MONEY: 1}, {}
    yield "venus", ("Libra",), {_D.SOCIAL: 1, _D.LOVE: 1}, {}
    yield "venus", ("Scorpio",), {_D.SOCIAL: -1, _D.SPIRITUAL: 1}, {
        _D.SOCIAL: "Your Scorpio Venus craves intensity over casual connection"
    }
    yield "venus", ("Aries",), {_D.LOVE: -1}, {_D.LOVE: "Your Aries Venus can be impatient in romance"}

    yield "mars", ("Aries", "Scorpio"), {_D.CAREER: 1, _D.DECISIONS: 1, _D.HEALTH: 1}, {}
    yield "mars", ("Libra",), {_D.DECISIONS: -1}, {_D.DECISIONS: "Your Libra Mars hesitates under pressure"}
    yield "mars", ("Cancer", "Pisces"), {_D.MONEY: -1, _D.DECISIONS: -1}, {
        _D.MONEY: "Your Mars in water sign prefers flowing with circumstances over forcing outcomes",
        _D.DECISIONS: "Trust your gut but verify with logic",
    }
    yield "mars", ("Leo", "Sagittarius"), {_D.DECISIONS: 1, _D.HEALTH: 1}, {}

    yield "jupiter", ("Sagittarius", "Pisces"), {_D.MONEY: 1, _D.SPIRITUAL: 1}, {}
    yield "jupiter", ("Capricorn",), {_D.SPIRITUAL: -1}, {
        _D.SPIRITUAL: "Your Capricorn Jupiter favors material over mystical"
    }

    earth = tuple(sign for sign in SIGNS if element_of(sign) == "earth")
    other = tuple(sign for sign in SIGNS if sign not in earth)
    yield "saturn", earth, {_D.CAREER: -1}, {}
    yield "saturn", other, {_D.DECISIONS: -1}, {}


def _build_modifiers() -> Mapping[tuple[str, str], NatalModifier]:
    table: dict[tuple[str, str], NatalModifier] = {}
    for body, signs, deltas, warnings in _rules():
        for sign in signs:
            table[(body, sign)] = NatalModifier(body=body, sign=sign, deltas=deltas, warnings=warnings)
    return MappingProxyType(table)


NATAL_MODIFIERS: Mapping[tuple[str, str], NatalModifier] = _build_modifiers()


def natal_modifiers(placements: Mapping[str, str] | object) -> tuple[NatalModifier, ...]:
    """Modifiers triggered by a chart's planets.

    ``placements`` is either a body to sign mapping or anything exposing
    ``placements()`` (such as a natal chart).
    """

    if hasattr(placements, "placements"):
        placements = placements.placements()
    found = []
    for body in PLANETS:
        sign = placements.get(body)  # type: ignore[union-attr]
        if sign is None:
            continue
        modifier = NATAL_MODIFIERS.get((body, sign))
        if modifier is not None:
            found.append(modifier)
    return tuple(found)
