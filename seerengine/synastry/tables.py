"""Fixed synastry tables: pair weights, relationship themes, element matrix.

Pair-keyed tables are looked up with an unordered ``frozenset`` so the
order in which two charts are compared never matters.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Final

from ..core.bodies import canonical_name

__all__ = [
    "DEFAULT_PAIR_WEIGHT",
    "DEFAULT_THEME",
    "ELEMENT_COMPAT",
    "ELEMENT_DESCRIPTIONS",
    "HARD_ASPECT_CHALLENGES",
    "PAIR_THEMES",
    "PAIR_WEIGHTS",
    "THEME_LABELS",
    "THEME_STRENGTHS",
    "WEAK_THEME_CHALLENGES",
    "Theme",
    "element_compatibility",
    "element_description",
    "pair_key",
    "pair_theme",
    "pair_weight",
]


class Theme(StrEnum):
    ATTRACTION = "attraction"
    SOUL = "soul"
    COMMUNICATION = "communication"
    GROWTH = "growth"
    COMMITMENT = "commitment"
    TRANSFORMATION = "transformation"
    CHAOS = "chaos"
    DREAMS = "dreams"
    DESTINY = "destiny"
    PASSION = "passion"
    EMOTIONAL = "emotional"
    IDENTITY = "identity"

    @property
    def label(self) -> str:
        return THEME_LABELS[self]


DEFAULT_PAIR_WEIGHT: Final[int] = 3
DEFAULT_THEME: Final[Theme] = Theme.IDENTITY
DEFAULT_ELEMENT_SCORE: Final[int] = 5


def pair_key(first: str, second: str) -> frozenset[str]:
    return frozenset({canonical_name(first), canonical_name(second)})


def _pairs(entries: Mapping[str, object]) -> Mapping[frozenset[str], object]:
    # "venus-mars" -> frozenset({"venus", "mars"}); "mars-mars" collapses to one member.
    return MappingProxyType({frozenset(key.split("-")): value for key, value in entries.items()})


PAIR_WEIGHTS: Mapping[frozenset[str], int] = _pairs(
    {
        "venus-mars": 10,
        "sun-moon": 9,
        "moon-venus": 8,
        "sun-venus": 8,
        "mars-mars": 7,
        "venus-venus": 7,
        "moon-mars": 7,
        "moon-moon": 7,
        "sun-sun": 6,
        "sun-mars": 6,
        "mercury-mercury": 5,
        "mercury-venus": 5,
        "moon-mercury": 5,
        "mercury-mars": 4,
        "sun-mercury": 4,
        "jupiter-sun": 6,
        "jupiter-moon": 5,
        "jupiter-venus": 6,
        "jupiter-mars": 5,
        "saturn-sun": 6,
        "saturn-moon": 6,
        "saturn-venus": 7,
        "saturn-mars": 5,
        "pluto-sun": 7,
        "pluto-moon": 7,
        "pluto-venus": 8,
        "pluto-mars": 7,
        "uranus-sun": 5,
        "uranus-moon": 5,
        "uranus-venus": 6,
        "uranus-mars": 5,
        "neptune-sun": 5,
        "neptune-moon": 6,
        "neptune-venus": 7,
        "neptune-mars": 4,
        "north_node-sun": 7,
        "north_node-moon": 7,
        "north_node-venus": 7,
        "north_node-mars": 5,
    }
)

_T = Theme

PAIR_THEMES: Mapping[frozenset[str], Theme] = _pairs(
    {
        "venus-mars": _T.ATTRACTION,
        "venus-venus": _T.ATTRACTION,
        "sun-venus": _T.ATTRACTION,
        "moon-mars": _T.PASSION,
        "mars-mars": _T.PASSION,
        "sun-moon": _T.SOUL,
        "sun-sun": _T.IDENTITY,
        "moon-moon": _T.EMOTIONAL,
        "moon-venus": _T.EMOTIONAL,
        "mercury-mercury": _T.COMMUNICATION,
        "mercury-venus": _T.COMMUNICATION,
        "mercury-mars": _T.COMMUNICATION,
        "sun-mercury": _T.COMMUNICATION,
        "moon-mercury": _T.COMMUNICATION,
        **{f"jupiter-{b}": _T.GROWTH for b in ("sun", "moon", "venus", "mars")},
        **{f"saturn-{b}": _T.COMMITMENT for b in ("sun", "moon", "venus", "mars")},
        **{f"pluto-{b}": _T.TRANSFORMATION for b in ("sun", "moon", "venus", "mars")},
        **{f"uranus-{b}": _T.CHAOS for b in ("sun", "moon", "venus", "mars")},
        **{f"neptune-{b}": _T.DREAMS for b in ("sun", "moon", "venus", "mars")},
        **{f"north_node-{b}": _T.DESTINY for b in ("sun", "moon", "venus", "mars")},
    }
)

THEME_LABELS: Mapping[Theme, str] = MappingProxyType(
    {
        _T.ATTRACTION: "Physical Attraction",
        _T.SOUL: "Soul Connection",
        _T.COMMUNICATION: "Communication",
        _T.GROWTH: "Growth & Expansion",
        _T.COMMITMENT: "Staying Power",
        _T.TRANSFORMATION: "Transformation",
        _T.CHAOS: "Electric Instability",
        _T.DREAMS: "Fantasy & Idealism",
        _T.DESTINY: "Karmic Bond",
        _T.PASSION: "Raw Passion",
        _T.EMOTIONAL: "Emotional Current",
        _T.IDENTITY: "Ego Dynamic",
    }
)

THEME_STRENGTHS: Mapping[Theme, str] = MappingProxyType(
    {
        _T.ATTRACTION: "Physical chemistry is strong. The body knows.",
        _T.SOUL: "A soul-level recognition that bypasses logic.",
        _T.COMMUNICATION: "Words flow between you. Understanding comes without effort.",
        _T.GROWTH: "You expand each other's world. Together, everything feels possible.",
        _T.COMMITMENT: "Built to last. This bond has structural integrity.",
        _T.EMOTIONAL: "Emotional attunement runs deep. You feel each other.",
        _T.DESTINY: "Karmic threads connect you. This meeting was not accidental.",
        _T.TRANSFORMATION: "You will not leave this connection unchanged.",
        _T.PASSION: "Fire meets fire. The energy between you is relentless.",
        _T.DREAMS: "A shared dream world. Beauty and imagination flow between you.",
    }
)

WEAK_THEME_CHALLENGES: Mapping[Theme, str] = MappingProxyType(
    {
        _T.COMMUNICATION: "Words may fail where feeling should carry. Learn each other's language.",
        _T.COMMITMENT: "Staying power is not guaranteed. This bond needs conscious tending.",
        _T.EMOTIONAL: "Emotional rhythms differ. Patience with each other's inner weather.",
        _T.ATTRACTION: "The physical spark requires kindling. It won't light itself.",
    }
)

HARD_ASPECT_CHALLENGES: Mapping[Theme, str] = MappingProxyType(
    {
        _T.TRANSFORMATION: "Power dynamics lurk beneath the surface. Name them before they name you.",
        _T.CHAOS: "Unpredictability keeps things electric, and exhausting.",
        _T.IDENTITY: "Two strong egos in the same space. Make room or make war.",
        _T.COMMITMENT: "Freedom and structure compete. Finding the balance is the work.",
    }
)

FALLBACK_STRENGTH: Final[str] = "Every connection carries a lesson. This one is no different."
FALLBACK_CHALLENGE: Final[str] = "Few challenges appear. Guard against complacency: ease is its own test."

ELEMENT_COMPAT: Mapping[frozenset[str], int] = _pairs(
    {
        "fire-fire": 8,
        "fire-air": 9,
        "fire-earth": 4,
        "fire-water": 3,
        "air-air": 7,
        "air-earth": 4,
        "air-water": 5,
        "earth-earth": 8,
        "earth-water": 9,
        "water-water": 7,
    }
)

ELEMENT_DESCRIPTIONS: Mapping[frozenset[str], str] = _pairs(
    {
        "fire-fire": "Two flames. You ignite each other, and risk burning out.",
        "fire-air": "Air feeds fire. Your ideas meet their passion. Natural chemistry.",
        "fire-earth": "Fire meets ground. Passion without patience, unless you learn.",
        "fire-water": "Steam. Intensity that either warms or scalds.",
        "air-air": "Two minds in conversation. Brilliance, but who holds the anchor?",
        "air-earth": "Ideas meet reality. Frustrating or grounding, depending on the day.",
        "air-water": "Thought meets feeling. Misunderstanding is possible. So is depth.",
        "earth-earth": "Solid ground beneath you both. Reliable, but watch for stagnation.",
        "earth-water": "The garden flourishes. Water nourishes earth. Quiet devotion.",
        "water-water": "Two oceans meet. Emotional depth without bottom. Beautiful and overwhelming.",
    }
)

FALLBACK_ELEMENT_DESCRIPTION: Final[str] = "Your elements create an unusual blend."


def pair_weight(first: str, second: str) -> int:
    return PAIR_WEIGHTS.get(pair_key(first, second), DEFAULT_PAIR_WEIGHT)


def pair_theme(first: str, second: str) -> Theme:
    return PAIR_THEMES.get(pair_key(first, second), DEFAULT_THEME)


def element_compatibility(first: str, second: str) -> int:
    return ELEMENT_COMPAT.get(frozenset({first, second}), DEFAULT_ELEMENT_SCORE)


def element_description(first: str, second: str) -> str:
    return ELEMENT_DESCRIPTIONS.get(frozenset({first, second}), FALLBACK_ELEMENT_DESCRIPTION)
