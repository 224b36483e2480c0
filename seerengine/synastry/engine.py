"""Two-chart compatibility scoring.

Cross-chart aspects come from the shared transit matcher run with the
synastry orb table.  Each aspect is weighted by how much its body pair
matters romantically, tagged with a relationship theme, and the whole set
is folded into a 0-100 score with a named tier.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Final

from ..core.bodies import CORE_BODIES, OUTER_BODIES, PLANETS
from ..core.numeric import round_half_up
from ..core.zodiac import ELEMENTS, element_of
from ..geometry.aspects import SYNASTRY_ORBS, AspectType, OrbTable
from ..observability.metrics import SYNASTRY_REPORTS
from ..transits.engine import Aspect, transits
from .tables import (
    FALLBACK_CHALLENGE,
    FALLBACK_STRENGTH,
    HARD_ASPECT_CHALLENGES,
    THEME_LABELS,
    THEME_STRENGTHS,
    WEAK_THEME_CHALLENGES,
    Theme,
    element_compatibility,
    element_description,
    pair_theme,
    pair_weight,
)

LOG = logging.getLogger(__name__)

__all__ = [
    "EMPTY_SCORE",
    "SYNASTRY_BODIES",
    "ElementHarmony",
    "Nature",
    "SynastryAspect",
    "SynastryReport",
    "ThemeScore",
    "Tier",
    "aspect_nature",
    "element_harmony",
    "selection_seed",
    "synastry",
    "tier_for_score",
    "tier_rank",
]

SYNASTRY_BODIES: tuple[str, ...] = PLANETS + ("north_node",)
EMPTY_SCORE: Final[int] = 30
KEY_ASPECT_LIMIT: Final[int] = 5
MAX_ORB_BONUS: Final[float] = 0.5


class Nature(StrEnum):
    HARMONIOUS = "harmonious"
    INTENSE = "intense"
    CHALLENGING = "challenging"


class Tier(StrEnum):
    DISTANT = "distant"
    FRICTION = "friction"
    COMPLEX = "complex"
    KINDRED = "kindred"
    MAGNETIC = "magnetic"
    FATED = "fated"

    @property
    def label(self) -> str:
        return self.value.title()


# (lower bound, tier), highest first.
_TIER_BANDS: tuple[tuple[int, Tier], ...] = (
    (85, Tier.FATED),
    (70, Tier.MAGNETIC),
    (55, Tier.KINDRED),
    (40, Tier.COMPLEX),
    (25, Tier.FRICTION),
)

# Share of an aspect's weight credited to its theme, and to the overall score.
_THEME_SHARE: Mapping[Nature, float] = MappingProxyType(
    {Nature.HARMONIOUS: 1.0, Nature.INTENSE: 0.9, Nature.CHALLENGING: 0.6}
)
_POSITIVE_SHARE: Mapping[Nature, float] = MappingProxyType(
    {Nature.HARMONIOUS: 1.0, Nature.INTENSE: 0.8, Nature.CHALLENGING: 0.4}
)


def tier_for_score(score: float) -> Tier:
    for floor, tier in _TIER_BANDS:
        if score >= floor:
            return tier
    return Tier.DISTANT


def tier_rank(tier: Tier | str) -> int:
    """Ordinal of ``tier``: 0 for distant up to 5 for fated."""

    return list(Tier).index(Tier(tier))


def aspect_nature(aspect: AspectType) -> Nature:
    if aspect in (AspectType.TRINE, AspectType.SEXTILE):
        return Nature.HARMONIOUS
    if aspect is AspectType.CONJUNCTION:
        return Nature.INTENSE
    return Nature.CHALLENGING


def selection_seed(name_a: str, name_b: str) -> int:
    """Stable integer derived from both names, for deterministic phrasing picks."""

    digest = hashlib.blake2b(f"{name_a}-{name_b}".encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "big")


@dataclass(frozen=True)
class SynastryAspect:
    body_a: str
    body_b: str
    aspect: AspectType
    orb: float
    weight: float
    nature: Nature
    theme: Theme

    def as_dict(self) -> dict[str, Any]:
        return {
            "body_a": self.body_a,
            "body_b": self.body_b,
            "aspect": self.aspect.value,
            "orb": self.orb,
            "weight": self.weight,
            "nature": self.nature.value,
            "theme": self.theme.value,
        }


@dataclass(frozen=True)
class ThemeScore:
    theme: Theme
    score: float
    count: int = 0

    @property
    def label(self) -> str:
        return THEME_LABELS[self.theme]

    def as_dict(self) -> dict[str, Any]:
        return {"theme": self.theme.value, "label": self.label, "score": self.score, "count": self.count}


@dataclass(frozen=True)
class ElementHarmony:
    score: int
    description: str
    dominant_a: str
    dominant_b: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "description": self.description,
            "dominant_a": self.dominant_a,
            "dominant_b": self.dominant_b,
        }


@dataclass(frozen=True)
class SynastryReport:
    person_a: Mapping[str, str | None]
    person_b: Mapping[str, str | None]
    score: int
    tier: Tier
    aspects: tuple[SynastryAspect, ...]
    themes: tuple[ThemeScore, ...]
    element_harmony: ElementHarmony
    strengths: tuple[str, ...]
    challenges: tuple[str, ...]
    seed: int = 0
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "person_a", MappingProxyType(dict(self.person_a)))
        object.__setattr__(self, "person_b", MappingProxyType(dict(self.person_b)))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def key_aspects(self) -> tuple[SynastryAspect, ...]:
        return self.aspects[:KEY_ASPECT_LIMIT]

    @property
    def tier_rank(self) -> int:
        return tier_rank(self.tier)

    def as_dict(self) -> dict[str, Any]:
        return {
            "person_a": dict(self.person_a),
            "person_b": dict(self.person_b),
            "score": self.score,
            "tier": self.tier.value,
            "aspects": [a.as_dict() for a in self.aspects],
            "key_aspects": [a.as_dict() for a in self.key_aspects],
            "themes": [t.as_dict() for t in self.themes],
            "element_harmony": self.element_harmony.as_dict(),
            "strengths": list(self.strengths),
            "challenges": list(self.challenges),
            "seed": self.seed,
        }


def _weighted(aspect: Aspect) -> SynastryAspect:
    tightness = 1.0 - aspect.orb / aspect.max_orb if aspect.max_orb > 0 else 0.0
    weight = pair_weight(aspect.body_a, aspect.body_b) * (1.0 + tightness * MAX_ORB_BONUS)
    return SynastryAspect(
        body_a=aspect.body_a,
        body_b=aspect.body_b,
        aspect=aspect.aspect,
        orb=round_half_up(aspect.orb, 1),
        weight=round_half_up(weight, 1),
        nature=aspect_nature(aspect.aspect),
        theme=pair_theme(aspect.body_a, aspect.body_b),
    )


def _theme_scores(aspects: Sequence[SynastryAspect]) -> tuple[ThemeScore, ...]:
    totals: dict[Theme, list[float]] = {theme: [] for theme in THEME_LABELS}
    for item in aspects:
        totals[item.theme].append(item.weight * _THEME_SHARE[item.nature])
    scores = []
    for theme, contributions in totals.items():
        mean = sum(contributions) / len(contributions) if contributions else 0.0
        scores.append(
            ThemeScore(
                theme=theme,
                score=min(10.0, round_half_up(mean / 1.5, 1)),
                count=len(contributions),
            )
        )
    scores.sort(key=lambda item: item.score, reverse=True)
    return tuple(scores)


def _dominant_element(chart: Any) -> str:
    weights = dict.fromkeys(ELEMENTS, 0)
    for bodies, weight in ((CORE_BODIES, 2), (OUTER_BODIES, 1)):
        for body in bodies:
            sign = chart.sign_of(body)
            if sign is not None:
                weights[element_of(sign)] += weight
    # max() keeps the first of equal maxima, so ties follow ELEMENTS order.
    return max(ELEMENTS, key=lambda element: weights[element])


def element_harmony(chart_a: Any, chart_b: Any) -> ElementHarmony:
    first, second = _dominant_element(chart_a), _dominant_element(chart_b)
    return ElementHarmony(
        score=element_compatibility(first, second),
        description=element_description(first, second),
        dominant_a=first,
        dominant_b=second,
    )


def _overall_score(aspects: Sequence[SynastryAspect], harmony: int) -> int:
    if not aspects:
        return EMPTY_SCORE
    total = sum(a.weight for a in aspects)
    positive = sum(a.weight * _POSITIVE_SHARE[a.nature] for a in aspects)
    ratio = positive / total if total > 0 else 0.5
    volume = min(15.0, len(aspects) * 0.8)
    quality = sum(
        2 if a.weight > 7 else 1 if a.weight > 5 else 0 for a in aspects[:KEY_ASPECT_LIMIT]
    )
    raw = ratio * 60.0 + harmony / 10.0 * 15.0 + volume + quality
    return int(max(0, min(100, round_half_up(raw))))


def _insights(
    aspects: Sequence[SynastryAspect], themes: Sequence[ThemeScore]
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    strong = [t for t in themes if t.score >= 5][:3]
    weak = [t for t in themes if 0 < t.score < 3][:2]

    strengths = [THEME_STRENGTHS[t.theme] for t in strong if t.theme in THEME_STRENGTHS]
    challenges = [WEAK_THEME_CHALLENGES[t.theme] for t in weak if t.theme in WEAK_THEME_CHALLENGES]
    covered = {t.theme for t in weak if t.theme in WEAK_THEME_CHALLENGES}

    hard = [a for a in aspects if a.nature is Nature.CHALLENGING and a.weight > 5][:2]
    for item in hard:
        text = HARD_ASPECT_CHALLENGES.get(item.theme)
        if text is None or item.theme in covered:
            continue
        covered.add(item.theme)
        challenges.append(text)

    return tuple(strengths or [FALLBACK_STRENGTH]), tuple(challenges or [FALLBACK_CHALLENGE])


def synastry(
    chart_a: Any,
    chart_b: Any,
    *,
    orbs: OrbTable = SYNASTRY_ORBS,
) -> SynastryReport:
    """Score the compatibility of two natal charts.

    Parameters
    ----------
    chart_a, chart_b:
        Natal charts (anything exposing ``positions``, ``sign_of`` and
        ``name``).  ``chart_a`` supplies the first body of every aspect.
    orbs:
        Orb table for cross-chart contacts.

    Returns
    -------
    SynastryReport
        Aspects sorted by weight (heaviest first); with no aspects at all
        the score is fixed at 30.
    """

    found = transits(chart_b, chart_a, orbs, SYNASTRY_BODIES)
    aspects = sorted((_weighted(a) for a in found), key=lambda item: item.weight, reverse=True)
    themes = _theme_scores(aspects)
    harmony = element_harmony(chart_a, chart_b)
    score = _overall_score(aspects, harmony.score)
    tier = tier_for_score(score)
    strengths, challenges = _insights(aspects, themes)

    name_a = getattr(chart_a, "name", "")
    name_b = getattr(chart_b, "name", "")
    report = SynastryReport(
        person_a={"name": name_a, "sun_sign": chart_a.sign_of("sun"), "moon_sign": chart_a.sign_of("moon")},
        person_b={"name": name_b, "sun_sign": chart_b.sign_of("sun"), "moon_sign": chart_b.sign_of("moon")},
        score=score,
        tier=tier,
        aspects=tuple(aspects),
        themes=themes,
        element_harmony=harmony,
        strengths=strengths,
        challenges=challenges,
        seed=selection_seed(name_a, name_b),
    )
    SYNASTRY_REPORTS.labels(tier=tier.value).inc()
    LOG.debug(
        "Synastry %r x %r: score=%d tier=%s aspects=%d harmony=%d",
        name_a,
        name_b,
        score,
        tier.value,
        len(aspects),
        harmony.score,
    )
    return report
