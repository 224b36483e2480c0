"""Daily report assembly for one natal chart."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from ..core.bodies import PLANETS
from ..core.numeric import round_half_up
from ..core.time import Instant
from ..ephemeris.lunar import MoonPhase, moon_phase
from ..ephemeris.positions import sky_positions
from ..ephemeris.provider import LongitudeProvider, default_provider
from ..ephemeris.rulers import DayRuler, day_ruler
from ..geometry.aspects import TRANSIT_ORBS, AspectType, OrbTable
from ..observability.metrics import DAILY_REPORTS
from ..transits.engine import Aspect, transits
from .category import CategoryScore, category_score, interpret_transit
from .tables import (
    ASPECT_IMPACTS,
    DOMAINS,
    RETROGRADE_ADVICE,
    Domain,
    conjunction_impact,
    domains_for,
    natal_modifiers,
)

LOG = logging.getLogger(__name__)

__all__ = [
    "KEY_TRANSIT_LIMIT",
    "DailyReport",
    "KeyTransit",
    "Retrograde",
    "build_daily_report",
    "energy_band",
    "transit_impact",
]

KEY_TRANSIT_LIMIT = 5
RETROGRADE_CANDIDATES: tuple[str, ...] = PLANETS[2:]


@dataclass(frozen=True)
class KeyTransit:
    transit: Aspect
    interpretation: str
    domains: tuple[Domain, ...]
    impact: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "transit": self.transit.as_dict(),
            "interpretation": self.interpretation,
            "domains": [d.value for d in self.domains],
            "impact": self.impact,
        }


@dataclass(frozen=True)
class Retrograde:
    body: str
    advice: str

    def as_dict(self) -> dict[str, str]:
        return {"body": self.body, "advice": self.advice}


@dataclass(frozen=True)
class DailyReport:
    """Everything the narrators need to describe one profile's day."""

    profile_id: str
    instant: Instant
    overall_score: int
    energy: str
    headline: str
    categories: Mapping[Domain, CategoryScore]
    key_transits: tuple[KeyTransit, ...]
    moon_phase: MoonPhase
    retrogrades: tuple[Retrograde, ...]
    day_ruler: DayRuler | None = None
    transits: tuple[Aspect, ...] = field(default=(), repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "categories", MappingProxyType(dict(self.categories)))

    def score_for(self, domain: Domain | str) -> int:
        return self.categories[Domain(domain)].score

    def is_retrograde(self, body: str) -> bool:
        return any(item.body == body for item in self.retrogrades)

    def as_dict(self) -> dict[str, Any]:
        return {
            "profile_id": self.profile_id,
            "instant": self.instant.isoformat(),
            "overall_score": self.overall_score,
            "energy": self.energy,
            "headline": self.headline,
            "categories": {d.value: s.as_dict() for d, s in self.categories.items()},
            "key_transits": [k.as_dict() for k in self.key_transits],
            "moon_phase": self.moon_phase.as_dict(),
            "retrogrades": [r.as_dict() for r in self.retrogrades],
            "day_ruler": (
                {"ruler": self.day_ruler.ruler, "quality": self.day_ruler.quality}
                if self.day_ruler
                else None
            ),
        }


def energy_band(score: float) -> str:
    if score >= 8:
        return "excellent"
    if score >= 6:
        return "good"
    if score >= 4:
        return "mixed"
    if score >= 2:
        return "challenging"
    return "difficult"


def transit_impact(aspect: Aspect) -> str:
    """``positive``/``negative``/``neutral`` label used for key transits."""

    if aspect.aspect is AspectType.CONJUNCTION:
        value = conjunction_impact(aspect.body_a, aspect.body_b)
        if value > 0:
            return "positive"
        if value < 0:
            return "negative"
        return "neutral"
    return ASPECT_IMPACTS.get(aspect.aspect, (0.0, "neutral"))[1]


def _key_transit(aspect: Aspect) -> KeyTransit:
    affected: list[Domain] = []
    for domain in domains_for(aspect.body_a) + domains_for(aspect.body_b):
        if domain not in affected:
            affected.append(domain)
    return KeyTransit(
        transit=aspect,
        interpretation=interpret_transit(aspect),
        domains=tuple(affected),
        impact=transit_impact(aspect),
    )


def build_daily_report(
    chart: Any,
    instant: Instant | None = None,
    profile_id: str = "",
    provider: LongitudeProvider | None = None,
    *,
    orbs: OrbTable = TRANSIT_ORBS,
) -> DailyReport:
    """Score the eight domains for ``chart`` at ``instant``.

    Parameters
    ----------
    chart:
        A natal chart (anything exposing ``positions`` and ``placements()``).
    instant:
        Moment of the reading; the current UTC time when omitted.
    profile_id:
        Opaque identifier carried through to the report.
    provider:
        Longitude provider for the current sky.
    orbs:
        Orb table applied to transit-to-natal contacts.
    """

    provider = provider or default_provider()
    instant = instant or Instant.now()
    jd = instant.julian_day

    sky = sky_positions(jd, PLANETS, provider)
    found = transits(chart, sky, orbs, PLANETS)
    modifiers = natal_modifiers(chart)
    phase = moon_phase(sky["sun"].longitude, sky["moon"].longitude)

    categories = {
        domain: category_score(domain, found, phase, modifiers) for domain in DOMAINS
    }
    overall = int(round_half_up(sum(c.score for c in categories.values()) / len(categories)))
    energy = energy_band(overall)

    headline = "The cosmos are in motion."
    if found and found[0].is_exact:
        headline = f"Major energy: {interpret_transit(found[0])}"

    retrogrades = tuple(
        Retrograde(body=body, advice=RETROGRADE_ADVICE.get(body, "Reflect and review"))
        for body in RETROGRADE_CANDIDATES
        if body in sky and sky[body].retrograde
    )

    report = DailyReport(
        profile_id=profile_id,
        instant=instant,
        overall_score=overall,
        energy=energy,
        headline=headline,
        categories=categories,
        key_transits=tuple(_key_transit(a) for a in found[:KEY_TRANSIT_LIMIT]),
        moon_phase=phase,
        retrogrades=retrogrades,
        day_ruler=day_ruler(instant),
        transits=tuple(found),
    )
    DAILY_REPORTS.labels(energy=energy).inc()
    LOG.debug(
        "Daily report for %r at %s: overall=%d (%s), %d transits, %d retrograde",
        profile_id,
        instant.isoformat(),
        overall,
        energy,
        len(found),
        len(retrogrades),
    )
    return report
