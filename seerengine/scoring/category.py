"""Per-domain daily score.

Each domain starts at a neutral 5.  Natal modifiers, then transits, then
the moon phase push the running total around; the result is rounded and
clamped to the integer band ``[1, 10]`` before advice and activity tags
are attached.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Final

from ..core.bodies import display_name
from ..core.numeric import round_half_up
from ..ephemeris.lunar import MoonPhase
from ..transits.engine import Aspect
from .tables import ASPECT_VERBS, Domain, NatalModifier, aspect_impact, domains_for

__all__ = [
    "EXACT_MULTIPLIER",
    "NEUTRAL_SCORE",
    "CategoryScore",
    "category_score",
    "interpret_transit",
    "orb_multiplier",
    "score_band",
]


NEUTRAL_SCORE: Final[float] = 5.0
EXACT_MULTIPLIER: Final[float] = 1.5
MIN_SCORE: Final[int] = 1
MAX_SCORE: Final[int] = 10


@dataclass(frozen=True)
class CategoryScore:
    domain: Domain
    score: int
    reasoning: tuple[str, ...]
    advice: str
    good_for: tuple[str, ...]
    bad_for: tuple[str, ...]

    def as_dict(self) -> dict[str, object]:
        return {
            "domain": self.domain.value,
            "score": self.score,
            "reasoning": list(self.reasoning),
            "advice": self.advice,
            "good_for": list(self.good_for),
            "bad_for": list(self.bad_for),
        }


def interpret_transit(aspect: Aspect) -> str:
    verb = ASPECT_VERBS.get(aspect.aspect, aspect.aspect.value)
    return f"Transit {display_name(aspect.body_a)} {verb} your natal {display_name(aspect.body_b)}"


def orb_multiplier(aspect: Aspect) -> float:
    """1.5 for exact contacts, otherwise decaying linearly to 0 at the max orb."""

    if aspect.is_exact:
        return EXACT_MULTIPLIER
    if aspect.max_orb <= 0:
        return 0.0
    return max(0.0, 1.0 - aspect.orb / aspect.max_orb)


def score_band(score: int) -> tuple[str, tuple[str, ...], tuple[str, ...]]:
    """Return ``(advice, good_for, bad_for)`` for a clamped score."""

    if score >= 8:
        return "Excellent energy! Go for it.", ("taking action", "making moves"), ()
    if score >= 6:
        return "Good energy. Proceed with awareness.", ("steady progress",), ()
    if score >= 4:
        return "Mixed energy. Be cautious.", (), ("major decisions", "rushing")
    return (
        "Challenging energy. Wait if possible.",
        ("reflection", "planning"),
        ("big moves", "confrontation"),
    )


class _Evidence:
    """Ordered, de-duplicated evidence accumulator."""

    def __init__(self) -> None:
        self.reasoning: list[str] = []
        self.good_for: list[str] = []
        self.bad_for: list[str] = []

    @staticmethod
    def _add(target: list[str], items: Iterable[str]) -> None:
        for item in items:
            if item not in target:
                target.append(item)

    def reason(self, *items: str) -> None:
        self._add(self.reasoning, items)

    def good(self, *items: str) -> None:
        self._add(self.good_for, items)

    def bad(self, *items: str) -> None:
        self._add(self.bad_for, items)


def _apply_moon(domain: Domain, phase: MoonPhase, evidence: _Evidence) -> float:
    if phase.name == "New Moon":
        if domain in (Domain.DECISIONS, Domain.CREATIVITY):
            evidence.reason("New Moon favors new beginnings")
            evidence.good("starting projects")
            return 1.0
        if domain is Domain.SPIRITUAL:
            evidence.reason("New Moon deepens introspection")
            return 0.5
        return 0.0
    if phase.name == "Full Moon":
        if domain in (Domain.DECISIONS, Domain.CREATIVITY):
            evidence.reason("Full Moon brings clarity but high emotions")
            evidence.good("completion", "celebration")
            evidence.bad("starting new things")
            return 0.5
        if domain is Domain.LOVE:
            evidence.reason("Full Moon heightens emotional connections")
            return 0.5
        if domain is Domain.SOCIAL:
            evidence.reason("Full Moon increases visibility and social energy")
            return 0.5
        if domain is Domain.HEALTH:
            evidence.reason("Full Moon can bring restlessness and poor sleep")
            evidence.bad("rest", "recovery")
            return -0.5
        return 0.0
    if phase.trend == "waning" and domain is Domain.DECISIONS:
        evidence.reason("Waning moon is not the time to initiate")
        evidence.bad("starting new ventures")
        return -0.5
    if phase.trend == "waxing" and domain is Domain.CAREER:
        evidence.reason("Waxing moon builds career momentum")
        evidence.good("pushing forward")
        return 0.5
    return 0.0


def category_score(
    domain: Domain | str,
    transits: Sequence[Aspect],
    moon_phase: MoonPhase | None,
    natal_modifiers: Sequence[NatalModifier] = (),
) -> CategoryScore:
    """Score one domain for the day.

    Parameters
    ----------
    domain:
        One of the eight life domains.
    transits:
        Transit-to-natal aspects, usually sorted tightest first.
    moon_phase:
        Current lunar phase; ``None`` skips the lunar adjustment.
    natal_modifiers:
        Permanent placement modifiers for the chart's owner.
    """

    domain = Domain(domain)
    evidence = _Evidence()
    total = NEUTRAL_SCORE

    for modifier in natal_modifiers:
        delta = modifier.deltas.get(domain)
        if delta is None:
            continue
        total += delta
        warning = modifier.warnings.get(domain)
        if warning:
            evidence.reason(warning)
        if delta < 0:
            evidence.bad("risky moves", "impulsive decisions")

    for aspect in transits:
        if domain not in domains_for(aspect.body_a) and domain not in domains_for(aspect.body_b):
            continue
        total += aspect_impact(aspect.aspect, aspect.body_a, aspect.body_b) * orb_multiplier(aspect)
        evidence.reason(f"{interpret_transit(aspect)} (orb: {aspect.orb:.1f}°)")

    if moon_phase is not None:
        total += _apply_moon(domain, moon_phase, evidence)

    score = max(MIN_SCORE, min(MAX_SCORE, int(round_half_up(total))))
    advice, good, bad = score_band(score)
    evidence.good(*good)
    evidence.bad(*bad)
    return CategoryScore(
        domain=domain,
        score=score,
        reasoning=tuple(evidence.reasoning),
        advice=advice,
        good_for=tuple(evidence.good_for),
        bad_for=tuple(evidence.bad_for),
    )
