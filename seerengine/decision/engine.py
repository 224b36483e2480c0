"""Yes/no verdicts for questions, scored against a daily report.

The verdict is anchored on the report's score for the question's domain.
Secondary factors (key transits, moon trend, retrogrades) are tallied into
a bounded point total that can only *strengthen* a verdict that is
already on one side; they never move it across the neutral line.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Final

from ..core.bodies import display_name
from ..observability.metrics import DECISIONS
from ..scoring.report import DailyReport
from ..scoring.tables import Domain
from .classifier import Classification, Polarity, QuestionCategory, classify, has_negative_intent, polarity

LOG = logging.getLogger(__name__)

__all__ = [
    "CONFIDENCE_FLOOR",
    "Factor",
    "QuestionMode",
    "ScoringResult",
    "Verdict",
    "decide",
    "mirror_verdict",
    "nudge",
    "simple_advice",
    "verdict_for_score",
]


class Verdict(StrEnum):
    HARD_YES = "HARD_YES"
    SOFT_YES = "SOFT_YES"
    NEUTRAL = "NEUTRAL"
    SOFT_NO = "SOFT_NO"
    HARD_NO = "HARD_NO"
    UNCLEAR = "UNCLEAR"

    @property
    def is_yes(self) -> bool:
        return self in (Verdict.HARD_YES, Verdict.SOFT_YES)

    @property
    def is_no(self) -> bool:
        return self in (Verdict.HARD_NO, Verdict.SOFT_NO)


class QuestionMode(StrEnum):
    YES_NO = "yes_no"
    GUIDANCE = "guidance"


CONFIDENCE_FLOOR: Final[float] = 0.25
SCORE_LIMIT: Final[int] = 100
TRANSIT_WEIGHTS: Final[tuple[float, ...]] = (1.0, 0.6, 0.3)
TRANSIT_POINTS: Final[int] = 10
RETROGRADE_POINTS: Final[int] = -12

_MIRROR: Mapping[Verdict, Verdict] = MappingProxyType(
    {
        Verdict.HARD_YES: Verdict.HARD_NO,
        Verdict.SOFT_YES: Verdict.SOFT_NO,
        Verdict.NEUTRAL: Verdict.NEUTRAL,
        Verdict.SOFT_NO: Verdict.SOFT_YES,
        Verdict.HARD_NO: Verdict.HARD_YES,
        Verdict.UNCLEAR: Verdict.UNCLEAR,
    }
)

_ADVICE: Mapping[Verdict, str] = MappingProxyType(
    {
        Verdict.HARD_YES: "Yes",
        Verdict.SOFT_YES: "Leaning Yes",
        Verdict.NEUTRAL: "Uncertain",
        Verdict.SOFT_NO: "Leaning No",
        Verdict.HARD_NO: "No",
        Verdict.UNCLEAR: "Ask clearer",
    }
)

# Retrograde bodies that weigh on a question, by category or by push polarity.
_RETROGRADE_CATEGORIES: Mapping[str, frozenset[QuestionCategory]] = MappingProxyType(
    {
        "mercury": frozenset({QuestionCategory.COMMUNICATION, QuestionCategory.CAREER}),
        "venus": frozenset({QuestionCategory.LOVE, QuestionCategory.MONEY}),
    }
)


@dataclass(frozen=True)
class Factor:
    description: str
    points: int
    source: str

    def as_dict(self) -> dict[str, Any]:
        return {"description": self.description, "points": self.points, "source": self.source}


@dataclass(frozen=True)
class ScoringResult:
    verdict: Verdict
    score: int
    factors: tuple[Factor, ...]
    category: QuestionCategory
    domain: Domain
    confidence: float
    polarity: Polarity = Polarity.NEUTRAL
    negative: bool = False
    mode: QuestionMode = QuestionMode.YES_NO
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def advice(self) -> str:
        return simple_advice(self.verdict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "verdict": self.verdict.value,
            "score": self.score,
            "advice": self.advice,
            "category": self.category.value,
            "domain": self.domain.value,
            "confidence": self.confidence,
            "polarity": self.polarity.value,
            "negative": self.negative,
            "mode": self.mode.value,
            "factors": [f.as_dict() for f in self.factors],
        }


def verdict_for_score(score: int, polarity_: Polarity | str = Polarity.NEUTRAL) -> Verdict:
    """Map a 1-10 domain score onto a verdict.

    Pull questions invert the score first (``11 - score``): a low-energy day
    favours resting.
    """

    if Polarity(polarity_) is Polarity.PULL:
        score = 11 - score
    if score >= 8:
        return Verdict.HARD_YES
    if score >= 7:
        return Verdict.SOFT_YES
    if score == 6:
        return Verdict.NEUTRAL
    if score >= 4:
        return Verdict.SOFT_NO
    return Verdict.HARD_NO


def nudge(verdict: Verdict, points: int) -> Verdict:
    """Strengthen ``verdict`` using the secondary point total.

    NEUTRAL may lean either way; soft verdicts may harden.  Nothing here
    turns a YES into a NO or back.
    """

    if verdict is Verdict.NEUTRAL:
        if points >= 20:
            return Verdict.SOFT_YES
        if points <= -20:
            return Verdict.SOFT_NO
        return verdict
    if verdict is Verdict.SOFT_NO and points <= -30:
        return Verdict.HARD_NO
    if verdict is Verdict.SOFT_YES and points >= 30:
        return Verdict.HARD_YES
    return verdict


def mirror_verdict(verdict: Verdict) -> Verdict:
    return _MIRROR[verdict]


def simple_advice(verdict: Verdict) -> str:
    return _ADVICE[verdict]


def _polarity_factor(score: int, polarity_: Polarity) -> Factor | None:
    source = "Action polarity"
    if polarity_ is Polarity.PUSH:
        if score >= 7:
            return Factor("Energy supports action", 10, source)
        if score <= 4:
            return Factor("Low energy for this", -15, source)
    elif polarity_ is Polarity.PULL:
        if score <= 4:
            return Factor("Good for rest", 15, source)
        if score >= 7:
            return Factor("High energy resists rest", -10, source)
    return None


def _transit_factors(report: DailyReport, domain: Domain) -> list[Factor]:
    """Top key transits touching the question's report domain.

    Filtering is on the resolved domain, not the question category, so
    communication questions read social transits while conflict and timing
    questions read decisions transits.
    """

    relevant = [kt for kt in report.key_transits if domain in kt.domains]
    factors = []
    for weight, kt in zip(TRANSIT_WEIGHTS, relevant):
        base = {"positive": TRANSIT_POINTS, "negative": -TRANSIT_POINTS}.get(kt.impact, 0)
        factors.append(Factor(kt.interpretation, round(base * weight), "Transit"))
    return factors


def _moon_factor(report: DailyReport, polarity_: Polarity) -> Factor | None:
    trend = report.moon_phase.trend
    name = report.moon_phase.name
    if polarity_ is Polarity.PUSH and trend == "waning":
        return Factor(name, -8, "Moon phase")
    if polarity_ is Polarity.PUSH and trend == "waxing":
        return Factor(name, 6, "Moon phase")
    if polarity_ is Polarity.PULL and trend == "waning":
        return Factor(name, 6, "Moon phase")
    return None


def _retrograde_factors(
    report: DailyReport, category: QuestionCategory, polarity_: Polarity
) -> list[Factor]:
    factors = []
    for retro in report.retrogrades:
        relevant = category in _RETROGRADE_CATEGORIES.get(retro.body, frozenset()) or (
            retro.body == "mars" and polarity_ is Polarity.PUSH
        )
        if relevant:
            factors.append(
                Factor(f"{display_name(retro.body)} retrograde", RETROGRADE_POINTS, "Retrograde")
            )
    return factors


def _sorted(factors: Sequence[Factor]) -> tuple[Factor, ...]:
    return tuple(sorted(factors, key=lambda f: abs(f.points), reverse=True))


def decide(
    question: str,
    report: DailyReport,
    mode: QuestionMode | str = QuestionMode.YES_NO,
    *,
    confidence_floor: float = CONFIDENCE_FLOOR,
) -> ScoringResult:
    """Answer ``question`` against ``report``.

    Parameters
    ----------
    question:
        Raw user text.
    report:
        Daily report for the asker.
    mode:
        ``"yes_no"`` or ``"guidance"``; carried through for narration and
        never changes the verdict.
    confidence_floor:
        Classifications below this confidence return ``UNCLEAR``.
    """

    mode = QuestionMode(mode)
    classification: Classification = classify(question)
    negative = has_negative_intent(question)
    polarity_ = polarity(question)
    category = classification.category
    domain = classification.domain

    if classification.confidence < confidence_floor:
        result = ScoringResult(
            verdict=Verdict.UNCLEAR,
            score=0,
            factors=(
                Factor(
                    "Question unclear",
                    0,
                    f"Confidence: {round(classification.confidence * 100)}%",
                ),
            ),
            category=category,
            domain=domain,
            confidence=classification.confidence,
            polarity=polarity_,
            negative=negative,
            mode=mode,
        )
        DECISIONS.labels(verdict=result.verdict.value).inc()
        LOG.debug("Question %r unclear (confidence %.2f)", question, classification.confidence)
        return result

    domain_score = report.score_for(domain)
    factors: list[Factor] = [
        Factor(
            f"{domain.value} energy: {domain_score}/10",
            (domain_score - 5) * 10,
            f"Daily {domain.value} score",
        )
    ]
    polarity_factor = _polarity_factor(domain_score, polarity_)
    if polarity_factor is not None:
        factors.append(polarity_factor)
    factors.extend(_transit_factors(report, domain))
    moon_factor = _moon_factor(report, polarity_)
    if moon_factor is not None:
        factors.append(moon_factor)
    factors.extend(_retrograde_factors(report, category, polarity_))

    total = max(-SCORE_LIMIT, min(SCORE_LIMIT, sum(f.points for f in factors)))
    verdict = nudge(verdict_for_score(domain_score, polarity_), total)
    if negative:
        verdict = mirror_verdict(verdict)
        total = -total

    result = ScoringResult(
        verdict=verdict,
        score=total,
        factors=_sorted(factors),
        category=category,
        domain=domain,
        confidence=classification.confidence,
        polarity=polarity_,
        negative=negative,
        mode=mode,
        metadata={"domain_score": domain_score},
    )
    DECISIONS.labels(verdict=verdict.value).inc()
    LOG.debug(
        "Decided %r: %s (category=%s domain=%s score=%d polarity=%s negative=%s)",
        question,
        verdict.value,
        category.value,
        domain.value,
        total,
        polarity_.value,
        negative,
    )
    return result
