"""Question classification and yes/no decisions."""

from __future__ import annotations

from .classifier import (
    CATEGORY_TO_DOMAIN,
    CRISIS_RESPONSE,
    Classification,
    Polarity,
    QuestionCategory,
    QuestionCheck,
    classify,
    detect_crisis,
    has_negative_intent,
    polarity,
    validate_question,
)
from .engine import (
    CONFIDENCE_FLOOR,
    Factor,
    QuestionMode,
    ScoringResult,
    Verdict,
    decide,
    mirror_verdict,
    nudge,
    simple_advice,
    verdict_for_score,
)

__all__ = [
    "CATEGORY_TO_DOMAIN",
    "CONFIDENCE_FLOOR",
    "CRISIS_RESPONSE",
    "Classification",
    "Factor",
    "Polarity",
    "QuestionCategory",
    "QuestionCheck",
    "QuestionMode",
    "ScoringResult",
    "Verdict",
    "classify",
    "decide",
    "detect_crisis",
    "has_negative_intent",
    "mirror_verdict",
    "nudge",
    "polarity",
    "simple_advice",
    "validate_question",
    "verdict_for_score",
]
