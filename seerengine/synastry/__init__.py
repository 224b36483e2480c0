"""Synastry: compatibility scoring between two natal charts and their daily bond."""

from __future__ import annotations

from .bond import (
    BondMood,
    TodaysBond,
    TransitProfile,
    calculate_pulse,
    determine_mood,
    mood_from_synastry,
    profile_transits,
    todays_bond,
)
from .engine import (
    EMPTY_SCORE,
    ElementHarmony,
    Nature,
    SynastryAspect,
    SynastryReport,
    ThemeScore,
    Tier,
    element_harmony,
    selection_seed,
    synastry,
    tier_for_score,
    tier_rank,
)
from .tables import Theme, pair_theme, pair_weight

__all__ = [
    "EMPTY_SCORE",
    "BondMood",
    "ElementHarmony",
    "Nature",
    "SynastryAspect",
    "SynastryReport",
    "Theme",
    "ThemeScore",
    "Tier",
    "TodaysBond",
    "TransitProfile",
    "calculate_pulse",
    "determine_mood",
    "element_harmony",
    "mood_from_synastry",
    "pair_theme",
    "pair_weight",
    "profile_transits",
    "selection_seed",
    "synastry",
    "tier_for_score",
    "tier_rank",
    "todays_bond",
]
