"""Daily scoring: lookup tables, per-domain scores and the daily report."""

from __future__ import annotations

from .category import CategoryScore, category_score, interpret_transit, orb_multiplier, score_band
from .report import DailyReport, KeyTransit, Retrograde, build_daily_report, energy_band, transit_impact
from .tables import DOMAINS, Domain, NatalModifier, aspect_impact, conjunction_impact, natal_modifiers

__all__ = [
    "DOMAINS",
    "CategoryScore",
    "DailyReport",
    "Domain",
    "KeyTransit",
    "NatalModifier",
    "Retrograde",
    "aspect_impact",
    "build_daily_report",
    "category_score",
    "conjunction_impact",
    "energy_band",
    "interpret_transit",
    "natal_modifiers",
    "orb_multiplier",
    "score_band",
    "transit_impact",
]
