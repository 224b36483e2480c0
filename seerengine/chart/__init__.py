"""Natal chart builder: positions, angles, houses, dignities and patterns."""

from __future__ import annotations

from .dignity import Dignity, DignityKind, dignity_for
from .natal import BirthRecord, NatalChart, build_chart, fortune_point, is_night_birth
from .patterns import Pattern, PatternKind, detect_patterns

__all__ = [
    "BirthRecord",
    "Dignity",
    "DignityKind",
    "NatalChart",
    "Pattern",
    "PatternKind",
    "build_chart",
    "detect_patterns",
    "dignity_for",
    "fortune_point",
    "is_night_birth",
]
