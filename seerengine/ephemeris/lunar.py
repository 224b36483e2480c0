"""Lunar phase classification from solar and lunar longitudes."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from ..core.angles import normalize_degrees

__all__ = ["MOON_PHASES", "MoonPhase", "moon_phase"]


MOON_PHASES: tuple[str, ...] = (
    "New Moon",
    "Waxing Crescent",
    "First Quarter",
    "Waxing Gibbous",
    "Full Moon",
    "Waning Gibbous",
    "Last Quarter",
    "Waning Crescent",
)

_PHASE_ADVICE: Mapping[str, str] = MappingProxyType(
    {
        "New Moon": "Set intentions, plant seeds, begin fresh",
        "Waxing Crescent": "Take first steps, build momentum",
        "First Quarter": "Take action, overcome obstacles",
        "Waxing Gibbous": "Refine and adjust your approach",
        "Full Moon": "Harvest results, celebrate, release",
        "Waning Gibbous": "Share wisdom, express gratitude",
        "Last Quarter": "Release what no longer serves",
        "Waning Crescent": "Rest, reflect, prepare for renewal",
    }
)


@dataclass(frozen=True)
class MoonPhase:
    """Phase descriptor: name, Sun-Moon elongation and illuminated fraction."""

    name: str
    elongation: float
    illumination: float

    @property
    def trend(self) -> str | None:
        """``"waxing"`` or ``"waning"`` for the crescent and gibbous phases.

        New, full and quarter moons carry no trend.
        """

        if self.name.startswith("Waxing"):
            return "waxing"
        if self.name.startswith("Waning"):
            return "waning"
        return None

    @property
    def cycle_fraction(self) -> float:
        return self.elongation / 360.0

    @property
    def advice(self) -> str:
        return _PHASE_ADVICE.get(self.name, "Flow with the lunar cycle")

    def as_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "elongation": self.elongation,
            "illumination": self.illumination,
            "trend": self.trend,
            "advice": self.advice,
        }


def moon_phase(sun_longitude: float, moon_longitude: float) -> MoonPhase:
    """Classify the phase into eight 45° bins starting at conjunction."""

    elongation = normalize_degrees(moon_longitude - sun_longitude)
    index = min(int(elongation // 45.0), len(MOON_PHASES) - 1)
    illumination = (1.0 - math.cos(math.radians(elongation))) / 2.0
    return MoonPhase(name=MOON_PHASES[index], elongation=elongation, illumination=illumination)
