"""Ephemeris layer: closed-form kernel, provider seam, positions and lunar phase."""

from __future__ import annotations

from .kernel import body_longitude, body_speed, is_retrograde, mean_lunar_nodes
from .lunar import MoonPhase, moon_phase
from .positions import BodyPosition, body_position, sky_positions
from .provider import (
    ClosedFormProvider,
    LongitudeProvider,
    default_provider,
    get_provider,
    list_providers,
    register_provider,
)
from .rulers import DayRuler, day_ruler, planetary_hour

__all__ = [
    "BodyPosition",
    "ClosedFormProvider",
    "DayRuler",
    "LongitudeProvider",
    "MoonPhase",
    "body_longitude",
    "body_position",
    "body_speed",
    "day_ruler",
    "default_provider",
    "get_provider",
    "is_retrograde",
    "list_providers",
    "mean_lunar_nodes",
    "moon_phase",
    "planetary_hour",
    "register_provider",
    "sky_positions",
]
