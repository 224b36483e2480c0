from __future__ import annotations

import pytest

from seerengine.core.time import Instant
from seerengine.ephemeris.lunar import moon_phase
from seerengine.ephemeris.rulers import day_ruler, planetary_hour


@pytest.mark.parametrize(
    "sun, moon, name, trend",
    [
        (0.0, 0.0, "New Moon", None),
        (0.0, 44.9, "New Moon", None),
        (0.0, 45.0, "Waxing Crescent", "waxing"),
        (100.0, 190.0, "First Quarter", None),
        (0.0, 150.0, "Waxing Gibbous", "waxing"),
        (0.0, 180.0, "Full Moon", None),
        (0.0, 240.0, "Waning Gibbous", "waning"),
        (0.0, 280.0, "Last Quarter", None),
        (10.0, 9.0, "Waning Crescent", "waning"),
    ],
)
def test_phase_bins(sun: float, moon: float, name: str, trend: str | None) -> None:
    phase = moon_phase(sun, moon)
    assert phase.name == name
    assert phase.trend == trend


def test_illumination() -> None:
    assert moon_phase(0.0, 0.0).illumination == pytest.approx(0.0)
    assert moon_phase(0.0, 180.0).illumination == pytest.approx(1.0)
    assert moon_phase(0.0, 90.0).illumination == pytest.approx(0.5)


def test_phase_advice() -> None:
    phase = moon_phase(0.0, 0.0)
    assert phase.advice == "Set intentions, plant seeds, begin fresh"
    assert phase.as_dict()["advice"] == phase.advice
    assert phase.cycle_fraction == 0.0


@pytest.mark.parametrize(
    "day, ruler, quality",
    [
        (7, "sun", "beneficial"),  # Sunday
        (8, "moon", "neutral"),
        (9, "mars", "challenging"),
        (10, "mercury", "neutral"),
        (11, "jupiter", "beneficial"),
        (12, "venus", "beneficial"),
        (13, "saturn", "challenging"),
    ],
)
def test_day_ruler(day: int, ruler: str, quality: str) -> None:
    result = day_ruler(Instant(2024, 1, day))
    assert (result.ruler, result.quality) == (ruler, quality)


def test_day_ruler_uses_utc_weekday() -> None:
    # Sunday 23:00 at UTC-3 is already Monday in UTC.
    assert day_ruler(Instant(2024, 1, 7, 23, utc_offset_hours=-3.0)).ruler == "moon"


def test_planetary_hour_advances_in_chaldean_order() -> None:
    assert planetary_hour(Instant(2024, 1, 7, 0)) == "sun"
    assert planetary_hour(Instant(2024, 1, 7, 1)) == "venus"
    assert planetary_hour(Instant(2024, 1, 7, 7)) == "sun"
