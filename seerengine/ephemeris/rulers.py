"""Day rulers and planetary hours in the Chaldean scheme."""

from __future__ import annotations

from dataclasses import dataclass

from ..core.time import Instant

__all__ = ["CHALDEAN_ORDER", "DayRuler", "day_ruler", "planetary_hour"]


CHALDEAN_ORDER: tuple[str, ...] = ("saturn", "jupiter", "mars", "sun", "venus", "mercury", "moon")


@dataclass(frozen=True)
class DayRuler:
    ruler: str
    quality: str


# Sunday first
_DAY_RULERS: tuple[DayRuler, ...] = (
    DayRuler("sun", "beneficial"),
    DayRuler("moon", "neutral"),
    DayRuler("mars", "challenging"),
    DayRuler("mercury", "neutral"),
    DayRuler("jupiter", "beneficial"),
    DayRuler("venus", "beneficial"),
    DayRuler("saturn", "challenging"),
)


def day_ruler(instant: Instant) -> DayRuler:
    """Planetary ruler of the UTC weekday of ``instant``."""

    weekday = instant.to_utc_datetime().isoweekday() % 7
    return _DAY_RULERS[weekday]


def planetary_hour(instant: Instant) -> str:
    """Simplified planetary hour: advance the day ruler by the UTC hour."""

    utc = instant.to_utc_datetime()
    start = CHALDEAN_ORDER.index(day_ruler(instant).ruler)
    return CHALDEAN_ORDER[(start + utc.hour) % len(CHALDEAN_ORDER)]
