"""Natal chart construction.

A :class:`NatalChart` is an immutable snapshot of one :class:`BirthRecord`:
every tracked body's position, the ascendant and midheaven, equal
houses, dignities, natal aspects and detected patterns.  All positions in
a chart share one instant and one geographic fix.
"""

from __future__ import annotations

import datetime as _dt
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.angles import normalize_degrees
from ..core.bodies import PLANETS, TRACKED_BODIES, canonical_name
from ..core.time import Instant
from ..ephemeris.positions import BodyPosition, body_position
from ..ephemeris.provider import LongitudeProvider, default_provider
from ..geometry.aspects import NATAL_ORBS, OrbTable
from ..geometry.houses import ascendant as compute_ascendant
from ..geometry.houses import house as house_for
from ..geometry.houses import midheaven as compute_midheaven
from ..observability.metrics import CHART_BUILD_DURATION
from ..transits.engine import Aspect, natal_aspects
from .dignity import Dignity, dignity_for
from .patterns import Pattern, detect_patterns

LOG = logging.getLogger(__name__)

__all__ = [
    "BirthRecord",
    "NatalChart",
    "build_chart",
    "fortune_point",
    "is_night_birth",
]

DEFAULT_BIRTH_TIME = _dt.time(12, 0)
DERIVED_POINTS = frozenset({"north_node", "south_node", "fortune"})


class BirthRecord(BaseModel):
    """Birth data supplied by the caller.

    An absent ``birth_time`` defaults to noon and flags the chart with
    ``time_known=False`` so narrators can hedge on house and ascendant
    placements.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = ""
    birth_date: _dt.date = Field(alias="date")
    birth_time: _dt.time | None = Field(default=None, alias="time")
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    utc_offset_hours: float = Field(default=0.0, ge=-14.0, le=14.0)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> str:
        return str(value or "").strip()

    @property
    def time_known(self) -> bool:
        return self.birth_time is not None

    @property
    def instant(self) -> Instant:
        clock = self.birth_time or DEFAULT_BIRTH_TIME
        return Instant(
            year=self.birth_date.year,
            month=self.birth_date.month,
            day=self.birth_date.day,
            hour=clock.hour,
            minute=clock.minute,
            second=clock.second,
            utc_offset_hours=self.utc_offset_hours,
        )


@dataclass(frozen=True)
class NatalChart:
    birth: BirthRecord
    instant: Instant
    jd: float
    positions: Mapping[str, BodyPosition]
    ascendant: float
    midheaven: float
    houses: Mapping[str, int]
    dignities: Mapping[str, Dignity]
    aspects: tuple[Aspect, ...] = ()
    patterns: tuple[Pattern, ...] = ()
    provider_id: str = "closed_form"
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "positions", MappingProxyType(dict(self.positions)))
        object.__setattr__(self, "houses", MappingProxyType(dict(self.houses)))
        object.__setattr__(self, "dignities", MappingProxyType(dict(self.dignities)))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def name(self) -> str:
        return self.birth.name

    @property
    def time_known(self) -> bool:
        return self.birth.time_known

    def position(self, body: str) -> BodyPosition | None:
        return self.positions.get(canonical_name(body))

    def sign_of(self, body: str) -> str | None:
        pos = self.position(body)
        return pos.sign if pos is not None else None

    def placements(self) -> dict[str, str]:
        """Body to sign mapping for every tracked position."""

        return {body: pos.sign for body, pos in self.positions.items()}

    def summary(self) -> dict[str, str | None]:
        return {"name": self.name, "sun_sign": self.sign_of("sun"), "moon_sign": self.sign_of("moon")}

    def as_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "instant": self.instant.isoformat(),
            "jd": self.jd,
            "time_known": self.time_known,
            "latitude": self.birth.latitude,
            "longitude": self.birth.longitude,
            "ascendant": self.ascendant,
            "midheaven": self.midheaven,
            "positions": {k: v.as_dict() for k, v in self.positions.items()},
            "houses": dict(self.houses),
            "dignities": {k: v.as_dict() for k, v in self.dignities.items()},
            "aspects": [a.as_dict() for a in self.aspects],
            "patterns": [p.as_dict() for p in self.patterns],
            "provider": self.provider_id,
        }


def is_night_birth(local_hour: float) -> bool:
    """Night means a local civil hour outside ``[6, 18)``."""

    return local_hour < 6.0 or local_hour >= 18.0


def fortune_point(asc: float, sun: float, moon: float, *, night: bool) -> float:
    """Part of Fortune: Asc + Moon - Sun by day, Asc + Sun - Moon by night."""

    if night:
        return normalize_degrees(asc + sun - moon)
    return normalize_degrees(asc + moon - sun)


def build_chart(
    birth: BirthRecord,
    provider: LongitudeProvider | None = None,
    *,
    orbs: OrbTable = NATAL_ORBS,
    include_chiron: bool = True,
) -> NatalChart:
    """Compute the complete natal chart for ``birth``.

    Parameters
    ----------
    birth:
        Validated birth record.
    provider:
        Longitude provider; the closed-form kernel when omitted.
    orbs:
        Orb table for natal aspects.
    include_chiron:
        Add Chiron when the provider supports it.
    """

    provider = provider or default_provider()
    provider_id = getattr(provider, "provider_id", type(provider).__name__)
    with CHART_BUILD_DURATION.labels(provider_id=provider_id).time():
        instant = birth.instant
        jd = instant.julian_day
        asc = compute_ascendant(jd, birth.latitude, birth.longitude)
        mc = compute_midheaven(asc)

        positions: dict[str, BodyPosition] = {}
        for body in TRACKED_BODIES:
            if body == "fortune":
                continue
            positions[body] = body_position(body, jd, provider)
        if include_chiron and provider.supports("chiron"):
            positions["chiron"] = body_position("chiron", jd, provider)

        night = is_night_birth(instant.local_hour)
        positions["fortune"] = BodyPosition(
            body="fortune",
            longitude=fortune_point(
                asc, positions["sun"].longitude, positions["moon"].longitude, night=night
            ),
        )

        houses = {body: house_for(pos.longitude, asc) for body, pos in positions.items()}
        dignities = {body: dignity_for(body, pos.sign) for body, pos in positions.items()}
        longitudes = {body: pos.longitude for body, pos in positions.items()}
        chart = NatalChart(
            birth=birth,
            instant=instant,
            jd=jd,
            positions=positions,
            ascendant=asc,
            midheaven=mc,
            houses=houses,
            dignities=dignities,
            aspects=tuple(natal_aspects(positions, orbs)),
            patterns=detect_patterns(longitudes, stellium_only=DERIVED_POINTS),
            provider_id=provider_id,
            metadata={"night_birth": night, "planets": [b for b in PLANETS if b in positions]},
        )
    LOG.debug(
        "Built chart for %r (jd=%.5f asc=%.2f, %d patterns)",
        birth.name,
        jd,
        asc,
        len(chart.patterns),
    )
    return chart
