"""Body positions assembled from a longitude provider."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from ..core.angles import delta_angle, normalize_degrees
from ..core.bodies import canonical_name
from ..core.zodiac import sign_and_degree
from .kernel import NEVER_RETROGRADE, RETROGRADE_SAMPLE_DAYS
from .provider import LongitudeProvider, default_provider

__all__ = ["BodyPosition", "body_position", "sky_positions"]


@dataclass(frozen=True)
class BodyPosition:
    """Ecliptic position of one body at one instant.

    ``sign``, ``degree``, ``arcminute`` and ``retrograde`` are derived from
    ``longitude`` and ``speed`` at construction.
    """

    body: str
    longitude: float
    latitude: float = 0.0
    speed: float = 0.0
    sign: str = ""
    degree: float = 0.0
    arcminute: int = 0
    retrograde: bool = False

    def __post_init__(self) -> None:
        lon = normalize_degrees(self.longitude)
        decomposed = sign_and_degree(lon)
        object.__setattr__(self, "body", canonical_name(self.body))
        object.__setattr__(self, "longitude", lon)
        object.__setattr__(self, "sign", decomposed.sign)
        object.__setattr__(self, "degree", decomposed.degree)
        object.__setattr__(self, "arcminute", decomposed.arcminute)
        retro = self.body not in NEVER_RETROGRADE and self.speed < 0.0
        object.__setattr__(self, "retrograde", retro)

    @property
    def sign_index(self) -> int:
        return int(self.longitude // 30.0) % 12

    def as_dict(self) -> dict[str, object]:
        return {
            "body": self.body,
            "longitude": self.longitude,
            "latitude": self.latitude,
            "speed": self.speed,
            "sign": self.sign,
            "degree": self.degree,
            "arcminute": self.arcminute,
            "retrograde": self.retrograde,
        }


def body_position(
    body: str,
    jd: float,
    provider: LongitudeProvider | None = None,
) -> BodyPosition:
    """Sample ``provider`` at ``jd`` and ``jd ± 0.5`` to build a position."""

    provider = provider or default_provider()
    lon = provider(body, jd)
    before = provider(body, jd - RETROGRADE_SAMPLE_DAYS)
    after = provider(body, jd + RETROGRADE_SAMPLE_DAYS)
    speed = delta_angle(before, after) / (2 * RETROGRADE_SAMPLE_DAYS)
    return BodyPosition(body=body, longitude=lon, speed=speed)


def sky_positions(
    jd: float,
    bodies: Iterable[str],
    provider: LongitudeProvider | None = None,
) -> Mapping[str, BodyPosition]:
    """Positions for every supported body in ``bodies`` at ``jd``."""

    provider = provider or default_provider()
    positions: dict[str, BodyPosition] = {}
    for body in bodies:
        if not provider.supports(body):
            continue
        position = body_position(body, jd, provider)
        positions[position.body] = position
    return positions
