"""Zodiac sign taxonomy and longitude decomposition.

The twelve tropical signs are fixed 30° segments counted from the vernal
equinox point (0° Aries).  Element and modality lookups are plain tuples
indexed by sign number so downstream scoring tables can be audited at a
glance.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .angles import normalize_degrees

__all__ = [
    "ELEMENTS",
    "MODALITIES",
    "SIGNS",
    "ZODIAC_ELEMENT_MAP",
    "ZODIAC_MODALITY_MAP",
    "SignPosition",
    "element_of",
    "modality_of",
    "sign_and_degree",
    "sign_index",
]

SIGNS: tuple[str, ...] = (
    "Aries",
    "Taurus",
    "Gemini",
    "Cancer",
    "Leo",
    "Virgo",
    "Libra",
    "Scorpio",
    "Sagittarius",
    "Capricorn",
    "Aquarius",
    "Pisces",
)

ELEMENTS: tuple[str, str, str, str] = ("fire", "earth", "air", "water")
MODALITIES: tuple[str, str, str] = ("cardinal", "fixed", "mutable")

# Zodiac (0=Aries ... 11=Pisces) → Element
ZODIAC_ELEMENT_MAP: tuple[str, ...] = (
    "fire",  # 0 Aries
    "earth",  # 1 Taurus
    "air",  # 2 Gemini
    "water",  # 3 Cancer
    "fire",  # 4 Leo
    "earth",  # 5 Virgo
    "air",  # 6 Libra
    "water",  # 7 Scorpio
    "fire",  # 8 Sagittarius
    "earth",  # 9 Capricorn
    "air",  # 10 Aquarius
    "water",  # 11 Pisces
)

ZODIAC_MODALITY_MAP: tuple[str, ...] = tuple(MODALITIES[idx % 3] for idx in range(12))

_SIGN_LOOKUP = {name.lower(): idx for idx, name in enumerate(SIGNS)}


@dataclass(frozen=True)
class SignPosition:
    """Longitude decomposed into sign, degree within sign and arcminute."""

    sign: str
    sign_index: int
    degree: float
    arcminute: int

    @property
    def whole_degree(self) -> int:
        return int(self.degree)

    def label(self) -> str:
        return f"{self.whole_degree}°{self.arcminute:02d}' {self.sign}"


def sign_index(longitude: float) -> int:
    """Zero-based sign number for ``longitude``."""

    return int(normalize_degrees(longitude) // 30.0) % 12


def sign_and_degree(longitude: float) -> SignPosition:
    """Split ``longitude`` into its sign, degree within sign and arcminute."""

    lon = normalize_degrees(longitude)
    idx = int(lon // 30.0) % 12
    degree = lon - idx * 30.0
    if not 0.0 <= degree < 30.0:
        degree = min(max(degree, 0.0), math.nextafter(30.0, 0.0))
    minute = int((degree - int(degree)) * 60.0)
    return SignPosition(sign=SIGNS[idx], sign_index=idx, degree=degree, arcminute=min(minute, 59))


def _resolve_sign(sign: str | int) -> int:
    if isinstance(sign, int):
        return sign % 12
    try:
        return _SIGN_LOOKUP[sign.strip().lower()]
    except KeyError as exc:
        raise ValueError(f"unknown zodiac sign '{sign}'") from exc


def element_of(sign: str | int) -> str:
    """Classical element of ``sign`` (name or index)."""

    return ZODIAC_ELEMENT_MAP[_resolve_sign(sign)]


def modality_of(sign: str | int) -> str:
    return ZODIAC_MODALITY_MAP[_resolve_sign(sign)]
