"""Optional Swiss Ephemeris backend loaded lazily from ``pyswisseph``."""

from __future__ import annotations

import importlib
import importlib.util
from types import MappingProxyType
from typing import Any, Mapping

from ..core.bodies import canonical_name
from ..exceptions import ProviderError, UnsupportedBodyError
from ..observability.metrics import PROVIDER_FAILURES

__all__ = ["SwissEphemerisProvider", "swe", "reset_swe", "has_swe"]

_swe_mod: Any | None = None


def _load_swe() -> Any:
    global _swe_mod
    if _swe_mod is None:
        try:
            _swe_mod = importlib.import_module("swisseph")
        except ImportError as exc:  # pragma: no cover - import errors depend on env
            raise ProviderError(
                "Swiss Ephemeris not available. Install the 'swe' extra (package: 'pyswisseph').",
                provider_id="swiss",
                error_code="missing_dependency",
            ) from exc
    return _swe_mod


class _SweProxy:
    """Proxy object exposing Swiss Ephemeris attributes lazily."""

    def __call__(self) -> Any:
        return _load_swe()

    def __getattr__(self, item: str) -> Any:
        return getattr(_load_swe(), item)


swe = _SweProxy()


def reset_swe() -> None:
    """For tests: force reload of swisseph on next swe() call."""

    global _swe_mod
    _swe_mod = None


def has_swe() -> bool:
    """Return ``True`` if pyswisseph is importable."""

    if _swe_mod is not None:
        return True
    return importlib.util.find_spec("swisseph") is not None


# Body name -> swisseph constant attribute
_SWE_BODIES: Mapping[str, str] = MappingProxyType(
    {
        "sun": "SUN",
        "moon": "MOON",
        "mercury": "MERCURY",
        "venus": "VENUS",
        "mars": "MARS",
        "jupiter": "JUPITER",
        "saturn": "SATURN",
        "uranus": "URANUS",
        "neptune": "NEPTUNE",
        "pluto": "PLUTO",
        "north_node": "MEAN_NODE",
        "chiron": "CHIRON",
    }
)


class SwissEphemerisProvider:
    """Higher precision provider evaluating positions with ``swe.calc_ut``."""

    provider_id = "swiss"

    def supports(self, body: str) -> bool:
        return canonical_name(body) in _SWE_BODIES or canonical_name(body) == "south_node"

    def __call__(self, body: str, jd: float) -> float:
        key = canonical_name(body)
        if key == "south_node":
            return (self("north_node", jd) + 180.0) % 360.0
        try:
            attr = _SWE_BODIES[key]
        except KeyError as exc:
            PROVIDER_FAILURES.labels(provider_id=self.provider_id, error_code="unsupported_body").inc()
            raise UnsupportedBodyError(key, provider_id=self.provider_id) from exc
        try:
            values, _flags = swe.calc_ut(jd, getattr(swe, attr))
        except ProviderError:
            raise
        except Exception as exc:
            PROVIDER_FAILURES.labels(provider_id=self.provider_id, error_code="calc_failed").inc()
            raise ProviderError(
                f"swe.calc_ut failed for {key}",
                provider_id=self.provider_id,
                error_code="calc_failed",
                context={"body": key, "jd": jd},
            ) from exc
        return float(values[0]) % 360.0

    def __repr__(self) -> str:
        return "SwissEphemerisProvider()"
