"""Longitude provider contract and registry.

Every position in the engine is obtained through a
:class:`LongitudeProvider`: a callable mapping ``(body, jd)`` to an
ecliptic longitude.  The closed-form kernel is the default; a Swiss
Ephemeris backed provider can be registered when ``pyswisseph`` is
installed.  Swapping providers never changes any downstream formula.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from ..core.bodies import canonical_name
from ..exceptions import ProviderError, UnsupportedBodyError
from ..observability.metrics import PROVIDER_FAILURES
from .kernel import CLOSED_FORM_BODIES, body_longitude

LOG = logging.getLogger(__name__)

__all__ = [
    "ClosedFormProvider",
    "LongitudeProvider",
    "default_provider",
    "get_provider",
    "list_providers",
    "register_provider",
]


@runtime_checkable
class LongitudeProvider(Protocol):
    """Provider contract returning ecliptic longitudes in degrees."""

    provider_id: str

    def __call__(self, body: str, jd: float) -> float:
        """Return the longitude of ``body`` at Julian day ``jd``."""

        ...

    def supports(self, body: str) -> bool:
        """Return ``True`` when ``body`` can be computed by this provider."""

        ...


class ClosedFormProvider:
    """Default provider backed by the closed-form kernel."""

    provider_id = "closed_form"

    def __call__(self, body: str, jd: float) -> float:
        try:
            return body_longitude(body, jd)
        except UnsupportedBodyError:
            PROVIDER_FAILURES.labels(provider_id=self.provider_id, error_code="unsupported_body").inc()
            raise

    def supports(self, body: str) -> bool:
        return canonical_name(body) in CLOSED_FORM_BODIES

    def __repr__(self) -> str:
        return "ClosedFormProvider()"


_REGISTRY: dict[str, LongitudeProvider] = {}


def register_provider(name: str, provider: LongitudeProvider) -> None:
    """Register ``provider`` under ``name`` (replacing any previous entry)."""

    if not callable(provider) or not hasattr(provider, "supports"):
        raise TypeError("provider must be callable and expose supports(body)")
    key = name.strip().lower()
    if key in _REGISTRY:
        LOG.debug("Replacing longitude provider %s", key)
    _REGISTRY[key] = provider


def get_provider(name: str = "closed_form") -> LongitudeProvider:
    """Return the provider registered under ``name``.

    The Swiss Ephemeris provider is registered lazily on first request so
    importing the package never requires ``pyswisseph``.
    """

    key = name.strip().lower()
    if key not in _REGISTRY and key in {"swiss", "swisseph", "swe"}:
        from .swe import SwissEphemerisProvider

        register_provider("swiss", SwissEphemerisProvider())
        key = "swiss"
    try:
        return _REGISTRY[key]
    except KeyError as exc:
        raise ProviderError(
            f"no longitude provider registered as '{name}'",
            provider_id=key,
            error_code="not_registered",
            context={"available": sorted(_REGISTRY)},
        ) from exc


def list_providers() -> list[str]:
    return sorted(_REGISTRY)


def default_provider() -> LongitudeProvider:
    return _REGISTRY["closed_form"]


register_provider("closed_form", ClosedFormProvider())
