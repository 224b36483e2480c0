from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from seerengine.chart.natal import build_chart
from seerengine.core.time import J2000
from seerengine.ephemeris.provider import get_provider
from seerengine.exceptions import UnsupportedBodyError
from seerengine.observability.metrics import (
    CHART_BUILD_DURATION,
    PROVIDER_FAILURES,
    ensure_metrics_registered,
)


def _sample(registry: CollectorRegistry, name: str, labels: dict[str, str] | None = None) -> float:
    value = registry.get_sample_value(name, labels or {})
    return 0.0 if value is None else value


def test_registration_is_idempotent() -> None:
    registry = CollectorRegistry()
    ensure_metrics_registered(registry)
    ensure_metrics_registered(registry)
    assert registry.get_sample_value("seerengine_chart_cache_hits_total") is not None
    assert registry.get_sample_value("seerengine_chart_cache_misses_total") is not None


def test_provider_failures_counted() -> None:
    registry = CollectorRegistry()
    ensure_metrics_registered(registry)
    labels = {"provider_id": "closed_form", "error_code": "unsupported_body"}
    before = _sample(registry, "seerengine_provider_failures_total", labels)

    with pytest.raises(UnsupportedBodyError):
        get_provider("closed_form")("chiron", J2000)

    assert _sample(registry, "seerengine_provider_failures_total", labels) == before + 1.0
    assert PROVIDER_FAILURES.labels(**labels) is PROVIDER_FAILURES.labels(**labels)


def test_chart_builds_are_timed(sample_birth) -> None:
    registry = CollectorRegistry()
    ensure_metrics_registered(registry)
    labels = {"provider_id": "closed_form"}
    before = _sample(registry, "seerengine_chart_build_duration_seconds_count", labels)

    build_chart(sample_birth)

    assert _sample(registry, "seerengine_chart_build_duration_seconds_count", labels) == before + 1.0
    assert CHART_BUILD_DURATION._name == "seerengine_chart_build_duration_seconds"  # type: ignore[attr-defined]
