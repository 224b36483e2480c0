"""Prometheus metric definitions shared across SeerEngine components."""

from __future__ import annotations

from collections.abc import Iterable

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

__all__ = [
    "BOND_READINGS",
    "CHART_BUILD_DURATION",
    "CHART_CACHE_HITS",
    "CHART_CACHE_MISSES",
    "DAILY_REPORTS",
    "DECISIONS",
    "PROVIDER_FAILURES",
    "SYNASTRY_REPORTS",
    "ensure_metrics_registered",
]


CHART_BUILD_DURATION = Histogram(
    "seerengine_chart_build_duration_seconds",
    "Duration of natal chart construction.",
    ("provider_id",),
    registry=None,
)

CHART_CACHE_HITS = Counter(
    "seerengine_chart_cache_hits_total",
    "Natal charts served from the in-memory chart cache.",
    registry=None,
)

CHART_CACHE_MISSES = Counter(
    "seerengine_chart_cache_misses_total",
    "Natal chart cache misses that required a fresh computation.",
    registry=None,
)

DAILY_REPORTS = Counter(
    "seerengine_daily_reports_total",
    "Daily reports generated grouped by overall energy band.",
    ("energy",),
    registry=None,
)

DECISIONS = Counter(
    "seerengine_decisions_total",
    "Question decisions grouped by verdict.",
    ("verdict",),
    registry=None,
)

SYNASTRY_REPORTS = Counter(
    "seerengine_synastry_reports_total",
    "Synastry reports grouped by compatibility tier.",
    ("tier",),
    registry=None,
)

BOND_READINGS = Counter(
    "seerengine_bond_readings_total",
    "Daily bond readings grouped by mood.",
    ("mood",),
    registry=None,
)

PROVIDER_FAILURES = Counter(
    "seerengine_provider_failures_total",
    "Longitude provider failures grouped by error code.",
    ("provider_id", "error_code"),
    registry=None,
)


def _iter_metrics() -> Iterable[Counter | Histogram]:
    yield CHART_BUILD_DURATION
    yield CHART_CACHE_HITS
    yield CHART_CACHE_MISSES
    yield DAILY_REPORTS
    yield DECISIONS
    yield SYNASTRY_REPORTS
    yield BOND_READINGS
    yield PROVIDER_FAILURES


def ensure_metrics_registered(
    registry: CollectorRegistry | None = None,
) -> None:
    """Register shared metrics with ``registry`` if not already present."""

    target = registry or REGISTRY
    for metric in _iter_metrics():
        try:
            target.register(metric)
        except ValueError:
            # Prometheus raises when a metric name already exists in the registry.
            continue
