"""SeerEngine package bootstrap and curated public API surface."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

from .chart import BirthRecord, NatalChart, build_chart
from .core.time import Instant
from .decision import ScoringResult, Verdict, classify, decide, has_negative_intent, polarity
from .exceptions import ConfigError, ProviderError, SeerEngineError, UnsupportedBodyError
from .scoring import DailyReport, Domain, build_daily_report, category_score
from .synastry import SynastryReport, Tier, synastry
from .transits import Aspect, transits

LOG = logging.getLogger(__name__)
LOG.addHandler(logging.NullHandler())

try:
    __version__ = _get_version("seerengine")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.0.0"


def get_version() -> str:
    """Return the resolved SeerEngine package version."""

    return __version__


__all__ = [
    "Aspect",
    "BirthRecord",
    "ConfigError",
    "DailyReport",
    "Domain",
    "Instant",
    "NatalChart",
    "ProviderError",
    "ScoringResult",
    "SeerEngineError",
    "SynastryReport",
    "Tier",
    "UnsupportedBodyError",
    "Verdict",
    "__version__",
    "build_chart",
    "build_daily_report",
    "category_score",
    "classify",
    "decide",
    "get_version",
    "has_negative_intent",
    "polarity",
    "synastry",
    "transits",
]
