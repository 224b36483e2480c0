"""Transit engine: cross-set aspect detection and timing scans."""

from __future__ import annotations

from .engine import Aspect, natal_aspects, transits
from .timing import TransitTiming, scan_transit_timing

__all__ = ["Aspect", "TransitTiming", "natal_aspects", "scan_transit_timing", "transits"]
