"""Process-local memoisation of natal charts.

Charts are immutable once built, so a cached chart can be handed to any
number of callers.  A per-key lock makes sure concurrent requests for the
same birth record trigger a single computation.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Callable, Hashable, Optional, Tuple

from .chart.natal import BirthRecord, NatalChart, build_chart
from .ephemeris.provider import LongitudeProvider, default_provider
from .observability.metrics import CHART_CACHE_HITS, CHART_CACHE_MISSES

LOG = logging.getLogger(__name__)

__all__ = ["ChartCache"]

ChartBuilder = Callable[[BirthRecord, LongitudeProvider], NatalChart]


def _default_builder(birth: BirthRecord, provider: LongitudeProvider) -> NatalChart:
    return build_chart(birth, provider)


class ChartCache:
    """LRU cache of :class:`NatalChart` keyed on birth record and provider."""

    def __init__(
        self,
        maxsize: Optional[int] = 256,
        *,
        builder: ChartBuilder = _default_builder,
    ) -> None:
        self.maxsize = maxsize
        self._builder = builder
        self._lock = threading.Lock()
        self._key_locks: dict[Hashable, threading.Lock] = {}
        self._data: "OrderedDict[Tuple[Hashable, ...], NatalChart]" = OrderedDict()
        # number of cached providers per birth record
        self._births: dict[BirthRecord, int] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, birth: object) -> bool:
        if not isinstance(birth, BirthRecord):
            return False
        with self._lock:
            return birth in self._births

    @staticmethod
    def _key(birth: BirthRecord, provider: LongitudeProvider) -> Tuple[Hashable, ...]:
        return (birth, getattr(provider, "provider_id", type(provider).__name__))

    def _lookup(self, key: Tuple[Hashable, ...]) -> Optional[NatalChart]:
        with self._lock:
            chart = self._data.get(key)
            if chart is not None:
                self._data.move_to_end(key)
            return chart

    def _store(self, key: Tuple[Hashable, ...], chart: NatalChart) -> None:
        with self._lock:
            if key not in self._data:
                self._births[key[0]] = self._births.get(key[0], 0) + 1
            self._data[key] = chart
            self._data.move_to_end(key)
            if self.maxsize is not None:
                while len(self._data) > self.maxsize:
                    evicted, _ = self._data.popitem(last=False)
                    self._forget(evicted[0])
                    LOG.debug("Evicted cached chart for %r", evicted[0].name)

    def _forget(self, birth: BirthRecord) -> None:
        remaining = self._births.pop(birth) - 1
        if remaining:
            self._births[birth] = remaining

    def get(self, birth: BirthRecord, provider: LongitudeProvider | None = None) -> NatalChart:
        """Return the chart for ``birth``, building it at most once per key."""

        provider = provider or default_provider()
        key = self._key(birth, provider)
        chart = self._lookup(key)
        if chart is not None:
            CHART_CACHE_HITS.inc()
            return chart

        with self._lock:
            key_lock = self._key_locks.setdefault(key, threading.Lock())
        try:
            with key_lock:
                # Another thread may have finished the build while we waited.
                chart = self._lookup(key)
                if chart is not None:
                    CHART_CACHE_HITS.inc()
                    return chart
                CHART_CACHE_MISSES.inc()
                chart = self._builder(birth, provider)
                self._store(key, chart)
                return chart
        finally:
            with self._lock:
                self._key_locks.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self._births.clear()
            self._key_locks.clear()
