"""Pool occupancy gauges as a custom prometheus-client collector.

One ``PoolStatsCollector`` is registered per registry, next to the shared
instruments.  Pools add an entry when their adapter is created and remove it
on close; every scrape reports all pools as samples of a single family per
gauge.
"""

from __future__ import annotations

import threading
from typing import Iterator

from prometheus_client.metrics_core import GaugeMetricFamily, Metric
from prometheus_client.registry import Collector

from poolmetrics.core.config import Settings, settings
from poolmetrics.core.logging import logger
from poolmetrics.core.protocols.pool_stats import PoolStats

# (metric suffix, help text, PoolStats attribute)
_GAUGES = (
    ("active_connections", "Active connections", "active_connections"),
    ("idle_connections", "Idle connections", "idle_connections"),
    ("pending_threads", "Pending threads", "pending_threads"),
    ("connections", "The number of current connections", "total_connections"),
    ("max_connections", "Max connections", "max_connections"),
    ("min_connections", "Min connections", "min_connections"),
)


class PoolStatsEntry:
    """One pool's registration in a ``PoolStatsCollector``."""

    __slots__ = ("pool_name", "pool_stats")

    def __init__(self, pool_name: str, pool_stats: PoolStats | None) -> None:
        self.pool_name = pool_name
        self.pool_stats = pool_stats

    def __repr__(self) -> str:
        return f"PoolStatsEntry(pool_name={self.pool_name!r})"


class PoolStatsCollector(Collector):
    """Occupancy gauges for every pool reporting into one registry."""

    def __init__(self, config: Settings = settings) -> None:
        self._config = config
        self._entries: list[PoolStatsEntry] = []
        self._lock = threading.Lock()

    def add(self, pool_name: str, pool_stats: PoolStats | None = None) -> PoolStatsEntry:
        """Start reporting ``pool_stats`` under ``pool_name``; returns the removal handle."""
        entry = PoolStatsEntry(pool_name, pool_stats)
        with self._lock:
            self._entries.append(entry)
        return entry

    def remove(self, entry: PoolStatsEntry) -> None:
        """Stop reporting ``entry``.

        Raises:
            KeyError: ``entry`` is not (or no longer) registered.
        """
        with self._lock:
            for i, existing in enumerate(self._entries):
                if existing is entry:
                    del self._entries[i]
                    return
        raise KeyError(entry)

    def __contains__(self, entry: object) -> bool:
        with self._lock:
            return any(existing is entry for existing in self._entries)

    def describe(self) -> Iterator[Metric]:
        for suffix, doc, _ in _GAUGES:
            yield self._family(suffix, doc)

    def collect(self) -> Iterator[Metric]:
        with self._lock:
            entries = list(self._entries)

        # Pools sharing a name share a series, so their values are summed.
        totals: dict[str, list[int]] = {}
        for entry in entries:
            if entry.pool_stats is None:
                continue
            try:
                values = [int(getattr(entry.pool_stats, attr)) for _, _, attr in _GAUGES]
            except Exception as e:
                # A broken pool must not fail the scrape of the other pools.
                log = logger.with_context(pool_name=entry.pool_name, operation="pool_stats_collect")
                log.warning(f"Skipping pool stats for this scrape: {e}")
                continue
            current = totals.setdefault(entry.pool_name, [0] * len(_GAUGES))
            for i, value in enumerate(values):
                current[i] += value

        if not totals:
            return

        for i, (suffix, doc, _) in enumerate(_GAUGES):
            family = self._family(suffix, doc)
            for pool_name, values in totals.items():
                family.add_metric([pool_name], values[i])
            yield family

    def _family(self, suffix: str, doc: str) -> GaugeMetricFamily:
        return GaugeMetricFamily(
            self._config.metric_name(suffix),
            doc,
            labels=[self._config.pool_label],
        )
