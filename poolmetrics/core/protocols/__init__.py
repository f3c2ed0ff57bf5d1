"""Core protocols for dependency injection."""

from poolmetrics.core.protocols.pool_metrics import PoolMetricsTracker, PoolMetricsTrackerFactory
from poolmetrics.core.protocols.pool_stats import PoolStats, PoolStatsSnapshot

__all__ = [
    "PoolMetricsTracker",
    "PoolMetricsTrackerFactory",
    "PoolStats",
    "PoolStatsSnapshot",
]
