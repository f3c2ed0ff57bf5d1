"""Connection pool metrics adapters."""

from poolmetrics.adapters.pool_metrics.collector import PoolStatsCollector, PoolStatsEntry
from poolmetrics.adapters.pool_metrics.fake import FakePoolMetrics, FakePoolMetricsFactory
from poolmetrics.adapters.pool_metrics.prometheus import (
    MetricCollectorSet,
    PrometheusPoolMetrics,
    PrometheusPoolMetricsFactory,
)

__all__ = [
    "FakePoolMetrics",
    "FakePoolMetricsFactory",
    "MetricCollectorSet",
    "PoolStatsCollector",
    "PoolStatsEntry",
    "PrometheusPoolMetrics",
    "PrometheusPoolMetricsFactory",
]
