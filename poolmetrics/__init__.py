"""Connection pool metrics for Prometheus."""

from poolmetrics.adapters.pool_metrics import (
    FakePoolMetrics,
    MetricCollectorSet,
    PrometheusPoolMetrics,
    PrometheusPoolMetricsFactory,
)
from poolmetrics.core.exceptions import (
    DuplicateRegistrationError,
    PoolMetricsException,
    RecordingFailure,
    UnregistrationError,
)
from poolmetrics.core.protocols import PoolMetricsTracker, PoolMetricsTrackerFactory, PoolStats

__all__ = [
    "DuplicateRegistrationError",
    "FakePoolMetrics",
    "MetricCollectorSet",
    "PoolMetricsException",
    "PoolMetricsTracker",
    "PoolMetricsTrackerFactory",
    "PoolStats",
    "PrometheusPoolMetrics",
    "PrometheusPoolMetricsFactory",
    "RecordingFailure",
    "UnregistrationError",
]
