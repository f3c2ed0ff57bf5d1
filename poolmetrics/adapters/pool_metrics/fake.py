"""Fake PoolMetricsTracker for testing.

Records all calls in memory so tests of pool code can assert on metrics
behaviour without reaching into prometheus-client internals.
"""

from __future__ import annotations

from poolmetrics.core.protocols.pool_metrics import PoolMetricsTracker
from poolmetrics.core.protocols.pool_stats import PoolStats


class FakePoolMetrics(PoolMetricsTracker):
    """In-memory spy implementing the PoolMetricsTracker protocol.

    Usage:
        fake = FakePoolMetrics("primary")
        # … inject into the pool …
        assert fake.acquired_nanos == [1500]
        assert fake.timeouts == 0
    """

    def __init__(self, pool_name: str = "fake", pool_stats: PoolStats | None = None) -> None:
        self.pool_name = pool_name
        self.pool_stats = pool_stats
        self.acquired_nanos: list[int] = []
        self.usage_millis: list[int] = []
        self.created_millis: list[int] = []
        self.timeouts: int = 0
        self.close_calls: int = 0

    def record_connection_acquired_nanos(self, elapsed_nanos: int) -> None:
        self.acquired_nanos.append(elapsed_nanos)

    def record_connection_usage_millis(self, elapsed_millis: int) -> None:
        self.usage_millis.append(elapsed_millis)

    def record_connection_created_millis(self, elapsed_millis: int) -> None:
        self.created_millis.append(elapsed_millis)

    def record_connection_timeout(self) -> None:
        self.timeouts += 1

    def close(self) -> None:
        self.close_calls += 1

    # -- test helpers --

    @property
    def closed(self) -> bool:
        return self.close_calls > 0

    def clear(self) -> None:
        """Reset all recorded state."""
        self.acquired_nanos.clear()
        self.usage_millis.clear()
        self.created_millis.clear()
        self.timeouts = 0
        self.close_calls = 0


class FakePoolMetricsFactory:
    """Hands out one ``FakePoolMetrics`` per ``create`` call, indexed by pool name."""

    def __init__(self) -> None:
        self.trackers: dict[str, FakePoolMetrics] = {}

    def create(self, pool_name: str, pool_stats: PoolStats | None = None) -> FakePoolMetrics:
        tracker = FakePoolMetrics(pool_name, pool_stats)
        self.trackers[pool_name] = tracker
        return tracker
