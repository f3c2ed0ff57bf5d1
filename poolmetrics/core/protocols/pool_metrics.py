"""PoolMetricsTracker protocol for connection pool instrumentation.

Abstracts event recording so a connection pool depends on a protocol rather
than a concrete library.  Production uses Prometheus; tests inject a fake
that records calls in memory.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from poolmetrics.core.protocols.pool_stats import PoolStats


@runtime_checkable
class PoolMetricsTracker(Protocol):
    """Protocol for one pool's metrics.

    Record methods must never raise into pool code.
    """

    def record_connection_acquired_nanos(self, elapsed_nanos: int) -> None:
        """Record how long a caller waited to acquire a connection (ns)."""
        ...

    def record_connection_usage_millis(self, elapsed_millis: int) -> None:
        """Record how long a connection was borrowed before release (ms)."""
        ...

    def record_connection_created_millis(self, elapsed_millis: int) -> None:
        """Record how long it took to open a new physical connection (ms)."""
        ...

    def record_connection_timeout(self) -> None:
        """Count one acquisition that timed out."""
        ...

    def close(self) -> None:
        """Release this pool's registration.  Safe to call more than once."""
        ...


@runtime_checkable
class PoolMetricsTrackerFactory(Protocol):
    """Protocol for creating a tracker when a pool starts."""

    def create(self, pool_name: str, pool_stats: PoolStats | None = None) -> PoolMetricsTracker:
        """Create the tracker for ``pool_name``.

        Args:
            pool_name: Label value identifying the pool.  Not required to be unique.
            pool_stats: Optional live view of the pool, exported as gauges.
        """
        ...
