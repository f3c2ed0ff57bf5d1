"""PoolStats protocol: a live, read-only view of a pool's occupancy."""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class PoolStats(Protocol):
    """Read surface of a connection pool sampled on every scrape."""

    @property
    def active_connections(self) -> int: ...

    @property
    def idle_connections(self) -> int: ...

    @property
    def pending_threads(self) -> int: ...

    @property
    def total_connections(self) -> int: ...

    @property
    def max_connections(self) -> int: ...

    @property
    def min_connections(self) -> int: ...


@dataclass(frozen=True)
class PoolStatsSnapshot:
    """Immutable PoolStats value, handy for pools that publish snapshots."""

    active_connections: int = 0
    idle_connections: int = 0
    pending_threads: int = 0
    total_connections: int = 0
    max_connections: int = 0
    min_connections: int = 0
