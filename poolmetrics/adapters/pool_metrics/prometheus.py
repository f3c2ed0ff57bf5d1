"""Prometheus implementation of the PoolMetricsTracker protocol.

Every pool gets its own ``PrometheusPoolMetrics`` with children of four
shared instruments labelled by its pool name.  The instruments themselves
(one Counter, three Summaries) and the occupancy-gauge collector are
registered once per CollectorRegistry and shared by every pool reporting
into that registry, because prometheus-client refuses to register the same
name twice.

The registry -> instruments map lives in a ``KeyedSingletonFactory``.  Callers
that do not inject one share the module default.
"""

from __future__ import annotations

import threading
from typing import Any, Callable

from prometheus_client import CollectorRegistry, Counter, Summary
from prometheus_client.registry import Collector

from poolmetrics.adapters.pool_metrics.collector import PoolStatsCollector, PoolStatsEntry
from poolmetrics.core.config import Settings, settings
from poolmetrics.core.exceptions import (
    DuplicateRegistrationError,
    RecordingFailure,
    UnregistrationError,
)
from poolmetrics.core.keyed_singleton import KeyedSingletonFactory
from poolmetrics.core.logging import logger
from poolmetrics.core.protocols.pool_metrics import PoolMetricsTracker
from poolmetrics.core.protocols.pool_stats import PoolStats

CollectorSets = KeyedSingletonFactory[Any, "MetricCollectorSet"]


class MetricCollectorSet:
    """The instruments shared by all pools on one registry.

    Built at most once per registry.  Never unregistered: other pools may
    still be reporting through it.  Construction is all or nothing: if any
    registration fails, the ones before it are undone.
    """

    def __init__(self, registry: Any, config: Settings = settings) -> None:
        self.registry = registry
        label = [config.pool_label]
        registered: list[Collector] = []

        try:
            name = config.metric_name("connection_timeout_count")
            self.connection_timeout_counter = self._register(
                name,
                Counter(name, "Connection timeout count", label, registry=None),
                registered,
            )
            name = config.metric_name("connection_acquired_nanos")
            self.elapsed_acquired_summary = self._register(
                name,
                Summary(name, "Connection acquired time (ns)", label, registry=None),
                registered,
            )
            name = config.metric_name("connection_usage_millis")
            self.elapsed_borrowed_summary = self._register(
                name,
                Summary(name, "Connection usage (ms)", label, registry=None),
                registered,
            )
            name = config.metric_name("connection_creation_millis")
            self.elapsed_creation_summary = self._register(
                name,
                Summary(name, "Connection creation (ms)", label, registry=None),
                registered,
            )
            self.pool_stats_collector = self._register(
                config.metric_name("connections"),
                PoolStatsCollector(config),
                registered,
            )
        except Exception:
            self._rollback(registered)
            raise

        logger.with_context(operation="collector_set_init").debug(
            f"Registered pool metric instruments on registry {id(registry):#x}"
        )

    @classmethod
    def get_or_create(
        cls,
        registry: Any,
        *,
        factory: CollectorSets | None = None,
        config: Settings = settings,
    ) -> MetricCollectorSet:
        """Return the set for ``registry``, building and registering it on first use.

        ``config`` only applies when the set is built; later callers get the
        existing set whatever config they pass.

        Raises:
            DuplicateRegistrationError: a name is already taken on ``registry``
                by something outside this package.  Nothing is left registered.
        """
        sets = factory if factory is not None else default_collector_sets
        return sets.get_or_create(registry, lambda r: cls(r, config))

    def _register(self, name: str, metric: Any, registered: list[Collector]) -> Any:
        try:
            self.registry.register(metric)
        except ValueError as e:
            raise DuplicateRegistrationError(self.registry, name, str(e)) from e
        registered.append(metric)
        return metric

    def _rollback(self, registered: list[Collector]) -> None:
        for metric in reversed(registered):
            try:
                self.registry.unregister(metric)
            except KeyError:
                logger.warning(f"Rollback could not unregister {metric!r}")


default_collector_sets: CollectorSets = KeyedSingletonFactory()


class PrometheusPoolMetrics(PoolMetricsTracker):
    """Prometheus-backed metrics for one connection pool."""

    def __init__(
        self,
        pool_name: str,
        collector_set: MetricCollectorSet,
        registration: PoolStatsEntry,
    ) -> None:
        self._pool_name = pool_name
        self._stats_collector = collector_set.pool_stats_collector
        self._registration = registration
        self._closed = False
        self._close_lock = threading.Lock()
        self._logger = logger.with_context(pool_name=pool_name, operation="pool_metrics")

        self._connection_timeout = collector_set.connection_timeout_counter.labels(pool_name)
        self._elapsed_acquired = collector_set.elapsed_acquired_summary.labels(pool_name)
        self._elapsed_borrowed = collector_set.elapsed_borrowed_summary.labels(pool_name)
        self._elapsed_creation = collector_set.elapsed_creation_summary.labels(pool_name)

    @classmethod
    def create(
        cls,
        pool_name: str,
        registry: Any,
        *,
        pool_stats: PoolStats | None = None,
        factory: CollectorSets | None = None,
        config: Settings = settings,
    ) -> PrometheusPoolMetrics:
        """Bind a new pool to ``registry``.

        Args:
            pool_name: Label value for every series of this pool.  Two pools
                with the same name report into the same series.
            registry: Destination registry; shared instruments are keyed by
                its identity.
            pool_stats: Optional live pool view exported as occupancy gauges.
            factory: Registry -> instruments map; defaults to the module one.
            config: Metric naming settings.

        Raises:
            ValueError: ``pool_name`` is empty.
            DuplicateRegistrationError: the shared instruments could not be
                registered on ``registry``.
        """
        if not isinstance(pool_name, str) or not pool_name:
            raise ValueError("pool_name must be a non-empty string")

        collector_set = MetricCollectorSet.get_or_create(registry, factory=factory, config=config)
        registration = collector_set.pool_stats_collector.add(pool_name, pool_stats)

        metrics = cls(pool_name, collector_set, registration)
        metrics._logger.debug("Pool metrics registered")
        return metrics

    @property
    def pool_name(self) -> str:
        return self._pool_name

    @property
    def registration(self) -> PoolStatsEntry:
        return self._registration

    @property
    def closed(self) -> bool:
        return self._closed

    # -- PoolMetricsTracker protocol methods --

    def record_connection_acquired_nanos(self, elapsed_nanos: int) -> None:
        self._record("connection_acquired_nanos", self._elapsed_acquired.observe, elapsed_nanos)

    def record_connection_usage_millis(self, elapsed_millis: int) -> None:
        self._record("connection_usage_millis", self._elapsed_borrowed.observe, elapsed_millis)

    def record_connection_created_millis(self, elapsed_millis: int) -> None:
        self._record("connection_creation_millis", self._elapsed_creation.observe, elapsed_millis)

    def record_connection_timeout(self) -> None:
        self._record("connection_timeout_count", self._connection_timeout.inc, 1)

    def close(self) -> None:
        """Remove this pool's registration.  Shared instruments stay registered."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True

        try:
            self._unregister()
        except UnregistrationError as e:
            self._logger.warning(str(e))
        else:
            self._logger.debug("Pool metrics closed")

    # -- internals --

    def _record(self, metric: str, update: Callable[[float], None], value: float) -> None:
        if self._closed:
            return
        try:
            update(value)
        except Exception as e:
            failure = RecordingFailure(self._pool_name, metric, str(e))
            self._logger.warning(str(failure), exc_info=e)

    def _unregister(self) -> None:
        try:
            self._stats_collector.remove(self._registration)
        except KeyError as e:
            raise UnregistrationError(self._pool_name, "not registered") from e

    def __enter__(self) -> PrometheusPoolMetrics:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"PrometheusPoolMetrics(pool_name={self._pool_name!r}, {state})"


class PrometheusPoolMetricsFactory:
    """Creates ``PrometheusPoolMetrics`` for pools sharing one registry.

    Satisfies the ``PoolMetricsTrackerFactory`` protocol structurally.
    """

    def __init__(
        self,
        registry: CollectorRegistry | None = None,
        *,
        collector_sets: CollectorSets | None = None,
        config: Settings = settings,
    ) -> None:
        self._registry = registry or CollectorRegistry()
        self._collector_sets = collector_sets
        self._config = config

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def create(self, pool_name: str, pool_stats: PoolStats | None = None) -> PrometheusPoolMetrics:
        return PrometheusPoolMetrics.create(
            pool_name,
            self._registry,
            pool_stats=pool_stats,
            factory=self._collector_sets,
            config=self._config,
        )
