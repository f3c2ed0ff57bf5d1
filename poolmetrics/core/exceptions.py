"""Pool metrics exceptions.

Only ``DuplicateRegistrationError`` ever reaches callers.  ``UnregistrationError``
is raised and caught inside ``close()``.  ``RecordingFailure`` is never raised;
the record path builds it as the logged form of a backend fault.
"""

from __future__ import annotations

from typing import Any


class PoolMetricsException(Exception):
    """Base exception for pool metrics."""


class DuplicateRegistrationError(PoolMetricsException):
    """A metric name is already registered on the target registry.

    Raised while building the shared instruments for a registry when something
    outside this package already owns one of the names.
    """

    def __init__(self, registry: Any, metric_name: str | None = None, detail: str = ""):
        self.registry = registry
        self.metric_name = metric_name
        message = f"Metric {metric_name!r} is already registered" if metric_name else (
            "Pool metric instruments could not be registered"
        )
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class UnregistrationError(PoolMetricsException):
    """A pool's collector entry could not be removed on close."""

    def __init__(self, pool_name: str, detail: str = ""):
        self.pool_name = pool_name
        message = f"Failed to unregister metrics collector for pool {pool_name!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class RecordingFailure(PoolMetricsException):
    """The backend failed while observing or incrementing an instrument.

    Logged with the original exception attached, never raised.
    """

    def __init__(self, pool_name: str, metric: str, detail: str = ""):
        self.pool_name = pool_name
        self.metric = metric
        message = f"Failed to record {metric} for pool {pool_name!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
