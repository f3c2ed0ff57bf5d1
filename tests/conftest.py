"""Shared fixtures for pool metrics tests."""

import pytest
from prometheus_client import CollectorRegistry

from poolmetrics.core.keyed_singleton import KeyedSingletonFactory


@pytest.fixture
def registry():
    """A fresh registry, never the global default."""
    return CollectorRegistry()


@pytest.fixture
def collector_sets():
    """An isolated registry -> instruments map per test."""
    return KeyedSingletonFactory()
