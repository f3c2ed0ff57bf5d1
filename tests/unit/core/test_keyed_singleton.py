"""Unit tests for KeyedSingletonFactory."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from poolmetrics.core.keyed_singleton import KeyedSingletonFactory


class Key:
    """Hashable-by-identity key that compares equal to every other Key."""

    def __eq__(self, other):
        return isinstance(other, Key)

    def __hash__(self):
        return 0


class TestKeyedSingletonFactory:
    def test_builder_runs_once_per_key(self):
        factory = KeyedSingletonFactory()
        key = Key()
        calls = []

        def build(k):
            calls.append(k)
            return object()

        first = factory.get_or_create(key, build)
        second = factory.get_or_create(key, build)

        assert first is second
        assert calls == [key]
        assert key in factory
        assert len(factory) == 1

    def test_keys_compare_by_identity(self):
        """Equal but distinct keys get distinct values."""
        factory = KeyedSingletonFactory()
        a, b = Key(), Key()
        assert a == b

        assert factory.get_or_create(a, lambda k: "a") == "a"
        assert factory.get_or_create(b, lambda k: "b") == "b"
        assert len(factory) == 2

    def test_get_returns_none_for_unknown_key(self):
        factory = KeyedSingletonFactory()
        assert factory.get(Key()) is None
        assert Key() not in factory

    def test_failed_builder_inserts_nothing(self):
        factory = KeyedSingletonFactory()
        key = Key()

        def broken(k):
            raise RuntimeError("registration failed")

        with pytest.raises(RuntimeError, match="registration failed"):
            factory.get_or_create(key, broken)

        assert key not in factory
        assert factory.get_or_create(key, lambda k: "ok") == "ok"

    def test_concurrent_callers_share_one_build(self):
        factory = KeyedSingletonFactory()
        key = Key()
        workers = 16
        barrier = threading.Barrier(workers)
        calls = []
        calls_lock = threading.Lock()

        def build(k):
            with calls_lock:
                calls.append(k)
            # Widen the window between check and insert.
            threading.Event().wait(0.05)
            return object()

        def worker():
            barrier.wait(timeout=5)
            return factory.get_or_create(key, build)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda _: worker(), range(workers)))

        assert len(calls) == 1
        assert all(r is results[0] for r in results)

    def test_slow_build_does_not_block_other_keys(self):
        """Construction for one key must not serialize construction for another."""
        factory = KeyedSingletonFactory()
        slow_key, fast_key = Key(), Key()
        started = threading.Event()
        release = threading.Event()

        def slow_build(k):
            started.set()
            release.wait(timeout=5)
            return "slow"

        thread = threading.Thread(target=factory.get_or_create, args=(slow_key, slow_build))
        thread.start()
        try:
            assert started.wait(timeout=5)
            assert factory.get_or_create(fast_key, lambda k: "fast") == "fast"
            assert slow_key not in factory
        finally:
            release.set()
            thread.join(timeout=5)

        assert factory.get(slow_key) == "slow"
