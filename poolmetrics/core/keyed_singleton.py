"""Thread-safe get-or-create keyed by object identity.

Holds at most one value per key.  Lookups of existing entries take no lock.
Creation takes a lock private to the key, so building the value for one key
never waits on another key's builder.  A builder that raises leaves nothing
behind and the exception propagates to the caller.

Entries are never evicted.  Keys are expected to be long-lived objects
(metrics registries), typically one or a handful per process.
"""

from __future__ import annotations

import threading
from typing import Callable, Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class KeyedSingletonFactory(Generic[K, V]):
    """Get-or-create map from key identity to a lazily built value."""

    def __init__(self) -> None:
        # id(key) -> (key, value); holding the key pins its id().
        self._entries: dict[int, tuple[K, V]] = {}
        self._key_locks: dict[int, threading.Lock] = {}
        self._guard = threading.Lock()

    def get(self, key: K) -> V | None:
        """Return the value for ``key`` or ``None`` if it was never built."""
        entry = self._entries.get(id(key))
        if entry is not None and entry[0] is key:
            return entry[1]
        return None

    def get_or_create(self, key: K, builder: Callable[[K], V]) -> V:
        """Return the value for ``key``, calling ``builder(key)`` on first use."""
        value = self.get(key)
        if value is not None:
            return value

        with self._lock_for(key):
            value = self.get(key)
            if value is None:
                value = builder(key)
                self._entries[id(key)] = (key, value)
            return value

    def _lock_for(self, key: K) -> threading.Lock:
        ident = id(key)
        with self._guard:
            lock = self._key_locks.get(ident)
            if lock is None:
                lock = self._key_locks[ident] = threading.Lock()
            return lock

    def __contains__(self, key: object) -> bool:
        entry = self._entries.get(id(key))
        return entry is not None and entry[0] is key

    def __len__(self) -> int:
        return len(self._entries)
