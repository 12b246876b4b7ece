"""One lock per key, created on first use."""

from __future__ import annotations

import threading
from collections.abc import Callable, Hashable, Iterable, Iterator
from contextlib import AbstractContextManager, ExitStack, contextmanager, nullcontext


class KeyedLock:
    """Serializes work per key (product ID, order ID).

    The per-key locks only reach threads of one process.  Pass *outer*, a
    factory for a re-entrant context manager such as a file lock, to
    serialize across processes too; it is entered before the key's lock.

    Locks are never evicted; the key space (products, orders) is small
    enough for a storefront.
    """

    def __init__(
        self,
        outer: Callable[[], AbstractContextManager[object]] | None = None,
    ) -> None:
        self._locks: dict[Hashable, threading.RLock] = {}
        self._registry_lock = threading.Lock()
        self._outer = outer or nullcontext

    def _lock_for(self, key: Hashable) -> threading.RLock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._outer(), self._lock_for(key):
            yield

    @contextmanager
    def hold_all(self, keys: Iterable[Hashable]) -> Iterator[None]:
        """Hold several keys at once, taken in sorted order."""
        with ExitStack() as stack:
            for key in sorted(set(keys)):
                stack.enter_context(self.hold(key))
            yield
