"""
Per-key locking for check-in resolution.

Concurrent scans of the same invitation must be serialized so the check-in
count read before recording is never stale. Scans of different invitations
must not block each other, so a single global lock is not enough.

Design decisions:
- One threading.Lock per key, created on first use
- Reference counting so locks for idle keys are dropped (bounded memory)
- A registry-level lock guards only the dictionary, never the critical section
- threading primitives rather than asyncio.Lock, because resolution runs in
  sync endpoints executed on the threadpool
"""

import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator, Tuple


class KeyedLock:
    """
    Mutual exclusion keyed by an arbitrary hashable value.

    Usage:
        locks = KeyedLock()
        with locks.hold(invite_id):
            ...  # at most one thread per invite_id here
    """

    def __init__(self):
        self._registry_lock = threading.Lock()
        # key -> (lock, number of threads holding or waiting)
        self._locks: Dict[Hashable, Tuple[threading.Lock, int]] = {}

    def _acquire_entry(self, key: Hashable) -> threading.Lock:
        with self._registry_lock:
            lock, waiters = self._locks.get(key, (None, 0))
            if lock is None:
                lock = threading.Lock()
            self._locks[key] = (lock, waiters + 1)
            return lock

    def _release_entry(self, key: Hashable) -> None:
        with self._registry_lock:
            lock, waiters = self._locks[key]
            if waiters <= 1:
                del self._locks[key]
            else:
                self._locks[key] = (lock, waiters - 1)

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        """Hold the lock for ``key`` for the duration of the block."""
        lock = self._acquire_entry(key)
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            self._release_entry(key)

    def active_keys(self) -> int:
        """Number of keys currently held or waited on (for tests and health)."""
        with self._registry_lock:
            return len(self._locks)


# Global lock registry for check-in resolution
checkin_locks = KeyedLock()
