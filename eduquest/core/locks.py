"""
Per-learner serialization of gamification state mutations
"""

import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator


class KeyedLockRegistry:
    """
    Hands out one re-entrant lock per key.

    A key's lock is dropped once no thread holds it or waits on it, so the
    registry only grows with the number of learners currently active.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, threading.RLock] = {}
        self._holders: Dict[Hashable, int] = {}

    def _checkout(self, key: Hashable) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            self._holders[key] = self._holders.get(key, 0) + 1
            return lock

    def _checkin(self, key: Hashable) -> None:
        with self._guard:
            self._holders[key] -= 1
            if not self._holders[key]:
                del self._holders[key]
                del self._locks[key]

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        lock = self._checkout(key)
        try:
            with lock:
                yield
        finally:
            self._checkin(key)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


_learner_locks = KeyedLockRegistry()


def learner_lock(user_id: int):
    """Serialize all point/level/reward mutations for one learner within this process"""
    return _learner_locks.hold(user_id)
