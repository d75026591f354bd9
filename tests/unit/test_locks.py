"""Tests for the per-learner lock registry."""

import threading

from eduquest.core.locks import KeyedLockRegistry


def test_released_locks_are_dropped():
    registry = KeyedLockRegistry()
    for learner_id in range(50):
        with registry.hold(learner_id):
            assert len(registry) == 1
    assert len(registry) == 0


def test_lock_is_reentrant_for_the_holding_thread():
    registry = KeyedLockRegistry()
    with registry.hold(7):
        with registry.hold(7):
            assert len(registry) == 1
        assert len(registry) == 1
    assert len(registry) == 0


def test_same_key_blocks_other_threads_until_released():
    registry = KeyedLockRegistry()
    order = []

    def worker():
        with registry.hold(1):
            order.append("worker")

    with registry.hold(1):
        thread = threading.Thread(target=worker)
        thread.start()
        thread.join(timeout=0.2)
        assert thread.is_alive()
        order.append("holder")

    thread.join(timeout=5)
    assert order == ["holder", "worker"]
    assert len(registry) == 0


def test_different_keys_do_not_block():
    registry = KeyedLockRegistry()
    entered = threading.Event()

    def worker():
        with registry.hold(2):
            entered.set()

    with registry.hold(1):
        thread = threading.Thread(target=worker)
        thread.start()
        assert entered.wait(timeout=5)
    thread.join(timeout=5)
