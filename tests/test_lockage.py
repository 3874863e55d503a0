import threading

import pytest

from monotone.lockage import Lockage, LockType


def _try_in_thread(lockage, kind):
    acquired = threading.Event()
    release = threading.Event()

    def run():
        lockage.lock(kind)
        acquired.set()
        release.wait(5)
        lockage.unlock(kind)

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    return thread, acquired, release


def test_other_thread_waits_until_unlock():
    lockage = Lockage()
    lockage.lock(LockType.ACCESS)
    thread, acquired, release = _try_in_thread(lockage, LockType.ACCESS)
    assert not acquired.wait(0.1)
    lockage.unlock(LockType.ACCESS)
    assert acquired.wait(2)
    release.set()
    thread.join(2)
    assert not thread.is_alive()


def test_nested_lock_needs_matching_unlocks():
    lockage = Lockage()
    lockage.lock(LockType.SERVICE)
    lockage.lock(LockType.SERVICE)
    thread, acquired, release = _try_in_thread(lockage, LockType.SERVICE)
    lockage.unlock(LockType.SERVICE)
    assert not acquired.wait(0.1)
    lockage.unlock(LockType.SERVICE)
    assert acquired.wait(2)
    release.set()
    thread.join(2)


def test_lock_kinds_are_independent():
    lockage = Lockage()
    lockage.lock(LockType.SERVICE)
    thread, acquired, release = _try_in_thread(lockage, LockType.ACCESS)
    assert acquired.wait(2)
    release.set()
    thread.join(2)
    lockage.unlock(LockType.SERVICE)
    assert not thread.is_alive()


def test_unlock_without_lock_raises():
    lockage = Lockage()
    with pytest.raises(RuntimeError):
        lockage.unlock(LockType.ACCESS)


def test_unlock_from_other_thread_raises():
    lockage = Lockage()
    lockage.lock(LockType.ACCESS)
    errors = []

    def run():
        try:
            lockage.unlock(LockType.ACCESS)
        except RuntimeError as exc:
            errors.append(exc)

    thread = threading.Thread(target=run)
    thread.start()
    thread.join(2)
    assert len(errors) == 1

    # the failed foreign unlock must leave the lock held by its owner
    waiter, acquired, release = _try_in_thread(lockage, LockType.ACCESS)
    assert not acquired.wait(0.1)
    lockage.unlock(LockType.ACCESS)
    assert acquired.wait(2)
    release.set()
    waiter.join(2)
    assert not waiter.is_alive()


def test_held_releases_on_exit():
    lockage = Lockage()
    with lockage.held(LockType.ACCESS):
        thread, acquired, release = _try_in_thread(lockage, LockType.ACCESS)
        assert not acquired.wait(0.1)
    assert acquired.wait(2)
    release.set()
    thread.join(2)


def test_shared_condition_between_lockages():
    cond = threading.Condition()
    first = Lockage(cond)
    second = Lockage(cond)
    first.lock(LockType.ACCESS)
    thread, acquired, release = _try_in_thread(second, LockType.ACCESS)
    assert acquired.wait(2)
    release.set()
    thread.join(2)
    first.unlock(LockType.ACCESS)
    with pytest.raises(RuntimeError):
        first.unlock(LockType.ACCESS)