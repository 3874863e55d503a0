"""Per-partition locks of several kinds sharing one condition variable."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator


class LockType(IntEnum):
    """Kinds of lock a partition reference can hold."""

    SERVICE = 0
    ACCESS = 1


@dataclass
class _Lock:
    locker: int | None = None
    refs: int = 0
    pending: int = 0


class Lockage:
    """A set of reentrant, thread-owned locks, one per :class:`LockType`.

    All locks wait on the same condition, which may be shared between
    several lockages. If a shared condition is already held by the caller
    it must be built on a reentrant lock.
    """

    def __init__(self, condition: threading.Condition | None = None) -> None:
        self._cond = condition if condition is not None else threading.Condition()
        self._locks = {kind: _Lock() for kind in LockType}

    def lock(self, type: LockType) -> None:
        """Take the lock, waiting while another thread holds it.

        A thread that already holds the lock takes it again.
        """
        me = threading.get_ident()
        with self._cond:
            lock = self._locks[LockType(type)]
            if lock.locker == me:
                lock.refs += 1
                return
            while lock.locker is not None:
                lock.pending += 1
                try:
                    self._cond.wait()
                finally:
                    lock.pending -= 1
            lock.locker = me
            lock.refs = 1

    def unlock(self, type: LockType) -> None:
        """Release one hold of the lock; waiters wake on the last one."""
        with self._cond:
            lock = self._locks[LockType(type)]
            if lock.locker != threading.get_ident():
                raise RuntimeError("lock is not held by the current thread")
            lock.refs -= 1
            if lock.refs > 0:
                return
            lock.locker = None
            lock.refs = 0
            if lock.pending > 0:
                # the condition may be shared with other lock kinds
                self._cond.notify_all()

    @contextmanager
    def held(self, type: LockType) -> Iterator[None]:
        """Hold the lock for the duration of a ``with`` block."""
        self.lock(type)
        try:
            yield
        finally:
            self.unlock(type)