"""Reader/writer-locked CAA wrapper.

Only needed when one CAA object is shared between threads, e.g. a request
handler loads an entity and then fans work out to a thread pool that
issues or revokes against that same entity. Each wrapper owns its own
lock; never share one wrapper between entities.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from compandauth.caa import CAA
from compandauth.caa.state import CAAState


class ReadWriteLock:
    """Many concurrent readers or one writer.

    Writer-preferring: once a writer is waiting, new readers queue behind
    it so a steady read load cannot starve writes. Not re-entrant.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class ThreadSafeCAA:
    """Serializes access to a wrapped CAA.

    ``issue``, ``revoke``, ``lock`` and ``unlock`` run exclusively;
    ``is_valid``, ``is_locked``, ``has_issued`` and state reads share the
    lock. No transition logic lives here.
    """

    def __new__(cls, caa: CAA):
        if isinstance(caa, ThreadSafeCAA):
            return caa
        return super().__new__(cls)

    def __init__(self, caa: CAA):
        if caa is self:
            return
        self._caa = caa
        self._rw = ReadWriteLock()

    @property
    def wrapped(self) -> CAA:
        return self._caa

    @property
    def strategy(self) -> str:
        return getattr(self._caa, "strategy", type(self._caa).__name__)

    @property
    def state(self) -> CAAState:
        with self._rw.read_locked():
            return self._caa.state

    def to_int(self) -> int:
        with self._rw.read_locked():
            return self._caa.to_int()

    def lock(self) -> None:
        with self._rw.write_locked():
            self._caa.lock()

    def unlock(self) -> None:
        with self._rw.write_locked():
            self._caa.unlock()

    def is_locked(self) -> bool:
        with self._rw.read_locked():
            return self._caa.is_locked()

    def is_valid(self, token: int, window: int) -> bool:
        with self._rw.read_locked():
            return self._caa.is_valid(token, window)

    def revoke(self, n: int) -> None:
        with self._rw.write_locked():
            self._caa.revoke(n)

    def issue(self) -> int:
        with self._rw.write_locked():
            return self._caa.issue()

    def has_issued(self) -> bool:
        with self._rw.read_locked():
            return self._caa.has_issued()

    def __int__(self) -> int:
        return self.to_int()

    def __repr__(self) -> str:
        return f"ThreadSafeCAA({self._caa!r})"
