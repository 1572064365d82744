"""
Reader/writer lock guarding a single collection.

Shared (read) mode is for concurrent document reads and queries.
Exclusive (write) mode is for inserts, updates, deletes and schema
version changes.

Invariants:
    - Writers are preferred: new readers wait while a writer is waiting
    - The write lock is reentrant for its owning thread
    - The write-lock owner may also take read locks
    - Releasing a lock that is not held raises RuntimeError
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional


class ReadWriteLock:
    """Writer-preferring reader/writer lock.

    Example:
        >>> lock = ReadWriteLock()
        >>> with lock.read_locked():
        ...     pass
        >>> with lock.write_locked():
        ...     pass
    """

    def __init__(self) -> None:
        """Initialize an unlocked lock."""
        self._cond = threading.Condition(threading.Lock())
        self._readers: Dict[int, int] = {}
        self._writer: Optional[int] = None
        self._write_depth = 0
        self._writers_waiting = 0

    @property
    def reader_count(self) -> int:
        """Number of read holds currently outstanding."""
        with self._cond:
            return sum(self._readers.values())

    @property
    def write_locked_now(self) -> bool:
        """Whether some thread holds the write lock."""
        with self._cond:
            return self._writer is not None

    def is_write_locked_by_current_thread(self) -> bool:
        """Whether the calling thread holds the write lock."""
        with self._cond:
            return self._writer == threading.get_ident()

    def acquire_read(self, timeout: Optional[float] = None) -> bool:
        """Acquire the lock in shared mode.

        Args:
            timeout: Seconds to wait, None to wait forever

        Returns:
            True if acquired, False on timeout
        """
        me = threading.get_ident()
        with self._cond:
            # Owner of the write lock, or a thread already reading, never waits
            if self._writer == me or me in self._readers:
                self._readers[me] = self._readers.get(me, 0) + 1
                return True

            if not self._cond.wait_for(
                lambda: self._writer is None and self._writers_waiting == 0, timeout
            ):
                return False
            self._readers[me] = self._readers.get(me, 0) + 1
            return True

    def release_read(self) -> None:
        """Release one shared hold of the calling thread."""
        me = threading.get_ident()
        with self._cond:
            count = self._readers.get(me, 0)
            if count == 0:
                raise RuntimeError("Cannot release read lock: not held by this thread")
            if count == 1:
                del self._readers[me]
            else:
                self._readers[me] = count - 1
            if not self._readers:
                self._cond.notify_all()

    def acquire_write(self, timeout: Optional[float] = None) -> bool:
        """Acquire the lock in exclusive mode.

        Args:
            timeout: Seconds to wait, None to wait forever

        Returns:
            True if acquired, False on timeout

        Raises:
            RuntimeError: If the calling thread holds only a read lock
                (upgrading would deadlock)
        """
        me = threading.get_ident()
        with self._cond:
            if self._writer == me:
                self._write_depth += 1
                return True
            if me in self._readers:
                raise RuntimeError("Cannot upgrade a read lock to a write lock")

            self._writers_waiting += 1
            try:
                if not self._cond.wait_for(
                    lambda: self._writer is None and not self._readers, timeout
                ):
                    return False
            finally:
                self._writers_waiting -= 1
                if self._writers_waiting == 0:
                    self._cond.notify_all()
            self._writer = me
            self._write_depth = 1
            return True

    def release_write(self) -> None:
        """Release one exclusive hold of the calling thread."""
        with self._cond:
            if self._writer != threading.get_ident():
                raise RuntimeError("Cannot release write lock: not held by this thread")
            self._write_depth -= 1
            if self._write_depth == 0:
                self._writer = None
                self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        """Hold the lock in shared mode for the duration of the block."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        """Hold the lock in exclusive mode for the duration of the block."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()
