"""
Unit tests for the collection reader/writer lock.

Tests cover:
- Shared readers
- Exclusive writers
- Reentrancy
- Writer preference
- Misuse errors
"""

import threading
import time

import pytest

from jsondb.metadata.locks import ReadWriteLock


def run_in_thread(target):
    """Run target in a thread and return its result."""
    result = {}

    def wrapper():
        result["value"] = target()

    t = threading.Thread(target=wrapper)
    t.start()
    t.join(timeout=5)
    return result.get("value")


class TestReadWriteLock:
    """Tests for ReadWriteLock."""

    @pytest.fixture
    def lock(self):
        """Create a fresh lock."""
        return ReadWriteLock()

    def test_readers_share(self, lock):
        """Several threads may hold the read lock at once."""
        lock.acquire_read()
        try:

            def other():
                acquired = lock.acquire_read(timeout=1)
                if acquired:
                    lock.release_read()
                return acquired

            assert run_in_thread(other) is True
        finally:
            lock.release_read()

    def test_writer_excludes_readers(self, lock):
        """A held write lock blocks readers from other threads."""
        with lock.write_locked():
            assert run_in_thread(lambda: lock.acquire_read(timeout=0.05)) is False

    def test_reader_excludes_writers(self, lock):
        """A held read lock blocks writers from other threads."""
        with lock.read_locked():
            assert run_in_thread(lambda: lock.acquire_write(timeout=0.05)) is False

    def test_write_reentrant(self, lock):
        """The writer may acquire the write lock again."""
        with lock.write_locked():
            with lock.write_locked():
                assert lock.is_write_locked_by_current_thread()
            assert lock.is_write_locked_by_current_thread()
        assert not lock.write_locked_now

    def test_writer_may_read(self, lock):
        """The write-lock owner may take read locks."""
        with lock.write_locked():
            with lock.read_locked():
                assert lock.reader_count == 1
        assert lock.reader_count == 0

    def test_read_reentrant(self, lock):
        """A reader may acquire the read lock again."""
        with lock.read_locked():
            with lock.read_locked():
                assert lock.reader_count == 2
        assert lock.reader_count == 0

    def test_upgrade_raises(self, lock):
        """A reader cannot upgrade to the write lock."""
        with lock.read_locked():
            with pytest.raises(RuntimeError, match="upgrade"):
                lock.acquire_write()

    def test_release_unheld_read_raises(self, lock):
        """Releasing an unheld read lock raises."""
        with pytest.raises(RuntimeError):
            lock.release_read()

    def test_release_unheld_write_raises(self, lock):
        """Releasing an unheld write lock raises."""
        with pytest.raises(RuntimeError):
            lock.release_write()

    def test_release_write_from_other_thread_raises(self, lock):
        """Only the owner can release the write lock."""
        with lock.write_locked():

            def other():
                try:
                    lock.release_write()
                except RuntimeError:
                    return "raised"
                return "released"

            assert run_in_thread(other) == "raised"

    def test_writer_preferred(self, lock):
        """New readers wait while a writer is waiting."""
        lock.acquire_read()
        writer_done = threading.Event()

        def writer():
            lock.acquire_write()
            lock.release_write()
            writer_done.set()

        t = threading.Thread(target=writer)
        t.start()
        try:
            deadline = time.monotonic() + 2
            while lock._writers_waiting == 0 and time.monotonic() < deadline:
                time.sleep(0.005)

            assert run_in_thread(lambda: lock.acquire_read(timeout=0.05)) is False
        finally:
            lock.release_read()
            t.join(timeout=5)

        assert writer_done.is_set()
        assert not lock.write_locked_now

    def test_timeout_releases_waiting_readers(self, lock):
        """A writer that times out no longer holds back readers."""
        lock.acquire_read()
        try:
            assert run_in_thread(lambda: lock.acquire_write(timeout=0.05)) is False

            def reader():
                acquired = lock.acquire_read(timeout=1)
                if acquired:
                    lock.release_read()
                return acquired

            assert run_in_thread(reader) is True
        finally:
            lock.release_read()
