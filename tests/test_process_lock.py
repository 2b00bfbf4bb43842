"""Tests for the export/analysis lock file."""

import os
import sys

import pytest

from core.exceptions import BusyError
from utils.process_lock import ProcessLock

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="flock based locking")


def test_second_lock_is_refused_while_first_is_held(tmp_path):
    path = tmp_path / "sync.lock"
    first = ProcessLock(path)
    second = ProcessLock(path)

    assert first.acquire()
    try:
        assert not second.acquire()
        assert path.read_text() == str(os.getpid())
    finally:
        first.release()

    assert second.acquire()
    second.release()
    assert not path.exists()


def test_refused_attempt_keeps_the_lock_file(tmp_path):
    """A losing contender must not truncate or remove the holder's file."""
    path = tmp_path / "sync.lock"
    holder = ProcessLock(path)
    assert holder.acquire()
    try:
        for _ in range(3):
            assert not ProcessLock(path).acquire()
        assert path.exists()
        assert path.read_text() == str(os.getpid())
    finally:
        holder.release()


def test_leftover_file_without_holder_is_reused(tmp_path):
    path = tmp_path / "sync.lock"
    path.write_text("999999")
    lock = ProcessLock(path)
    assert lock.acquire()
    assert path.read_text() == str(os.getpid())
    lock.release()


def test_context_manager_raises_busy_error(tmp_path):
    path = tmp_path / "sync.lock"
    with ProcessLock(path):
        with pytest.raises(BusyError):
            with ProcessLock(path):
                pass
    assert not path.exists()
