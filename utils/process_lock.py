import os
import sys
import logging
from pathlib import Path
from typing import IO, Optional

from core.exceptions import BusyError

logger = logging.getLogger(__name__)


class ProcessLock:
    """Cross-platform lock file; one export or analysis at a time"""

    def __init__(self, lockfile):
        self.lockfile = Path(lockfile)
        self.fp: Optional[IO[str]] = None
        self.pid: Optional[int] = None

        self.lockfile.parent.mkdir(exist_ok=True, parents=True)

    def acquire(self) -> bool:
        try:
            if sys.platform == "win32":
                return self._acquire_windows()
            return self._acquire_unix()
        except OSError as e:
            logger.warning(f"Could not acquire lock {self.lockfile}: {e}")
            self._close()
            return False

    def _acquire_unix(self) -> bool:
        import fcntl

        while True:
            # "a+" so the holder's PID is never truncated before we own the lock
            fp = open(self.lockfile, "a+")
            try:
                fcntl.flock(fp, fcntl.LOCK_EX | fcntl.LOCK_NB)
            except BlockingIOError:
                fp.seek(0)
                holder = fp.read().strip()
                fp.close()
                logger.warning(f"Another sync is running (PID: {holder or 'unknown'})")
                return False

            # The previous holder may have unlinked the file between our open and flock
            try:
                same_file = os.path.samestat(os.fstat(fp.fileno()), os.stat(self.lockfile))
            except FileNotFoundError:
                same_file = False
            if same_file:
                break
            fcntl.flock(fp, fcntl.LOCK_UN)
            fp.close()

        self.fp = fp
        self._write_pid()
        return True

    def _acquire_windows(self) -> bool:
        if self.lockfile.exists() and not self._check_existing_lock():
            return False
        self.fp = open(self.lockfile, "a+")
        self._write_pid()
        return True

    def _write_pid(self) -> None:
        self.pid = os.getpid()
        self.fp.seek(0)
        self.fp.truncate()
        self.fp.write(str(self.pid))
        self.fp.flush()
        logger.debug(f"Lock acquired (PID: {self.pid})")

    def _check_existing_lock(self) -> bool:
        """True when the existing lock file is stale and was removed"""
        try:
            with open(self.lockfile, "r") as f:
                existing_pid = int(f.read().strip())
        except (ValueError, FileNotFoundError):
            self.lockfile.unlink(missing_ok=True)
            return True

        if existing_pid != os.getpid() and self._is_process_running(existing_pid):
            logger.warning(f"Another sync is running (PID: {existing_pid})")
            return False

        logger.info(f"Removing stale lock (PID: {existing_pid})")
        self.lockfile.unlink(missing_ok=True)
        return True

    def _is_process_running(self, pid: int) -> bool:
        import subprocess
        try:
            result = subprocess.run(
                ["tasklist", "/FI", f"PID eq {pid}"],
                capture_output=True,
                text=True
            )
        except (OSError, subprocess.SubprocessError):
            return False
        return str(pid) in result.stdout

    def _close(self) -> None:
        if self.fp is not None:
            self.fp.close()
            self.fp = None

    def release(self):
        if self.fp is None:
            return
        try:
            if sys.platform == "win32":
                self._close()
                self.lockfile.unlink(missing_ok=True)
            else:
                import fcntl
                # Unlink while still holding the lock; waiters re-check the inode
                self.lockfile.unlink(missing_ok=True)
                fcntl.flock(self.fp, fcntl.LOCK_UN)
        finally:
            self._close()
            logger.debug(f"Lock released (PID: {self.pid})")

    def __enter__(self):
        if self.acquire():
            return self
        raise BusyError("Trwa już inna synchronizacja lub analiza. Spróbuj ponownie za chwilę.")

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
