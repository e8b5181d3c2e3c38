"""
Cross-process install locking for the boj-mcp-server launcher.

Several launcher processes can start at the same time against one cache
root. This module serializes them per cache slot with an exclusive-create
lock file that is deleted on release.

Features:
- Exclusive create via filelock.SoftFileLock (O_CREAT | O_EXCL)
- Holder identity (pid and hostname) recorded in the lock file by filelock;
  the file's mtime is the acquisition time
- Stale lock reclamation based on the lock file's mtime
- Bounded waiting with LockTimeout
- Idempotent release

The lock is advisory and assumes cooperating processes. A holder that stays
alive past the staleness threshold can have its lock reclaimed by another
process.

Usage:
    from boj_mcp_launcher.core.locking import file_lock

    with file_lock(slot_dir.with_name(slot_dir.name + ".lock")):
        # Only one process installs into the slot at a time
        install()
"""

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

from filelock import SoftFileLock, Timeout

from boj_mcp_launcher.core.exceptions import LockTimeout

logger = logging.getLogger(__name__)

DEFAULT_STALE_AFTER = 5 * 60.0
DEFAULT_RETRY_INTERVAL = 0.2
DEFAULT_MAX_WAIT = 60.0


class LockHandle:
    """
    Release capability for an acquired lock.

    Attributes:
        path: Lock file path
    """

    def __init__(self, lock: SoftFileLock, path: Path):
        self._lock = lock
        self.path = path
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Close and delete the lock file. Safe to call more than once."""
        if self._released:
            return
        self._released = True
        # SoftFileLock closes its descriptor and unlinks the path
        self._lock.release()
        logger.debug(f"Released lock: {self.path}")

    def __enter__(self) -> "LockHandle":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()


def acquire_lock(
    lock_path: Union[str, Path],
    stale_after: float = DEFAULT_STALE_AFTER,
    retry_interval: float = DEFAULT_RETRY_INTERVAL,
    max_wait: float = DEFAULT_MAX_WAIT,
) -> LockHandle:
    """
    Acquire an exclusive lock file, waiting for other holders.

    On conflict the existing lock is reclaimed at once if its mtime is older
    than stale_after; otherwise the attempt sleeps retry_interval and retries
    until max_wait has elapsed.

    Args:
        lock_path: Lock file path
        stale_after: Age in seconds after which a lock is considered abandoned
        retry_interval: Seconds to sleep between attempts
        max_wait: Maximum total wait in seconds

    Returns:
        LockHandle whose release() deletes the lock file

    Raises:
        LockTimeout: If the lock is still held after max_wait

    Example:
        >>> handle = acquire_lock(Path("/tmp/slot.lock"), max_wait=5)
        >>> try:
        ...     do_work()
        ... finally:
        ...     handle.release()
    """
    lock_path = Path(lock_path)
    lock_path.parent.mkdir(parents=True, exist_ok=True)

    lock = SoftFileLock(lock_path, thread_local=False)
    started_at = time.monotonic()

    while True:
        try:
            lock.acquire(blocking=False)
        except Timeout:
            age = _lock_age(lock_path)
            if age is None:
                # Holder released between our attempt and the stat
                continue

            if age > stale_after:
                logger.warning(
                    f"Removing stale lock {lock_path} "
                    f"(age {age:.0f}s, holder {_read_holder(lock_path)})"
                )
                lock_path.unlink(missing_ok=True)
                continue

            waited = time.monotonic() - started_at
            if waited > max_wait:
                raise LockTimeout(lock_path, waited)

            logger.debug(f"Waiting for lock {lock_path} ({waited:.1f}s)")
            time.sleep(retry_interval)
            continue

        # The file holds filelock's own "<pid>\n<hostname>\n" record; leave it as is
        logger.debug(f"Acquired lock: {lock_path}")
        return LockHandle(lock, lock_path)


@contextmanager
def file_lock(
    lock_path: Union[str, Path],
    stale_after: float = DEFAULT_STALE_AFTER,
    retry_interval: float = DEFAULT_RETRY_INTERVAL,
    max_wait: float = DEFAULT_MAX_WAIT,
):
    """
    Scoped lock: acquire on entry, release on every exit path.

    Yields:
        LockHandle

    Raises:
        LockTimeout: If lock can't be acquired within max_wait
    """
    handle = acquire_lock(
        lock_path,
        stale_after=stale_after,
        retry_interval=retry_interval,
        max_wait=max_wait,
    )
    try:
        yield handle
    finally:
        handle.release()


def _lock_age(lock_path: Path) -> Optional[float]:
    """Seconds since the lock file was last modified, None if it is gone."""
    try:
        return time.time() - lock_path.stat().st_mtime
    except FileNotFoundError:
        return None


def _read_holder(lock_path: Path) -> str:
    """Describe the holder from filelock's "<pid>\\n<hostname>\\n" record."""
    try:
        lines = lock_path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError):
        return "unknown"

    if len(lines) < 2:
        return "unknown"
    return f"pid {lines[0]} on {lines[1]}"


__all__ = [
    "LockHandle",
    "acquire_lock",
    "file_lock",
    "LockTimeout",
    "DEFAULT_STALE_AFTER",
    "DEFAULT_RETRY_INTERVAL",
    "DEFAULT_MAX_WAIT",
]
