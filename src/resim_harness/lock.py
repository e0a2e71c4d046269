"""Exclusive ownership of the resim ledger for one scenario.

resim keeps a single ledger directory per user, so two scenarios running
at once would interleave writes. The lock is a PID file: a live PID means
the ledger is busy, a dead one is a stale lock and is replaced.

Reading, replacing and removing the PID file all happen under an flock
on a sibling ``.guard`` file, so two acquirers can never both see the
same stale PID and both take the ledger.
"""

from __future__ import annotations

import fcntl
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType

from .errors import LedgerBusy
from .shared.logging import get_logger
from .shared.paths import LOCK_FILE

logger = get_logger(__name__)


def _read_pid(lock_path: Path) -> int | None:
    try:
        return int(lock_path.read_text().strip())
    except (ValueError, OSError):
        return None


def _is_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)  # Signal 0 = check existence
        return True
    except ProcessLookupError:
        return False
    except PermissionError:
        # Process exists under another user
        return True


def owner_pid(lock_path: Path) -> int | None:
    """Return the live PID holding ``lock_path``, or None if free or stale.

    Read-only: stale files are left for ``LedgerLock`` to replace.
    """
    if not lock_path.exists():
        return None
    pid = _read_pid(lock_path)
    if pid is None or not _is_alive(pid):
        return None
    return pid


@contextmanager
def _guard(lock_path: Path) -> Iterator[None]:
    guard_path = lock_path.with_name(lock_path.name + ".guard")
    guard_path.parent.mkdir(parents=True, exist_ok=True)
    with open(guard_path, "a") as f:
        fcntl.flock(f, fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(f, fcntl.LOCK_UN)


class LedgerLock:
    """Context manager holding the ledger for the duration of a scenario."""

    def __init__(self, lock_path: str | Path | None = None):
        self.lock_path = Path(lock_path) if lock_path else LOCK_FILE
        self._held = False

    def acquire(self) -> None:
        """Take the lock or raise LedgerBusy."""
        with _guard(self.lock_path):
            pid = owner_pid(self.lock_path)
            if pid == os.getpid():
                raise LedgerBusy(
                    lock_path=str(self.lock_path),
                    pid=pid,
                    message="Ledger is already locked by this process",
                )
            if pid is not None:
                raise LedgerBusy(lock_path=str(self.lock_path), pid=pid)

            if self.lock_path.exists():
                logger.info("stale_lock_replaced", lock=str(self.lock_path))
                self.lock_path.unlink()

            fd = os.open(self.lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o600)
            with os.fdopen(fd, "w") as f:
                f.write(str(os.getpid()))

        self._held = True
        logger.debug("ledger_locked", lock=str(self.lock_path))

    def release(self) -> None:
        """Release the lock if held and still ours."""
        if not self._held:
            return
        with _guard(self.lock_path):
            if _read_pid(self.lock_path) == os.getpid():
                self.lock_path.unlink(missing_ok=True)
        self._held = False
        logger.debug("ledger_unlocked", lock=str(self.lock_path))

    def __enter__(self) -> LedgerLock:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
