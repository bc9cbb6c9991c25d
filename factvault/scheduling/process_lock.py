"""Single-instance guard for the scheduled worker."""

from __future__ import annotations

import errno
import fcntl
import logging
import os
from typing import IO, Optional


logger = logging.getLogger(__name__)


class ProcessLock:
    """Exclusive flock on a file, holding the owner's PID."""

    def __init__(self, lock_file: str):
        self.lock_file = lock_file
        self.lock_file_handle: Optional[IO[str]] = None

    def acquire(self) -> bool:
        """Acquire a lock, return True if successful, False otherwise"""
        parent = os.path.dirname(self.lock_file)
        if parent:
            os.makedirs(parent, exist_ok=True)
        handle = open(self.lock_file, "a+")
        try:
            fcntl.flock(handle, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError as e:
            handle.seek(0)
            pid = handle.read().strip() or "unknown PID"
            handle.close()
            if e.errno in (errno.EAGAIN, errno.EACCES):
                logger.warning(f"Another worker is already running ({pid})")
                return False
            raise

        handle.seek(0)
        handle.truncate()
        handle.write(str(os.getpid()))
        handle.flush()
        self.lock_file_handle = handle
        logger.info(f"Process lock acquired (PID: {os.getpid()})")
        return True

    def release(self) -> None:
        if self.lock_file_handle:
            fcntl.flock(self.lock_file_handle, fcntl.LOCK_UN)
            self.lock_file_handle.close()
            self.lock_file_handle = None
            logger.info("Process lock released")
