"""
Module: storage.file_locking

Purpose:
    Cross-platform locked, atomic file writes for the directory backends.
    Uses portalocker for Mac, Windows, and Linux compatibility.

Key Functions:
    - locked_file: Context manager holding a lock on a sidecar lock file
    - atomic_write_bytes: Temp-file write + atomic replace under the lock
    - locked_read_bytes: Read under a shared lock

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - storage.backends: DirectoryBlobStore, DirectoryFileStore
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

import portalocker

logger = logging.getLogger(__name__)

LOCK_SUFFIX = ".lock"


def lock_path_for(path: Path) -> Path:
    """Sidecar lock file guarding path."""
    return path.with_name(path.name + LOCK_SUFFIX)


@contextmanager
def locked_file(
    path: Path,
    lock_type: int = portalocker.LOCK_EX,
) -> Generator:
    """
    Context manager holding a lock for path.

    The lock is taken on a sidecar "<name>.lock" file, so the data file
    itself can be replaced atomically while the lock is held.

    Args:
        path: Data file to guard.
        lock_type: LOCK_EX for writers, LOCK_SH for readers.

    Example:
        >>> with locked_file(path):
        ...     path.write_bytes(b'data')
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(lock_path_for(path), 'a+b') as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """
    Write data to path via a temp file and atomic rename, under lock.

    Args:
        path: Destination file.
        data: Bytes to write.

    Raises:
        OSError: If the write or rename fails. The temp file is removed.
    """
    temp_path = path.with_name(path.name + '.tmp')
    with locked_file(path, portalocker.LOCK_EX):
        try:
            temp_path.write_bytes(data)
            temp_path.replace(path)
        except OSError:
            try:
                if temp_path.exists():
                    temp_path.unlink()
            except OSError:
                pass
            raise

    logger.debug(f"Wrote {len(data)} bytes to {path.name}")


def locked_read_bytes(path: Path) -> Optional[bytes]:
    """
    Read path under a shared lock.

    Returns:
        File bytes, or None if path does not exist.

    Raises:
        OSError: If the file exists but cannot be read.
    """
    if not path.exists():
        return None
    with locked_file(path, portalocker.LOCK_SH):
        if not path.exists():
            return None
        return path.read_bytes()
