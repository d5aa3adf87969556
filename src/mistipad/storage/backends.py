"""
Module: storage.backends

Purpose:
    Concrete BlobStore and FileStore implementations.

Key Classes:
    - MemoryBlobStore / MemoryFileStore: In-process fakes for tests
    - DirectoryBlobStore: One "<key>.json" file per key, atomic writes
    - DirectoryFileStore: Flat directory of image files, atomic writes

Dependencies:
    - storage.file_locking: portalocker-guarded atomic writes

Used By:
    - config.open_manager: default on-disk stack
    - tests
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

from mistipad.errors import StorageError

from .file_locking import LOCK_SUFFIX, atomic_write_bytes, locked_read_bytes
from .interfaces import BlobStore, FileStore

logger = logging.getLogger(__name__)

BLOB_SUFFIX = ".json"


def check_flat_name(name: str, kind: str = "filename") -> str:
    """
    Reject names that would escape a flat directory.

    Raises:
        ValueError: If name is empty, a dot entry, or contains a separator
    """
    if not name or name in (".", "..") or "/" in name or "\\" in name or "\x00" in name:
        raise ValueError(f"Invalid {kind}: {name!r}")
    return name


# ─────────────────────────────────────────────────────────────────────────────
# In-memory fakes
# ─────────────────────────────────────────────────────────────────────────────

class MemoryBlobStore(BlobStore):
    """Dictionary-backed BlobStore."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None) -> None:
        self.blobs: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self.blobs.get(key)

    def set(self, key: str, data: bytes) -> None:
        self.blobs[key] = bytes(data)

    def delete(self, key: str) -> None:
        self.blobs.pop(key, None)


class MemoryFileStore(FileStore):
    """Dictionary-backed FileStore."""

    def __init__(self) -> None:
        self.files: Dict[str, bytes] = {}

    def write(self, filename: str, data: bytes) -> None:
        self.files[check_flat_name(filename)] = bytes(data)

    def read(self, filename: str) -> Optional[bytes]:
        return self.files.get(check_flat_name(filename))

    def delete(self, filename: str) -> bool:
        return self.files.pop(check_flat_name(filename), None) is not None

    def list_files(self) -> list[str]:
        return sorted(self.files)


# ─────────────────────────────────────────────────────────────────────────────
# Directory backends
# ─────────────────────────────────────────────────────────────────────────────

class DirectoryBlobStore(BlobStore):
    """
    BlobStore keeping each key in its own file under root.

    Key "SavedQuestionSets" lives at "<root>/SavedQuestionSets.json".
    Writes go through a temp file and an atomic replace.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        return self.root / f"{check_flat_name(key, 'key')}{BLOB_SUFFIX}"

    def get(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        try:
            return locked_read_bytes(path)
        except OSError as e:
            raise StorageError(f"Failed to read blob {key!r}: {e}", name=key) from e

    def set(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        try:
            atomic_write_bytes(path, data)
        except OSError as e:
            raise StorageError(f"Failed to write blob {key!r}: {e}", name=key) from e

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete blob {key!r}: {e}", name=key) from e


class DirectoryFileStore(FileStore):
    """FileStore backed by a flat directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path_for(self, filename: str) -> Path:
        return self.root / check_flat_name(filename)

    def write(self, filename: str, data: bytes) -> None:
        path = self.path_for(filename)
        try:
            atomic_write_bytes(path, data)
        except OSError as e:
            raise StorageError(f"Failed to write {filename}: {e}", name=filename) from e

    def read(self, filename: str) -> Optional[bytes]:
        path = self.path_for(filename)
        try:
            return locked_read_bytes(path)
        except OSError as e:
            raise StorageError(f"Failed to read {filename}: {e}", name=filename) from e

    def delete(self, filename: str) -> bool:
        path = self.path_for(filename)
        try:
            if not path.exists():
                return False
            path.unlink()
        except OSError as e:
            raise StorageError(f"Failed to delete {filename}: {e}", name=filename) from e
        try:
            path.with_name(path.name + LOCK_SUFFIX).unlink(missing_ok=True)
        except OSError:
            logger.debug(f"Could not remove lock file for {filename}")
        return True

    def list_files(self) -> list[str]:
        if not self.root.exists():
            return []
        return sorted(
            entry.name for entry in self.root.iterdir()
            if entry.is_file()
            and not entry.name.endswith(LOCK_SUFFIX)
            and not entry.name.endswith(".tmp")
        )
