"""
Module: storage.interfaces

Purpose:
    Abstract interfaces for the host-provided storage collaborators.
    The persistence store only talks to these, so tests can swap in
    in-memory fakes for real platform storage.

Key Classes:
    - BlobStore: Key-value store of whole-document byte blobs
    - FileStore: Flat directory of named binary files

Used By:
    - storage.persistence: PersistenceStore
    - storage.backends: In-memory and directory implementations
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class BlobStore(ABC):
    """
    Key-value store for whole-document blobs.

    Implementations raise StorageError when the underlying medium fails.
    A missing key is not an error: get() returns None.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """
        Read the blob stored at key.

        Returns:
            Blob bytes, or None if key is absent

        Raises:
            StorageError: If the blob exists but cannot be read
        """

    @abstractmethod
    def set(self, key: str, data: bytes) -> None:
        """
        Replace the blob stored at key.

        Raises:
            StorageError: If the blob cannot be written
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present."""


class FileStore(ABC):
    """
    Flat directory of binary files addressed by filename.

    Filenames never contain path separators.
    """

    @abstractmethod
    def write(self, filename: str, data: bytes) -> None:
        """
        Write data to filename, overwriting an existing file.

        Raises:
            StorageError: If the file cannot be written
        """

    @abstractmethod
    def read(self, filename: str) -> Optional[bytes]:
        """
        Read filename.

        Returns:
            File bytes, or None if the file does not exist

        Raises:
            StorageError: If the file exists but cannot be read
        """

    @abstractmethod
    def delete(self, filename: str) -> bool:
        """
        Delete filename.

        Returns:
            True if a file was removed, False if it did not exist
        """

    @abstractmethod
    def list_files(self) -> list[str]:
        """Sorted filenames currently stored."""
