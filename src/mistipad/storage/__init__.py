"""
Storage Package

Blob/file store interfaces, their backends, and the PersistenceStore that
loads and saves whole question-set collections.
"""

from .interfaces import BlobStore, FileStore
from .backends import (
    DirectoryBlobStore,
    DirectoryFileStore,
    MemoryBlobStore,
    MemoryFileStore,
)
from .persistence import PersistenceStore

__all__ = [
    "BlobStore",
    "FileStore",
    "DirectoryBlobStore",
    "DirectoryFileStore",
    "MemoryBlobStore",
    "MemoryFileStore",
    "PersistenceStore",
]
