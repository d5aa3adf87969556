"""
Module: storage.persistence

Purpose:
    Whole-collection load/save of question sets through a BlobStore and
    per-image write/read through a FileStore.

    Failures never propagate to the caller: they are logged and reported
    through the return value (empty list, False or None). Persisted state
    may therefore lag behind in-memory state after a failed save.

Key Classes:
    - PersistenceStore

Dependencies:
    - core.utils.serialization: encode_collection / decode_collection
    - storage.interfaces: BlobStore, FileStore

Used By:
    - manager.QuestionSetManager
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from mistipad.core.models import QuestionSet
from mistipad.core.schemas.validator import ValidationError
from mistipad.core.utils.serialization import decode_collection, encode_collection
from mistipad.errors import StorageError

from .interfaces import BlobStore, FileStore

logger = logging.getLogger(__name__)


class PersistenceStore:
    """
    Best-effort local store for question-set collections and images.

    Attributes:
        blobs: Key-value store holding one JSON blob per collection
        files: Flat directory holding image files

    Example:
        >>> store = PersistenceStore(MemoryBlobStore(), MemoryFileStore())
        >>> store.save_collection("SavedQuestionSets", [qset])
        True
        >>> store.load_collection("SavedQuestionSets") == [qset]
        True
    """

    def __init__(self, blobs: BlobStore, files: FileStore) -> None:
        self.blobs = blobs
        self.files = files

    # ─────────────────────────────────────────────────────────────────────────
    # Collections
    # ─────────────────────────────────────────────────────────────────────────

    def load_collection(self, key: str) -> list[QuestionSet]:
        """
        Load the collection stored at key.

        Returns:
            Decoded sets, or [] if the key is absent or the blob is unusable
        """
        try:
            data = self.blobs.get(key)
        except StorageError as e:
            logger.warning(f"Failed to read collection {key!r}: {e}")
            return []

        if data is None:
            logger.debug(f"No stored collection for {key!r}")
            return []

        try:
            sets = decode_collection(data)
        except ValidationError as e:
            logger.warning(f"Discarding undecodable collection {key!r}: {e}")
            return []

        logger.debug(f"Loaded {len(sets)} question sets from {key!r}")
        return sets

    def save_collection(self, key: str, sets: Iterable[QuestionSet]) -> bool:
        """
        Encode sets and write them wholesale to key.

        Returns:
            True if the blob was written, False if encoding or writing failed
        """
        try:
            data = encode_collection(sets)
        except (TypeError, ValueError) as e:
            logger.warning(f"Failed to encode collection {key!r}, save skipped: {e}")
            return False

        try:
            self.blobs.set(key, data)
        except StorageError as e:
            logger.warning(f"Failed to write collection {key!r}: {e}")
            return False

        logger.debug(f"Saved collection {key!r} ({len(data)} bytes)")
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Images
    # ─────────────────────────────────────────────────────────────────────────

    def write_image(self, data: bytes, filename: str) -> bool:
        """
        Write raw image bytes to filename, overwriting any existing file.

        Returns:
            True on success, False if the write failed or filename is not flat
        """
        try:
            self.files.write(filename, data)
        except (StorageError, ValueError) as e:
            logger.warning(f"Failed to write image {filename}: {e}")
            return False
        return True

    def read_image(self, filename: str) -> Optional[bytes]:
        """
        Read raw image bytes.

        Returns:
            Bytes, or None if the file is missing, unreadable or not a flat name
        """
        try:
            return self.files.read(filename)
        except (StorageError, ValueError) as e:
            logger.warning(f"Failed to read image {filename}: {e}")
            return None

    def delete_image(self, filename: str) -> bool:
        """Delete an image file. False if it was missing or could not be removed."""
        try:
            return self.files.delete(filename)
        except (StorageError, ValueError) as e:
            logger.warning(f"Failed to delete image {filename}: {e}")
            return False

    def list_images(self) -> list[str]:
        """Filenames currently in the image directory ([] on failure)."""
        try:
            return self.files.list_files()
        except StorageError as e:
            logger.warning(f"Failed to list images: {e}")
            return []
