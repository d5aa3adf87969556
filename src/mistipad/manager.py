"""
Module: manager

Purpose:
    Owns the active and trashed question-set collections and keeps them
    persisted. Every mutating operation updates the in-memory list and then
    explicitly rewrites the whole owning collection(s) through the
    PersistenceStore.

Key Classes:
    - QuestionSetManager

Dependencies:
    - storage.persistence: PersistenceStore
    - images: PNG encoding for Pillow images

Used By:
    - config.open_manager
    - UI layers (out of this package)

Notes:
    Not thread-safe. Sets are held by value: arguments are copied in and
    accessors return copies, so edits only reach storage through update()
    or save().
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Optional

from PIL import Image

from mistipad.core.models import QuestionSet
from mistipad.core.models.question_set import image_filename
from mistipad.images import ImageInput, decode_image, to_png_bytes
from mistipad.storage.persistence import PersistenceStore

logger = logging.getLogger(__name__)

ACTIVE_KEY = "SavedQuestionSets"
TRASHED_KEY = "DeletedQuestionSets"


def _copy(qset: QuestionSet) -> QuestionSet:
    return replace(
        qset,
        questions=list(qset.questions),
        answers=list(qset.answers),
        image_paths=list(qset.image_paths),
    )


def _index_of(sets: list[QuestionSet], set_id: str) -> Optional[int]:
    for i, qset in enumerate(sets):
        if qset.id == set_id:
            return i
    return None


class QuestionSetManager:
    """
    Active list and trash of question sets, persisted on every change.

    Both collections are loaded once at construction. An id is present in
    at most one of them.

    Attributes:
        store: PersistenceStore used for collections and images
        active_key: Blob key of the active collection
        trashed_key: Blob key of the trashed collection

    Example:
        >>> manager = QuestionSetManager(PersistenceStore(MemoryBlobStore(), MemoryFileStore()))
        >>> qset = manager.create()
        >>> manager.soft_delete(qset.id)
        True
        >>> [s.id for s in manager.trashed] == [qset.id]
        True
    """

    def __init__(
        self,
        store: PersistenceStore,
        *,
        active_key: str = ACTIVE_KEY,
        trashed_key: str = TRASHED_KEY,
    ) -> None:
        self.store = store
        self.active_key = active_key
        self.trashed_key = trashed_key
        self._active: list[QuestionSet] = store.load_collection(active_key)
        self._trashed: list[QuestionSet] = store.load_collection(trashed_key)
        logger.debug(
            f"Loaded {len(self._active)} active and {len(self._trashed)} trashed question sets"
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Read access
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def active(self) -> list[QuestionSet]:
        """Copies of the active sets, in user order."""
        return [_copy(qset) for qset in self._active]

    @property
    def trashed(self) -> list[QuestionSet]:
        """Copies of the trashed sets, oldest deletion first."""
        return [_copy(qset) for qset in self._trashed]

    def get(self, set_id: str) -> Optional[QuestionSet]:
        """Copy of the active set with set_id, or None."""
        i = _index_of(self._active, set_id)
        return _copy(self._active[i]) if i is not None else None

    def get_trashed(self, set_id: str) -> Optional[QuestionSet]:
        """Copy of the trashed set with set_id, or None."""
        i = _index_of(self._trashed, set_id)
        return _copy(self._trashed[i]) if i is not None else None

    # ─────────────────────────────────────────────────────────────────────────
    # Active collection
    # ─────────────────────────────────────────────────────────────────────────

    def create(self, initial: Optional[QuestionSet] = None) -> QuestionSet:
        """
        Append a new set to the active collection.

        Args:
            initial: Set to add. A fresh set with one blank question/answer
                pair is created when omitted.

        Returns:
            Copy of the stored set

        Raises:
            ValueError: If the id is already active or trashed
        """
        qset = _copy(initial) if initial is not None else QuestionSet.new()
        if _index_of(self._active, qset.id) is not None or _index_of(self._trashed, qset.id) is not None:
            raise ValueError(f"Question set {qset.id} already exists")
        qset.normalize()
        self._active.append(qset)
        self._save_active()
        return _copy(qset)

    def update(self, qset: QuestionSet) -> bool:
        """
        Replace the active set that has the same id.

        Returns:
            True if replaced, False (and nothing saved) if the id is not active
        """
        i = _index_of(self._active, qset.id)
        if i is None:
            logger.debug(f"update: question set {qset.id} is not active, ignoring")
            return False
        stored = _copy(qset)
        stored.normalize()
        self._active[i] = stored
        self._save_active()
        return True

    def save(self, qset: QuestionSet) -> QuestionSet:
        """
        Store qset whether or not it exists yet.

        Active sets are replaced, trashed sets are replaced in the trash,
        unknown sets are appended to the active collection.

        Returns:
            Copy of the stored set
        """
        stored = _copy(qset)
        stored.normalize()
        i = _index_of(self._active, qset.id)
        if i is not None:
            self._active[i] = stored
            self._save_active()
            return _copy(stored)
        i = _index_of(self._trashed, qset.id)
        if i is not None:
            self._trashed[i] = stored
            self._save_trashed()
            return _copy(stored)
        self._active.append(stored)
        self._save_active()
        return _copy(stored)

    def reorder(self, from_index: int, to_index: int) -> None:
        """
        Move one active set so it ends up at to_index.

        The relative order of all other sets is unchanged.

        Raises:
            IndexError: If either index is outside the active collection
        """
        count = len(self._active)
        for name, index in (("from_index", from_index), ("to_index", to_index)):
            if not 0 <= index < count:
                raise IndexError(f"{name} {index} out of range for {count} sets")
        if from_index == to_index:
            return
        qset = self._active.pop(from_index)
        self._active.insert(to_index, qset)
        self._save_active()

    def move(self, offsets: Iterable[int], destination: int) -> None:
        """
        Move several active sets in front of the set at destination.

        destination is an index into the list before the move and may equal
        len(active) to move to the end. Moved sets keep their relative order.

        Raises:
            IndexError: If an offset or destination is out of range
        """
        count = len(self._active)
        picked = sorted(set(offsets))
        if any(not 0 <= i < count for i in picked):
            raise IndexError(f"offsets {picked} out of range for {count} sets")
        if not 0 <= destination <= count:
            raise IndexError(f"destination {destination} out of range for {count} sets")
        if not picked:
            return

        moving = [self._active[i] for i in picked]
        remaining = [qset for i, qset in enumerate(self._active) if i not in picked]
        insert_at = destination - sum(1 for i in picked if i < destination)
        remaining[insert_at:insert_at] = moving
        self._active = remaining
        self._save_active()

    # ─────────────────────────────────────────────────────────────────────────
    # Trash lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    def soft_delete(self, set_id: str) -> bool:
        """
        Move an active set to the end of the trash.

        Returns:
            True if moved, False if set_id is not active
        """
        if not self._move_to_trash(set_id):
            return False
        self._save_active()
        self._save_trashed()
        return True

    def soft_delete_at(self, offsets: Iterable[int]) -> int:
        """
        Trash the active sets at the given positions.

        Returns:
            Number of sets moved
        """
        picked = sorted(set(offsets))
        if any(not 0 <= i < len(self._active) for i in picked):
            raise IndexError(f"offsets {picked} out of range for {len(self._active)} sets")
        ids = [self._active[i].id for i in picked]
        moved = sum(1 for set_id in ids if self._move_to_trash(set_id))
        if moved:
            self._save_active()
            self._save_trashed()
        return moved

    def restore(self, set_id: str) -> bool:
        """
        Move a trashed set back to the end of the active collection.

        Returns:
            True if restored, False if set_id is not trashed
        """
        i = _index_of(self._trashed, set_id)
        if i is None:
            logger.debug(f"restore: question set {set_id} is not trashed, ignoring")
            return False
        self._active.append(self._trashed.pop(i))
        logger.info(f"Restored question set {set_id}")
        self._save_active()
        self._save_trashed()
        return True

    def purge(self, set_id: str) -> bool:
        """
        Permanently remove a trashed set.

        Image files are left in place; see prune_orphan_images().

        Returns:
            True if removed, False if set_id is not trashed
        """
        i = _index_of(self._trashed, set_id)
        if i is None:
            logger.debug(f"purge: question set {set_id} is not trashed, ignoring")
            return False
        del self._trashed[i]
        logger.info(f"Purged question set {set_id}")
        self._save_trashed()
        return True

    def purge_at(self, offsets: Iterable[int]) -> int:
        """
        Permanently remove the trashed sets at the given positions.

        Returns:
            Number of sets removed

        Raises:
            IndexError: If an offset is outside the trashed collection
        """
        picked = set(offsets)
        if any(not 0 <= i < len(self._trashed) for i in picked):
            raise IndexError(f"offsets {sorted(picked)} out of range for {len(self._trashed)} sets")
        if not picked:
            return 0
        before = len(self._trashed)
        self._trashed = [qset for i, qset in enumerate(self._trashed) if i not in picked]
        removed = before - len(self._trashed)
        if removed:
            logger.info(f"Purged {removed} question sets")
            self._save_trashed()
        return removed

    def purge_all(self) -> int:
        """
        Empty the trash.

        Returns:
            Number of sets removed
        """
        removed = len(self._trashed)
        self._trashed = []
        logger.info(f"Emptied trash ({removed} question sets)")
        self._save_trashed()
        return removed

    # ─────────────────────────────────────────────────────────────────────────
    # Images
    # ─────────────────────────────────────────────────────────────────────────

    def save_image_for(
        self,
        qset: QuestionSet,
        question_index: int,
        image: ImageInput,
    ) -> Optional[str]:
        """
        Store the image for one question of qset.

        Args:
            qset: Owning set (only its id is used)
            question_index: 0-based question position
            image: Raw PNG bytes, or a Pillow image to encode as PNG

        Returns:
            Filename "<id>-q<index>.png", or None if the write failed

        Raises:
            ValueError: If question_index is negative
        """
        filename = image_filename(qset.id, question_index)
        if not self.store.write_image(to_png_bytes(image), filename):
            return None
        return filename

    def attach_image(self, set_id: str, question_index: int, image: ImageInput) -> Optional[str]:
        """
        Store an image and reference it from an active set's question.

        Returns:
            The filename, or None if the set is not active, the index is out
            of range, or the write failed. The set is unchanged on None.
        """
        i = _index_of(self._active, set_id)
        if i is None:
            return None
        qset = self._active[i]
        if not 0 <= question_index < len(qset.questions):
            return None
        filename = self.save_image_for(qset, question_index, image)
        if filename is None:
            return None
        qset.normalize()
        qset.image_paths[question_index] = filename
        self._save_active()
        return filename

    def detach_image(self, set_id: str, question_index: int) -> bool:
        """
        Clear the image reference of one question. The file is kept.

        Returns:
            True if a reference was cleared
        """
        i = _index_of(self._active, set_id)
        if i is None:
            return False
        qset = self._active[i]
        qset.normalize()
        if not 0 <= question_index < len(qset.image_paths) or not qset.image_paths[question_index]:
            return False
        qset.image_paths[question_index] = ""
        self._save_active()
        return True

    def load_image(self, filename: str) -> Optional[bytes]:
        """Raw bytes of a stored image, or None."""
        return self.store.read_image(filename)

    def open_image(self, filename: str) -> Optional[Image.Image]:
        """Decoded Pillow image of a stored image, or None."""
        data = self.load_image(filename)
        if data is None:
            return None
        return decode_image(data)

    def prune_orphan_images(self) -> list[str]:
        """
        Delete image files that no active or trashed set references.

        Returns:
            Filenames that were removed
        """
        referenced: set[str] = set()
        for qset in self._active + self._trashed:
            referenced |= qset.referenced_images()

        removed = [
            name for name in self.store.list_images()
            if name not in referenced and self.store.delete_image(name)
        ]
        if removed:
            logger.info(f"Removed {len(removed)} orphaned image files")
        return removed

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    def _move_to_trash(self, set_id: str) -> bool:
        i = _index_of(self._active, set_id)
        if i is None:
            logger.debug(f"soft_delete: question set {set_id} is not active, ignoring")
            return False
        self._trashed.append(self._active.pop(i))
        logger.info(f"Moved question set {set_id} to trash")
        return True

    def _save_active(self) -> bool:
        for qset in self._active:
            qset.normalize()
        return self.store.save_collection(self.active_key, self._active)

    def _save_trashed(self) -> bool:
        for qset in self._trashed:
            qset.normalize()
        return self.store.save_collection(self.trashed_key, self._trashed)
