"""Tests for PersistenceStore."""
import logging

import pytest

from mistipad.core.models import QuestionSet
from mistipad.errors import StorageError
from mistipad.storage import MemoryBlobStore, MemoryFileStore, PersistenceStore


class FailingBlobStore(MemoryBlobStore):
    """Blob store whose reads and writes always fail."""

    def get(self, key):
        raise StorageError("disk unavailable", name=key)

    def set(self, key, data):
        raise StorageError("disk full", name=key)


class FailingFileStore(MemoryFileStore):
    """File store whose every operation fails."""

    def write(self, filename, data):
        raise StorageError("disk full", name=filename)

    def read(self, filename):
        raise StorageError("disk unavailable", name=filename)

    def delete(self, filename):
        raise StorageError("read-only", name=filename)

    def list_files(self):
        raise StorageError("disk unavailable")


class TestCollections:
    """Tests for load_collection / save_collection."""

    def test_load_when_key_absent_then_empty(self, store):
        assert store.load_collection("SavedQuestionSets") == []

    def test_save_then_load_roundtrip(self, store, blobs, math_set):
        math_set.normalize()

        assert store.save_collection("SavedQuestionSets", [math_set]) is True
        assert "SavedQuestionSets" in blobs.blobs
        assert store.load_collection("SavedQuestionSets") == [math_set]

    def test_load_when_blob_corrupt_then_empty_and_warns(self, blobs, files, caplog):
        """Undecodable blobs are treated as an empty collection."""
        blobs.set("SavedQuestionSets", b"\x00garbage")
        store = PersistenceStore(blobs, files)

        with caplog.at_level(logging.WARNING):
            assert store.load_collection("SavedQuestionSets") == []

        assert "SavedQuestionSets" in caplog.text

    def test_load_when_record_invalid_then_empty(self, blobs, files):
        blobs.set("k", b'[{"id": "A", "questions": "not a list", "answers": []}]')

        assert PersistenceStore(blobs, files).load_collection("k") == []

    @pytest.mark.parametrize("title", ["null", "5", '["Math"]'])
    def test_load_when_title_not_string_then_empty(self, blobs, files, title):
        """A record whose title is not text makes the whole blob unusable."""
        blobs.set(
            "k",
            f'[{{"id": "A", "title": {title}, "questions": ["2+2"], "answers": ["4"]}}]'.encode(),
        )

        assert PersistenceStore(blobs, files).load_collection("k") == []

    def test_load_when_backend_fails_then_empty(self, files):
        assert PersistenceStore(FailingBlobStore(), files).load_collection("k") == []

    def test_save_when_backend_fails_then_false(self, files, math_set):
        assert PersistenceStore(FailingBlobStore(), files).save_collection("k", [math_set]) is False

    def test_save_when_unencodable_then_false_and_blob_untouched(self, store, blobs):
        """Encoding failures skip the write."""
        blobs.set("k", b"[]")
        broken = QuestionSet(id="A", questions=[object()], answers=[""], image_paths=[""])

        assert store.save_collection("k", [broken]) is False
        assert blobs.get("k") == b"[]"


class TestImages:
    """Tests for image write/read."""

    def test_write_then_read(self, store, png_bytes):
        assert store.write_image(png_bytes, "A-q0.png") is True
        assert store.read_image("A-q0.png") == png_bytes

    def test_write_overwrites(self, store):
        store.write_image(b"old", "A-q0.png")
        store.write_image(b"new", "A-q0.png")

        assert store.read_image("A-q0.png") == b"new"

    def test_read_missing_then_none(self, store):
        assert store.read_image("missing.png") is None

    def test_list_and_delete(self, store):
        store.write_image(b"x", "A-q0.png")

        assert store.list_images() == ["A-q0.png"]
        assert store.delete_image("A-q0.png") is True
        assert store.list_images() == []

    def test_failing_backend_reports_without_raising(self, blobs):
        store = PersistenceStore(blobs, FailingFileStore())

        assert store.write_image(b"x", "A-q0.png") is False
        assert store.read_image("A-q0.png") is None
        assert store.delete_image("A-q0.png") is False
        assert store.list_images() == []

    def test_write_when_filename_has_separator_then_false(self, store, files):
        """Names that are not flat are reported as a failed write."""
        assert store.write_image(b"x", "../A-q0.png") is False
        assert files.list_files() == []

    def test_read_and_delete_when_filename_has_separator_then_absent(self, store):
        assert store.read_image("../etc.png") is None
        assert store.delete_image("a/b-q0.png") is False
