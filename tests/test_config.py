"""Tests for store configuration and the default manager factory."""
import sys
from pathlib import Path

import pytest

from mistipad import config
from mistipad.config import StoreConfig, get_app_data_dir, open_manager
from mistipad.core.models import QuestionSet


class TestAppDataDir:
    """Tests for get_app_data_dir."""

    def test_dev_mode_uses_workspace(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.delattr(sys, "frozen", raising=False)
        monkeypatch.delattr(sys, "_MEIPASS", raising=False)

        assert get_app_data_dir() == tmp_path / "workspace"

    def test_frozen_without_qt_uses_platform_dir(self, monkeypatch, tmp_path: Path) -> None:
        monkeypatch.setattr(sys, "frozen", True, raising=False)
        monkeypatch.setattr(config, "_HAS_QT", False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        monkeypatch.setenv("LOCALAPPDATA", str(tmp_path / "local"))

        result = get_app_data_dir()

        assert result.name == "Mistipad"
        assert tmp_path in result.parents


class TestStoreConfig:
    """Tests for StoreConfig."""

    def test_layout(self, tmp_path: Path) -> None:
        cfg = StoreConfig(data_dir=tmp_path)

        assert cfg.blobs_dir == tmp_path / "blobs"
        assert cfg.images_dir == tmp_path / "images"
        assert cfg.active_key == "SavedQuestionSets"
        assert cfg.trashed_key == "DeletedQuestionSets"


class TestOpenManager:
    """Tests for open_manager on the real directory backends."""

    def test_persists_across_instances(self, tmp_path: Path, png_bytes: bytes) -> None:
        cfg = StoreConfig(data_dir=tmp_path)
        manager = open_manager(cfg)
        manager.create(QuestionSet(id="A", title="Math", questions=["2+2"], answers=["4"]))
        manager.create(QuestionSet(id="B", title="Art", questions=["Hue?"], answers=["Colour"]))
        manager.attach_image("A", 0, png_bytes)
        manager.soft_delete("B")

        reopened = open_manager(cfg)

        assert [s.id for s in reopened.active] == ["A"]
        assert [s.id for s in reopened.trashed] == ["B"]
        assert reopened.load_image("A-q0.png") == png_bytes
        assert (tmp_path / "blobs" / "SavedQuestionSets.json").exists()
        assert (tmp_path / "images" / "A-q0.png").exists()

    def test_corrupt_blob_starts_empty(self, tmp_path: Path) -> None:
        cfg = StoreConfig(data_dir=tmp_path)
        cfg.blobs_dir.mkdir(parents=True)
        (cfg.blobs_dir / "SavedQuestionSets.json").write_text("{{{", encoding="utf-8")

        assert open_manager(cfg).active == []
