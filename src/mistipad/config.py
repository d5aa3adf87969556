"""
Configuration and path resolution for the on-disk store.

Dev mode: Uses local workspace/ directory
Frozen mode: Uses the system-standard application data location
"""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from mistipad.manager import ACTIVE_KEY, TRASHED_KEY, QuestionSetManager
from mistipad.storage.backends import DirectoryBlobStore, DirectoryFileStore
from mistipad.storage.persistence import PersistenceStore

# Try to import Qt paths, but don't fail if not available (e.g., headless use)
try:
    from PySide6.QtCore import QStandardPaths
    _HAS_QT = True
except ImportError:
    _HAS_QT = False

logger = logging.getLogger(__name__)

APP_NAME = "Mistipad"


def is_frozen() -> bool:
    """Check if running as a frozen (PyInstaller) application."""
    return getattr(sys, 'frozen', False) or hasattr(sys, '_MEIPASS')


def get_app_data_dir() -> Path:
    """
    Get the application data directory for stored question sets and images.

    Frozen: ~/Library/Application Support/Mistipad (macOS)
            or %LOCALAPPDATA%/Mistipad (Windows)
    Dev: workspace/
    """
    if not is_frozen():
        return Path.cwd() / "workspace"

    if _HAS_QT:
        return Path(QStandardPaths.writableLocation(
            QStandardPaths.StandardLocation.AppLocalDataLocation
        ))

    import os
    import platform
    if platform.system() == "Windows":
        base = os.environ.get("LOCALAPPDATA", os.environ.get("APPDATA"))
        return Path(base) / APP_NAME if base else Path.home() / ".mistipad"
    elif platform.system() == "Darwin":
        return Path.home() / "Library/Application Support" / APP_NAME
    else:
        return Path.home() / ".local/share" / APP_NAME


@dataclass(frozen=True)
class StoreConfig:
    """
    Layout of the on-disk store.

    Attributes:
        data_dir: Root directory for everything Mistipad writes
        blobs_dirname: Subdirectory holding one JSON file per collection key
        images_dirname: Flat subdirectory holding question images
        active_key: Blob key of the active collection
        trashed_key: Blob key of the trashed collection
    """
    data_dir: Path = field(default_factory=get_app_data_dir)
    blobs_dirname: str = "blobs"
    images_dirname: str = "images"
    active_key: str = ACTIVE_KEY
    trashed_key: str = TRASHED_KEY

    @classmethod
    def default(cls) -> "StoreConfig":
        return cls(data_dir=get_app_data_dir())

    @property
    def blobs_dir(self) -> Path:
        return Path(self.data_dir) / self.blobs_dirname

    @property
    def images_dir(self) -> Path:
        return Path(self.data_dir) / self.images_dirname


def open_store(config: Optional[StoreConfig] = None) -> PersistenceStore:
    """Build a PersistenceStore over the directory backends described by config."""
    config = config or StoreConfig.default()
    return PersistenceStore(
        DirectoryBlobStore(config.blobs_dir),
        DirectoryFileStore(config.images_dir),
    )


def open_manager(config: Optional[StoreConfig] = None) -> QuestionSetManager:
    """
    Build a QuestionSetManager backed by the on-disk store.

    Both collections are loaded before this returns.
    """
    config = config or StoreConfig.default()
    logger.debug(f"Opening question sets in {config.data_dir}")
    return QuestionSetManager(
        open_store(config),
        active_key=config.active_key,
        trashed_key=config.trashed_key,
    )
