"""Shared test fixtures for opencode-session."""

import os
import sys

import pytest

from opencode_session.utils.storage_paths import StoragePaths
from helpers import StoreBuilder


@pytest.fixture(scope="session")
def qapp():
    """Create a QCoreApplication for tests that need Qt."""
    os.environ["QT_QPA_PLATFORM"] = "offscreen"
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication(sys.argv or ["test"])
    yield app


@pytest.fixture
def storage_paths(tmp_path) -> StoragePaths:
    """Storage locations rooted in a temporary directory."""
    return StoragePaths.from_dirs(
        tmp_path / "share" / "opencode",
        tmp_path / "state" / "opencode",
    )


@pytest.fixture
def worktree(tmp_path):
    """An existing working directory sessions can point at."""
    path = tmp_path / "work" / "myapp"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def store(storage_paths) -> StoreBuilder:
    return StoreBuilder(storage_paths)
