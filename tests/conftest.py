"""
Pytest configuration and shared fixtures for sysconftrack tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import pytest
import yaml

from sysconftrack.fs import LocalFilesystem
from sysconftrack.logging import SilentLogger, set_global_logger


class FlakyFilesystem(LocalFilesystem):
    """Local filesystem that fails stat for selected canonical paths."""

    def __init__(self) -> None:
        self.stat_failures: set[str] = set()
        self.mkdir_failures: set[str] = set()

    def stat_mtime(self, path) -> int:
        if str(path) in self.stat_failures:
            raise PermissionError(13, "Permission denied", str(path))
        return super().stat_mtime(path)

    def ensure_directory(self, path, mode: int = 0o755) -> None:
        if str(path) in self.mkdir_failures:
            raise PermissionError(13, "Permission denied", str(path))
        super().ensure_directory(path, mode)


@pytest.fixture(autouse=True)
def silent_global_logger():
    """Reset the global logger so CLI tests don't leak verbosity."""
    set_global_logger(SilentLogger())
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def state_file(tmp_path: Path) -> Path:
    """Provide a state file path inside a not-yet-created tracking directory."""
    return tmp_path / "track" / "status"


@pytest.fixture
def make_file(tmp_path: Path):
    """
    Factory fixture for creating files with a fixed mtime.

    Usage:
        path = make_file("etc/foo", mtime=1000)

    Returns the canonical (resolved) path.
    """

    def _create(name: str, mtime: int = 1000, content: str = "") -> Path:
        path = tmp_path / "root" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        os.utime(path, (mtime, mtime))
        return path.resolve()

    return _create


@pytest.fixture
def set_mtime():
    """Provide a helper that changes the mtime of an existing path."""

    def _set(path: Path, mtime: int) -> None:
        os.utime(path, (mtime, mtime))

    return _set


@pytest.fixture
def flaky_fs() -> FlakyFilesystem:
    """Provide a filesystem whose stat/mkdir can be made to fail."""
    return FlakyFilesystem()


@pytest.fixture
def create_yaml_file(tmp_path: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("config.yaml", {"key": "value"})
    """

    def _create(filename: str, data: Any) -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create
