# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Filesystem access used by the state tracker.

The tracker never touches the filesystem directly. It goes through a small
facade so tests can substitute a fake that simulates failures (for example a
path that exists but cannot be stat'ed).

Failing operations raise OSError; exists() never raises. An empty path and a
symlink loop both fail to canonicalize.

Example:
    ```python
    from sysconftrack.fs import LocalFilesystem

    fs = LocalFilesystem()
    real = fs.canonicalize("/etc/../etc/fonts")
    mtime = fs.stat_mtime(real)
    ```
"""

from __future__ import annotations

import errno
import os
from pathlib import Path
from typing import Protocol

StrPath = str | os.PathLike[str]

_NS_PER_SECOND = 1_000_000_000


class Filesystem(Protocol):
    """Protocol for the filesystem operations the tracker consumes."""

    def canonicalize(self, path: StrPath) -> str:
        """Return the absolute path with symlinks and '..' resolved.

        Raises:
            OSError: If the path does not exist or cannot be resolved.
        """
        ...

    def stat_mtime(self, path: StrPath) -> int:
        """Return the modification time in whole seconds since the epoch.

        Raises:
            OSError: If the path cannot be stat'ed.
        """
        ...

    def exists(self, path: StrPath) -> bool:
        """Return True if the path currently exists."""
        ...

    def ensure_directory(self, path: StrPath, mode: int = 0o755) -> None:
        """Create the directory (and missing parents) if it does not exist.

        Raises:
            OSError: If the directory cannot be created.
        """
        ...


class LocalFilesystem:
    """Filesystem implementation backed by the local OS."""

    def canonicalize(self, path: StrPath) -> str:
        if not os.fspath(path):
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", "")
        try:
            return str(Path(path).resolve(strict=True))
        except RuntimeError as err:
            # Python < 3.13 reports symlink loops as RuntimeError
            raise OSError(errno.ELOOP, str(err), os.fspath(path)) from err

    def stat_mtime(self, path: StrPath) -> int:
        # Floor to whole seconds, matching st_mtim.tv_sec for pre-epoch times
        return os.stat(path).st_mtime_ns // _NS_PER_SECOND

    def exists(self, path: StrPath) -> bool:
        return os.path.exists(path)

    def ensure_directory(self, path: StrPath, mode: int = 0o755) -> None:
        Path(path).mkdir(mode=mode, parents=True, exist_ok=True)
