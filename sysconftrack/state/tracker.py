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

"""State tracking implementation for sysconftrack.

This module implements the persistence layer that remembers, per filesystem
path, the modification time observed when a trigger last ran for it. The
trigger runner asks needs_update() before doing work and calls record_path()
afterwards.

State File Format:

    # This file is automatically generated. DO NOT EDIT
    <mtime>:<path>
    <mtime>:<path>

- Lines starting with '#' and blank lines are ignored on read
- Only the FIRST colon separates the fields, so paths may contain colons
- The file is read and written as bytes; paths round-trip exactly even when
  they are not valid UTF-8

Key Features:

- Uniqueness by canonical path (symlinks resolved, '..' collapsed)
- Entries whose path has disappeared are pruned on load and on write
- All-or-nothing load: a malformed line empties the tracker
- Conservative freshness check: unknown or un-stat'able paths need an update

Example:
    High-level API with StateTracker:
        ```python
        from pathlib import Path
        from sysconftrack.state import StateTracker

        tracker = StateTracker(Path("/var/lib/sysconftrack/status"))
        tracker.load()

        if tracker.needs_update("/usr/share/fonts"):
            run_fc_cache()
            tracker.record_path("/usr/share/fonts")

        tracker.write()
        ```

    Low-level API with functions:
        ```python
        from pathlib import Path
        from sysconftrack.state import load_state, save_state

        entries = load_state(Path("/var/lib/sysconftrack/status"))
        save_state(entries, Path("/tmp/status.copy"))
        ```

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
import os
from pathlib import Path
import re

from sysconftrack.exceptions import (
    StateIOError,
    StateParseError,
    SysconfTrackError,
)
from sysconftrack.fs import Filesystem, LocalFilesystem, StrPath
from sysconftrack.logging import Logger, get_global_logger

STATE_HEADER = "# This file is automatically generated. DO NOT EDIT"
STATE_DIR_MODE = 0o755

_MTIME_PATTERN = re.compile(r"-?[0-9]+")
_MTIME_MIN = -(2**63)
_MTIME_MAX = 2**63 - 1


@dataclass
class StateEntry:
    """A registered path and the mtime recorded for it.

    Attributes:
        path: Canonical absolute path.
        mtime: Modification time in whole seconds since the epoch.
    """

    path: str
    mtime: int


def parse_state_line(line: str, lineno: int = 0) -> StateEntry | None:
    """Parse a single state file line.

    Args:
        line: The line, with or without its trailing newline.
        lineno: 1-based line number, used in error messages.

    Returns:
        The parsed entry, or None for blank lines and comments.

    Raises:
        StateParseError: If the line has no colon, an empty timestamp or
            path, or a timestamp that is not a signed 64-bit decimal.

    Example:
        Paths keep everything after the first colon:
            ```python
            entry = parse_state_line("42:/tmp/a:b\\n")
            assert entry == StateEntry("/tmp/a:b", 42)
            ```

    """
    if line.endswith("\n"):
        line = line[:-1]

    if not line or line.startswith("#"):
        return None

    raw_mtime, sep, path = line.partition(":")
    if not sep:
        raise StateParseError(
            f"line {lineno} is missing a colon: {line!r}", lineno, line
        )
    if not raw_mtime:
        raise StateParseError(
            f"line {lineno} is missing a timestamp: {line!r}", lineno, line
        )
    if not path:
        raise StateParseError(
            f"line {lineno} is missing a filename: {line!r}", lineno, line
        )
    if not _MTIME_PATTERN.fullmatch(raw_mtime):
        raise StateParseError(
            f"line {lineno} has an invalid timestamp {raw_mtime!r}", lineno, line
        )

    mtime = int(raw_mtime)
    if not _MTIME_MIN <= mtime <= _MTIME_MAX:
        raise StateParseError(
            f"line {lineno} has an out of range timestamp {raw_mtime!r}",
            lineno,
            line,
        )

    return StateEntry(path=path, mtime=mtime)


def format_state_line(entry: StateEntry) -> str:
    """Format an entry as a state file line, including the newline."""
    return f"{entry.mtime}:{entry.path}\n"


def load_state(state_file: Path) -> list[StateEntry]:
    """Read and parse every record in a state file.

    Comment and blank lines are skipped. No filesystem checks are made on
    the recorded paths; duplicates are returned in file order.

    Args:
        state_file: Path to the state file.

    Returns:
        Parsed entries in file order.

    Raises:
        FileNotFoundError: If the state file doesn't exist.
        StateParseError: If any line is malformed.
        OSError: If the file cannot be read.

    """
    entries: list[StateEntry] = []
    with open(state_file, "rb") as f:
        for lineno, raw in enumerate(f, start=1):
            entry = parse_state_line(os.fsdecode(raw), lineno)
            if entry is not None:
                entries.append(entry)
    return entries


def save_state(entries: Iterable[StateEntry], state_file: Path) -> None:
    """Write the header and one line per entry, truncating the file.

    The replacement is not atomic: a failure part way through leaves a
    truncated file behind.

    Args:
        entries: Entries to write, in the order given.
        state_file: Path to the state file. Its directory must exist.

    Raises:
        OSError: If the file cannot be opened or written.

    """
    with open(state_file, "wb") as f:
        f.write(os.fsencode(STATE_HEADER + "\n"))
        for entry in entries:
            f.write(os.fsencode(format_state_line(entry)))


class StateTracker:
    """Tracks the last seen modification time of registered paths.

    Every operation reports failure through its return value. Problems with
    the state file are written to the diagnostic stream via the logger's
    error channel, never raised.

    Attributes:
        state_file: Path to the state file.
        last_error: Exception describing why the most recent load() or
            write() failed, or None if it succeeded.

    Example:
        Basic usage:
            ```python
            tracker = StateTracker(Path("/var/lib/sysconftrack/status"))
            if not tracker.load():
                sys.exit(1)
            if tracker.needs_update("/etc/ld.so.conf.d", force=args.force):
                ...
                tracker.record_path("/etc/ld.so.conf.d")
            tracker.write()
            ```

    """

    def __init__(
        self,
        state_file: Path,
        *,
        fs: Filesystem | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Initialize an empty tracker.

        Args:
            state_file: Path to the state file. Nothing is read until load().
            fs: Filesystem facade. Defaults to the local filesystem.
            logger: Logger for diagnostics. Defaults to the global logger.

        """
        self.state_file = Path(state_file)
        self._fs: Filesystem = fs if fs is not None else LocalFilesystem()
        self._logger: Logger = logger if logger is not None else get_global_logger()
        self._entries: dict[str, StateEntry] = {}
        self.last_error: SysconfTrackError | None = None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __iter__(self) -> Iterator[StateEntry]:
        return iter(list(self._entries.values()))

    def get(self, path: str) -> StateEntry | None:
        """Return the entry stored under the exact (canonical) path string."""
        return self._entries.get(path)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def _put(self, path: str, mtime: int) -> None:
        entry = self._entries.get(path)
        if entry is not None:
            entry.mtime = mtime
        else:
            self._entries[path] = StateEntry(path=path, mtime=mtime)

    def record_path(self, path: StrPath) -> bool:
        """Record the current mtime of a path.

        The path is canonicalized first, so different spellings of the same
        file share one entry. Nothing is written to disk.

        Args:
            path: Path to register.

        Returns:
            True if the entry was inserted or updated, False if the path
            could not be resolved or stat'ed (tracker unchanged).

        """
        try:
            real = self._fs.canonicalize(path)
        except (OSError, ValueError) as err:
            self._logger.debug("STATE", f"Cannot resolve {path}: {err}")
            return False

        try:
            mtime = self._fs.stat_mtime(real)
        except (OSError, ValueError) as err:
            self._logger.debug("STATE", f"Cannot stat {real}: {err}")
            return False

        self._put(real, mtime)
        self._logger.debug("STATE", f"Recorded {real} at {mtime}")
        return True

    def needs_update(self, path: StrPath, force: bool = False) -> bool:
        """Check whether work keyed off a path should run again.

        Args:
            path: Path to check.
            force: Report an update for any known, existing path.

        Returns:
            False if the path does not exist. True if it is unknown, cannot
            be stat'ed, force is set, or it is newer than the recorded mtime.
            False otherwise, including when the recorded mtime is newer than
            the one on disk.

        """
        try:
            real = self._fs.canonicalize(path)
        except (OSError, ValueError):
            return False

        entry = self._entries.get(real)
        if entry is None:
            return True

        try:
            mtime = self._fs.stat_mtime(real)
        except (OSError, ValueError) as err:
            self._logger.debug("STATE", f"Cannot stat {real}, assuming stale: {err}")
            return True

        if force:
            return True

        return entry.mtime < mtime

    def _fail(self, error: StateIOError) -> None:
        self.last_error = error
        self._logger.error("STATE", str(error))

    def _existing_entries(self) -> Iterator[StateEntry]:
        for entry in sorted(self._entries.values(), key=lambda e: e.path):
            if not self._fs.exists(entry.path):
                self._logger.verbose("STATE", f"Pruning vanished path: {entry.path}")
                continue
            yield entry

    def write(self) -> bool:
        """Write every entry whose path still exists to the state file.

        Creates the state directory (mode 0755) if needed. Entries are
        written sorted by path.

        Returns:
            True on success, False if the directory could not be created or
            the file could not be written.

        """
        self.last_error = None
        state_dir = self.state_file.parent
        if not self._fs.exists(state_dir):
            try:
                self._fs.ensure_directory(state_dir, mode=STATE_DIR_MODE)
            except OSError as err:
                self._fail(
                    StateIOError(f"Failed to create directory {state_dir}: {err}"),
                )
                return False

        try:
            save_state(self._existing_entries(), self.state_file)
        except OSError as err:
            self._fail(
                StateIOError(f"Failed to write state file {self.state_file}: {err}"),
            )
            return False

        self._logger.verbose("STATE", f"Wrote state file {self.state_file}")
        return True

    def load(self) -> bool:
        """Merge the state file into the tracker.

        A missing state file is the initial state and loads nothing. Records
        for paths that no longer exist are dropped. A later record for the
        same path overrides an earlier one.

        Returns:
            True on success (including a missing file). False if the file
            could not be read (tracker unchanged) or contained a malformed
            line (tracker emptied).

        """
        self.last_error = None
        try:
            entries = load_state(self.state_file)
        except FileNotFoundError:
            self._logger.verbose(
                "STATE", f"No state file at {self.state_file}, starting fresh"
            )
            return True
        except StateParseError as err:
            self._logger.error(
                "STATE", f"Failed to parse state: {self.state_file}: {err}"
            )
            self.last_error = err
            self.clear()
            return False
        except OSError as err:
            self._fail(
                StateIOError(f"Failed to load state file {self.state_file}: {err}"),
            )
            return False

        loaded = 0
        for entry in entries:
            if not self._fs.exists(entry.path):
                self._logger.debug("STATE", f"Dropping vanished path: {entry.path}")
                continue
            self._put(entry.path, entry.mtime)
            loaded += 1

        self._logger.verbose(
            "STATE", f"Loaded {loaded} record(s) from {self.state_file}"
        )
        return True
