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

"""Core orchestration for sysconftrack.

This module provides the high-level operations behind the CLI. Each one
loads the tracker from its state file, performs its work and, where it
changes state, writes the file back.

Design Principles:

- The tracker reports failures as return values; this layer turns failed
  loads and writes into exceptions so callers can't ignore them
- Functions return structured data (dataclasses) for easy testing
- The CLI layer formats results and errors for display

Example:
    Programmatic usage:
        ```python
        from pathlib import Path
        from sysconftrack.core import check_paths, record_paths

        state_file = Path("/var/lib/sysconftrack/status")
        stale = [r.path for r in check_paths(["/usr/share/fonts"], state_file)
                 if r.needs_update]
        if stale:
            rebuild_font_cache()
            record_paths(stale, state_file)
        ```

"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from sysconftrack.exceptions import StateIOError
from sysconftrack.logging import Logger, get_global_logger
from sysconftrack.results import CheckResult, RecordResult, StateListing
from sysconftrack.state import StateTracker


def _load_tracker(state_file: Path, logger: Logger) -> StateTracker:
    tracker = StateTracker(state_file, logger=logger)
    if not tracker.load():
        raise tracker.last_error or StateIOError(
            f"Failed to load state file: {state_file}"
        )
    return tracker


def check_paths(
    paths: Iterable[str],
    state_file: Path,
    *,
    force: bool = False,
    logger: Logger | None = None,
) -> list[CheckResult]:
    """Report which paths need their triggers re-run.

    Args:
        paths: Paths to check.
        state_file: State file to load.
        force: Report every existing, known path as needing an update.
        logger: Logger for progress output. Defaults to the global logger.

    Returns:
        One CheckResult per input path, in input order.

    Raises:
        StateParseError: If the state file is malformed.
        StateIOError: If the state file cannot be read.

    """
    if logger is None:
        logger = get_global_logger()

    tracker = _load_tracker(state_file, logger)

    results = []
    for path in paths:
        needs_update = tracker.needs_update(path, force=force)
        logger.verbose(
            "CHECK", f"{path}: {'needs update' if needs_update else 'up to date'}"
        )
        results.append(CheckResult(path=path, needs_update=needs_update))
    return results


def record_paths(
    paths: Iterable[str],
    state_file: Path,
    *,
    logger: Logger | None = None,
) -> RecordResult:
    """Record the current mtime of paths and persist the state.

    Args:
        paths: Paths to record.
        state_file: State file to load and rewrite.
        logger: Logger for progress output. Defaults to the global logger.

    Returns:
        Which paths were recorded and which could not be.

    Raises:
        StateParseError: If the existing state file is malformed.
        StateIOError: If the state file cannot be read or written.

    """
    if logger is None:
        logger = get_global_logger()

    tracker = _load_tracker(state_file, logger)

    recorded: list[str] = []
    failed: list[str] = []
    for path in paths:
        if tracker.record_path(path):
            recorded.append(path)
        else:
            logger.verbose("RECORD", f"Cannot record {path}")
            failed.append(path)

    if not tracker.write():
        raise tracker.last_error or StateIOError(
            f"Failed to write state file: {state_file}"
        )

    return RecordResult(recorded=recorded, failed=failed, state_file=state_file)


def list_state(state_file: Path, *, logger: Logger | None = None) -> StateListing:
    """Load a state file and return its live entries sorted by path.

    Raises:
        StateParseError: If the state file is malformed.
        StateIOError: If the state file cannot be read.

    """
    if logger is None:
        logger = get_global_logger()

    tracker = _load_tracker(state_file, logger)
    entries = sorted(tracker, key=lambda e: e.path)
    return StateListing(state_file=state_file, entries=entries)
