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

"""State tracking for sysconftrack.

This module provides state persistence for remembering the modification time
of every path a trigger has run for. This enables:

- Skipping triggers whose inputs have not changed since the last run
- Forcing a re-run on demand
- Forgetting paths that have been removed from the system

The state file is a line-oriented text file that stores one
``<mtime>:<path>`` record per tracked path below a comment header.

Public API:

- StateTracker: Main interface for state management operations
- StateEntry: A single (path, mtime) record
- load_state: Parse every record from a state file
- save_state: Write records to a state file
- parse_state_line / format_state_line: Single-line codec

Example:
    Basic usage:

        from pathlib import Path
        from sysconftrack.state import StateTracker

        tracker = StateTracker(Path("/var/lib/sysconftrack/status"))
        tracker.load()
        if tracker.needs_update("/usr/lib/systemd/system"):
            tracker.record_path("/usr/lib/systemd/system")
        tracker.write()

"""

from .tracker import (
    STATE_HEADER,
    StateEntry,
    StateTracker,
    format_state_line,
    load_state,
    parse_state_line,
    save_state,
)

__all__ = [
    "STATE_HEADER",
    "StateEntry",
    "StateTracker",
    "format_state_line",
    "load_state",
    "parse_state_line",
    "save_state",
]
