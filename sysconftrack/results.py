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

"""Public API return types for sysconftrack.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Note:
    Only public API return types belong in this module. StateEntry stays
    with the tracker that owns it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sysconftrack.state import StateEntry


@dataclass(frozen=True)
class CheckResult:
    """Result of a freshness check for one path.

    Attributes:
        path: The path as given by the caller.
        needs_update: True if work keyed off the path should run.
    """

    path: str
    needs_update: bool


@dataclass(frozen=True)
class RecordResult:
    """Result from recording paths and writing the state file.

    Attributes:
        recorded: Paths that were recorded, as given by the caller.
        failed: Paths that could not be resolved or stat'ed.
        state_file: The state file that was written.
    """

    recorded: list[str]
    failed: list[str]
    state_file: Path


@dataclass(frozen=True)
class StateListing:
    """Entries loaded from a state file, sorted by path.

    Attributes:
        state_file: The state file that was read.
        entries: Loaded entries.
    """

    state_file: Path
    entries: list[StateEntry]
