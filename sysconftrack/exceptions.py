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

"""Exception hierarchy for sysconftrack.

This module defines a custom exception hierarchy that allows library users
to distinguish between different types of errors:

- ConfigError: Configuration-related errors (YAML parse, invalid values)
- StateIOError: Filesystem failures while reading or writing the state file
- StateParseError: Malformed lines in the state file

All exceptions inherit from SysconfTrackError, allowing users to catch all
sysconftrack errors with a single except clause if needed.

Example:
    Catching specific error types:
        ```python
        from sysconftrack.core import record_paths
        from sysconftrack.exceptions import StateIOError, StateParseError

        try:
            result = record_paths(["/etc/fonts"], Path("/var/lib/sysconftrack/status"))
        except StateParseError as e:
            print(f"Corrupt state: {e}")
        except StateIOError as e:
            print(f"I/O error: {e}")
        ```

Note:
    A missing state file is not an error. It is the initial state and loads
    as an empty tracker.
"""

from __future__ import annotations

__all__ = [
    "SysconfTrackError",
    "ConfigError",
    "StateIOError",
    "StateParseError",
]


class SysconfTrackError(Exception):
    """Base exception for all sysconftrack errors."""

    pass


class ConfigError(SysconfTrackError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - YAML parsing (syntax errors, non-mapping top level)
    - Missing configuration files passed explicitly
    - Invalid tracking directory or state file values
    """

    pass


class StateIOError(SysconfTrackError):
    """Raised when a filesystem operation on the state file fails.

    Covers opening, reading, writing the state file and creating the
    tracking directory that holds it.
    """

    pass


class StateParseError(SysconfTrackError):
    """Raised when the state file contains a malformed line.

    Attributes:
        lineno: 1-based line number of the offending line.
        line: The offending line with its newline stripped.

    Example:
        Inspecting the failing line:
            ```python
            try:
                parse_state_line("notanumber:/x", 2)
            except StateParseError as e:
                print(e.lineno, e.line)
            ```
    """

    def __init__(self, message: str, lineno: int = 0, line: str = "") -> None:
        super().__init__(message)
        self.lineno = lineno
        self.line = line
