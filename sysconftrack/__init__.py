"""
sysconftrack - System configuration trigger state tracking

A small library and CLI that remembers the modification time of the paths
system configuration triggers depend on (font directories, kernel modules,
systemd units, ...), so a trigger runner can skip work whose inputs have not
changed since the last run.

sysconftrack provides:
  - A persistent (path, mtime) tracker with a plain text state file
  - A conservative freshness check that errs towards re-running triggers
  - Pruning of paths that no longer exist
  - Layered YAML configuration for the state location

Quick Start
-----------
Check whether a trigger must run:

    $ sysconftrack check /usr/share/fonts

Record that it ran:

    $ sysconftrack record /usr/share/fonts

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
core : module
    High-level check/record/list operations.
config : package
    YAML configuration loading and merging.
state : package
    The state tracker and its file format.
fs : module
    Filesystem facade used by the tracker.

Public API
----------
    from sysconftrack.state import StateTracker
    from sysconftrack.core import check_paths, record_paths, list_state
    from sysconftrack.config import load_effective_config, resolve_state_file
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"
__description__ = "Modification-time state tracking for system configuration triggers"

from sysconftrack.config import load_effective_config, resolve_state_file
from sysconftrack.core import check_paths, list_state, record_paths
from sysconftrack.state import StateEntry, StateTracker

__all__ = [
    "__version__",
    "__license__",
    "__description__",
    "StateEntry",
    "StateTracker",
    "check_paths",
    "list_state",
    "record_paths",
    "load_effective_config",
    "resolve_state_file",
]
