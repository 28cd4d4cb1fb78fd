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

"""Command-line interface for sysconftrack.

This module provides the main CLI entry point for the sysconftrack tool,
which lets shell-based triggers ask whether a path changed since they last
ran and record that they have run.

Commands:

    check: Report which paths need their trigger re-run
    record: Record the current mtime of paths and save the state
    list: Show the recorded state

Example:
    Gate a trigger in a shell script:
        ```bash
        $ sysconftrack check /usr/share/fonts && fc-cache -s \\
            && sysconftrack record /usr/share/fonts
        ```

    Force a re-run:
        ```bash
        $ sysconftrack check --force /usr/share/fonts
        ```

    Use an alternate state file:
        ```bash
        $ sysconftrack list --state-file /tmp/status --verbose
        ```

Exit Codes:

- check: 0 if any path needs an update, 1 if none does, 2 on error
- record: 0 on success, 1 if any path could not be recorded, 2 on error
- list: 0 on success, 2 on error

Note:
    Errors are printed to stderr. Verbose mode shows full tracebacks on
    errors for debugging. Debug mode implies verbose mode.

"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys
from typing import Any

from sysconftrack import __version__
from sysconftrack.config import load_effective_config, resolve_state_file
from sysconftrack.core import check_paths, list_state, record_paths
from sysconftrack.exceptions import (
    ConfigError,
    StateIOError,
    StateParseError,
    SysconfTrackError,
)
from sysconftrack.logging import get_logger, set_global_logger

EXIT_OK = 0
EXIT_NEGATIVE = 1
EXIT_ERROR = 2


def _state_file_from_args(args: argparse.Namespace) -> Path:
    """Resolve the state file from the configuration, with --state-file on top."""
    overrides: dict[str, Any] = {}
    if args.state_file is not None:
        state_file = Path(args.state_file).resolve()
        overrides["tracking"] = {
            "directory": str(state_file.parent),
            "state_file": state_file.name,
        }
    config_path = Path(args.config) if args.config else None
    cfg = load_effective_config(config_path, overrides=overrides)
    return resolve_state_file(cfg)


def _report_error(args: argparse.Namespace, err: Exception) -> int:
    print(f"Error: {err}", file=sys.stderr)
    if args.verbose or args.debug:
        import traceback

        traceback.print_exc()
    return EXIT_ERROR


def cmd_check(args: argparse.Namespace) -> int:
    """Handler for 'sysconftrack check' command.

    Args:
        args: Parsed command-line arguments containing paths and force flag.

    Returns:
        Exit code (0 if any path needs an update, 1 if none, 2 on error).

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    try:
        state_file = _state_file_from_args(args)
        results = check_paths(args.paths, state_file, force=args.force, logger=logger)
    except (ConfigError, StateIOError, StateParseError) as err:
        return _report_error(args, err)
    except SysconfTrackError as err:
        # Catch any other errors we might have missed
        return _report_error(args, err)

    for result in results:
        status = "update" if result.needs_update else "current"
        print(f"{status:<8}{result.path}")

    if any(result.needs_update for result in results):
        return EXIT_OK
    return EXIT_NEGATIVE


def cmd_record(args: argparse.Namespace) -> int:
    """Handler for 'sysconftrack record' command.

    Args:
        args: Parsed command-line arguments containing paths.

    Returns:
        Exit code (0 on success, 1 if a path could not be recorded, 2 on error).

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    try:
        state_file = _state_file_from_args(args)
        result = record_paths(args.paths, state_file, logger=logger)
    except SysconfTrackError as err:
        return _report_error(args, err)

    for path in result.recorded:
        logger.verbose("RECORD", f"Recorded {path}")
    for path in result.failed:
        print(f"Warning: cannot record {path}", file=sys.stderr)

    if result.failed:
        return EXIT_NEGATIVE
    return EXIT_OK


def cmd_list(args: argparse.Namespace) -> int:
    """Handler for 'sysconftrack list' command.

    Prints one ``<mtime>:<path>`` line per live entry, sorted by path.
    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    try:
        state_file = _state_file_from_args(args)
        listing = list_state(state_file, logger=logger)
    except SysconfTrackError as err:
        return _report_error(args, err)

    logger.verbose("STATE", f"State file: {listing.state_file}")
    for entry in listing.entries:
        print(f"{entry.mtime}:{entry.path}")

    return EXIT_OK


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="YAML configuration file layered over /etc/sysconftrack/config.yaml",
    )
    parser.add_argument(
        "--state-file",
        default=None,
        help="State file to use (overrides the configured tracking directory)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands registered."""
    parser = argparse.ArgumentParser(
        prog="sysconftrack",
        description="Track modification times of paths that gate system configuration triggers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"sysconftrack {__version__}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'check' command
    parser_check = subparsers.add_parser(
        "check",
        help="Report which paths need their trigger re-run",
        description="Compare the on-disk mtime of each path with the recorded one.",
    )
    parser_check.add_argument(
        "paths",
        nargs="+",
        help="Paths to check",
    )
    parser_check.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Report every existing, recorded path as needing an update",
    )
    _add_common_arguments(parser_check)
    parser_check.set_defaults(func=cmd_check)

    # 'record' command
    parser_record = subparsers.add_parser(
        "record",
        help="Record the current mtime of paths",
        description="Record the current mtime of each path and rewrite the state file.",
    )
    parser_record.add_argument(
        "paths",
        nargs="+",
        help="Paths to record",
    )
    _add_common_arguments(parser_record)
    parser_record.set_defaults(func=cmd_record)

    # 'list' command
    parser_list = subparsers.add_parser(
        "list",
        help="Show the recorded state",
        description="Print every recorded path that still exists, with its mtime.",
    )
    _add_common_arguments(parser_list)
    parser_list.set_defaults(func=cmd_list)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the sysconftrack CLI.

    This function is registered as the 'sysconftrack' console script in
    pyproject.toml.
    """
    parser = build_parser()

    # Parse and dispatch
    args = parser.parse_args(argv)

    # Call the appropriate command handler
    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
