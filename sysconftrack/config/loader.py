"""
Configuration loading and merging for sysconftrack.

This module implements a layered configuration system: built-in defaults are
overridden by the system-wide configuration file, then by a file passed
explicitly (e.g. ``--config``), and finally by command-line overrides.

Configuration Layers
--------------------
1. **Built-in defaults** (DEFAULT_CONFIG)
   - tracking.directory: /var/lib/sysconftrack
   - tracking.state_file: status

2. **System configuration** (/etc/sysconftrack/config.yaml)
   - Optional; only loaded if it exists

3. **Explicit configuration** (config_path argument)
   - Optional; must exist when given

4. **Overrides** (overrides argument)
   - Dict built from CLI flags

Merge Behavior
--------------
The loader performs deep merging with "last wins" semantics:
  - **Dicts**: Recursively merged (keys from overlay override base)
  - **Lists**: Completely replaced (NOT appended/extended)
  - **Scalars**: Overwritten (strings, numbers, booleans)

Example Configuration
---------------------
    tracking:
      directory: /var/lib/sysconftrack
      state_file: status

Error Handling
--------------
- ConfigError: explicit file missing, YAML parse errors, non-mapping
  documents, invalid tracking values
- All errors are chained with "from err" for better debugging
"""

from __future__ import annotations

import copy
from pathlib import Path, PurePosixPath
from typing import Any

import yaml

from sysconftrack.exceptions import ConfigError
from sysconftrack.logging import get_global_logger

DEFAULT_CONFIG: dict[str, Any] = {
    "tracking": {
        "directory": "/var/lib/sysconftrack",
        "state_file": "status",
    },
}

SYSTEM_CONFIG_PATH = Path("/etc/sysconftrack/config.yaml")

# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> dict[str, Any]:
    """Loads a YAML file that must contain a mapping.

    Args:
        p: Path to the YAML file to load.

    Returns:
        The parsed mapping. An empty file yields an empty dict.

    Raises:
        ConfigError: When the file does not exist, cannot be read, is invalid
            YAML, or does not contain a mapping at the top level.
    """
    if not p.exists():
        raise ConfigError(f"file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err
    except OSError as err:
        raise ConfigError(f"Cannot read config file: {p}: {err}") from err
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"top-level YAML must be a mapping (dict): {p}")
    return data


# -------------------------------
# Merge logic
# -------------------------------


def _deep_merge_dicts(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep-merges two dicts with "overlay wins" semantics.

    This function does not mutate inputs; returns a new dict.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            # Replace lists and scalars entirely
            result[k] = v
    return result


# -------------------------------
# Validation
# -------------------------------


def _validate_tracking(cfg: dict[str, Any]) -> None:
    tracking = cfg.get("tracking")
    if not isinstance(tracking, dict):
        raise ConfigError("'tracking' must be a mapping")

    directory = tracking.get("directory")
    if not isinstance(directory, str) or not directory:
        raise ConfigError("'tracking.directory' must be a non-empty string")
    if not PurePosixPath(directory).is_absolute():
        raise ConfigError(
            f"'tracking.directory' must be an absolute path, got {directory!r}"
        )

    state_file = tracking.get("state_file")
    if not isinstance(state_file, str) or not state_file:
        raise ConfigError("'tracking.state_file' must be a non-empty string")
    if "/" in state_file or state_file in (".", ".."):
        raise ConfigError(
            f"'tracking.state_file' must be a bare filename, got {state_file!r}"
        )


# -------------------------------
# Public API
# -------------------------------


def load_effective_config(
    config_path: Path | None = None,
    *,
    overrides: dict[str, Any] | None = None,
    system_config: Path | None = SYSTEM_CONFIG_PATH,
) -> dict[str, Any]:
    """
    Load and merge the effective configuration.

    Steps
      1) Start from DEFAULT_CONFIG.
      2) Merge the system configuration file if it exists.
      3) Merge the explicit config_path (required to exist when given).
      4) Merge overrides.
      5) Validate the tracking section.

    Returns
      A merged configuration dict.

    Raises
      ConfigError on missing explicit files, YAML parse errors, or invalid
      values.
    """
    logger = get_global_logger()

    merged = copy.deepcopy(DEFAULT_CONFIG)

    if system_config is not None and system_config.exists():
        logger.verbose("CONFIG", f"Loading: {system_config}")
        merged = _deep_merge_dicts(merged, _load_yaml_file(system_config))

    if config_path is not None:
        logger.verbose("CONFIG", f"Loading: {config_path}")
        merged = _deep_merge_dicts(merged, _load_yaml_file(config_path))

    if overrides:
        logger.debug("CONFIG", f"Applying overrides: {overrides}")
        merged = _deep_merge_dicts(merged, overrides)

    _validate_tracking(merged)

    logger.debug(
        "CONFIG",
        "Effective configuration:\n"
        + yaml.safe_dump(merged, default_flow_style=False, sort_keys=False),
    )
    return merged


def resolve_state_file(cfg: dict[str, Any]) -> Path:
    """Return the state file path described by a merged configuration.

    Example:
        ```python
        cfg = load_effective_config()
        resolve_state_file(cfg)  # Path('/var/lib/sysconftrack/status')
        ```
    """
    tracking = cfg["tracking"]
    return Path(tracking["directory"]) / tracking["state_file"]
